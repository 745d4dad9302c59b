"""
整数 log10 (ホスト側スカラー版)
================================

除算も桁数ループも使わずに floor(log10(x)) を求める 2 つの手法を提供

1. log10_floor:      floor(log2(x)) から推定値を引き、上限テーブルと 1 回比較して補正
2. log10_floor_wide: ビット長でパック定数を引き、加算 1 回とシフト 1 回で結果を得る

どちらも副作用のない定数時間の関数で、テーブルは読み取り専用。
"""

import operator

from .errors import Log10DomainError
from .tables import get_tables
from .types import U16, U32, UIntWidth, WidthLike, resolve_width


def _check_operand(x, width: UIntWidth, allow_zero: bool) -> int:
    """入力を int に変換し、型の範囲内かどうかを確認"""
    # bool は int のサブクラスだが数値としては受け付けない
    if isinstance(x, bool):
        raise TypeError("log10 operand must be an integer, not bool")
    x = operator.index(x)
    if x < 0:
        raise Log10DomainError(f"{x} is negative; only unsigned values are supported")
    if x == 0 and not allow_zero:
        raise Log10DomainError("log10_floor is undefined for 0 (floor(log2(0)) does not exist)")
    if x > width.max_value:
        raise Log10DomainError(f"{x} does not fit in {width}")
    return x


def log10_floor(x, width: WidthLike = U16) -> int:
    """
    floor(log10(x)) を log2 ベースの推定 + 1 回の補正で求める

    Args:
        x: 1 以上、width の最大値以下の整数
        width: 入力の整数幅 (既定は u16)

    Returns:
        floor(log10(x))

    Raises:
        Log10DomainError: x が 0、負、または width に収まらない場合
        TypeError: x が整数でない場合
    """
    width = resolve_width(width)
    x = _check_operand(x, width, allow_zero=False)
    tables = get_tables(width)

    log2x = x.bit_length() - 1
    guess = tables.log10_guess[log2x]
    if x > tables.decade_limits[guess]:
        return guess + 1
    return guess


def log10_floor_wide(x, width: WidthLike = U32) -> int:
    """
    floor(log10(x)) をパック定数テーブルで分岐なしに求める

    x = 0 のとき 0 を返す (テーブルのエントリ 0 が 0 のため)。

    Raises:
        Log10DomainError: x が負、または width に収まらない場合
        TypeError: x が整数でない場合
    """
    width = resolve_width(width)
    x = _check_operand(x, width, allow_zero=True)
    tables = get_tables(width)
    return (x + tables.packed[x.bit_length()]) >> tables.packed_shift


def log10_floor_split(x, width: WidthLike = U32) -> int:
    """パック定数を (閾値, 寄与) に分解したテーブルで floor(log10(x)) を求める"""
    width = resolve_width(width)
    x = _check_operand(x, width, allow_zero=True)
    tables = get_tables(width)

    bit_length = x.bit_length()
    result = tables.contributions[bit_length]
    if x >= tables.thresholds[bit_length]:
        result += 1
    return result


__all__ = ["log10_floor", "log10_floor_wide", "log10_floor_split"]
