"""
log10 定数テーブル
==================

floor(log10(x)) を除算・桁数ループなしで求めるためのテーブルを提供

- 推定テーブル:   floor(log2(x)) → floor(log10(x)) の推定値 (正解か 1 小さい)
- 10進上限テーブル: floor(log10(x)) == d となる最大の x
- パックテーブル:  ビット長 → (x + entry) >> shift が floor(log10(x)) になる定数

テーブルはすべて整数演算だけで生成する (浮動小数点の log10 は使わない)。
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

import numpy as np

from .errors import TableConstructionError
from .types import ALL_WIDTHS, U8, U16, U32, U64, UIntWidth, WidthLike, resolve_width

logger = logging.getLogger(__name__)

# 環境変数で import 時のテーブル検証を有効化
DECLOG_VERIFY_TABLES = os.environ.get('DECLOG_VERIFY_TABLES', '0').lower() in ('1', 'true')

# 推定テーブルは u128 まで共通 (狭い型のテーブルは先頭部分と一致する)
MAX_GUESS_BITS = 128


# ==================================================
# テーブル生成
# ==================================================
def build_log10_guess_table(bits: int) -> Tuple[int, ...]:
    """
    floor(log2(x)) = k に対する floor(log10(2^k)) のテーブル (k = 0 .. bits-1)

    2^k はビット長 k+1 の最小値なので、この値は floor(log10(x)) の下界になる。
    """
    if bits < 1:
        raise ValueError(f"bits must be positive: {bits}")

    table = []
    log10 = 0
    next_pow10 = 10
    for k in range(bits):
        power = 1 << k
        while power >= next_pow10:
            log10 += 1
            next_pow10 *= 10
        table.append(log10)
    return tuple(table)


def build_decade_limit_table(bits: int) -> Tuple[int, ...]:
    """
    limits[d] = floor(log10(x)) == d となる最大の x

    最後のエントリは型の最大値で飽和させる (10^(d+1) - 1 が型に収まらないため)。
    """
    if bits < 1:
        raise ValueError(f"bits must be positive: {bits}")

    max_value = (1 << bits) - 1
    limits = []
    pow10 = 10
    while pow10 - 1 < max_value:
        limits.append(pow10 - 1)
        pow10 *= 10
    limits.append(max_value)
    return tuple(limits)


def build_packed_table(bits: int, shift: int) -> Tuple[int, ...]:
    """
    ビット長 b に対するパック定数 (b = 0 .. bits)

    下位 shift ビットが補正値、上位ビットが log10 の値。
    ビット長 b の範囲 [2^(b-1), 2^b - 1] に 10 の累乗 p が入る場合は
    ((d+1) << shift) - p、入らない場合は d << shift となる。
    エントリ 0 は x = 0 用で、結果は 0。
    """
    if bits < 1:
        raise ValueError(f"bits must be positive: {bits}")
    if shift < bits:
        raise ValueError(f"shift ({shift}) must be >= bits ({bits})")

    table = [0]
    log10 = 0
    pow10 = 10
    for bit_length in range(1, bits + 1):
        low = 1 << (bit_length - 1)
        high = (1 << bit_length) - 1
        while low >= pow10:
            log10 += 1
            pow10 *= 10
        if pow10 <= high:
            table.append(((log10 + 1) << shift) - pow10)
        else:
            table.append(log10 << shift)
    return tuple(table)


def split_packed_table(packed, shift: int) -> Tuple[Tuple[int, ...], Tuple[int, ...]]:
    """
    パック定数を (閾値, 寄与) の 2 つのテーブルに分解する

    result = contribution[b] + (1 if x >= threshold[b] else 0)
    """
    mask = (1 << shift) - 1
    thresholds = []
    contributions = []
    for bit_length, entry in enumerate(packed):
        entry = int(entry)
        correction = entry & mask
        contributions.append(entry >> shift)
        if correction:
            thresholds.append((1 << shift) - correction)
        else:
            # このビット長の値は常に 1 << bit_length 未満なので繰り上がらない
            thresholds.append(1 << bit_length)
    return tuple(thresholds), tuple(contributions)


@dataclass(frozen=True)
class Log10Tables:
    """1 つの整数幅に対するテーブル一式"""
    width: UIntWidth
    log10_guess: Tuple[int, ...]
    decade_limits: Tuple[int, ...]
    packed: Tuple[int, ...]
    packed_shift: int
    thresholds: Tuple[int, ...]
    contributions: Tuple[int, ...]


_TABLE_CACHE: Dict[UIntWidth, Log10Tables] = {}


def get_tables(width: WidthLike) -> Log10Tables:
    """指定幅のテーブル一式を返す (初回のみ生成)"""
    width = resolve_width(width)
    tables = _TABLE_CACHE.get(width)
    if tables is None:
        packed = build_packed_table(width.bits, width.packed_shift)
        thresholds, contributions = split_packed_table(packed, width.packed_shift)
        tables = Log10Tables(
            width=width,
            log10_guess=build_log10_guess_table(width.bits),
            decade_limits=build_decade_limit_table(width.bits),
            packed=packed,
            packed_shift=width.packed_shift,
            thresholds=thresholds,
            contributions=contributions,
        )
        _TABLE_CACHE[width] = tables
        logger.debug(
            "built log10 tables for %s: %d guesses, %d limits, %d packed entries",
            width, len(tables.log10_guess), len(tables.decade_limits), len(tables.packed),
        )
    return tables


# ==================================================
# テーブル検証
# ==================================================
def _reference_log10_floor(x: int) -> int:
    """10 進表記の桁数 - 1 (テーブルとは独立した参照実装)"""
    return len(str(x)) - 1


def _sample_values(low: int, high: int) -> Iterator[int]:
    """区間の両端と、区間内の 10 進境界 (10^j - 1, 10^j) を列挙"""
    yield low
    yield high
    pow10 = 10
    while pow10 - 1 <= high:
        for x in (pow10 - 1, pow10):
            if low <= x <= high:
                yield x
        pow10 *= 10


def verify_tables(width: WidthLike) -> Log10Tables:
    """
    テーブルの不変条件と、推定 + 1 回の補正で常に正解になることを検証

    どちらの手法も同じビット長の中では x について単調な階段関数なので、
    区間の両端と 10 進境界を調べれば区間全体を調べたことになる。

    Raises:
        TableConstructionError: いずれかの条件を満たさない場合
    """
    tables = get_tables(width)
    width = tables.width
    guess = tables.log10_guess
    limits = tables.decade_limits
    packed = tables.packed
    shift = tables.packed_shift

    def check(condition, message):
        if not condition:
            raise TableConstructionError(f"{width}: {message}")

    # 推定テーブル
    check(len(guess) == width.bits, f"guess table has {len(guess)} entries, expected {width.bits}")
    check(guess[0] == 0, "guess[0] must be 0")
    for k, g in enumerate(guess):
        check(g == _reference_log10_floor(1 << k), f"guess[{k}] = {g} is not floor(log10(2^{k}))")
        if k > 0:
            check(guess[k - 1] <= g, f"guess table decreases at index {k}")

    # 10進上限テーブル
    check(limits[-1] == width.max_value, "last limit must saturate to the type maximum")
    for d, limit in enumerate(limits):
        check(limit <= width.max_value, f"limit[{d}] does not fit the type")
        check(_reference_log10_floor(limit) == d, f"limit[{d}] = {limit} is not in decade {d}")
        if d < len(limits) - 1:
            check(limit == 10 ** (d + 1) - 1, f"limit[{d}] = {limit} is not 10^{d + 1} - 1")
        if d > 0:
            check(limits[d - 1] < limit, f"limit table is not increasing at index {d}")
    check(max(guess) < len(limits), "a guess exceeds the last limit index")

    # 推定 + 1 回の補正
    for k in range(width.bits):
        low = 1 << k
        high = (1 << (k + 1)) - 1
        for x in _sample_values(low, high):
            expected = _reference_log10_floor(x)
            g = guess[k]
            check(expected - g in (0, 1), f"guess for x={x} is off by {expected - g}")
            result = g + 1 if x > limits[g] else g
            check(result == expected, f"corrected guess for x={x} is {result}, expected {expected}")

    # パックテーブルと分解テーブル
    check(len(packed) == width.bits + 1, f"packed table has {len(packed)} entries, expected {width.bits + 1}")
    check(packed[0] == 0, "packed[0] must be 0 so that x = 0 yields 0")
    for bit_length in range(1, width.bits + 1):
        low = 1 << (bit_length - 1)
        high = (1 << bit_length) - 1
        for x in _sample_values(low, high):
            expected = _reference_log10_floor(x)
            result = (x + packed[bit_length]) >> shift
            check(result == expected, f"packed result for x={x} is {result}, expected {expected}")
            split = tables.contributions[bit_length] + (1 if x >= tables.thresholds[bit_length] else 0)
            check(split == expected, f"split result for x={x} is {split}, expected {expected}")

    return tables


def verify_all_tables() -> None:
    """全ての整数幅のテーブルを検証"""
    for width in ALL_WIDTHS:
        verify_tables(width)
    logger.info("log10 tables verified for %s", ", ".join(str(w) for w in ALL_WIDTHS))


# ==================================================
# ホスト側 numpy テーブル (njit / CUDA カーネル用、読み取り専用)
# ==================================================
def _read_only(values, dtype) -> np.ndarray:
    arr = np.array(values, dtype=dtype)
    arr.flags.writeable = False
    return arr


LOG10_GUESS_TABLE_HOST = _read_only(build_log10_guess_table(MAX_GUESS_BITS), np.uint8)

DECADE_LIMITS_U8_HOST = _read_only(get_tables(U8).decade_limits, np.uint8)
DECADE_LIMITS_U16_HOST = _read_only(get_tables(U16).decade_limits, np.uint16)
DECADE_LIMITS_U32_HOST = _read_only(get_tables(U32).decade_limits, np.uint32)
DECADE_LIMITS_U64_HOST = _read_only(get_tables(U64).decade_limits, np.uint64)

# シフト 32 のパックテーブル (u32 まで、エントリは u64 に収まる)
PACKED_TABLE_U32_HOST = _read_only(get_tables(U32).packed, np.uint64)

_HOST_ARRAY_CACHE: Dict[UIntWidth, Tuple[np.ndarray, np.ndarray, np.ndarray]] = {}


def host_arrays(width: WidthLike) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    njit / CUDA 用に (推定 uint8, 上限 uint64, パック uint64) の配列を返す

    パック配列は shift 32 のテーブルが u64 に収まる幅 (u32 以下) のみ。
    それ以外の幅では空配列を返す。
    """
    width = resolve_width(width)
    arrays = _HOST_ARRAY_CACHE.get(width)
    if arrays is None:
        if width.dtype is None:
            raise ValueError(f"{width} has no numpy dtype")
        tables = get_tables(width)
        guess = _read_only(LOG10_GUESS_TABLE_HOST[: width.bits], np.uint8)
        limits = _read_only(tables.decade_limits, np.uint64)
        if width.packed_shift == 32:
            packed = _read_only(tables.packed, np.uint64)
        else:
            packed = _read_only((), np.uint64)
        arrays = (guess, limits, packed)
        _HOST_ARRAY_CACHE[width] = arrays
    return arrays


if DECLOG_VERIFY_TABLES:
    verify_all_tables()


__all__ = [
    "build_log10_guess_table",
    "build_decade_limit_table",
    "build_packed_table",
    "split_packed_table",
    "Log10Tables",
    "get_tables",
    "verify_tables",
    "verify_all_tables",
    "host_arrays",
    "LOG10_GUESS_TABLE_HOST",
    "DECADE_LIMITS_U8_HOST",
    "DECADE_LIMITS_U16_HOST",
    "DECADE_LIMITS_U32_HOST",
    "DECADE_LIMITS_U64_HOST",
    "PACKED_TABLE_U32_HOST",
]
