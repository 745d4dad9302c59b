"""
numpy 配列向け整数 log10 (CPU / Numba njit)
"""

import numpy as np
from numba import njit

from .errors import Log10DomainError
from .tables import host_arrays
from .types import U32, WidthLike, resolve_width


@njit
def bit_length_u64(x):
    """uint64 のビット長 (シフト量の二分探索、ループなし)"""
    n = 0
    if x >= np.uint64(0x100000000):
        x = x >> np.uint64(32)
        n += 32
    if x >= np.uint64(0x10000):
        x = x >> np.uint64(16)
        n += 16
    if x >= np.uint64(0x100):
        x = x >> np.uint64(8)
        n += 8
    if x >= np.uint64(0x10):
        x = x >> np.uint64(4)
        n += 4
    if x >= np.uint64(0x4):
        x = x >> np.uint64(2)
        n += 2
    if x >= np.uint64(0x2):
        x = x >> np.uint64(1)
        n += 1
    # ここで x は 0 か 1
    if x != np.uint64(0):
        n += 1
    return n


@njit
def _log10_floor_loop(values, guess_table, limit_table, out):
    """推定 + 補正で各要素を計算。0 を見つけたらその位置を返す (無ければ -1)"""
    for i in range(values.shape[0]):
        x = values[i]
        if x == np.uint64(0):
            return i
        log2x = bit_length_u64(x) - 1
        guess = guess_table[log2x]
        if x > limit_table[guess]:
            out[i] = guess + 1
        else:
            out[i] = guess
    return -1


@njit
def _log10_floor_wide_loop(values, packed_table, out):
    """パック定数で各要素を計算 (分岐なし)"""
    for i in range(values.shape[0]):
        x = values[i]
        out[i] = (x + packed_table[bit_length_u64(x)]) >> np.uint64(32)


def zero_input_error(index) -> Log10DomainError:
    """0 を含む入力に対する例外 (CPU / GPU 共通のメッセージ)"""
    return Log10DomainError(f"log10_floor is undefined for 0 (found at flat index {index})")


def prepare_uint_array(values, width, packed: bool = False):
    """
    入力配列を検証し、(元の配列, 平坦化した uint64 配列, UIntWidth) を返す

    width 省略時、符号付き配列は同じバイト幅の符号なし型として扱う。
    packed=True (パック定数版) では u32 を超える符号付き配列 (Python のリストなど)
    を u32 として扱う。
    """
    arr = np.asarray(values)
    if arr.dtype.kind not in "ui":
        raise TypeError(f"Input must be an unsigned integer array, got dtype {arr.dtype}")

    if width is None:
        if arr.dtype.kind == "u":
            width = resolve_width(arr.dtype)
        elif packed and arr.dtype.itemsize > U32.dtype.itemsize:
            width = U32
        else:
            width = resolve_width(np.dtype(f"u{arr.dtype.itemsize}"))
    else:
        width = resolve_width(width)
    if width.dtype is None:
        raise ValueError(f"{width} is not supported for arrays")

    if arr.size:
        if arr.dtype.kind == "i" and int(arr.min()) < 0:
            raise Log10DomainError("negative values are not supported")
        if int(arr.max()) > width.max_value:
            raise Log10DomainError(f"array contains values that do not fit in {width}")

    flat = np.ascontiguousarray(arr, dtype=np.uint64).ravel()
    return arr, flat, width


def log10_floor_array(values, width: WidthLike = None) -> np.ndarray:
    """
    配列の各要素に対して floor(log10(x)) を log2 ベースの推定 + 補正で計算

    Args:
        values: 符号なし整数配列 (非負の符号付き整数配列も可)
        width: 入力の整数幅。省略時は dtype から決定 (符号付きは同じバイト幅の符号なし型)

    Returns:
        values と同じ shape の uint8 配列

    Raises:
        Log10DomainError: 0 や幅に収まらない値を含む場合
    """
    arr, flat, width = prepare_uint_array(values, width)
    guess_table, limit_table, _ = host_arrays(width)

    out = np.empty(flat.shape[0], dtype=np.uint8)
    zero_index = _log10_floor_loop(flat, guess_table, limit_table, out)
    if zero_index >= 0:
        raise zero_input_error(zero_index)
    return out.reshape(arr.shape)


def log10_floor_wide_array(values, width: WidthLike = None) -> np.ndarray:
    """
    配列の各要素に対して floor(log10(x)) をパック定数で計算 (0 は 0)

    u32 以下の幅のみ対応 (シフト 32 のパック定数が u64 に収まる範囲)。

    Returns:
        values と同じ shape の uint32 配列
    """
    arr, flat, width = prepare_uint_array(values, width, packed=True)
    _, _, packed_table = host_arrays(width)
    if packed_table.size == 0:
        raise ValueError(f"packed estimator arrays support widths up to u32, not {width}")

    out = np.empty(flat.shape[0], dtype=np.uint32)
    _log10_floor_wide_loop(flat, packed_table, out)
    return out.reshape(arr.shape)


__all__ = [
    "bit_length_u64",
    "zero_input_error",
    "prepare_uint_array",
    "log10_floor_array",
    "log10_floor_wide_array",
]
