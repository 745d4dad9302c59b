"""
整数 log10 の CUDA device 関数とカーネル
========================================

入力値はすべて uint64 のデバイス配列として受け取る。
テーブルは tables.host_arrays() の配列をデバイスに転送したものを使う。
"""

import numpy as np
from numba import cuda


@cuda.jit(device=True, inline=True)
def bit_length_device(x):
    """uint64 のビット長 (64 - clz)"""
    return 64 - cuda.clz(x)


@cuda.jit(device=True, inline=True)
def log10_floor_device(x, guess_table, limit_table):
    """
    floor(log2(x)) から推定値を引き、上限テーブルと 1 回比較して補正

    x は 1 以上であること (0 の扱いは呼び出し側の責任)
    """
    log2x = bit_length_device(x) - 1
    guess = guess_table[log2x]
    if x > limit_table[guess]:
        return guess + 1
    return guess


@cuda.jit(device=True, inline=True)
def log10_floor_wide_device(x, packed_table):
    """パック定数 (シフト 32) で分岐なしに floor(log10(x)) を求める"""
    return (x + packed_table[bit_length_device(x)]) >> np.uint64(32)


@cuda.jit
def log10_floor_kernel(values, guess_table, limit_table, out, zero_index):
    """
    各要素の floor(log10(x)) を計算 (グリッドストライドループ)

    0 の要素があれば zero_index[0] を最小の位置で更新し、その位置には 0 を書き込む
    """
    start = cuda.grid(1)
    stride = cuda.gridsize(1)
    for i in range(start, values.shape[0], stride):
        x = values[i]
        if x == np.uint64(0):
            cuda.atomic.min(zero_index, 0, i)
            out[i] = 0
        else:
            out[i] = log10_floor_device(x, guess_table, limit_table)


@cuda.jit
def log10_floor_wide_kernel(values, packed_table, out):
    """各要素の floor(log10(x)) をパック定数で計算 (グリッドストライドループ)"""
    start = cuda.grid(1)
    stride = cuda.gridsize(1)
    for i in range(start, values.shape[0], stride):
        out[i] = log10_floor_wide_device(values[i], packed_table)


__all__ = [
    "bit_length_device",
    "log10_floor_device",
    "log10_floor_wide_device",
    "log10_floor_kernel",
    "log10_floor_wide_kernel",
]
