"""
GPU 版整数 log10 のホスト側ラッパー

テーブルと入力をデバイスに転送し、カーネルを起動して結果をホストに戻す。
"""

import logging
import os
from typing import Dict, Tuple

import numpy as np
from numba import cuda

from ..array_log10 import prepare_uint_array, zero_input_error
from ..errors import GpuNotAvailableError
from ..tables import host_arrays
from ..types import UIntWidth, WidthLike
from .log10_kernels import log10_floor_kernel, log10_floor_wide_kernel

logger = logging.getLogger(__name__)

# 環境変数から起動パラメータを取得
THREADS_PER_BLOCK = int(os.environ.get('DECLOG_THREADS_PER_BLOCK', '256'))
MAX_BLOCKS = int(os.environ.get('DECLOG_MAX_BLOCKS', '2048'))

_DEVICE_TABLE_CACHE: Dict[UIntWidth, tuple] = {}


def calculate_launch_dimensions(num_values: int) -> Tuple[int, int]:
    """
    要素数から (blocks, threads) を計算

    カーネルはグリッドストライドループなので、ブロック数は MAX_BLOCKS で打ち切ってよい
    """
    threads = THREADS_PER_BLOCK
    blocks = (num_values + threads - 1) // threads
    blocks = max(1, min(blocks, MAX_BLOCKS))
    return blocks, threads


def _require_cuda():
    if not cuda.is_available():
        raise GpuNotAvailableError("CUDAデバイスが利用できません")


def _device_tables(width: UIntWidth):
    """テーブルをデバイスに転送 (幅ごとに 1 回)"""
    tables = _DEVICE_TABLE_CACHE.get(width)
    if tables is None:
        guess, limits, packed = host_arrays(width)
        tables = (
            cuda.to_device(guess),
            cuda.to_device(limits),
            cuda.to_device(packed) if packed.size else None,
        )
        _DEVICE_TABLE_CACHE[width] = tables
    return tables


def gpu_log10_floor(values, width: WidthLike = None) -> np.ndarray:
    """
    GPU 上で各要素の floor(log10(x)) を log2 ベースの推定 + 補正で計算

    Returns:
        values と同じ shape の uint8 配列

    Raises:
        GpuNotAvailableError: CUDA が使えない場合
        Log10DomainError: 0 や幅に収まらない値を含む場合
    """
    _require_cuda()
    arr, flat, width = prepare_uint_array(values, width)
    if flat.size == 0:
        return np.empty(arr.shape, dtype=np.uint8)

    d_guess, d_limits, _ = _device_tables(width)
    d_values = cuda.to_device(flat)
    d_out = cuda.device_array(flat.shape[0], dtype=np.uint8)
    # 最初の 0 の位置 (無ければ要素数のまま)
    d_zero_index = cuda.to_device(np.full(1, flat.shape[0], dtype=np.int64))

    blocks, threads = calculate_launch_dimensions(flat.shape[0])
    logger.debug("log10_floor_kernel: %d values, blocks=%d, threads=%d", flat.shape[0], blocks, threads)
    log10_floor_kernel[blocks, threads](d_values, d_guess, d_limits, d_out, d_zero_index)
    cuda.synchronize()

    zero_index = int(d_zero_index.copy_to_host()[0])
    if zero_index < flat.shape[0]:
        raise zero_input_error(zero_index)
    return d_out.copy_to_host().reshape(arr.shape)


def gpu_log10_floor_wide(values, width: WidthLike = None) -> np.ndarray:
    """
    GPU 上で各要素の floor(log10(x)) をパック定数で計算 (0 は 0、u32 以下)

    Returns:
        values と同じ shape の uint32 配列
    """
    _require_cuda()
    arr, flat, width = prepare_uint_array(values, width, packed=True)
    _, _, d_packed = _device_tables(width)
    if d_packed is None:
        raise ValueError(f"packed estimator kernels support widths up to u32, not {width}")
    if flat.size == 0:
        return np.empty(arr.shape, dtype=np.uint32)

    d_values = cuda.to_device(flat)
    d_out = cuda.device_array(flat.shape[0], dtype=np.uint32)

    blocks, threads = calculate_launch_dimensions(flat.shape[0])
    logger.debug("log10_floor_wide_kernel: %d values, blocks=%d, threads=%d", flat.shape[0], blocks, threads)
    log10_floor_wide_kernel[blocks, threads](d_values, d_packed, d_out)
    cuda.synchronize()

    return d_out.copy_to_host().reshape(arr.shape)


__all__ = [
    "THREADS_PER_BLOCK",
    "MAX_BLOCKS",
    "calculate_launch_dimensions",
    "gpu_log10_floor",
    "gpu_log10_floor_wide",
]
