"""
CUDA カーネル関連の定義
"""

from .gpu_log10 import calculate_launch_dimensions, gpu_log10_floor, gpu_log10_floor_wide
from .log10_kernels import (
    bit_length_device,
    log10_floor_device,
    log10_floor_kernel,
    log10_floor_wide_device,
    log10_floor_wide_kernel,
)

__all__ = [
    "bit_length_device",
    "log10_floor_device",
    "log10_floor_wide_device",
    "log10_floor_kernel",
    "log10_floor_wide_kernel",
    "calculate_launch_dimensions",
    "gpu_log10_floor",
    "gpu_log10_floor_wide",
]
