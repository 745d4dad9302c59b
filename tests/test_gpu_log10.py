"""
GPU log10 kernel tests. Skipped when CUDA is not available.
"""

import numpy as np
import pytest

from declog import Log10DomainError, log10_floor_array, log10_floor_wide_array
from declog.types import U64


@pytest.mark.gpu
class TestGpuLog10:
    def test_all_u16_values(self, all_u16_values):
        from declog.cuda_kernels import gpu_log10_floor

        np.testing.assert_array_equal(
            gpu_log10_floor(all_u16_values),
            log10_floor_array(all_u16_values),
        )

    def test_u64_sample(self):
        from declog.cuda_kernels import gpu_log10_floor

        rng = np.random.default_rng(5)
        values = rng.integers(1, 2**64 - 1, size=100_000, dtype=np.uint64, endpoint=True)
        np.testing.assert_array_equal(gpu_log10_floor(values, U64), log10_floor_array(values))

    def test_zero_is_rejected(self):
        from declog.cuda_kernels import gpu_log10_floor

        with pytest.raises(Log10DomainError, match="index 1"):
            gpu_log10_floor(np.array([1, 0, 5, 0], dtype=np.uint32))

    def test_zero_message_matches_cpu(self):
        from declog.cuda_kernels import gpu_log10_floor

        values = np.array([7, 3, 0, 9, 0], dtype=np.uint16)
        with pytest.raises(Log10DomainError) as cpu_error:
            log10_floor_array(values)
        with pytest.raises(Log10DomainError) as gpu_error:
            gpu_log10_floor(values)
        assert str(gpu_error.value) == str(cpu_error.value)

    def test_wide_signed_and_list_input(self):
        from declog.cuda_kernels import gpu_log10_floor_wide

        assert gpu_log10_floor_wide([0, 10, 100]).tolist() == [0, 1, 2]
        assert gpu_log10_floor_wide(np.array([0, 10, 100], dtype=np.int32)).tolist() == [0, 1, 2]

    def test_wide_all_u16_values_including_zero(self):
        from declog.cuda_kernels import gpu_log10_floor_wide

        values = np.arange(0, 1 << 16, dtype=np.uint16)
        np.testing.assert_array_equal(gpu_log10_floor_wide(values), log10_floor_wide_array(values))

    def test_wide_u32_sample(self):
        from declog.cuda_kernels import gpu_log10_floor_wide

        rng = np.random.default_rng(6)
        values = rng.integers(0, 2**32, size=100_000, dtype=np.uint64).astype(np.uint32)
        np.testing.assert_array_equal(gpu_log10_floor_wide(values), log10_floor_wide_array(values))

    def test_empty(self):
        from declog.cuda_kernels import gpu_log10_floor, gpu_log10_floor_wide

        assert gpu_log10_floor(np.array([], dtype=np.uint16)).shape == (0,)
        assert gpu_log10_floor_wide(np.array([], dtype=np.uint16)).shape == (0,)


class TestLaunchDimensions:
    def test_small_input(self):
        from declog.cuda_kernels.gpu_log10 import THREADS_PER_BLOCK, calculate_launch_dimensions

        blocks, threads = calculate_launch_dimensions(1)
        assert blocks == 1
        assert threads == THREADS_PER_BLOCK

    def test_blocks_are_capped(self):
        from declog.cuda_kernels.gpu_log10 import MAX_BLOCKS, calculate_launch_dimensions

        blocks, _ = calculate_launch_dimensions(10**12)
        assert blocks == MAX_BLOCKS

    def test_gpu_unavailable(self, gpu_available):
        if gpu_available:
            pytest.skip("GPU is available")
        from declog import GpuNotAvailableError
        from declog.cuda_kernels import gpu_log10_floor

        with pytest.raises(GpuNotAvailableError):
            gpu_log10_floor(np.array([1], dtype=np.uint16))
