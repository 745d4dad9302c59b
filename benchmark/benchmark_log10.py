#!/usr/bin/env python3
"""
整数 log10 性能比較ベンチマーク

log2 推定 + 補正、パック定数、10 進文字列長 (参照実装) の処理時間を比較します。
"""

import os
import sys
import time

import numpy as np

# パッケージのパスを追加
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from declog import log10_floor, log10_floor_array, log10_floor_wide, log10_floor_wide_array
from declog.types import U32

NUM_SCALARS = int(os.environ.get('DECLOG_BENCH_SCALARS', '200000'))
NUM_ARRAY = int(os.environ.get('DECLOG_BENCH_ARRAY', '10000000'))


def _timeit(label, func):
    start_time = time.time()
    result = func()
    elapsed = time.time() - start_time
    print(f"  {label:<32} {elapsed:8.3f} s")
    return result


def run_benchmark():
    rng = np.random.default_rng(0)
    scalars = [int(v) for v in rng.integers(1, 2**32, size=NUM_SCALARS, dtype=np.uint64)]
    array = rng.integers(1, 2**32, size=NUM_ARRAY, dtype=np.uint64).astype(np.uint32)

    print("=" * 60)
    print("INTEGER LOG10 BENCHMARK")
    print("=" * 60)

    print(f"\n1. Scalar ({NUM_SCALARS:,} values, u32)")
    print("-" * 60)
    expected = _timeit("len(str(x)) - 1", lambda: [len(str(x)) - 1 for x in scalars])
    approx = _timeit("log10_floor", lambda: [log10_floor(x, U32) for x in scalars])
    wide = _timeit("log10_floor_wide", lambda: [log10_floor_wide(x) for x in scalars])
    assert approx == expected and wide == expected

    print(f"\n2. Array ({NUM_ARRAY:,} values, u32)")
    print("-" * 60)
    # 初回呼び出しで JIT コンパイル
    log10_floor_array(array[:1])
    log10_floor_wide_array(array[:1])
    approx = _timeit("log10_floor_array", lambda: log10_floor_array(array))
    wide = _timeit("log10_floor_wide_array", lambda: log10_floor_wide_array(array))
    assert np.array_equal(approx, wide)

    try:
        from numba import cuda

        if cuda.is_available():
            from declog.cuda_kernels import gpu_log10_floor, gpu_log10_floor_wide

            print(f"\n3. GPU ({NUM_ARRAY:,} values, u32)")
            print("-" * 60)
            gpu_log10_floor(array[:1])
            gpu_log10_floor_wide(array[:1])
            gpu_approx = _timeit("gpu_log10_floor", lambda: gpu_log10_floor(array))
            gpu_wide = _timeit("gpu_log10_floor_wide", lambda: gpu_log10_floor_wide(array))
            assert np.array_equal(gpu_approx, approx) and np.array_equal(gpu_wide, wide)
    except ImportError:
        print("\nnumba.cuda is not available, skipping GPU benchmark")


if __name__ == "__main__":
    run_benchmark()
