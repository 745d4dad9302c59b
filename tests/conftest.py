"""
Pytest configuration and fixtures for declog tests.
"""

import logging
import os
import sys

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Keep Numba CUDA quiet when no driver is installed
os.environ.setdefault("NUMBA_CUDA_LOG_LEVEL", "ERROR")
os.environ.setdefault("NUMBA_DISABLE_PERFORMANCE_WARNINGS", "1")


def _cuda_available():
    try:
        from numba import cuda

        return cuda.is_available()
    except Exception:
        return False


def reference_log10_floor(x):
    """Number of decimal digits minus one."""
    return len(str(int(x))) - 1


@pytest.fixture
def reference():
    """Independent reference implementation based on the decimal string."""
    return reference_log10_floor


@pytest.fixture(scope="session")
def all_u16_values():
    """Every non-zero u16 value."""
    return np.arange(1, 1 << 16, dtype=np.uint16)


@pytest.fixture(scope="session")
def gpu_available():
    """Check if GPU is available for testing."""
    return _cuda_available()


# Markers for test categorization
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "gpu: marks tests that require GPU")
    config.addinivalue_line("markers", "slow: marks slow tests")


# Skip GPU tests if no GPU available
def pytest_collection_modifyitems(config, items):
    """Skip GPU tests if no GPU is available."""
    if not _cuda_available():
        skip_gpu = pytest.mark.skip(reason="GPU not available")
        for item in items:
            if "gpu" in item.keywords:
                item.add_marker(skip_gpu)
