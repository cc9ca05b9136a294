"""
memory_equations test configuration
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from memory_equations import MemoryKernel


# =============================================================================
# Reference kernels
# =============================================================================

class ZeroKernel(MemoryKernel):
    """K ≡ 0: the equation reduces to a damped oscillator."""

    def evaluate(self, F, t):
        return F * 0


class ConstantKernel(MemoryKernel):
    """K ≡ λ, independent of F and t."""

    def __init__(self, lam):
        self.lam = lam

    def evaluate(self, F, t):
        return self.lam + F * 0


class SchematicF2Kernel(MemoryKernel):
    """K = λ F², per mode; glass transition at λ = 4."""

    def __init__(self, lam):
        self.lam = np.asarray(lam) if np.ndim(lam) else lam
        self.calls = 0

    def evaluate(self, F, t):
        self.calls += 1
        return self.lam * F * F


class BlockF2Kernel(MemoryKernel):
    """K_k = λ F_k @ F_k for block-valued F."""

    def __init__(self, lam):
        self.lam = lam

    def evaluate(self, F, t):
        return self.lam * np.matmul(F, F)


@pytest.fixture
def zero_kernel():
    return ZeroKernel()


@pytest.fixture
def constant_kernel():
    return ConstantKernel


@pytest.fixture
def f2_kernel():
    return SchematicF2Kernel


@pytest.fixture
def block_f2_kernel():
    return BlockF2Kernel


@pytest.fixture
def fast_solver():
    """Small solver that reaches t ≈ 13 quickly."""
    from memory_equations import TimeDoublingSolver
    return TimeDoublingSolver(N=128, dt=1e-4, t_max=10.0)


@pytest.fixture
def random_vectors():
    rng = np.random.default_rng(42)
    return rng.normal(size=6), rng.normal(size=6), rng.normal(size=6)


def pytest_configure(config):
    """Configure pytest"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
