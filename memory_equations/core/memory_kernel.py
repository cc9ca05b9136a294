"""
Memory Kernel Interface
=======================

The memory kernel enters the equation of motion through

    ∫₀ᵗ K(t-τ; F) F'(τ) dτ

and depends on the unknown F itself.  The solvers see a kernel only
through ``evaluate(F, t)``, which must return a value of the same shape
as F:

| F family | K returned       | acts on F as      |
|----------|------------------|-------------------|
| scalar   | number           | K * F             |
| vector   | ndarray (n,)     | K_k * F_k         |
| block    | ndarray (n,s,s)  | K_k @ F_k         |

Evaluation may be expensive (a convolution over modes, say); the time
stepper calls it once per fixed-point iteration and never otherwise.

Concrete physical kernels (structure-factor based, schematic, ...) live
outside this package; subclass ``MemoryKernel`` or wrap a plain function
with ``FunctionKernel``.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


# =============================================================================
# Base Kernel Class
# =============================================================================

class MemoryKernel(ABC):
    """Abstract base class for self-consistent memory kernels."""

    @abstractmethod
    def evaluate(self, F, t: float):
        """Return K(t) given the current value F(t)."""
        pass

    @property
    def name(self) -> str:
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.name}>"


# =============================================================================
# Callable Adapter
# =============================================================================

class FunctionKernel(MemoryKernel):
    """
    Wrap a plain function as a memory kernel.

    Example:
        >>> kernel = FunctionKernel(lambda F, t: 2.0 * F**2, name="F2")
        >>> kernel.evaluate(0.5, 0.0)
        0.5
    """

    def __init__(self, func: Callable[[Any, float], Any], name: str = None):
        self.func = func
        self._name = name or getattr(func, "__name__", "FunctionKernel")

    def evaluate(self, F, t: float):
        return self.func(F, t)

    @property
    def name(self) -> str:
        return self._name


__all__ = ["MemoryKernel", "FunctionKernel"]
