"""
Memory Equation
===============

    α F''(t) + β F'(t) + γ F(t) + δ + ∫₀ᵗ K(t-τ; F) F'(τ) dτ = 0
    F(0) = F0,  F'(0) = ∂F0

The shape family of F (scalar / vector / block) is fixed by F0 when the
equation is built; α, β, γ are normalized to operators of that family and
δ to a value of F0's shape.  An optional hook

    update_coefficients(coefficients, t)

may change coefficient values before each time step, in place.  It may
not change what kind of operator a coefficient is or its shape; this is
re-checked after every call while Python runs with assertions enabled.
"""

import numpy as np
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .algebra import algebra_for
from .exceptions import ConfigurationError, ShapeMismatch
from .memory_kernel import FunctionKernel, MemoryKernel


@dataclass
class Coefficients:
    """Normalized coefficients; mutable in value, fixed in kind."""
    alpha: Any
    beta: Any
    gamma: Any
    delta: Any

    def signature(self) -> tuple:
        ops = tuple((type(op).__name__, np.shape(op.value))
                    for op in (self.alpha, self.beta, self.gamma))
        return ops + (np.shape(self.delta),)


def _no_update(coefficients: Coefficients, t: float):
    pass


class MemoryEquation:
    """
    A memory equation ready to be handed to a solver.

    Args:
        alpha, beta, gamma: Multiplicative coefficients.  A number is a
            uniform scaling, a vector is diagonal, an n×n matrix is dense
            (vector F); for block F an (s,s) matrix is repeated per mode
            and an (n,s,s) array gives one block per mode.
        delta: Additive coefficient, broadcast to the shape of F0
        F0: Initial value; its shape fixes the family
        dF0: Initial derivative, same shape as F0
        kernel: MemoryKernel (a plain function (F, t) -> K is wrapped)
        update_coefficients: Optional hook(coefficients, t)
    """

    def __init__(self,
                 alpha, beta, gamma, delta,
                 F0, dF0,
                 kernel,
                 update_coefficients: Optional[Callable[[Coefficients, float], None]] = None):
        self.algebra = algebra_for(F0)
        alg = self.algebra

        self.F0 = alg.as_value(F0)
        self.dF0 = alg.check_value(alg.as_value(dF0), "∂F0")

        self.coefficients = Coefficients(
            alpha=alg.normalize_operator(alpha),
            beta=alg.normalize_operator(beta),
            gamma=alg.normalize_operator(gamma),
            delta=alg.normalize_additive(delta),
        )
        self._signature = self.coefficients.signature()
        self.check_leading_coefficient()

        if not isinstance(kernel, MemoryKernel):
            if not callable(kernel):
                raise TypeError(f"kernel must be a MemoryKernel or callable, got {type(kernel)}")
            kernel = FunctionKernel(kernel)
        self.kernel = kernel
        self.update_coefficients = update_coefficients or _no_update

    def update(self, t: float) -> Coefficients:
        """Run the update hook at time t and return the coefficients."""
        self.update_coefficients(self.coefficients, t)
        if __debug__ and self.coefficients.signature() != self._signature:
            raise ShapeMismatch(
                f"update_coefficients changed coefficient kind/shape at t={t}: "
                f"{self._signature} -> {self.coefficients.signature()}"
            )
        return self.coefficients

    def check_leading_coefficient(self):
        """
        α must vanish identically or be invertible; when α ≡ 0, β must be
        invertible instead.  Partly zero diagonals count as singular.
        """
        c = self.coefficients
        if c.alpha.is_zero():
            if c.beta.is_singular():
                raise ConfigurationError(
                    f"β must be invertible when α ≡ 0, got {c.beta!r}")
        elif c.alpha.is_singular():
            raise ConfigurationError(
                f"α must be identically zero or invertible, got {c.alpha!r}")

    def evaluate_kernel(self, F, t: float):
        """K = kernel.evaluate(F, t), checked against the shape of F0."""
        return self.algebra.check_value(self.kernel.evaluate(F, t), "Kernel output")

    def __repr__(self) -> str:
        c = self.coefficients
        return (f"MemoryEquation({self.algebra.name}, shape={self.algebra.shape}, "
                f"α={c.alpha!r}, β={c.beta!r}, γ={c.gamma!r}, kernel={self.kernel.name})")


__all__ = ["Coefficients", "MemoryEquation"]
