"""
Steady-State Solver
===================

The long-time limit F(∞) of the memory equation satisfies

    F = (K(F) + γ)⁻¹ · K(F) · F0

(the non-ergodicity parameter in mode-coupling theory).  It is found by
direct fixed-point iteration starting from F0; a non-trivial solution
signals an arrested (glassy) state.
"""

import math

from ..core.algebra import algebra_for
from ..core.exceptions import ConvergenceFailure
from ..core.memory_kernel import FunctionKernel, MemoryKernel
from .solution import SteadyStateSolution


def solve_steady_state(gamma,
                       F0,
                       kernel,
                       tolerance: float = 1e-10,
                       max_iterations: int = 10**4,
                       verbose: bool = False) -> SteadyStateSolution:
    """
    Fixed point of F ← (K(F, ∞) + γ)⁻¹ K(F, ∞) F0.

    Args:
        gamma: Coefficient γ (number, per-mode vector, dense matrix or blocks)
        F0: Initial value and starting guess; fixes the shape family
        kernel: MemoryKernel or plain function (F, t) -> K
        tolerance: Sup-norm tolerance between successive iterates
        max_iterations: Iteration budget
        verbose: Print progress

    Returns:
        SteadyStateSolution

    Raises:
        ConvergenceFailure: Budget exhausted (time = inf)
        ShapeMismatch: γ or the kernel output do not match F0
    """
    alg = algebra_for(F0)
    F0 = alg.as_value(F0)
    gamma = alg.normalize_operator(gamma)
    if not isinstance(kernel, MemoryKernel):
        kernel = FunctionKernel(kernel)

    if verbose:
        print(f"🔁 Steady state: {alg.name} F{alg.shape}, kernel={kernel.name}")

    F = F0
    error = None
    for iteration in range(1, max_iterations + 1):
        K = alg.check_value(kernel.evaluate(F, math.inf), "Kernel output")
        KF0 = alg.affine_multiply(alg.zeros(), alg.diagonal(K), F0, 1, 0)
        A = alg.combine([(1, alg.diagonal(K)), (1, gamma)])
        F_new = alg.solve(A, KF0)

        error = alg.error_norm(F_new, F)
        F = F_new
        if not math.isfinite(error):
            raise ConvergenceFailure(math.inf, error, iteration)
        if verbose and iteration % 100 == 0:
            print(f"   iteration {iteration}: error={float(error):.3e}")
        if error <= tolerance:
            break
    else:
        raise ConvergenceFailure(math.inf, error, max_iterations)

    # K at the converged F
    K = alg.check_value(kernel.evaluate(F, math.inf), "Kernel output")

    if verbose:
        print(f"   ✅ Converged after {iteration} iterations (error={float(error):.3e})")
    return SteadyStateSolution(F=F, K=K, iterations=iteration, error=error)


__all__ = ["solve_steady_state"]
