"""
Time-Doubling Solver
====================

Solves

    α F'' + β F' + γ F + δ + ∫₀ᵗ K(t-τ; F) F'(τ) dτ = 0

on a grid whose step size doubles after every block of N/2 new samples,
so that t_max ≈ Δt0·N·2^B is reached after B blocks while memory and
per-step cost stay O(N).

Run state machine:

    SEEDING ──> STEPPING ──> DECIMATING ──> STEPPING ──> … ──> DONE
                    └────────────── any error ──────────────> FAILED

  SEEDING     first N/2 samples from the short-time expansion of F
  STEPPING    samples N/2+1 … N, each by a self-consistent fixed point
  DECIMATING  history halved, h doubled (see HistoryBuffer)

Per step the equation is discretized with backward differences

    F'  ≈ (3F_i - 4F_{i-1} + F_{i-2}) / 2h
    F'' ≈ (2F_i - 5F_{i-1} + 4F_{i-2} - F_{i-3}) / h²

which leaves a system that is linear in F_i once K_i is known:

    [2α/h² + 3β/2h + γ + ½(K_0+K_1)] F_i = B_i - ½ K_i (F_1 - F_0)

The matrix on the left is fixed for the step; only K_i is iterated.
"""

import math
import time
import numpy as np
from dataclasses import dataclass
from enum import Enum

from ..core.exceptions import ConfigurationError, ConvergenceFailure
from ..core.history_buffer import HistoryBuffer
from .solution import SolutionTimeSeries


class RunState(Enum):
    SEEDING = "seeding"
    STEPPING = "stepping"
    DECIMATING = "decimating"
    DONE = "done"
    FAILED = "failed"


@dataclass
class TimeDoublingSolver:
    """
    Configuration of the time-doubling solver.

    Attributes:
        N: Number of samples kept in history (even, ≥ 4); each block
           adds N/2 new samples
        dt: Initial step size Δt0
        t_max: Stop once a block ends at or after t_max
        tolerance: Sup-norm tolerance of the per-step fixed point
        max_iterations: Fixed-point iterations allowed per step
        verbose: Print progress (no effect on the result)
    """
    N: int = 128
    dt: float = 1e-12
    t_max: float = 1e10
    tolerance: float = 1e-10
    max_iterations: int = 10**4
    verbose: bool = False

    def __post_init__(self):
        if self.N < 4 or self.N % 2:
            raise ConfigurationError(f"N must be an even integer ≥ 4, got {self.N}")
        if not self.dt > 0:
            raise ConfigurationError(f"dt must be positive, got {self.dt}")
        if not self.t_max > 0:
            raise ConfigurationError(f"t_max must be positive, got {self.t_max}")
        if self.tolerance < 0:
            raise ConfigurationError(f"tolerance must be non-negative, got {self.tolerance}")
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be at least 1, got {self.max_iterations}")

    @property
    def n_blocks(self) -> int:
        """Blocks needed to reach t_max (the first block is seeded + stepped)."""
        span = self.N * self.dt
        return 1 + max(0, math.ceil(math.log2(float(self.t_max / span))))

    def solve(self, equation) -> SolutionTimeSeries:
        return _TimeDoublingRun(equation, self).run()


def solve(equation, solver: TimeDoublingSolver = None) -> SolutionTimeSeries:
    """Solve a MemoryEquation with the time-doubling scheme."""
    if solver is None:
        solver = TimeDoublingSolver()
    return solver.solve(equation)


# =============================================================================
# One run
# =============================================================================

class _TimeDoublingRun:
    """State of a single solve; owns the history buffer."""

    def __init__(self, equation, config: TimeDoublingSolver):
        self.equation = equation
        self.config = config
        self.algebra = equation.algebra
        self.state = RunState.SEEDING
        self.buffer = None
        self.iterations = 0

    def run(self) -> SolutionTimeSeries:
        cfg = self.config
        eq = self.equation
        N = cfg.N

        solution = SolutionTimeSeries(solver=cfg)

        if cfg.verbose:
            print(f"⏱️ Time-doubling solve: {eq.algebra.name} F{eq.algebra.shape}, "
                  f"kernel={eq.kernel.name}")
            print(f"   N={N}, Δt0={float(cfg.dt):.3e}, t_max={float(cfg.t_max):.3e}, "
                  f"~{cfg.n_blocks} blocks")

        t0_wall = time.time()
        try:
            self.buffer = self._allocate()
            solution.append(self.buffer.t(0), eq.F0, self.buffer.K[0])

            self._seed(solution)
            block = 0
            while True:
                self.state = RunState.STEPPING
                iterations_before = self.iterations
                for i in range(N // 2 + 1, N + 1):
                    self._step(i)
                    solution.append(self.buffer.t(i), self.buffer.F[i], self.buffer.K[i])
                block += 1

                t_reached = self.buffer.t(N)
                if cfg.verbose:
                    print(f"   Block {block}: t={float(t_reached):.3e}, Δt={float(self.buffer.h):.3e}, "
                          f"iterations={self.iterations - iterations_before}")
                if t_reached >= cfg.t_max:
                    break

                self.state = RunState.DECIMATING
                self.buffer.decimate()
        except Exception:
            self.state = RunState.FAILED
            raise

        self.state = RunState.DONE
        solution.n_blocks = block
        solution.n_iterations = self.iterations
        solution.wall_time = time.time() - t0_wall
        solution.freeze()

        if cfg.verbose:
            print(f"   ✅ Done in {solution.wall_time:.2f}s "
                  f"({len(solution)} samples, {self.iterations} iterations)")
        return solution

    # ------------------------------------------------------------------

    def _allocate(self) -> HistoryBuffer:
        eq, alg = self.equation, self.algebra
        c = eq.update(0.0)
        K0 = eq.evaluate_kernel(eq.F0, 0.0)

        K_dtype = np.result_type(alg.dtype, np.asarray(K0))
        F_dtype = np.result_type(
            K_dtype, np.asarray(eq.dF0), np.asarray(c.delta),
            *(np.asarray(op.value) for op in (c.alpha, c.beta, c.gamma)))
        return HistoryBuffer(alg, self.config.N, self.config.dt, eq.F0, K0,
                             F_dtype=F_dtype, K_dtype=K_dtype)

    def _seed(self, solution: SolutionTimeSeries):
        """
        Short-time expansion for the first N/2 samples.

        At t=0 the memory integral vanishes, so
            F''(0) = -α⁻¹ (β ∂F0 + γ F0 + δ)      (α ≠ 0)
            F'(0)  = -β⁻¹ (γ F0 + δ)              (α ≡ 0)
        """
        self.state = RunState.SEEDING
        eq, alg, buf = self.equation, self.algebra, self.buffer
        eq.check_leading_coefficient()
        c = eq.coefficients
        F0, dF0 = eq.F0, eq.dF0

        force = alg.apply(c.gamma, F0) + c.delta
        if c.alpha.is_zero():
            slope = alg.solve(c.beta, -force)
            curvature = alg.zeros()
        else:
            force = alg.affine_multiply(force, c.beta, dF0, 1, 1)
            slope = dF0
            curvature = alg.solve(c.alpha, -force)

        for i in range(1, self.config.N // 2 + 1):
            t = buf.t(i)
            F = F0 + t * slope + (t * t / 2) * curvature
            K = eq.evaluate_kernel(F, t)
            buf.store(i, F, K)
            solution.append(t, buf.F[i], buf.K[i])

    def _step(self, i: int):
        """Advance to sample i by fixed-point iteration on K_i."""
        eq, alg, buf, cfg = self.equation, self.algebra, self.buffer, self.config
        h = buf.h
        t = buf.t(i)
        F = buf.F

        c = eq.update(t)
        C, K_self, lever = buf.convolution(i)

        # Known parts of the difference stencils
        d2 = (-5 * F[i - 1] + 4 * F[i - 2] - F[i - 3]) / (h * h)
        d1 = (-4 * F[i - 1] + F[i - 2]) / (2 * h)

        B = -(C + c.delta)
        B = alg.affine_multiply(B, c.alpha, d2, -1, 1)
        B = alg.affine_multiply(B, c.beta, d1, -1, 1)

        A = alg.combine([
            (2 / (h * h), c.alpha),
            (3 / (2 * h), c.beta),
            (1, c.gamma),
            (1, alg.diagonal(K_self)),
        ])

        F_i = F[i - 1]
        error = None
        for iteration in range(1, cfg.max_iterations + 1):
            K_i = eq.evaluate_kernel(F_i, t)
            F_new = alg.solve(A, B - alg.product(K_i, lever))
            error = alg.error_norm(F_new, F_i)
            F_i = F_new
            if not math.isfinite(error):
                self.iterations += iteration
                raise ConvergenceFailure(t, error, iteration)
            if error <= cfg.tolerance:
                break
        else:
            self.iterations += cfg.max_iterations
            raise ConvergenceFailure(t, error, cfg.max_iterations)

        self.iterations += iteration
        buf.store(i, F_i, K_i)


__all__ = ["TimeDoublingSolver", "RunState", "solve"]
