"""
History Buffer for the time-doubling solver
===========================================

Bounded store of the most recent samples of F and K on a uniform grid

    t_i = i·h,   i = 0 … N

together with their interval means

    F̄_i = (1/h) ∫_{t_{i-1}}^{t_i} F(τ) dτ,   K̄_i likewise,

which are the quadrature weights of the memory integral.

Decimation (when the buffer is full):
  - points are subsampled:      F_j ← F_{2j}
  - interval means are averaged: F̄_j ← (F̄_{2j-1} + F̄_{2j}) / 2
  - the step size doubles:       h ← 2h

so N/2 samples survive and the next block of N/2 samples covers twice
the time.  Averaging the means keeps ∫ F dτ over the merged interval
exact, which is what the convolution needs.

One buffer belongs to exactly one running solve.
"""

import numpy as np
from typing import Tuple


class HistoryBuffer:
    """
    Rolling (t, F, K) store with decimation.

    Index 0 always holds the t=0 sample; indices 1…N the current block.
    """

    def __init__(self,
                 algebra,
                 N: int,
                 dt: float,
                 F0,
                 K0,
                 F_dtype=None,
                 K_dtype=None):
        """
        Args:
            algebra: Shape family of F (from ``algebra_for``)
            N: Capacity (even)
            dt: Initial step size
            F0, K0: Values at t=0
            F_dtype, K_dtype: Element types of the stored stacks
        """
        self.algebra = algebra
        self.N = N
        self.h = dt

        self.F = algebra.empty_stack(N + 1, F_dtype)
        self.K = algebra.empty_stack(N + 1, K_dtype)
        self.F_bar = algebra.empty_stack(N + 1, F_dtype)
        self.K_bar = algebra.empty_stack(N + 1, K_dtype)

        self.F[0] = F0
        self.K[0] = K0

        # Statistics
        self.n_stored = 0
        self.n_decimations = 0

    def t(self, i: int) -> float:
        return i * self.h

    def store(self, i: int, F, K):
        """Put sample i and the trapezoidal means of interval (i-1, i]."""
        self.F[i] = F
        self.K[i] = K
        self.F_bar[i] = (self.F[i] + self.F[i - 1]) / 2
        self.K_bar[i] = (self.K[i] + self.K[i - 1]) / 2
        self.n_stored += 1

    def decimate(self):
        """Halve the stored history and double the step size."""
        N, half = self.N, self.N // 2

        self.F_bar[1:half + 1] = (self.F_bar[1:N:2] + self.F_bar[2:N + 1:2]) / 2
        self.K_bar[1:half + 1] = (self.K_bar[1:N:2] + self.K_bar[2:N + 1:2]) / 2
        self.F[1:half + 1] = self.F[2:N + 1:2].copy()
        self.K[1:half + 1] = self.K[2:N + 1:2].copy()

        self.h *= 2
        self.n_decimations += 1

    def convolution(self, i: int) -> Tuple:
        """
        Memory integral C_i = ∫₀^{t_i} K(t_i-τ) F'(τ) dτ, split at t_{i/2}.

        The first half is summed with the exact increments of F against
        the interval means of K; the second half is integrated by parts
        and summed with the exact increments of K against the means of F:

            C_i = Σ_{j=1}^{i2}   K̄_{i-j+1} (F_j - F_{j-1})
                + K_0 F_i - K_{i-i2} F_{i2}
                + Σ_{j=1}^{i-i2} (K_j - K_{j-1}) F̄_{i-j+1}

        F_i and K_i are unknown.  They enter as
            ½(K_0 + K_1)·F_i       (self term, goes into the system matrix)
            ½ K_i·(F_1 - F_0)      (kernel term, refreshed every iteration)

        Returns:
            (known part of C_i, ½(K_0 + K_1), ½(F_1 - F_0))
        """
        alg = self.algebra
        F, K, F_bar, K_bar = self.F, self.K, self.F_bar, self.K_bar
        i2 = i // 2

        C = alg.contract(K_bar[i - i2 + 1:i][::-1], np.diff(F[1:i2 + 1], axis=0))
        C = C + alg.contract(np.diff(K[1:i - i2 + 1], axis=0), F_bar[i2 + 1:i][::-1])

        C = alg.affine_multiply(C, alg.diagonal(K[i - 1]), (F[1] - F[0]) / 2, 1, 1)
        C = alg.affine_multiply(C, alg.diagonal((K[1] - K[0]) / 2), F[i - 1], 1, 1)
        C = alg.affine_multiply(C, alg.diagonal(K[i - i2]), F[i2], -1, 1)

        K_self = (K[0] + K[1]) / 2
        lever = (F[1] - F[0]) / 2
        return C, K_self, lever

    def get_statistics(self) -> dict:
        return {
            'capacity': self.N,
            'step_size': self.h,
            'time_reached': self.t(self.N),
            'samples_stored': self.n_stored,
            'decimations': self.n_decimations,
        }

    def __repr__(self) -> str:
        return (f"HistoryBuffer(N={self.N}, h={float(self.h):.3e}, "
                f"decimations={self.n_decimations})")


__all__ = ["HistoryBuffer"]
