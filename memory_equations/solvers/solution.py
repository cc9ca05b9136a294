"""
Solution containers
===================

SolutionTimeSeries   (t, F, K) over the whole run of the time-doubling solver
SteadyStateSolution  (F, K) at t = ∞
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class SolutionTimeSeries:
    """
    Time series produced by ``solve``.

    Samples are appended block by block while the solver runs; once
    ``solve`` returns the series is frozen.  ``t``, ``F`` and ``K`` are
    stacked arrays with time along the first axis:

        scalar F  ->  F.shape == (n_t,)
        vector F  ->  F.shape == (n_t, n_modes)
        block F   ->  F.shape == (n_t, n_modes, s, s)

    Derivatives with respect to model parameters have no separate channel:
    number types that carry them (dual numbers in object arrays, say)
    travel inside F and K unchanged.
    """
    # Diagnostics
    n_blocks: int = 0
    n_iterations: int = 0
    wall_time: float = 0.0
    solver: Any = None

    _times: List[float] = field(default_factory=list, repr=False)
    _values: List[Any] = field(default_factory=list, repr=False)
    _kernels: List[Any] = field(default_factory=list, repr=False)
    _frozen: bool = field(default=False, repr=False)
    _cache: dict = field(default_factory=dict, repr=False)

    def append(self, t: float, F, K):
        if self._frozen:
            raise RuntimeError("SolutionTimeSeries is read-only once solve() has returned")
        self._times.append(t)
        self._values.append(_snapshot(F))
        self._kernels.append(_snapshot(K))

    def freeze(self):
        self._frozen = True
        self._cache.clear()

    # ------------------------------------------------------------------
    # Stacked views
    # ------------------------------------------------------------------

    def _stacked(self, key: str, items: list) -> np.ndarray:
        if key not in self._cache or not self._frozen:
            arr = np.asarray(items)
            arr.flags.writeable = False
            self._cache[key] = arr
        return self._cache[key]

    @property
    def t(self) -> np.ndarray:
        return self._stacked('t', self._times)

    @property
    def F(self) -> np.ndarray:
        return self._stacked('F', self._values)

    @property
    def K(self) -> np.ndarray:
        return self._stacked('K', self._kernels)

    def get_t(self) -> np.ndarray:
        return self.t

    def get_F(self, it: Optional[int] = None, k: Optional[int] = None):
        """F at time index ``it`` and/or mode ``k`` (all if omitted)."""
        return _select(self.F, it, k)

    def get_K(self, it: Optional[int] = None, k: Optional[int] = None):
        """K at time index ``it`` and/or mode ``k`` (all if omitted)."""
        return _select(self.K, it, k)

    def __len__(self) -> int:
        return len(self._times)

    def __getitem__(self, it: int):
        """(t, F, K) at time index it, as read-only views."""
        return self.t[it], self.F[it], self.K[it]

    def __repr__(self) -> str:
        if not self._times:
            return "SolutionTimeSeries(empty)"
        return (f"SolutionTimeSeries(n_t={len(self)}, "
                f"t=[{float(self._times[1] if len(self) > 1 else 0):.3e}, {float(self._times[-1]):.3e}], "
                f"blocks={self.n_blocks}, iterations={self.n_iterations})")


@dataclass
class SteadyStateSolution:
    """Fixed point F = (K(F) + γ)⁻¹ K(F) F0."""
    F: Any
    K: Any
    iterations: int = 0
    error: Any = 0.0

    def __repr__(self) -> str:
        return f"SteadyStateSolution(iterations={self.iterations}, error={self.error})"


def _snapshot(value):
    return value.copy() if hasattr(value, 'copy') else value


def _select(arr: np.ndarray, it, k):
    if it is None and k is None:
        return arr
    if k is None:
        return arr[it]
    if it is None:
        return arr[:, k]
    return arr[it, k]


__all__ = ["SolutionTimeSeries", "SteadyStateSolution"]
