"""
Relaxation Time
===============

τ is the time at which the normalized correlator F(t)/F(t_0) first
drops to a threshold (1/e by default):

    F(τ) / F(t_0) = threshold

The crossing is interpolated linearly between the two bracketing
samples, either in t or in log t.  The latter suits the geometric
grids produced by the time-doubling solver.
"""

import numpy as np

from ..core.exceptions import ConfigurationError

INTERPOLATION_MODES = ("log", "lin", "linear")


def find_relaxation_time(t, F, threshold: float = np.exp(-1), mode: str = "log"):
    """
    First time at which F(t)/F[0] reaches ``threshold``.

    Args:
        t: Sample times, increasing
        F: Samples of the correlator; a 2-D array (time, mode) gives one
           relaxation time per mode, interpolated at the first sample
           where any mode has crossed
        threshold: Level of the normalized correlator
        mode: "log" (linear in log t) or "lin" / "linear" (linear in t);
              a bracket starting at t = 0 is always interpolated in t

    Returns:
        τ, with the conventions
          0    the first sample already satisfies the threshold
          inf  F never decays to the threshold
        Only the first crossing in time order is reported.

    Raises:
        ConfigurationError: Unknown mode
    """
    if mode not in INTERPOLATION_MODES:
        raise ConfigurationError(
            f"Unknown interpolation mode '{mode}'. Use one of {INTERPOLATION_MODES}."
        )

    t = np.asarray(t, dtype=float)
    F = np.asarray(F)
    ratio = F / F[0]

    for it in range(len(t)):
        if np.all(ratio[it] > threshold):
            continue
        if it == 0:
            return 0.0

        y0, y1 = ratio[it], ratio[it - 1]
        # log t is undefined at t = 0; that bracket is interpolated in t
        use_log = mode == "log" and t[it - 1] > 0
        if use_log:
            x0, x1 = np.log(t[it]), np.log(t[it - 1])
        else:
            x0, x1 = t[it], t[it - 1]
        x = ((threshold - y0) * (x1 - x0) + x0 * (y1 - y0)) / (y1 - y0)
        return np.exp(x) if use_log else x

    return np.inf


__all__ = ["find_relaxation_time", "INTERPOLATION_MODES"]
