"""
Root Finding
============

Bracketed regula-falsi search, used by tooling around the solvers (for
instance to locate the critical coupling at which the steady state
becomes non-trivial).
"""

from typing import Callable


def regula_falsi(x0: float,
                 x1: float,
                 f: Callable[[float], float],
                 accuracy: float = 1e-10,
                 max_iterations: int = 10**4) -> float:
    """
    Find x with f(x) ≈ 0 in the bracket [x0, x1].

    Each iteration takes the secant estimate between the bracket ends
    and keeps the sub-interval on which f changes sign.  If the secant
    extrapolates outside the bracket (f not monotone, or discontinuous),
    the bracket is moved towards that side instead of giving up.

    The bracket is assumed, not checked, to contain exactly one root.
    No error is raised when the iteration budget runs out: the last
    estimate is returned either way.

    Args:
        x0: Lower end of the bracket
        x1: Upper end of the bracket
        f: Scalar function
        accuracy: Stop once the bracket is at most this wide
        max_iterations: Iteration budget

    Returns:
        The last secant estimate

    Example:
        >>> regula_falsi(0.0, 2.0, lambda x: x - 1)
        1.0
    """
    xa, xb = x0, x1
    fa, fb = f(xa), f(xb)
    dx = xb - xa
    xguess = (xa + xb) / 2
    iterations = 0

    while iterations == 0 or (dx > accuracy and iterations <= max_iterations):
        if fb == fa:
            break
        xguess = xa - (dx / (fb - fa)) * fa
        fguess = f(xguess)
        if fguess == 0:
            break

        if xguess < xa:
            xa, fa, xb, fb = xguess, fguess, xa, fa
        elif xguess > xb:
            xa, fa, xb, fb = xb, fb, xguess, fguess
        elif (fguess > 0 and fa < 0) or (fguess < 0 and fa > 0):
            xb, fb = xguess, fguess
        else:
            xa, fa = xguess, fguess

        iterations += 1
        dx = xb - xa

    return xguess


__all__ = ["regula_falsi"]
