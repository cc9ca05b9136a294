"""
Exceptions for memory_equations
===============================

  MemoryEquationError
  ├── ShapeMismatch        coefficient / kernel output incompatible with F0
  ├── ConfigurationError   invalid solver parameters, unknown modes
  └── ConvergenceFailure   fixed-point iteration exceeded its budget
"""

import math


class MemoryEquationError(Exception):
    """Base class for all errors raised by memory_equations."""


class ShapeMismatch(MemoryEquationError, ValueError):
    """A value cannot be reconciled with the shape family of F0."""


class ConfigurationError(MemoryEquationError, ValueError):
    """Invalid solver parameter or option."""


class ConvergenceFailure(MemoryEquationError, RuntimeError):
    """
    Fixed-point iteration did not reach the tolerance.

    Attributes:
        time: Time at which the iteration failed (inf for the steady state)
        residual: Last error norm between successive iterates
        iterations: Number of iterations performed
    """

    def __init__(self, time: float, residual, iterations: int):
        self.time = time
        self.residual = residual
        self.iterations = iterations
        where = "t=∞" if math.isinf(time) else f"t={float(time):.6g}"
        super().__init__(
            f"No convergence at {where} after {iterations} iterations "
            f"(residual={residual})"
        )
