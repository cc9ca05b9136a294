"""
memory_equations
================

Numerical solver for self-consistent memory equations

    α F''(t) + β F'(t) + γ F(t) + δ + ∫₀ᵗ K(t-τ; F) F'(τ) dτ = 0
    F(0) = F0,  F'(0) = ∂F0

where the memory kernel K depends on the solution itself, as in the
mode-coupling theory of glassy dynamics.

Key ideas:
  - Time-doubling grid: the step size doubles after each block while
    the stored history is decimated, so many decades of time are
    covered at O(N) memory and cost per step.
  - Self-consistency: at every step K(F_i) and F_i are iterated to a
    fixed point in the sup norm.
  - One engine for scalar F, per-mode vectors F_k and per-mode blocks
    F_k (s×s), and for any numeric element type numpy can hold.

Structure:
  memory_equations/
  ├── core/
  │   ├── algebra.py          # Operators, affine_multiply, error_norm
  │   ├── memory_kernel.py    # Kernel interface
  │   ├── equation.py         # MemoryEquation
  │   ├── history_buffer.py   # Decimating history
  │   └── exceptions.py       # Error taxonomy
  ├── solvers/
  │   ├── time_doubling.py    # Time-doubling solver
  │   ├── steady_state.py     # t → ∞ fixed point
  │   └── solution.py         # Result containers
  ├── analysis/
  │   ├── relaxation_time.py  # τ from a correlator
  │   └── root_finding.py     # Regula falsi
  └── tests/

Example:
    >>> from memory_equations import MemoryEquation, TimeDoublingSolver, solve
    >>> from memory_equations import find_relaxation_time
    >>> eq = MemoryEquation(1.0, 0.0, 1.0, 0.0, 1.0, 0.0, lambda F, t: 3.0 * F**2)
    >>> sol = solve(eq, TimeDoublingSolver(N=64, dt=1e-4, t_max=1e3))
    >>> tau = find_relaxation_time(sol.t, sol.F)
"""

__version__ = "0.1.0"

# =============================================================================
# Core Components
# =============================================================================

from .core.algebra import (
    UniformScaling,
    Diagonal,
    BlockDiagonal,
    Dense,
    algebra_for,
    affine_multiply,
    error_norm,
)

from .core.memory_kernel import (
    MemoryKernel,
    FunctionKernel,
)

from .core.equation import (
    Coefficients,
    MemoryEquation,
)

from .core.history_buffer import HistoryBuffer

from .core.exceptions import (
    MemoryEquationError,
    ShapeMismatch,
    ConfigurationError,
    ConvergenceFailure,
)

# =============================================================================
# Solvers
# =============================================================================

from .solvers.time_doubling import (
    TimeDoublingSolver,
    RunState,
    solve,
)

from .solvers.steady_state import solve_steady_state

from .solvers.solution import (
    SolutionTimeSeries,
    SteadyStateSolution,
)

# =============================================================================
# Analysis
# =============================================================================

from .analysis.relaxation_time import find_relaxation_time
from .analysis.root_finding import regula_falsi


__all__ = [
    # Version
    '__version__',

    # Core - Algebra
    'UniformScaling',
    'Diagonal',
    'BlockDiagonal',
    'Dense',
    'algebra_for',
    'affine_multiply',
    'error_norm',

    # Core - Kernels
    'MemoryKernel',
    'FunctionKernel',

    # Core - Equation
    'Coefficients',
    'MemoryEquation',
    'HistoryBuffer',

    # Core - Errors
    'MemoryEquationError',
    'ShapeMismatch',
    'ConfigurationError',
    'ConvergenceFailure',

    # Solvers
    'TimeDoublingSolver',
    'RunState',
    'solve',
    'solve_steady_state',
    'SolutionTimeSeries',
    'SteadyStateSolution',

    # Analysis
    'find_relaxation_time',
    'regula_falsi',
]
