"""
memory_equations core components
================================

Foundation modules shared by all solvers.

Modules:
  - algebra: operators and arithmetic for scalar / vector / block F
  - memory_kernel: kernel interface K = evaluate(F, t)
  - equation: MemoryEquation and its coefficient container
  - history_buffer: decimating (t, F, K) store of the time-doubling solver
  - exceptions: error taxonomy
"""

# Algebra
from .algebra import (
    UniformScaling,
    Diagonal,
    BlockDiagonal,
    Dense,
    ScalarAlgebra,
    VectorAlgebra,
    BlockAlgebra,
    algebra_for,
    affine_multiply,
    error_norm,
)

# Kernels
from .memory_kernel import (
    MemoryKernel,
    FunctionKernel,
)

# Equation
from .equation import (
    Coefficients,
    MemoryEquation,
)

# History
from .history_buffer import HistoryBuffer

# Errors
from .exceptions import (
    MemoryEquationError,
    ShapeMismatch,
    ConfigurationError,
    ConvergenceFailure,
)


__all__ = [
    # Algebra
    'UniformScaling',
    'Diagonal',
    'BlockDiagonal',
    'Dense',
    'ScalarAlgebra',
    'VectorAlgebra',
    'BlockAlgebra',
    'algebra_for',
    'affine_multiply',
    'error_norm',

    # Kernels
    'MemoryKernel',
    'FunctionKernel',

    # Equation
    'Coefficients',
    'MemoryEquation',

    # History
    'HistoryBuffer',

    # Errors
    'MemoryEquationError',
    'ShapeMismatch',
    'ConfigurationError',
    'ConvergenceFailure',
]
