"""
Coefficient Algebra
===================

Generic arithmetic that lets one time-stepping engine work on every
shape family of the unknown F:

| Family  | F                          | Kernel value K acts as  |
|---------|----------------------------|-------------------------|
| scalar  | number                     | UniformScaling          |
| vector  | ndarray (n,)   one / mode  | Diagonal                |
| block   | ndarray (n, s, s)          | BlockDiagonal           |

Multiplicative coefficients (α, β, γ) are normalized to operators:

  UniformScaling(λ)   λ·F                       all families
  Diagonal(d)         d_k · F_k                 vector
  BlockDiagonal(M)    M_k @ F_k                 block
  Dense(A)            A @ F                     vector

Operators of different kind are combined by promotion to the richest
kind present (uniform < diagonal < dense).  Uniform and diagonal
operators are never expanded into dense matrices, so their cost stays
linear in the number of modes.

The element type is whatever numpy infers for F0.  Python number types
(Fraction, uncertainty-carrying numbers, ...) end up in object arrays
and pass through unchanged; only the dense and per-block solves need a
separate path for them.
"""

import numpy as np
import scipy.linalg
from typing import Any, List, Sequence, Tuple

from .exceptions import ShapeMismatch


# =============================================================================
# Operators
# =============================================================================

class UniformScaling:
    """λ·I, shape-agnostic."""

    rank = 0

    def __init__(self, value):
        self.value = value

    def apply(self, b):
        return self.value * b

    def solve(self, b):
        return b / self.value

    def scaled(self, w):
        return UniformScaling(w * self.value)

    def plus(self, other):
        if other.rank > self.rank:
            return other.plus(self)
        return UniformScaling(self.value + other.value)

    def is_zero(self) -> bool:
        return bool(np.all(np.asarray(self.value) == 0))

    def as_elementwise(self):
        return self.value

    def is_singular(self) -> bool:
        return self.is_zero()

    def as_blocks(self, like: np.ndarray) -> np.ndarray:
        s = like.shape[-1]
        return self.value * np.broadcast_to(_identity(s, like.dtype), like.shape)

    def as_matrix(self, n: int, dtype=float) -> np.ndarray:
        return self.value * _identity(n, dtype)

    def __repr__(self) -> str:
        return f"UniformScaling({self.value!r})"


class Diagonal:
    """Elementwise (per-mode) operator for the vector family."""

    rank = 1

    def __init__(self, value: np.ndarray):
        self.value = value

    def apply(self, b):
        return self.value * b

    def solve(self, b):
        return b / self.value

    def scaled(self, w):
        return Diagonal(w * self.value)

    def plus(self, other):
        if other.rank > self.rank:
            return other.plus(self)
        return Diagonal(self.value + other.as_elementwise())

    def is_zero(self) -> bool:
        return bool(np.all(self.value == 0))

    def is_singular(self) -> bool:
        return bool(np.any(self.value == 0))

    def as_elementwise(self):
        return self.value

    def as_matrix(self, n: int, dtype=float) -> np.ndarray:
        return np.diag(self.value)

    def __repr__(self) -> str:
        return f"Diagonal(n={len(self.value)})"


class BlockDiagonal:
    """One s×s matrix per mode, applied by batched matmul."""

    rank = 1

    def __init__(self, value: np.ndarray):
        self.value = value

    def apply(self, b):
        return np.matmul(self.value, b)

    def solve(self, b):
        if self.value.dtype == object:
            return np.stack([_gauss_jordan_solve(a, x) for a, x in zip(self.value, b)])
        return np.linalg.solve(self.value, b)

    def scaled(self, w):
        return BlockDiagonal(w * self.value)

    def plus(self, other):
        return BlockDiagonal(self.value + other.as_blocks(self.value))

    def is_zero(self) -> bool:
        return bool(np.all(self.value == 0))

    def is_singular(self) -> bool:
        return _any_singular(self.value)

    def as_blocks(self, like: np.ndarray) -> np.ndarray:
        return self.value

    def __repr__(self) -> str:
        n, s, _ = self.value.shape
        return f"BlockDiagonal(n={n}, s={s})"


class Dense:
    """Full n×n operator coupling modes (vector family only)."""

    rank = 2

    def __init__(self, value: np.ndarray):
        self.value = value

    def apply(self, b):
        return self.value @ b

    def solve(self, b):
        if self.value.dtype == object:
            return _gauss_jordan_solve(self.value, b)
        return scipy.linalg.solve(self.value, b)

    def scaled(self, w):
        return Dense(w * self.value)

    def plus(self, other):
        return Dense(self.value + other.as_matrix(self.value.shape[0], self.value.dtype))

    def is_zero(self) -> bool:
        return bool(np.all(self.value == 0))

    def is_singular(self) -> bool:
        return _any_singular(self.value)

    def as_matrix(self, n: int, dtype=float) -> np.ndarray:
        return self.value

    def __repr__(self) -> str:
        return f"Dense(n={self.value.shape[0]})"


OPERATOR_TYPES = (UniformScaling, Diagonal, BlockDiagonal, Dense)


def _identity(n: int, dtype) -> np.ndarray:
    """Identity whose entries keep the element type of 'dtype' (exact 0 and 1 for object)."""
    if np.dtype(dtype) == object:
        return np.identity(n, dtype=object)
    return np.identity(n)


def _any_singular(value: np.ndarray) -> bool:
    """Rank test for float matrices (or stacks of them); object arrays are not checked."""
    if value.dtype == object:
        return False
    return bool(np.any(np.linalg.matrix_rank(value) < value.shape[-1]))


def _gauss_jordan_solve(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve a @ x = b with partial pivoting, for any field-like element type."""
    m = a.shape[0]
    a = np.array(a, dtype=object)
    x = np.array(b, dtype=object)
    for col in range(m):
        pivot = max(range(col, m), key=lambda r: abs(a[r, col]))
        if pivot != col:
            a[[col, pivot]] = a[[pivot, col]]
            x[[col, pivot]] = x[[pivot, col]]
        p = a[col, col]
        a[col] = a[col] / p
        x[col] = x[col] / p
        for row in range(m):
            if row != col:
                factor = a[row, col]
                a[row] = a[row] - factor * a[col]
                x[row] = x[row] - factor * x[col]
    return x


# =============================================================================
# Algebra families
# =============================================================================

class _AlgebraBase:
    """Shared behaviour of the three shape families."""

    name = "abstract"

    def __init__(self, F0):
        self.shape: Tuple[int, ...] = np.shape(F0)
        self.dtype = np.result_type(np.asarray(F0), 1.0)
        self.zero = np.asarray(F0, dtype=self.dtype) * 0

    # --- values -----------------------------------------------------------

    def as_value(self, raw):
        return np.array(raw, dtype=self.dtype)

    def zeros(self):
        return self.zero.copy()

    def check_value(self, value, what: str = "value"):
        if np.shape(value) != self.shape:
            raise ShapeMismatch(
                f"{what} has shape {np.shape(value)}, expected {self.shape} "
                f"({self.name} family)"
            )
        return value

    def normalize_additive(self, raw):
        """Broadcast an additive coefficient (δ) to F0's shape."""
        try:
            value = np.asarray(raw) + self.zero
        except ValueError:
            value = None
        if value is None or value.shape != self.shape:
            raise ShapeMismatch(
                f"Additive coefficient of shape {np.shape(raw)} cannot be "
                f"broadcast to {self.shape} ({self.name} family)"
            )
        return value

    # --- operators --------------------------------------------------------

    def normalize_operator(self, raw):
        if isinstance(raw, OPERATOR_TYPES):
            self._check_operator(raw)
            return raw
        if np.ndim(raw) == 0:
            return UniformScaling(raw)
        return self._array_operator(np.array(raw))

    def _array_operator(self, arr: np.ndarray):
        raise ShapeMismatch(
            f"Coefficient of shape {arr.shape} is incompatible with the "
            f"{self.name} family {self.shape}"
        )

    def _check_operator(self, op):
        if isinstance(op, UniformScaling) and np.ndim(op.value) == 0:
            return
        expected = self._array_operator(np.asarray(op.value))
        if type(expected) is not type(op) or expected.value.shape != np.shape(op.value):
            raise ShapeMismatch(f"{op!r} does not fit the {self.name} family {self.shape}")

    def diagonal(self, K):
        """Wrap a kernel value as the operator it represents."""
        raise NotImplementedError

    def combine(self, terms: Sequence[Tuple[Any, Any]]):
        """Σ wᵢ·Aᵢ, promoted to the richest operator kind present."""
        total = None
        for weight, op in terms:
            term = op.scaled(weight)
            total = term if total is None else total.plus(term)
        return total

    def solve(self, A, b):
        return A.solve(b)

    def apply(self, a, b):
        return _as_operator(a).apply(b)

    # --- in-place arithmetic ---------------------------------------------

    def affine_multiply(self, c, a, b, alpha=1, beta=0):
        """c := beta·c + alpha·(a·b), in place; returns c."""
        ab = _as_operator(a).apply(b)
        c *= beta
        c += alpha * ab
        return c

    def product(self, K, F):
        """Kernel value(s) applied to F value(s); leading axes broadcast."""
        return K * F

    def contract(self, Ks: np.ndarray, Fs: np.ndarray):
        """Σⱼ Kⱼ·Fⱼ over the leading axis of two stacks."""
        if len(Ks) == 0:
            return self.zero.copy()
        return self.product(Ks, Fs).sum(axis=0)

    def error_norm(self, F_new, F_old):
        """Sup norm of the elementwise difference."""
        return np.max(np.abs(np.asarray(F_new) - np.asarray(F_old)))

    def empty_stack(self, length: int, dtype=None) -> np.ndarray:
        return np.zeros((length,) + self.shape, dtype=dtype or self.dtype)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype})"


class ScalarAlgebra(_AlgebraBase):
    """F is a single number."""

    name = "scalar"

    def __init__(self, F0):
        super().__init__(F0)
        self.zero = F0 * 0

    def as_value(self, raw):
        return raw

    def zeros(self):
        return self.zero

    def normalize_additive(self, raw):
        if np.ndim(raw) != 0:
            raise ShapeMismatch(
                f"Additive coefficient of shape {np.shape(raw)} given for a scalar F0"
            )
        return raw + self.zero

    def diagonal(self, K):
        return UniformScaling(K)

    def affine_multiply(self, c, a, b, alpha=1, beta=0):
        """Scalars are immutable: returns beta·c + alpha·(a·b)."""
        return beta * c + alpha * _as_operator(a).apply(b)

    def contract(self, Ks: np.ndarray, Fs: np.ndarray):
        if len(Ks) == 0:
            return self.zero
        return (Ks * Fs).sum()

    def error_norm(self, F_new, F_old):
        return abs(F_new - F_old)


class VectorAlgebra(_AlgebraBase):
    """F is a vector with one value per mode."""

    name = "vector"

    def _array_operator(self, arr: np.ndarray):
        n = self.shape[0]
        if arr.shape == (n,):
            return Diagonal(arr)
        if arr.shape == (n, n):
            return Dense(arr)
        return super()._array_operator(arr)

    def diagonal(self, K):
        return Diagonal(K)


class BlockAlgebra(_AlgebraBase):
    """F is a vector of small s×s matrices, one per mode."""

    name = "block"

    def _array_operator(self, arr: np.ndarray):
        n, s, _ = self.shape
        if arr.shape == (s, s):
            return BlockDiagonal(np.array(np.broadcast_to(arr, self.shape)))
        if arr.shape == (n,):
            return BlockDiagonal(arr[:, None, None] * _identity(s, arr.dtype))
        if arr.shape == (n, s, s):
            return BlockDiagonal(arr)
        return super()._array_operator(arr)

    def diagonal(self, K):
        return BlockDiagonal(K)

    def product(self, K, F):
        return np.matmul(K, F)


def _as_operator(a):
    return a if hasattr(a, "apply") else UniformScaling(a)


def algebra_for(F0) -> _AlgebraBase:
    """Pick the shape family from F0; fixed for the lifetime of an equation."""
    shape = np.shape(F0)
    if len(shape) == 0:
        return ScalarAlgebra(F0)
    if len(shape) == 1:
        return VectorAlgebra(F0)
    if len(shape) == 3 and shape[1] == shape[2]:
        return BlockAlgebra(F0)
    raise ShapeMismatch(
        f"F0 of shape {shape} is not a scalar, a vector or a vector of square blocks"
    )


# =============================================================================
# Convenience functions
# =============================================================================

def affine_multiply(c, a, b, alpha=1, beta=0):
    """
    c := beta·c + alpha·(a·b)

    In place when c is an array (c is returned either way); a may be a
    number or any operator.  The family is chosen from the shape of c.
    """
    return algebra_for(c).affine_multiply(c, a, b, alpha, beta)


def error_norm(F_new, F_old):
    """Max absolute elementwise difference, recursing into blocks."""
    return algebra_for(F_old).error_norm(F_new, F_old)


__all__: List[str] = [
    "UniformScaling",
    "Diagonal",
    "BlockDiagonal",
    "Dense",
    "ScalarAlgebra",
    "VectorAlgebra",
    "BlockAlgebra",
    "algebra_for",
    "affine_multiply",
    "error_norm",
]
