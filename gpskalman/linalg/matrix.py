"""
Dimension-checked dense matrix used by the Kalman filter.
"""

from __future__ import annotations

import numpy as np
from typing import Iterable, Sequence, Tuple, Union

from ..errors import DimensionError

Number = Union[int, float]


class Matrix:
    """
    Dense real matrix with a shape fixed at construction.

    Entries are stored as a float64 numpy array. Every binary operation checks
    shapes and raises DimensionError on mismatch instead of broadcasting.
    """

    __slots__ = ("_data",)

    # Make numpy scalars defer to Matrix.__rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, rows: int, cols: int):
        """
        Create a zero-filled matrix.

        Args:
            rows: Number of rows (> 0)
            cols: Number of columns (> 0)
        """
        if int(rows) != rows or int(cols) != cols or rows <= 0 or cols <= 0:
            raise DimensionError(f"Matrix dimensions must be positive integers, got {rows}x{cols}")
        self._data = np.zeros((int(rows), int(cols)), dtype=np.float64)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def create(cls, rows: int, cols: int) -> Matrix:
        """Zero matrix of the given shape."""
        return cls(rows, cols)

    @classmethod
    def identity(cls, n: int) -> Matrix:
        """n x n identity matrix."""
        m = cls(n, n)
        np.fill_diagonal(m._data, 1.0)
        return m

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Number]]) -> Matrix:
        """Build a matrix from a list of equal-length rows."""
        try:
            array = np.array(rows, dtype=np.float64)
        except ValueError as e:
            raise DimensionError(f"Rows must form a rectangular 2-D array: {e}") from e
        if array.ndim != 2:
            raise DimensionError("Rows must form a rectangular 2-D array")
        return cls._wrap(array)

    @classmethod
    def column(cls, values: Iterable[Number]) -> Matrix:
        """Build an n x 1 column vector."""
        array = np.array(list(values), dtype=np.float64).reshape(-1, 1)
        return cls._wrap(array)

    @classmethod
    def diagonal(cls, values: Iterable[Number]) -> Matrix:
        """Build a square matrix with the given diagonal."""
        values = list(values)
        return cls._wrap(np.diag(np.array(values, dtype=np.float64)))

    @classmethod
    def _wrap(cls, array: np.ndarray) -> Matrix:
        rows, cols = array.shape if array.ndim == 2 else (0, 0)
        m = cls(rows, cols)
        m._data[:, :] = array
        return m

    # ------------------------------------------------------------------
    # Shape and element access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._data.shape[0]

    @property
    def cols(self) -> int:
        return self._data.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._data.shape

    @property
    def is_square(self) -> bool:
        return self.rows == self.cols

    def __getitem__(self, index: Tuple[int, int]) -> float:
        return float(self._data[self._check_index(index)])

    def __setitem__(self, index: Tuple[int, int], value: Number):
        self._data[self._check_index(index)] = value

    def _check_index(self, index) -> Tuple[int, int]:
        if not isinstance(index, tuple) or len(index) != 2:
            raise DimensionError("Matrix elements are addressed as m[row, col]")
        row, col = index
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"Index ({row}, {col}) out of range for {self.rows}x{self.cols} matrix")
        return row, col

    def set(self, *values: Number) -> Matrix:
        """
        Assign every entry in row-major order.

        Args:
            values: Exactly rows*cols numbers

        Returns:
            self, to allow chaining
        """
        if len(values) == 1 and isinstance(values[0], (list, tuple, np.ndarray)):
            values = tuple(np.ravel(values[0]))
        if len(values) != self.rows * self.cols:
            raise DimensionError(
                f"Expected {self.rows * self.cols} values for {self.rows}x{self.cols} matrix, got {len(values)}"
            )
        self._data[:, :] = np.array(values, dtype=np.float64).reshape(self.shape)
        return self

    def set_identity(self) -> Matrix:
        """Overwrite a square matrix with the identity, in place."""
        if not self.is_square:
            raise DimensionError(f"Identity requires a square matrix, got {self.rows}x{self.cols}")
        self._data[:, :] = 0.0
        np.fill_diagonal(self._data, 1.0)
        return self

    def copy(self) -> Matrix:
        return Matrix._wrap(self._data)

    def to_numpy(self) -> np.ndarray:
        """Copy of the entries as a 2-D numpy array."""
        return self._data.copy()

    def to_list(self):
        return self._data.tolist()

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _require_same_shape(self, other: Matrix, op: str):
        if not isinstance(other, Matrix):
            raise TypeError(f"Cannot {op} Matrix and {type(other).__name__}")
        if self.shape != other.shape:
            raise DimensionError(
                f"Cannot {op} {self.rows}x{self.cols} and {other.rows}x{other.cols} matrices"
            )

    def add(self, other: Matrix) -> Matrix:
        self._require_same_shape(other, "add")
        return Matrix._wrap(self._data + other._data)

    def subtract(self, other: Matrix) -> Matrix:
        self._require_same_shape(other, "subtract")
        return Matrix._wrap(self._data - other._data)

    def multiply(self, other: Matrix) -> Matrix:
        if not isinstance(other, Matrix):
            raise TypeError(f"Cannot multiply Matrix and {type(other).__name__}")
        if self.cols != other.rows:
            raise DimensionError(
                f"Cannot multiply {self.rows}x{self.cols} by {other.rows}x{other.cols} matrix"
            )
        return Matrix._wrap(self._data @ other._data)

    def transpose(self) -> Matrix:
        return Matrix._wrap(self._data.T)

    def scale(self, factor: Number) -> Matrix:
        """Return a new matrix with every entry multiplied by factor."""
        return Matrix._wrap(self._data * float(factor))

    def scale_in_place(self, factor: Number) -> Matrix:
        """Multiply every entry by factor, in place."""
        self._data *= float(factor)
        return self

    def symmetrize(self) -> Matrix:
        """Return (M + M^T) / 2 for a square matrix."""
        if not self.is_square:
            raise DimensionError(f"Cannot symmetrize a {self.rows}x{self.cols} matrix")
        return Matrix._wrap(0.5 * (self._data + self._data.T))

    @property
    def T(self) -> Matrix:
        return self.transpose()

    def __add__(self, other: Matrix) -> Matrix:
        return self.add(other)

    def __sub__(self, other: Matrix) -> Matrix:
        return self.subtract(other)

    def __matmul__(self, other: Matrix) -> Matrix:
        return self.multiply(other)

    def __mul__(self, factor: Number) -> Matrix:
        if isinstance(factor, Matrix):
            return self.multiply(factor)
        return self.scale(factor)

    __rmul__ = scale

    def __neg__(self) -> Matrix:
        return self.scale(-1.0)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def allclose(self, other: Matrix, rtol: float = 1e-9, atol: float = 1e-12) -> bool:
        """True if other has the same shape and entries within tolerance."""
        if not isinstance(other, Matrix) or self.shape != other.shape:
            return False
        return bool(np.allclose(self._data, other._data, rtol=rtol, atol=atol))

    def is_symmetric(self, tol: float = 1e-9) -> bool:
        if not self.is_square:
            return False
        return bool(np.allclose(self._data, self._data.T, rtol=tol, atol=0.0))

    def max_abs(self) -> float:
        """Largest absolute entry; the scale used for singularity tests."""
        return float(np.max(np.abs(self._data)))

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._data)))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Matrix({self.rows}x{self.cols}, {self._data.tolist()})"
