"""
Matrix inversion for small covariance matrices.

Gauss-Jordan elimination with partial pivoting, with a closed-form fast path
for the 2x2 case that dominates GPS updates.
"""

import numpy as np

from ..errors import DimensionError, SingularMatrixError
from ..math.constants import SINGULARITY_EPSILON
from .matrix import Matrix


def _require_square(m: Matrix):
    if not m.is_square:
        raise DimensionError(f"Cannot invert a non-square {m.rows}x{m.cols} matrix")


def _invert_2x2(m: Matrix, epsilon: float) -> Matrix:
    if not m.is_finite():
        raise SingularMatrixError("2x2 matrix is not finite")

    a, b = m[0, 0], m[0, 1]
    c, d = m[1, 0], m[1, 1]

    det = a * d - b * c
    scale = m.max_abs()
    if scale == 0.0 or abs(det) <= epsilon * scale * scale:
        raise SingularMatrixError(f"2x2 matrix is singular (det={det:.3e}, scale={scale:.3e})")

    inverse = Matrix(2, 2)
    inverse.set(d / det, -b / det,
                -c / det, a / det)
    return inverse


def _gauss_jordan(m: Matrix, epsilon: float) -> Matrix:
    n = m.rows
    scale = m.max_abs()
    if scale == 0.0 or not m.is_finite():
        raise SingularMatrixError(f"{n}x{n} matrix is zero or not finite")

    # Augmented [A | I]
    work = np.hstack([m.to_numpy(), np.eye(n)])
    threshold = epsilon * scale

    for col in range(n):
        # Partial pivoting: largest absolute value in this column
        pivot_row = col + int(np.argmax(np.abs(work[col:, col])))
        pivot = work[pivot_row, col]
        if abs(pivot) <= threshold:
            raise SingularMatrixError(
                f"{n}x{n} matrix is singular (pivot {pivot:.3e} in column {col})"
            )

        if pivot_row != col:
            work[[col, pivot_row]] = work[[pivot_row, col]]

        work[col] /= work[col, col]

        for row in range(n):
            if row != col:
                work[row] -= work[row, col] * work[col]

    return Matrix.from_rows(work[:, n:])


def invert(m: Matrix, epsilon: float = SINGULARITY_EPSILON) -> Matrix:
    """
    Invert a square matrix.

    Args:
        m: Square matrix to invert
        epsilon: Relative threshold below which a pivot (or 2x2
            determinant) counts as zero

    Returns:
        New matrix holding the inverse

    Raises:
        DimensionError: m is not square
        SingularMatrixError: m is numerically singular
    """
    _require_square(m)

    if m.rows == 1:
        value = m[0, 0]
        if not np.isfinite(value) or value == 0.0:
            raise SingularMatrixError("1x1 matrix is zero or not finite")
        result = Matrix(1, 1)
        result[0, 0] = 1.0 / value
        return result

    if m.rows == 2:
        return _invert_2x2(m, epsilon)

    return _gauss_jordan(m, epsilon)


def determinant(m: Matrix) -> float:
    """
    Determinant of a square matrix by elimination with partial pivoting.

    Args:
        m: Square matrix

    Returns:
        float: Determinant (0.0 for an exactly singular matrix)
    """
    _require_square(m)

    work = m.to_numpy()
    n = m.rows
    det = 1.0

    for col in range(n):
        pivot_row = col + int(np.argmax(np.abs(work[col:, col])))
        pivot = work[pivot_row, col]
        if pivot == 0.0:
            return 0.0
        if pivot_row != col:
            work[[col, pivot_row]] = work[[pivot_row, col]]
            det = -det
        det *= pivot
        work[col + 1:] -= np.outer(work[col + 1:, col] / pivot, work[col])

    return float(det)
