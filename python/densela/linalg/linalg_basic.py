"""Shape transforms and matrix algebra on ``Matrix`` handles.

``transpose`` and ``reshape`` mutate and return their argument. ``inv``,
``det`` and ``dot`` never touch their inputs: they read every element as a
float and return a new ``float`` matrix (or a Python float for ``det``).
"""

import math
from typing import Any

from densela.backend.dtypes import PROMOTED
from densela.backend.matrix import Matrix
from densela.config import resolve_epsilon
from densela.exceptions import (
    InvalidArgumentError,
    ShapeMismatchError,
    SingularMatrixError,
)

from .elimination import check_pivoting, eliminate, normalize_rows


def _check_matrix(a: Any, name: str) -> Matrix:
    if not isinstance(a, Matrix):
        raise InvalidArgumentError(
            f"{name}: expected a Matrix, got {type(a).__name__}"
        )
    return a


def _check_square(a: Matrix, name: str) -> int:
    if a.rows != a.cols:
        raise ShapeMismatchError(
            f"{name}: only square matrices are supported, got shape {a.shape}",
            expected=(a.rows, a.rows),
            actual=a.shape,
        )
    return a.rows


def transpose(a: Matrix) -> Matrix:
    """Transpose ``a`` in place and return it."""
    return _check_matrix(a, "a").transpose()


def reshape(a: Matrix, shape: Any) -> Matrix:
    """Give ``a`` new dimensions with the same element count; returns ``a``."""
    return _check_matrix(a, "a").reshape(shape)


def inv(a: Matrix, *, epsilon: float | None = None, pivoting: str = "none") -> Matrix:
    """Inverse of a square matrix by Gauss-Jordan elimination.

    Parameters
    ----------
    a : Matrix
        Square input of any dtype; left unchanged.
    epsilon : float | None, optional
        Pivot threshold. Defaults to ``densela.config.get_epsilon()``.
    pivoting : {"none", "partial"}, optional
        Row exchange strategy, see ``densela.linalg.elimination.eliminate``.

    Returns
    -------
    Matrix
        A new ``float`` matrix holding the inverse.

    Raises
    ------
    InvalidArgumentError
        If ``a`` is not a Matrix.
    ShapeMismatchError
        If ``a`` is not square.
    SingularMatrixError
        If a pivot falls below ``epsilon``.
    """
    a = _check_matrix(a, "a")
    n = _check_square(a, "inv")
    epsilon = resolve_epsilon(epsilon)
    check_pivoting(pivoting)
    device = a.device

    with device.scratch(n * n) as work, device.scratch(n * n) as unit:
        device.promote(a._handle, work)
        device.identity(unit, n)
        data = device.to_numpy(work, (n, n))
        accumulator = device.to_numpy(unit, (n, n))

        result = eliminate(data, accumulator, epsilon=epsilon, pivoting=pivoting)
        if not result.ok:
            raise SingularMatrixError(
                "input matrix is singular", row=result.singular_row, pivot=result.pivot
            )
        normalize_rows(data, accumulator)

        out = Matrix.make((n, n), dtype=PROMOTED, device=device)
        device.copy(unit, out._handle)
    return out


def det(a: Matrix, *, epsilon: float | None = None, pivoting: str = "none") -> float:
    """Determinant of a square matrix by Gaussian elimination.

    Rows ``0 .. N-2`` are used as pivots; the last diagonal element is never
    tested against ``epsilon``, so a singular matrix whose earlier pivots are
    healthy yields a (near) zero determinant instead of an error. A ``1 x 1``
    matrix returns its sole element and a ``0 x 0`` matrix returns 1.0.

    Raises
    ------
    InvalidArgumentError
        If ``a`` is not a Matrix.
    ShapeMismatchError
        If ``a`` is not square.
    SingularMatrixError
        If one of the first ``N-1`` pivots falls below ``epsilon``.
    """
    a = _check_matrix(a, "a")
    n = _check_square(a, "det")
    epsilon = resolve_epsilon(epsilon)
    check_pivoting(pivoting)
    if n == 0:
        return 1.0
    device = a.device

    with device.scratch(n * n) as work:
        device.promote(a._handle, work)
        data = device.to_numpy(work, (n, n))

        result = eliminate(data, epsilon=epsilon, stop=n - 1, pivoting=pivoting)
        if not result.ok:
            raise SingularMatrixError(
                "singular matrix", row=result.singular_row, pivot=result.pivot
            )
        value = math.prod(float(data[m, m]) for m in range(n))
    return -value if result.swaps % 2 else value


def dot(a: Matrix, b: Matrix) -> Matrix:
    """Matrix product ``a @ b`` as a new ``float`` matrix.

    The operands may have different dtypes; every element is read as a
    float.

    Raises
    ------
    InvalidArgumentError
        If either operand is not a Matrix.
    ShapeMismatchError
        If ``a.cols != b.rows``.
    """
    a = _check_matrix(a, "a")
    b = _check_matrix(b, "b")
    if a.cols != b.rows:
        raise ShapeMismatchError(
            f"matrix dimensions do not match: {a.shape} and {b.shape}",
            expected=a.cols,
            actual=b.rows,
        )
    m, n, p = a.rows, a.cols, b.cols
    b = b.to(a.device)
    out = Matrix.make((m, p), dtype=PROMOTED, device=a.device)
    a.device.matmul(a._handle, b._handle, out._handle, m, n, p)
    return out


invert = inv
determinant = det
