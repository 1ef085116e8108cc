import logging
from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np

from .dtypes import PROMOTED, normalize_dtype, numpy_dtype

__device_name__ = "numpy"

logger = logging.getLogger(__name__)


class Array:
    def __init__(self, size: int, dtype: str = PROMOTED):
        # use numpy array as buffer to store the data
        self._dtype = normalize_dtype(dtype)
        self.buffer = np.empty(size, dtype=numpy_dtype(self._dtype))

    @property
    def size(self) -> int:
        return self.buffer.size

    @property
    def dtype(self) -> str:
        return self._dtype

    @property
    def itemsize(self) -> int:
        return self.buffer.itemsize

    @property
    def nbytes(self) -> int:
        return self.buffer.nbytes

    def ptr(self) -> int:
        return self.buffer.ctypes.data

    def release(self) -> None:
        """Drop the storage; the array is empty afterwards."""
        self.buffer = np.empty(0, dtype=self.buffer.dtype)


@contextmanager
def scratch(size: int, dtype: str = PROMOTED) -> Iterator[Array]:
    """Allocate a temporary ``Array`` that is released on every exit path."""
    tmp = Array(size, dtype)
    try:
        yield tmp
    finally:
        tmp.release()


def to_numpy(a: Array, shape: tuple[int, int]) -> np.ndarray:
    """Return a row-major view of ``a.buffer`` with the given 2-D shape.

    The view shares memory with ``a.buffer``; writing to it writes to ``a``.
    """
    return a.buffer.reshape(shape)


def from_numpy(numpy_array: np.ndarray, out: Array) -> None:
    """Copy values from an arbitrary NumPy array into ``out.buffer``.

    Values are copied in row-major (C-order) via ``numpy_array.flat`` and
    converted to the dtype of ``out``.
    """
    out.buffer[:] = numpy_array.flat


def fill(out: Array, val: float) -> None:
    """Write ``val`` into every element, converted to the dtype of ``out``."""
    out.buffer.fill(val)


def read_float(a: Array, index: int) -> float:
    """Promoted read: the element at ``index`` as a Python float."""
    return float(a.buffer[index])


def write(a: Array, index: int, val: Any) -> None:
    """Typed write: store ``val`` at ``index`` in the dtype of ``a``."""
    a.buffer[index] = val


def promote(a: Array, out: Array) -> None:
    """Copy every element of ``a`` into the floating point buffer ``out``."""
    out.buffer[:] = a.buffer.astype(np.float64)


def copy(a: Array, out: Array) -> None:
    out.buffer[:] = a.buffer


def transpose(a: Array, m: int, n: int) -> None:
    """Transpose the ``m x n`` row-major contents of ``a`` in place.

    Rectangular matrices cannot be transposed by pairwise swaps, so the
    permuted elements are gathered in a scratch buffer of the same byte
    length, which then replaces the original contents. Element ``(i, j)``
    at byte offset ``(i*n + j) * itemsize`` moves to ``(j*m + i) * itemsize``.
    """
    size = a.itemsize
    raw = a.buffer.view(np.uint8).reshape(m, n, size)
    logger.debug("transpose %dx%d via %d byte scratch", m, n, a.nbytes)
    with scratch(a.nbytes, "uint8") as tmp:
        tmp.buffer.reshape(n, m, size)[:] = raw.transpose(1, 0, 2)
        a.buffer.view(np.uint8)[:] = tmp.buffer


def identity(out: Array, n: int) -> None:
    """Fill ``out`` with the ``n x n`` identity matrix."""
    out.buffer.fill(0)
    out.buffer[:: n + 1] = 1


def set_diagonal(out: Array, m: int, n: int, k: int, val: Any) -> None:
    """Write ``val`` on the ``k``-th diagonal of the ``m x n`` matrix ``out``.

    ``k > 0`` is above the main diagonal, ``k < 0`` below. Positions that
    fall outside the matrix are skipped.
    """
    view = out.buffer.reshape(m, n)
    if k >= 0:
        count = max(0, min(m, n - k))
        rows = np.arange(count)
        view[rows, rows + k] = val
    else:
        count = max(0, min(m + k, n))
        cols = np.arange(count)
        view[cols - k, cols] = val


def matmul(a: Array, b: Array, out: Array, m: int, n: int, p: int) -> None:
    """Matrix multiplication ``out = (A @ B).ravel()`` with promoted reads.

    Parameters
    ----------
    a : Array
        Left matrix storage containing ``A`` flattened with shape ``(m, n)``.
    b : Array
        Right matrix storage containing ``B`` flattened with shape ``(n, p)``.
    out : Array
        Floating point output storage for ``C = A @ B`` of size ``m * p``.
    m : int
        Number of rows of ``A`` and ``C``.
    n : int
        Shared inner dimension of ``A`` and ``B``.
    p : int
        Number of columns of ``B`` and ``C``.
    """
    lhs = a.buffer.astype(np.float64).reshape(m, n)
    rhs = b.buffer.astype(np.float64).reshape(n, p)
    out.buffer[:] = (lhs @ rhs).reshape(-1)
