from typing import Any, Optional

from densela.backend.device import Device, default_device
from densela.backend.matrix import Matrix
from densela.exceptions import InvalidArgumentError
from densela.validation import check_dim, check_shape, is_integer


def constant(
    shape: Any,
    c: float = 1.0,
    dtype: Any = "float",
    device: Optional[Device] = None,
) -> Matrix:
    """Generate a matrix with every element set to ``c``.

    ``shape`` is an int ``n`` (a ``1 x n`` row) or a 2-tuple ``(m, n)``.
    The value is written through the dtype-aware fill, so it is stored in
    the representation of ``dtype``.
    """
    device = default_device() if device is None else device
    array = Matrix.make(check_shape(shape), dtype=dtype, device=device)
    array.fill(c)
    return array


def ones(
    shape: Any,
    dtype: Any = "float",
    device: Optional[Device] = None,
) -> Matrix:
    """Generate all-ones Matrix"""
    return constant(shape, c=1, dtype=dtype, device=device)


def zeros(
    shape: Any,
    dtype: Any = "float",
    device: Optional[Device] = None,
) -> Matrix:
    """Generate all-zeros Matrix"""
    return constant(shape, c=0, dtype=dtype, device=device)


def eye(
    n: int,
    M: Optional[int] = None,
    k: int = 0,
    dtype: Any = "float",
    device: Optional[Device] = None,
) -> Matrix:
    """Generate an ``M x n`` matrix with ones on the ``k``-th diagonal.

    ``M`` defaults to ``n``. ``k > 0`` shifts the diagonal right (positions
    ``(i, i + k)``), ``k < 0`` shifts it down (positions ``(i - k, i)``).
    A diagonal that lies entirely outside the matrix gives all zeros.
    """
    n = check_dim(n, "n")
    M = n if M is None else check_dim(M, "M")
    if not is_integer(k):
        raise InvalidArgumentError(f"k: expected an integer, got {type(k).__name__}")
    array = zeros((M, n), dtype=dtype, device=device)
    array.device.set_diagonal(array._handle, M, n, int(k), 1)
    return array


def zeros_like(
    array: Matrix, *, dtype: Any = None, device: Optional[Device] = None
) -> Matrix:
    device = device if device else array.device
    return zeros(
        array.shape, dtype=array.dtype if dtype is None else dtype, device=device
    )


def ones_like(
    array: Matrix, *, dtype: Any = None, device: Optional[Device] = None
) -> Matrix:
    device = device if device else array.device
    return ones(
        array.shape, dtype=array.dtype if dtype is None else dtype, device=device
    )
