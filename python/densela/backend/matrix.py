from typing import Any, cast

import numpy as np

from densela.config import default_dtype
from densela.exceptions import InvalidArgumentError, ShapeMismatchError
from densela.validation import check_shape_pair, is_integer

from .device import Device, default_device
from .dtypes import normalize_dtype


class Matrix:
    """Dense 2-D matrix over a contiguous, row-major, typed buffer.

    A ``Matrix`` pairs a row and column count with an ``Array`` that it owns
    exclusively. Element ``(i, j)`` lives at linear index ``i * cols + j``.
    Reads go through the device's promoted reader, so every value comes back
    as a float regardless of the stored dtype; writes are converted to the
    stored dtype.
    """

    _rows: int
    _cols: int
    _device: Device
    _handle: Any

    def __init__(
        self, other: Any, dtype: Any = None, device: Device | None = None
    ) -> None:
        """Construct a Matrix from another Matrix, a NumPy array, or nested lists.

        Parameters
        ----------
        other : Matrix | numpy.ndarray | array_like
            Source to copy from. One-dimensional input becomes a ``1 x n`` row.
        dtype : str | numpy.dtype | None, optional
            Element encoding. Defaults to the dtype of ``other`` when it is a
            Matrix, and to the configured default dtype otherwise.
        device : Device | None, optional
            Target device. Defaults to the device of ``other`` when it is a
            Matrix, and to the global default device otherwise.

        Raises
        ------
        InvalidArgumentError
            If the input has more than two dimensions or an unsupported dtype.
        """
        if isinstance(other, Matrix):
            if device is None:
                device = other.device
            if dtype is None:
                dtype = other.dtype
            self._init(Matrix(other.numpy(), dtype=dtype, device=device))
        elif isinstance(other, np.ndarray):
            if other.ndim > 2:
                raise InvalidArgumentError(
                    f"only 1-D and 2-D input is supported, got {other.ndim}-D"
                )
            shape = (1, other.size) if other.ndim < 2 else other.shape
            array = self.make(
                shape,
                dtype=default_dtype() if dtype is None else dtype,
                device=device if device is not None else default_device(),
            )
            array.device.from_numpy(other, array._handle)
            self._init(array)
        elif other is None:
            raise InvalidArgumentError("cannot build a matrix from None")
        else:
            # see if we can create a numpy array from input
            try:
                converted = np.array(other, dtype=np.float64)
            except (TypeError, ValueError) as e:
                raise InvalidArgumentError(
                    f"cannot build a matrix from {type(other).__name__}: {e}"
                ) from e
            self._init(Matrix(converted, dtype=dtype, device=device))

    def _init(self, other: "Matrix") -> None:
        """Take over the dimensions and the buffer of a freshly built ``other``."""
        self._rows = other._rows
        self._cols = other._cols
        self._device = other._device
        self._handle = other._handle

    @staticmethod
    def make(
        shape: tuple[int, int],
        dtype: Any = None,
        device: Device | None = None,
        handle: Any = None,
    ) -> "Matrix":
        """Create a Matrix with the given shape and uninitialized or given storage.

        Parameters
        ----------
        shape : tuple of int
            ``(rows, cols)``.
        dtype : str | None, optional
            Element encoding of newly allocated storage; ignored when
            ``handle`` is supplied.
        device : Device | None, optional
            Target device. Defaults to the global default device.
        handle : Any, optional
            Existing storage of exactly ``rows * cols`` elements. The new
            Matrix takes ownership of it.
        """
        rows, cols = check_shape_pair(shape)
        matrix = Matrix.__new__(Matrix)
        matrix._rows = rows
        matrix._cols = cols
        matrix._device = device if device is not None else default_device()
        if handle is None:
            dtype = normalize_dtype(default_dtype() if dtype is None else dtype)
            matrix._handle = matrix.device.Array(rows * cols, dtype)
        else:
            assert handle.size == rows * cols
            matrix._handle = handle
        return matrix

    ### Properties and string representations
    @property
    def shape(self) -> tuple[int, int]:
        """tuple[int, int]: ``(rows, cols)``."""
        return (self._rows, self._cols)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def device(self) -> Device:
        """Device: The device on which this matrix's storage resides."""
        return self._device

    @property
    def dtype(self) -> str:
        """str: Canonical name of the element encoding."""
        return cast(str, self._handle.dtype)

    @property
    def ndim(self) -> int:
        return 2

    @property
    def size(self) -> int:
        """int: Number of elements, ``rows * cols``."""
        return self._rows * self._cols

    @property
    def itemsize(self) -> int:
        """int: Size of one element in bytes."""
        return cast(int, self._handle.itemsize)

    @property
    def nbytes(self) -> int:
        return cast(int, self._handle.nbytes)

    @property
    def T(self) -> "Matrix":
        """Matrix: A transposed copy; ``self`` is left unchanged."""
        return self.copy().transpose()

    def __repr__(self) -> str:
        return (
            "Matrix("
            + self.numpy().__str__()
            + f", dtype={self.dtype}, device={self.device})"
        )

    def __str__(self) -> str:
        return self.numpy().__str__()

    def __len__(self) -> int:
        return self._rows

    ### Basic matrix manipulation
    def fill(self, value: float) -> None:
        """Write ``value`` into every element, converted to the stored dtype."""
        self.device.fill(self._handle, value)

    def copy(self) -> "Matrix":
        """Return a deep copy with its own buffer."""
        out = Matrix.make(self.shape, dtype=self.dtype, device=self.device)
        self.device.copy(self._handle, out._handle)
        return out

    def to(self, device: Device) -> "Matrix":
        """Return ``self`` if already on ``device``; otherwise a copy on ``device``."""
        if self.device == device:
            return self
        else:
            return Matrix(self.numpy(), dtype=self.dtype, device=device)

    def numpy(self) -> np.ndarray:
        """Return a NumPy view of the buffer with shape ``(rows, cols)``."""
        return cast(np.ndarray, self.device.to_numpy(self._handle, self.shape))

    def tolist(self) -> list[list[float]]:
        """Return the promoted values as nested lists of floats."""
        return [
            [self.read_float(i * self._cols + j) for j in range(self._cols)]
            for i in range(self._rows)
        ]

    ### Element access
    def read_float(self, index: int) -> float:
        """Promoted read of the element at linear ``index``."""
        return cast(float, self.device.read_float(self._handle, index))

    def write(self, index: int, value: Any) -> None:
        """Typed write of ``value`` at linear ``index``."""
        self.device.write(self._handle, index, value)

    def _linear_index(self, idx: Any) -> int:
        if not isinstance(idx, tuple) or len(idx) != 2:
            raise InvalidArgumentError(f"expected a (row, col) index, got {idx!r}")
        i, j = idx
        if not (is_integer(i) and is_integer(j)):
            raise InvalidArgumentError(f"indices must be integers, got {idx!r}")
        i = i + self._rows if i < 0 else i
        j = j + self._cols if j < 0 else j
        if not (0 <= i < self._rows and 0 <= j < self._cols):
            raise IndexError(f"index {idx} is out of bounds for shape {self.shape}")
        return int(i) * self._cols + int(j)

    def __getitem__(self, idx: tuple[int, int]) -> float:
        """Return element ``(i, j)`` as a float."""
        return self.read_float(self._linear_index(idx))

    def __setitem__(self, idx: tuple[int, int], value: Any) -> None:
        self.write(self._linear_index(idx), value)

    ### Shape transforms
    def transpose(self) -> "Matrix":
        """Transpose in place and return ``self``.

        Row and column vectors only swap their dimensions; every other shape
        has its elements permuted through a scratch buffer first.
        """
        if self._rows != 1 and self._cols != 1:
            self.device.transpose(self._handle, self._rows, self._cols)
        self._rows, self._cols = self._cols, self._rows
        return self

    def reshape(self, new_shape: Any) -> "Matrix":
        """Reinterpret the buffer with new dimensions; returns ``self``.

        Raises
        ------
        InvalidArgumentError
            If ``new_shape`` is not a 2-element sequence of non-negative ints.
        ShapeMismatchError
            If the element count would change.
        """
        rows, cols = check_shape_pair(new_shape)
        if rows * cols != self.size:
            raise ShapeMismatchError(
                f"cannot reshape matrix of size {self.size} into shape "
                f"({rows}, {cols})",
                expected=self.size,
                actual=rows * cols,
            )
        self._rows = rows
        self._cols = cols
        return self

    ### Matrix multiplication
    def __matmul__(self, other: "Matrix") -> "Matrix":
        from densela.linalg import dot  # lazy to avoid circular import

        return dot(self, other)


def array(a: Any, dtype: Any = "float", device: Device | None = None) -> "Matrix":
    """Convenience constructor matching ``numpy.array`` for 1-D and 2-D input."""
    dtype = default_dtype() if dtype is None else dtype
    return Matrix(a, dtype=dtype, device=device)
