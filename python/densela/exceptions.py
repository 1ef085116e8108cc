"""Exception hierarchy for densela.

Every error raised by the library derives from ``DenseLAError``. The
concrete classes also derive from the builtin exception a numpy user would
expect (``TypeError`` for bad arguments, ``ValueError`` for shape and
numerical failures), so existing ``except ValueError`` blocks keep working.
"""

from typing import Any


class DenseLAError(Exception):
    """Base exception for all densela errors."""


class InvalidArgumentError(DenseLAError, TypeError):
    """An argument has the wrong type or a malformed value.

    Raised for shape specifications that are not an int or a 2-sequence of
    non-negative ints, unsupported dtypes, unknown pivoting modes, and
    operands that are not a ``Matrix``.
    """


class ShapeMismatchError(DenseLAError, ValueError):
    """Matrix dimensions are incompatible with the requested operation.

    Attributes:
        expected: The shape (or size) the operation required, if known
        actual: The shape (or size) that was supplied, if known
    """

    def __init__(
        self, message: str, expected: Any | None = None, actual: Any | None = None
    ) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class SingularMatrixError(DenseLAError, ValueError):
    """A pivot fell below the singularity threshold during elimination.

    Attributes:
        row: Position of the offending pivot on the diagonal
        pivot: Value of the offending pivot
    """

    def __init__(
        self, message: str, row: int | None = None, pivot: float | None = None
    ) -> None:
        super().__init__(message)
        self.row = row
        self.pivot = pivot
