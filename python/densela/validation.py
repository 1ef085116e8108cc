"""Argument checks shared by the matrix handle, constructors and algebra.

The checks fail fast with an ``InvalidArgumentError`` naming the offending
parameter; they never coerce silently beyond ``int()`` on integer types.
"""

from typing import Any

import numpy as np

from densela.exceptions import InvalidArgumentError


def is_integer(value: Any) -> bool:
    """Return True for Python and numpy integers, but not for bools."""
    return isinstance(value, (int, np.integer)) and not isinstance(
        value, (bool, np.bool_)
    )


def check_dim(value: Any, name: str) -> int:
    """Validate a single non-negative dimension and return it as ``int``."""
    if not is_integer(value):
        raise InvalidArgumentError(
            f"{name}: expected a non-negative integer, got {type(value).__name__}"
        )
    if value < 0:
        raise InvalidArgumentError(f"{name}: must be non-negative, got {value}")
    return int(value)


def check_shape_pair(shape: Any, name: str = "shape") -> tuple[int, int]:
    """Validate a 2-element tuple/list of non-negative integers."""
    if not isinstance(shape, (tuple, list)) or len(shape) != 2:
        raise InvalidArgumentError(f"{name}: must be a 2-tuple, got {shape!r}")
    return check_dim(shape[0], f"{name}[0]"), check_dim(shape[1], f"{name}[1]")


def check_shape(shape: Any, name: str = "shape") -> tuple[int, int]:
    """Validate a constructor shape: an int ``n`` (a ``1 x n`` row) or a 2-tuple."""
    if is_integer(shape):
        return 1, check_dim(shape, name)
    if isinstance(shape, (tuple, list)):
        return check_shape_pair(shape, name)
    raise InvalidArgumentError(
        f"{name}: input argument must be an integer or a 2-tuple, "
        f"got {type(shape).__name__}"
    )
