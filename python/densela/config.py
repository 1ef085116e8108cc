"""Process-wide defaults.

The singularity threshold is absolute: a pivot whose magnitude is below it
is treated as zero, independent of the scale of the matrix.
"""

import math
from contextlib import contextmanager
from typing import Any, Iterator

from densela.exceptions import InvalidArgumentError

DEFAULT_EPSILON = 1.2e-7

_epsilon = DEFAULT_EPSILON


def _check_epsilon(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(
            f"epsilon: expected a real number, got {type(value).__name__}"
        )
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(
            f"epsilon: must be positive and finite, got {value}"
        )
    return float(value)


def get_epsilon() -> float:
    return _epsilon


def set_epsilon(value: float) -> None:
    """Set the pivot threshold used when an operation gets ``epsilon=None``."""
    global _epsilon
    _epsilon = _check_epsilon(value)


@contextmanager
def epsilon_context(value: float) -> Iterator[float]:
    """Temporarily override the pivot threshold."""
    global _epsilon
    previous = _epsilon
    _epsilon = _check_epsilon(value)
    try:
        yield _epsilon
    finally:
        _epsilon = previous


def resolve_epsilon(epsilon: float | None) -> float:
    """Return ``epsilon`` validated, or the configured threshold when None."""
    return _epsilon if epsilon is None else _check_epsilon(epsilon)


def default_dtype() -> str:
    return "float"
