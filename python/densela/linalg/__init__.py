from .elimination import EliminationResult, eliminate, normalize_rows
from .linalg_basic import (
    det,
    determinant,
    dot,
    inv,
    invert,
    reshape,
    transpose,
)

__all__ = [
    "transpose",
    "reshape",
    "inv",
    "invert",
    "det",
    "determinant",
    "dot",
    "eliminate",
    "normalize_rows",
    "EliminationResult",
]
