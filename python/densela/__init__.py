"""
densela (dense linear algebra)

A small dense-matrix kernel: transpose, reshape, inversion, determinant and
matrix products over row-major typed buffers, plus zeros/ones/eye
constructors.
"""

import logging
from importlib.metadata import PackageNotFoundError as _PkgNotFoundError
from importlib.metadata import version as _pkg_version

from .backend.matrix import Matrix, array
from .config import epsilon_context, get_epsilon, set_epsilon
from .exceptions import (
    DenseLAError,
    InvalidArgumentError,
    ShapeMismatchError,
    SingularMatrixError,
)
from .init import eye, ones, zeros
from .linalg import det, determinant, dot, inv, invert, reshape, transpose

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "Matrix",
    "array",
    "transpose",
    "reshape",
    "inv",
    "invert",
    "det",
    "determinant",
    "dot",
    "zeros",
    "ones",
    "eye",
    "get_epsilon",
    "set_epsilon",
    "epsilon_context",
    "DenseLAError",
    "InvalidArgumentError",
    "ShapeMismatchError",
    "SingularMatrixError",
]

try:
    __version__ = _pkg_version("densela")
except _PkgNotFoundError:
    # Fallback for editable installs before metadata is written
    __version__ = "0.1.0"
