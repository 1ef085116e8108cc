"""Element encodings supported by the typed buffer.

Canonical names are the strings stored on every ``Array``/``Matrix``:
``"int8"``, ``"uint8"``, ``"int16"``, ``"uint16"`` and ``"float"``.
``"float"`` is stored as an IEEE double and is the promoted encoding every
algebra result uses.
"""

from typing import Any

import numpy as np

from densela.exceptions import InvalidArgumentError

PROMOTED = "float"

_NUMPY_DTYPES: dict[str, np.dtype] = {
    "int8": np.dtype(np.int8),
    "uint8": np.dtype(np.uint8),
    "int16": np.dtype(np.int16),
    "uint16": np.dtype(np.uint16),
    "float": np.dtype(np.float64),
}

_ALIASES = {
    "i8": "int8",
    "u8": "uint8",
    "i16": "int16",
    "u16": "uint16",
    "float64": "float",
    "f8": "float",
    "double": "float",
}

SUPPORTED_DTYPES = tuple(_NUMPY_DTYPES)


def normalize_dtype(dtype: Any) -> str:
    """Map a user-supplied dtype token to its canonical name.

    Accepts canonical names and aliases (case-insensitive), the builtin
    ``float`` and numpy dtypes or scalar types of a supported kind.

    Raises
    ------
    InvalidArgumentError
        If ``dtype`` does not name a supported encoding.
    """
    if dtype is float:
        return PROMOTED

    if isinstance(dtype, str):
        s = dtype.strip().lower()
        s = _ALIASES.get(s, s)
        if s in _NUMPY_DTYPES:
            return s
        raise InvalidArgumentError(
            f"dtype: unsupported dtype {dtype!r}, expected one of {SUPPORTED_DTYPES}"
        )

    try:
        np_dtype = np.dtype(dtype)
    except TypeError as e:
        raise InvalidArgumentError(f"dtype: cannot interpret {dtype!r}: {e}") from e

    for name, candidate in _NUMPY_DTYPES.items():
        if np_dtype == candidate:
            return name
    raise InvalidArgumentError(
        f"dtype: unsupported dtype {np_dtype}, expected one of {SUPPORTED_DTYPES}"
    )


def numpy_dtype(name: str) -> np.dtype:
    return _NUMPY_DTYPES[normalize_dtype(name)]


def itemsize(name: str) -> int:
    """Size of one element of ``name`` in bytes."""
    return numpy_dtype(name).itemsize


def is_floating(name: str) -> bool:
    return normalize_dtype(name) == PROMOTED
