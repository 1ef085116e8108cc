from .init_basic import (
    constant,
    eye,
    ones,
    ones_like,
    zeros,
    zeros_like,
)

__all__ = [
    "constant",
    "ones",
    "zeros",
    "eye",
    "zeros_like",
    "ones_like",
]
