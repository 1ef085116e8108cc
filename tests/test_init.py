from typing import Any

import numpy as np
import pytest
from densela import init
from densela.backend import device as backend_device
from densela.backend import matrix as mx
from densela.exceptions import InvalidArgumentError

_DEVICES = [backend_device.cpu_numpy()]
_DEVICE_IDS = ["numpy"]

_ALL_DTYPES = ["int8", "uint8", "int16", "uint16", "float"]


@pytest.mark.parametrize("dtype", _ALL_DTYPES)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_zeros(dtype: str, device: backend_device.Device) -> None:
    A = init.zeros((3, 4), dtype=dtype, device=device)
    assert A.shape == (3, 4)
    assert A.dtype == dtype
    assert all(A.read_float(i) == 0.0 for i in range(A.size))
    np.testing.assert_array_equal(A.numpy(), np.zeros((3, 4)))


@pytest.mark.parametrize("dtype", _ALL_DTYPES)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_ones(dtype: str, device: backend_device.Device) -> None:
    A = init.ones((2, 2), dtype=dtype, device=device)
    assert A.dtype == dtype
    assert A.tolist() == [[1.0, 1.0], [1.0, 1.0]]
    assert A.numpy().dtype.itemsize == A.itemsize


def test_default_dtype_is_float() -> None:
    assert init.zeros(3).dtype == "float"
    assert init.ones((1, 1)).dtype == "float"
    assert init.eye(2).dtype == "float"


@pytest.mark.parametrize("shape,expected", [(5, (1, 5)), (0, (1, 0)), ([2, 3], (2, 3))])
def test_shape_forms(shape: Any, expected: tuple[int, int]) -> None:
    assert init.ones(shape).shape == expected
    assert init.zeros(shape).shape == expected


@pytest.mark.parametrize(
    "bad_shape", [(1, 2, 3), (3,), 2.5, "3", None, (-1, 2), -3, (2, True)]
)
def test_shape_rejects(bad_shape: Any) -> None:
    with pytest.raises(InvalidArgumentError):
        init.zeros(bad_shape)
    with pytest.raises(InvalidArgumentError):
        init.ones(bad_shape)


def test_constant() -> None:
    A = init.constant((2, 3), c=7, dtype="int16")
    assert A.tolist() == [[7.0] * 3] * 2


eye_params = [
    {"n": 3, "M": None, "k": 0},
    {"n": 3, "M": None, "k": 1},
    {"n": 3, "M": None, "k": -1},
    {"n": 4, "M": 2, "k": 0},
    {"n": 2, "M": 4, "k": 0},
    {"n": 4, "M": 3, "k": 2},
    {"n": 3, "M": 5, "k": -3},
    {"n": 3, "M": None, "k": 3},
    {"n": 3, "M": None, "k": -3},
    {"n": 3, "M": None, "k": 10},
    {"n": 0, "M": None, "k": 0},
]


@pytest.mark.parametrize("dtype", _ALL_DTYPES)
@pytest.mark.parametrize("params", eye_params)
def test_eye(params: dict[str, Any], dtype: str) -> None:
    n, M, k = params["n"], params["M"], params["k"]
    A = init.eye(n, M=M, k=k, dtype=dtype)
    expected = np.eye(n if M is None else M, n, k=k)
    assert A.shape == expected.shape
    assert A.dtype == dtype
    np.testing.assert_array_equal(A.numpy(), expected)


def test_eye_offset_example() -> None:
    assert init.eye(3, k=1).tolist() == [
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.0, 0.0, 0.0],
    ]


@pytest.mark.parametrize(
    "kwargs", [{"n": -1}, {"n": 2.0}, {"n": 2, "M": -2}, {"n": 2, "k": 0.5}]
)
def test_eye_rejects(kwargs: dict[str, Any]) -> None:
    with pytest.raises(InvalidArgumentError):
        init.eye(**kwargs)


def test_like_constructors() -> None:
    A = mx.array(np.random.randn(3, 2), dtype="int16")
    Z = init.zeros_like(A)
    W = init.ones_like(A, dtype="float")
    assert Z.shape == W.shape == (3, 2)
    assert Z.dtype == "int16"
    assert W.dtype == "float"
    np.testing.assert_array_equal(Z.numpy(), np.zeros((3, 2)))
    np.testing.assert_array_equal(W.numpy(), np.ones((3, 2)))
