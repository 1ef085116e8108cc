from typing import Any

import numpy as np
import pytest
from densela.backend import device as backend_device
from densela.backend import dtypes
from densela.backend import matrix as mx
from densela.exceptions import InvalidArgumentError, ShapeMismatchError

_DEVICES = [backend_device.cpu_numpy()]
_DEVICE_IDS = ["numpy"]

_INT_DTYPES = ["int8", "uint8", "int16", "uint16"]
_ALL_DTYPES = _INT_DTYPES + ["float"]


def check_same_memory(original: mx.Matrix, other: mx.Matrix) -> None:
    assert original._handle.ptr() == other._handle.ptr()


@pytest.mark.parametrize(
    "token,expected",
    [
        ("int8", "int8"),
        ("U16", "uint16"),
        ("float64", "float"),
        ("double", "float"),
        (float, "float"),
        (np.int16, "int16"),
        (np.dtype("uint8"), "uint8"),
    ],
)
def test_normalize_dtype(token: Any, expected: str) -> None:
    assert dtypes.normalize_dtype(token) == expected


@pytest.mark.parametrize("token", ["complex", "int32", np.float32, object])
def test_normalize_dtype_rejects(token: Any) -> None:
    with pytest.raises(InvalidArgumentError):
        dtypes.normalize_dtype(token)


@pytest.mark.parametrize(
    "dtype,size", [("int8", 1), ("uint8", 1), ("int16", 2), ("uint16", 2), ("float", 8)]
)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_layout(dtype: str, size: int, device: backend_device.Device) -> None:
    A = mx.array(np.arange(6).reshape(2, 3), dtype=dtype, device=device)
    assert A.shape == (2, 3)
    assert A.dtype == dtype
    assert A.itemsize == size == dtypes.itemsize(dtype)
    assert dtypes.is_floating(dtype) == (dtype == dtypes.PROMOTED)
    assert A.nbytes == 6 * size
    assert A._handle.size == A.rows * A.cols
    # row-major: (i, j) lives at i * cols + j
    for i in range(2):
        for j in range(3):
            assert A[i, j] == A.read_float(i * 3 + j) == float(i * 3 + j)


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_construct_from_lists(device: backend_device.Device) -> None:
    A = mx.Matrix([[1, 2], [3, 4]], device=device)
    assert A.shape == (2, 2)
    assert A.dtype == "float"
    assert A.tolist() == [[1.0, 2.0], [3.0, 4.0]]

    row = mx.array([1, 2, 3], device=device)
    assert row.shape == (1, 3)


def test_construct_rejects_3d() -> None:
    with pytest.raises(InvalidArgumentError):
        mx.array(np.zeros((2, 2, 2)))


def test_construct_rejects_ragged() -> None:
    with pytest.raises(InvalidArgumentError):
        mx.array([[1, 2], [3]])


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_copy_is_independent(device: backend_device.Device) -> None:
    A = mx.array([[1, 2], [3, 4]], dtype="int16", device=device)
    B = mx.Matrix(A)
    C = A.copy()
    assert B.dtype == C.dtype == "int16"
    B[0, 0] = 9
    C[1, 1] = 7
    assert A.tolist() == [[1.0, 2.0], [3.0, 4.0]]
    assert A._handle.ptr() != B._handle.ptr()


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_element_access(device: backend_device.Device) -> None:
    A = mx.array(np.zeros((2, 3)), dtype="uint8", device=device)
    A[1, 2] = 200
    A[-1, 0] = 5
    assert A[1, 2] == 200.0
    assert isinstance(A[1, 2], float)
    assert A[1, 0] == 5.0
    with pytest.raises(IndexError):
        A[2, 0]
    with pytest.raises(IndexError):
        A[0, 3] = 1
    with pytest.raises(InvalidArgumentError):
        A[0]


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_typed_write_truncates(device: backend_device.Device) -> None:
    A = mx.array(np.zeros((1, 2)), dtype="int8", device=device)
    A.write(0, 3.7)
    A.write(1, -2.2)
    assert A.tolist() == [[3.0, -2.0]]


transpose_shapes = [(4, 4), (2, 3), (3, 2), (1, 5), (5, 1), (7, 8), (1, 1)]


@pytest.mark.parametrize("dtype", _ALL_DTYPES)
@pytest.mark.parametrize("shape", transpose_shapes)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_transpose(
    shape: tuple[int, int], dtype: str, device: backend_device.Device
) -> None:
    _A = np.random.randint(low=0, high=100, size=shape)
    A = mx.array(_A, dtype=dtype, device=device)
    start_ptr = A._handle.ptr()
    out = A.transpose()
    assert out is A
    assert A.shape == (shape[1], shape[0])
    assert A.dtype == dtype
    assert A._handle.ptr() == start_ptr, "transpose should modify in-place"
    np.testing.assert_array_equal(A.numpy(), _A.T)


@pytest.mark.parametrize("shape", transpose_shapes)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_transpose_involution(
    shape: tuple[int, int], device: backend_device.Device
) -> None:
    _A = np.random.randn(*shape)
    A = mx.array(_A, device=device)
    A.transpose().transpose()
    assert A.shape == shape
    np.testing.assert_array_equal(A.numpy(), _A)


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_vector_transpose_keeps_buffer_order(device: backend_device.Device) -> None:
    A = mx.array([1, 2, 3, 4], device=device)
    before = A.numpy().ravel().copy()
    A.transpose()
    assert A.shape == (4, 1)
    np.testing.assert_array_equal(A.numpy().ravel(), before)


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_T_is_a_copy(device: backend_device.Device) -> None:
    _A = np.random.randn(2, 3)
    A = mx.array(_A, device=device)
    B = A.T
    assert A.shape == (2, 3)
    assert B.shape == (3, 2)
    np.testing.assert_array_equal(B.numpy(), _A.T)


reshape_params = [
    {"shape": (2, 3), "new_shape": (3, 2)},
    {"shape": (2, 3), "new_shape": (1, 6)},
    {"shape": (4, 4), "new_shape": [8, 2]},
    {"shape": (1, 12), "new_shape": (12, 1)},
    {"shape": (0, 3), "new_shape": (3, 0)},
]


@pytest.mark.parametrize("params", reshape_params)
@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_reshape(device: backend_device.Device, params: dict[str, Any]) -> None:
    shape = params["shape"]
    new_shape = params["new_shape"]
    _A = np.random.randn(*shape)
    A = mx.array(_A, device=device)
    before = [A.read_float(i) for i in range(A.size)]
    handle = A._handle
    out = A.reshape(new_shape)
    assert out is A
    assert A.shape == tuple(new_shape)
    assert A._handle is handle
    assert [A.read_float(i) for i in range(A.size)] == before
    np.testing.assert_array_equal(A.numpy(), _A.reshape(*new_shape))
    check_same_memory(out, A)


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_reshape_rejects_size_change(device: backend_device.Device) -> None:
    A = mx.array(np.zeros((2, 3)), device=device)
    with pytest.raises(ShapeMismatchError) as excinfo:
        A.reshape((2, 2))
    assert excinfo.value.expected == 6
    assert excinfo.value.actual == 4
    assert A.shape == (2, 3)


@pytest.mark.parametrize(
    "bad_shape", [6, (6,), (1, 2, 3), (2.0, 3), (-2, -3), (True, 6), "23", None]
)
def test_reshape_rejects_malformed_shape(bad_shape: Any) -> None:
    A = mx.array(np.zeros((2, 3)))
    with pytest.raises(InvalidArgumentError):
        A.reshape(bad_shape)
    assert A.shape == (2, 3)


@pytest.mark.parametrize("device", _DEVICES, ids=_DEVICE_IDS)
def test_fill_and_to(device: backend_device.Device) -> None:
    A = mx.array(np.zeros((2, 2)), dtype="int16", device=device)
    A.fill(3)
    assert A.tolist() == [[3.0, 3.0], [3.0, 3.0]]
    assert A.to(backend_device.cpu_numpy()) is A
    assert len(A) == 2
    assert "dtype=int16" in repr(A)


def test_scratch_is_released_on_error() -> None:
    device = backend_device.cpu_numpy()
    with pytest.raises(RuntimeError):
        with device.scratch(16) as tmp:
            assert tmp.size == 16
            raise RuntimeError("boom")
    assert tmp.size == 0
