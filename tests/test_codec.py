import pytest

from fbx_bridge.core import codec
from fbx_bridge.core.exceptions import ArityError, MalformedInputError


def test_pack_concatenates_groups_as_floats():
    assert codec.pack([(1, 2, 3), (4.5, 5, 6)]) == [1.0, 2.0, 3.0, 4.5, 5.0, 6.0]


def test_pack_of_nothing_is_empty():
    assert codec.pack([]) == []


@pytest.mark.parametrize(
    "arity, expected",
    [
        (2, [(0.0, 1.0), (2.0, 3.0), (4.0, 5.0)]),
        (3, [(0.0, 1.0, 2.0), (3.0, 4.0, 5.0)]),
    ],
)
def test_unpack_groups_by_arity(arity, expected):
    assert codec.unpack([0, 1, 2, 3, 4, 5], arity) == expected


def test_unpack_quaternions():
    assert codec.unpack([0, 0, 0, 1], 4) == [(0.0, 0.0, 0.0, 1.0)]


def test_unpack_rejects_length_not_multiple_of_arity():
    with pytest.raises(ArityError):
        codec.unpack([1.0] * 7, 3)


def test_unpack_rejects_unsupported_arity():
    with pytest.raises(ArityError):
        codec.unpack([1.0] * 5, 5)


def test_unpack_rejects_non_numbers_and_bools():
    with pytest.raises(MalformedInputError):
        codec.unpack([1.0, "2", 3.0], 3)
    with pytest.raises(MalformedInputError):
        codec.unpack([1.0, True, 3.0], 3)


def test_unpack_rejects_non_sequences():
    with pytest.raises(MalformedInputError):
        codec.unpack("123", 3)
    with pytest.raises(MalformedInputError):
        codec.unpack({"x": 1}, 3)


def test_arity_error_is_a_malformed_input_error():
    assert issubclass(ArityError, MalformedInputError)


def test_unpack_indices_accepts_non_negative_integers():
    assert codec.unpack_indices([0, 1, 2]) == [0, 1, 2]


@pytest.mark.parametrize("bad", [[-1], [1.5], [False], ["0"]])
def test_unpack_indices_rejects_invalid_entries(bad):
    with pytest.raises(MalformedInputError):
        codec.unpack_indices(bad)


def test_unpack_faces_groups_triangles():
    assert codec.unpack_faces([0, 1, 2, 2, 3, 0]) == [(0, 1, 2), (2, 3, 0)]


def test_unpack_faces_rejects_partial_triangle():
    with pytest.raises(ArityError):
        codec.unpack_faces([0, 1, 2, 3])


def test_unpack_rejects_integers_too_large_for_a_float():
    with pytest.raises(MalformedInputError):
        codec.unpack([10**400, 0, 0], 3)
