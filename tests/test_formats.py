import pytest

from alpacawire.encoding import AlpacaError, InvalidArgumentError, ValueTooLargeError
from alpacawire.formats import unpack
from alpacawire.mappings import Map, Set
from alpacawire.schema import (
    Array,
    Bool,
    Char,
    Float,
    Int,
    String,
    Tuple,
    Vector,
)


def test_fundamental_sample_bytes():
    data = bytes([0x61, 0x05, 0xB9, 0x60, 0xC3, 0xF5, 0x48, 0x40, 0x01])
    result = unpack("ciQf?", data)
    assert result[0] == "a"
    assert result[1] == 5
    assert result[2] == 12345
    assert result[3] == pytest.approx(3.14, rel=1e-6)
    assert result[4] is True


def test_simple_round_trip():
    data = (
        Int(8, True).encode(-5)
        + Int(16, False).encode(512)
        + Int(64, True).encode(-5294967295)
        + Float(64).encode(2.5)
        + String().encode("Hello")
    )
    assert unpack("bHqds", data) == [-5, 512, -5294967295, 2.5, "Hello"]


def test_array_and_vector():
    data = Array(Int(), 3).encode([1, 2, 3]) + Vector(Vector(Float(32))).encode(
        [[0.5, 1.5], [2.0]]
    )
    assert unpack("[3i][[f]]", data) == [[1, 2, 3], [[0.5, 1.5], [2.0]]]


def test_map_set_and_tuple():
    data = (
        Map(String(), Tuple(Int(8, False), Bool())).encode(
            {"a": (1, True), "b": (2, False)}
        )
        + Set(Int()).encode([3, 1, 2])
        + Tuple(Int(), Char()).encode((7, "z"))
    )
    result = unpack("{s:(B?)}{i}(ic)", data)
    assert result == [{"a": (1, True), "b": (2, False)}, {1, 2, 3}, (7, "z")]


def test_map_of_vectors_uses_top_level_colon():
    field = Map(String(), Vector(Int()))
    value = {"time": [0, 1, 2], "x": [5]}
    assert unpack("{s:[i]}", field.encode(value)) == [value]


def test_stops_when_input_exhausted():
    assert unpack("BB", b"\x05") == [5]


def test_unknown_codes_are_skipped():
    assert unpack("x?", b"\x01") == [True]


def test_vector_size_too_large():
    with pytest.raises(ValueTooLargeError):
        unpack("[i]", b"\xff\x01\x02\x03")


def test_map_size_too_large():
    with pytest.raises(ValueTooLargeError):
        unpack("{s:i}", b"\x09\x01")


def test_truncated_simple_value():
    with pytest.raises(AlpacaError, match="uint16_t"):
        unpack("H", b"\x01")


def test_unbalanced_brackets():
    with pytest.raises(InvalidArgumentError):
        unpack("[i", b"\x01\x01")