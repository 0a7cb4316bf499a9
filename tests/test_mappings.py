import pytest

from alpacawire.encoding import ValueTooLargeError
from alpacawire.mappings import Map, Set, UnorderedMap, UnorderedSet
from alpacawire.schema import Char, FieldKind, Int, String, Tuple, Vector


def test_serialize_map_char_int():
    field = Map(Char(), Int())
    data = field.encode({"x": 1, "y": 2, "z": 3})
    assert len(data) == 7
    assert data[0] == 3
    assert data[1] == ord("x")
    assert data[2] == 1
    assert data[3] == ord("y")
    assert data[4] == 2
    assert data[5] == ord("z")
    assert data[6] == 3


def test_serialize_map_written_in_key_order():
    field = Map(Char(), Int())
    assert field.encode({"z": 3, "x": 1, "y": 2}) == field.encode(
        {"x": 1, "y": 2, "z": 3}
    )


def test_serialize_map_string_vector():
    field = Map(String(), Vector(Int()))
    data = field.encode({"time": [0, 1, 2, 3, 4], "x": [5, 10, 15]})
    assert len(data) == 18
    assert data[0] == 2
    assert data[1] == 4
    assert data[2:6] == b"time"
    assert data[6] == 5
    assert list(data[7:12]) == [0, 1, 2, 3, 4]
    assert data[12] == 1
    assert data[13] == ord("x")
    assert data[14] == 3
    assert list(data[15:18]) == [5, 10, 15]


def test_map_round_trip():
    field = Map(String(), Vector(Int()))
    value = {"time": [0, 1, 2, 3, 4], "x": [5, 10, 15]}
    assert field.decode(field.encode(value)) == value


def test_map_of_tuples_sample_bytes():
    colour = Tuple(Int(8, False), Int(8, False), Int(8, False))
    field = Map(String(), colour)
    value = {"red": (255, 0, 0), "green": (0, 255, 0), "blue": (0, 0, 255)}
    data = field.encode(value)
    assert data == bytes(
        [0x03, 0x04]
        + list(b"blue")
        + [0x00, 0x00, 0xFF, 0x05]
        + list(b"green")
        + [0x00, 0xFF, 0x00, 0x03]
        + list(b"red")
        + [0xFF, 0x00, 0x00]
    )
    assert field.decode(data) == value


def test_unordered_map_keeps_iteration_order():
    field = UnorderedMap(Char(), Int())
    assert field.encode({"z": 3, "x": 1}) == b"\x02z\x03x\x01"
    assert field.decode(b"\x02z\x03x\x01") == {"z": 3, "x": 1}


def test_map_size_too_large():
    with pytest.raises(ValueTooLargeError):
        Map(Char(), Int()).decode(b"\xff\x01\x02")


def test_map_default_when_input_exhausted():
    assert Map(Char(), Int()).decode(b"") == {}


def test_serialize_set_into_bytes():
    data = Set(Int()).encode([1, 1, 1, 2, 3, 4])
    assert len(data) == 5
    assert list(data) == [4, 1, 2, 3, 4]


def test_serialize_unordered_set():
    field = UnorderedSet(Int())
    data = field.encode({4, 3, 2, 1, 1, 1, 1, 2, 3, 4})
    assert len(data) == 5
    assert data[0] == 4
    assert field.decode(data) == {1, 2, 3, 4}


def test_deserialize_set_with_trailing_padding():
    field = Set(Int())
    data = field.encode([1, 1, 1, 2, 2, 3, 3, 3, 3, 3, 4]) + bytes(5)
    result = field.decode(data)
    assert len(result) == 4
    assert result == {1, 2, 3, 4}


def test_set_size_too_large():
    with pytest.raises(ValueTooLargeError):
        Set(Int()).decode(b"\x09\x01")


def test_set_default_when_input_exhausted():
    assert UnorderedSet(String()).decode(b"") == set()


def test_type_info_map():
    out = bytearray()
    Map(Int(), String()).type_info(out)
    assert list(out) == [FieldKind.MAP, FieldKind.INT32, FieldKind.STRING]


def test_type_info_unordered_map():
    out = bytearray()
    UnorderedMap(Char(), String()).type_info(out)
    assert list(out) == [FieldKind.UNORDERED_MAP, FieldKind.CHAR, FieldKind.STRING]


def test_type_info_sets():
    ordered = bytearray()
    Set(String()).type_info(ordered)
    unordered = bytearray()
    UnorderedSet(String()).type_info(unordered)
    assert list(ordered) == [FieldKind.SET, FieldKind.STRING]
    assert list(unordered) == [FieldKind.UNORDERED_SET, FieldKind.STRING]