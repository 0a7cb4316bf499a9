"""Decode a message described by a compact format string into plain values.

Format codes: ``?`` bool, ``c`` char, ``b``/``B`` 8-bit, ``h``/``H`` 16-bit,
``i``/``I`` 32-bit, ``q``/``Q`` 64-bit signed/unsigned integers, ``f`` float,
``d`` double, ``N`` size, ``s`` string.  Containers: ``[3i]`` array of three,
``[i]`` vector, ``{s:i}`` map, ``{i}`` set and ``(ifs)`` tuple.
"""

from __future__ import annotations

from typing import Any

from .encoding import AlpacaError, InvalidArgumentError, Reader, ValueTooLargeError
from .options import Options
from .schema import Bool, Char, FieldType, Float, Int, String

_OPTIONS = Options.NONE

_SIMPLE: dict[str, tuple[str, FieldType]] = {
    "?": ("bool", Bool()),
    "c": ("char", Char()),
    "b": ("int8_t", Int(8, signed=True)),
    "B": ("uint8_t", Int(8, signed=False)),
    "h": ("int16_t", Int(16, signed=True)),
    "H": ("uint16_t", Int(16, signed=False)),
    "i": ("int32_t", Int(32, signed=True)),
    "I": ("uint32_t", Int(32, signed=False)),
    "q": ("int64_t", Int(64, signed=True)),
    "Q": ("uint64_t", Int(64, signed=False)),
    "f": ("float", Float(32)),
    "d": ("double", Float(64)),
    "N": ("std::size_t", Int(64, signed=False)),
    "s": ("std::string", String()),
}

_SIZE = Int(64, signed=False)
_OPENERS = "([{"
_CLOSERS = ")]}"


def unpack(format: str, data: bytes) -> list:
    """Decode ``data`` according to ``format`` and return the values in order.

    Decoding stops once the input is exhausted, so trailing format codes with
    no bytes behind them produce no values.
    """
    return _unpack(format, Reader(data))


def _matching(fmt: str, start: int) -> int:
    depth = 0
    for position in range(start, len(fmt)):
        char = fmt[position]
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return position
    raise InvalidArgumentError(f"unbalanced bracket at position {start} in {fmt!r}")


def _top_level_colon(body: str) -> int:
    depth = 0
    for position, char in enumerate(body):
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == ":" and depth == 0:
            return position
    return -1


def _read_count(reader: Reader, what: str) -> int:
    size = _SIZE.read(reader, _OPTIONS)
    if size > reader.remaining:
        raise ValueTooLargeError(f"Invalid {what} size")
    return size


def _load_simple(code: str, reader: Reader) -> Any:
    name, field = _SIMPLE[code]
    try:
        return field.read(reader, _OPTIONS)
    except AlpacaError as exc:
        raise AlpacaError(f"Error parsing {name}") from exc


def _single(fmt: str, reader: Reader, what: str) -> Any:
    values = _unpack(fmt, reader)
    if not values:
        raise AlpacaError(f"Error parsing {what}")
    return values[0]


def _load_brackets(body: str, reader: Reader) -> list:
    digits = len(body) - len(body.lstrip("0123456789"))
    if digits:
        size = int(body[:digits])
        return _unpack(body[digits:] * size, reader)
    size = _read_count(reader, "vector")
    return _unpack(body * size, reader)


def _load_braces(body: str, reader: Reader) -> Any:
    colon = _top_level_colon(body)
    if colon < 0:
        size = _read_count(reader, "set")
        return set(_unpack(body * size, reader))
    size = _read_count(reader, "map")
    key_format, value_format = body[:colon], body[colon + 1 :]
    result: dict = {}
    for _ in range(size):
        key = _single(key_format, reader, "map key")
        result[key] = _single(value_format, reader, "map value")
    return result


def _unpack(fmt: str, reader: Reader) -> list:
    result: list = []
    index = 0
    while not reader.at_end and index < len(fmt):
        code = fmt[index]
        if code in _SIMPLE:
            result.append(_load_simple(code, reader))
            index += 1
        elif code in _OPENERS:
            close = _matching(fmt, index)
            body = fmt[index + 1 : close]
            if code == "[":
                result.append(_load_brackets(body, reader))
            elif code == "{":
                result.append(_load_braces(body, reader))
            else:
                result.append(tuple(_unpack(body, reader)))
            index = close + 1
        else:
            index += 1
    return result