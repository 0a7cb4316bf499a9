"""Field types that describe how each kind of value is laid out on the wire."""

from __future__ import annotations

import abc
import collections
import dataclasses
import enum
import operator
import struct
from datetime import timedelta
from typing import Any, Optional

from .encoding import InvalidArgumentError, Reader, ValueTooLargeError, encode_varint
from .options import Options


class FieldKind(enum.IntEnum):
    """One-byte codes that identify a field's type in a type signature."""

    BOOL = 0
    CHAR = 1
    UINT8 = 2
    UINT16 = 3
    UINT32 = 4
    UINT64 = 5
    INT8 = 6
    INT16 = 7
    INT32 = 8
    INT64 = 9
    FLOAT32 = 10
    FLOAT64 = 11
    ENUM_CLASS = 12
    STRING = 13
    ARRAY = 14
    VECTOR = 15
    DEQUE = 16
    LIST = 17
    MAP = 18
    UNORDERED_MAP = 19
    SET = 20
    UNORDERED_SET = 21
    TUPLE = 22
    PAIR = 23
    OPTIONAL = 24
    VARIANT = 25
    UNIQUE_PTR = 26
    CHRONO_DURATION = 27


class FieldType(abc.ABC):
    """Describes how one field is written, read and fingerprinted.

    Reading a field when the input is already exhausted yields the field's
    default value, so that newer layouts can read older messages.
    """

    kind: FieldKind

    def encode(self, value: Any, options: Options = Options.NONE) -> bytes:
        """Return the bytes of ``value`` on its own."""
        out = bytearray()
        self.write(value, out, options)
        return bytes(out)

    def decode(self, data: bytes, options: Options = Options.NONE) -> Any:
        """Read one value from the start of ``data``."""
        return self.read(Reader(data), options)

    @abc.abstractmethod
    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        """Append the bytes of ``value`` to ``out``."""

    def read(self, reader: Reader, options: Options = Options.NONE) -> Any:
        """Read one value, or the default when no bytes remain."""
        if reader.at_end:
            return self.default()
        return self._read_value(reader, options)

    @abc.abstractmethod
    def _read_value(self, reader: Reader, options: Options) -> Any:
        """Read one value; the reader holds at least one byte."""

    @abc.abstractmethod
    def default(self) -> Any:
        """Value used for a field that is missing from the input."""

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        """Append this field's type signature to ``out``."""
        out.append(self.kind)


@dataclasses.dataclass(frozen=True)
class Bool(FieldType):
    """A boolean stored as one byte."""

    kind = FieldKind.BOOL

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        out.append(1 if value else 0)

    def _read_value(self, reader: Reader, options: Options) -> bool:
        return reader.read(1)[0] != 0

    def default(self) -> bool:
        return False


@dataclasses.dataclass(frozen=True)
class Char(FieldType):
    """A single-byte character, held as a one-character string."""

    kind = FieldKind.CHAR

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        if not isinstance(value, str) or len(value) != 1 or ord(value) > 0xFF:
            raise ValueError(f"a char field needs a single-byte character, got {value!r}")
        out.append(ord(value))

    def _read_value(self, reader: Reader, options: Options) -> str:
        return chr(reader.read(1)[0])

    def default(self) -> str:
        return "\x00"


_INT_KINDS = {
    (8, False): FieldKind.UINT8,
    (16, False): FieldKind.UINT16,
    (32, False): FieldKind.UINT32,
    (64, False): FieldKind.UINT64,
    (8, True): FieldKind.INT8,
    (16, True): FieldKind.INT16,
    (32, True): FieldKind.INT32,
    (64, True): FieldKind.INT64,
}


@dataclasses.dataclass(frozen=True)
class Int(FieldType):
    """An integer of 8, 16, 32 or 64 bits.

    8- and 16-bit integers are always written at full width; 32- and 64-bit
    integers are written as varints unless the options ask for full width.
    """

    bits: int = 32
    signed: bool = True

    def __post_init__(self) -> None:
        if self.bits not in (8, 16, 32, 64):
            raise ValueError(f"unsupported integer width: {self.bits}")

    @property
    def kind(self) -> FieldKind:  # type: ignore[override]
        return _INT_KINDS[(self.bits, self.signed)]

    def _in_range(self, value: int) -> bool:
        if self.signed:
            limit = 1 << (self.bits - 1)
            return -limit <= value < limit
        return 0 <= value < (1 << self.bits)

    def _uses_varint(self, options: Options) -> bool:
        return self.bits >= 32 and not options.fixed_width_integers()

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        number = operator.index(value)
        if not self._in_range(number):
            raise ValueError(f"{number} does not fit in {self.kind.name.lower()}")
        if self._uses_varint(options):
            out += encode_varint(number, self.signed)
        else:
            out += number.to_bytes(self.bits // 8, options.byte_order(), signed=self.signed)

    def _read_value(self, reader: Reader, options: Options) -> int:
        if self._uses_varint(options):
            number = reader.read_varint(self.signed)
            if not self._in_range(number):
                raise ValueTooLargeError(
                    f"{number} does not fit in {self.kind.name.lower()}"
                )
            return number
        return int.from_bytes(
            reader.read(self.bits // 8), options.byte_order(), signed=self.signed
        )

    def default(self) -> int:
        return 0


@dataclasses.dataclass(frozen=True)
class Float(FieldType):
    """An IEEE 754 floating-point number of 32 or 64 bits."""

    bits: int = 64

    def __post_init__(self) -> None:
        if self.bits not in (32, 64):
            raise ValueError(f"unsupported float width: {self.bits}")

    @property
    def kind(self) -> FieldKind:  # type: ignore[override]
        return FieldKind.FLOAT32 if self.bits == 32 else FieldKind.FLOAT64

    def _format(self, options: Options) -> str:
        order = ">" if options.byte_order() == "big" else "<"
        return order + ("f" if self.bits == 32 else "d")

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"a float field needs a number, got {value!r}")
        out += struct.pack(self._format(options), value)

    def _read_value(self, reader: Reader, options: Options) -> float:
        return struct.unpack(self._format(options), reader.read(self.bits // 8))[0]

    def default(self) -> float:
        return 0.0


_SIZE = Int(64, signed=False)


@dataclasses.dataclass(frozen=True)
class String(FieldType):
    """A UTF-8 string preceded by its length in bytes."""

    kind = FieldKind.STRING

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        if not isinstance(value, str):
            raise TypeError(f"a string field needs a str, got {value!r}")
        raw = value.encode("utf-8")
        _SIZE.write(len(raw), out, options)
        out += raw

    def _read_value(self, reader: Reader, options: Options) -> str:
        size = _SIZE.read(reader, options)
        if size > reader.remaining:
            raise ValueTooLargeError(
                f"string of {size} bytes but only {reader.remaining} remain"
            )
        try:
            return reader.read(size).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise InvalidArgumentError(f"string is not valid UTF-8: {exc}") from exc

    def default(self) -> str:
        return ""


@dataclasses.dataclass(frozen=True)
class EnumField(FieldType):
    """An enumeration stored as its underlying integer value."""

    enum_type: type[enum.Enum]
    underlying: FieldType = Int(32, signed=True)

    kind = FieldKind.ENUM_CLASS

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        if not isinstance(value, self.enum_type):
            raise TypeError(f"expected a {self.enum_type.__name__}, got {value!r}")
        self.underlying.write(value.value, out, options)

    def _read_value(self, reader: Reader, options: Options) -> enum.Enum:
        raw = self.underlying.read(reader, options)
        try:
            return self.enum_type(raw)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"{raw} is not a value of {self.enum_type.__name__}"
            ) from exc

    def default(self) -> enum.Enum:
        try:
            return self.enum_type(0)
        except ValueError:
            return next(iter(self.enum_type))


@dataclasses.dataclass(frozen=True)
class Array(FieldType):
    """A fixed number of elements written back to back, without a length."""

    element: FieldType
    length: int

    kind = FieldKind.ARRAY

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        items = list(value)
        if len(items) != self.length:
            raise ValueError(f"array needs {self.length} elements, got {len(items)}")
        for item in items:
            self.element.write(item, out, options)

    def _read_value(self, reader: Reader, options: Options) -> list:
        if self.length > reader.remaining:
            raise ValueTooLargeError(
                f"array of {self.length} elements but only {reader.remaining} bytes remain"
            )
        return [self.element.read(reader, options) for _ in range(self.length)]

    def default(self) -> list:
        return [self.element.default() for _ in range(self.length)]

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        out.append(self.length & 0xFF)
        self.element.type_info(out, visited)


@dataclasses.dataclass(frozen=True)
class Vector(FieldType):
    """A variable number of elements preceded by their count."""

    element: FieldType

    kind = FieldKind.VECTOR

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        items = list(value)
        _SIZE.write(len(items), out, options)
        for item in items:
            self.element.write(item, out, options)

    def _read_items(self, reader: Reader, options: Options) -> list:
        size = _SIZE.read(reader, options)
        if size > reader.remaining:
            raise ValueTooLargeError(
                f"{size} elements announced but only {reader.remaining} bytes remain"
            )
        return [self.element.read(reader, options) for _ in range(size)]

    def _read_value(self, reader: Reader, options: Options) -> list:
        return self._read_items(reader, options)

    def default(self) -> list:
        return []

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        self.element.type_info(out, visited)


@dataclasses.dataclass(frozen=True)
class Deque(Vector):
    """Like :class:`Vector`, read back as a :class:`collections.deque`."""

    kind = FieldKind.DEQUE

    def _read_value(self, reader: Reader, options: Options) -> collections.deque:
        return collections.deque(self._read_items(reader, options))

    def default(self) -> collections.deque:
        return collections.deque()


class Tuple(FieldType):
    """A fixed sequence of differently typed elements, written in order."""

    kind = FieldKind.TUPLE

    def __init__(self, *elements: FieldType):
        self.elements = tuple(elements)

    def __repr__(self) -> str:
        return f"Tuple({', '.join(map(repr, self.elements))})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tuple):
            return NotImplemented
        return self.elements == other.elements

    def __hash__(self) -> int:
        return hash((Tuple, self.elements))

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        items = tuple(value)
        if len(items) != len(self.elements):
            raise ValueError(
                f"tuple needs {len(self.elements)} elements, got {len(items)}"
            )
        for element, item in zip(self.elements, items):
            element.write(item, out, options)

    def _read_value(self, reader: Reader, options: Options) -> tuple:
        return tuple(element.read(reader, options) for element in self.elements)

    def default(self) -> tuple:
        return tuple(element.default() for element in self.elements)

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        for element in self.elements:
            element.type_info(out, visited)


@dataclasses.dataclass(frozen=True)
class Duration(FieldType):
    """A :class:`datetime.timedelta` stored as a count of ``unit`` ticks."""

    unit: timedelta = timedelta(milliseconds=1)
    rep: FieldType = Int(64, signed=True)

    kind = FieldKind.CHRONO_DURATION

    def __post_init__(self) -> None:
        if self.unit <= timedelta(0):
            raise ValueError("duration unit must be positive")

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        if not isinstance(value, timedelta):
            raise TypeError(f"a duration field needs a timedelta, got {value!r}")
        count = value / self.unit if isinstance(self.rep, Float) else value // self.unit
        self.rep.write(count, out, options)

    def _read_value(self, reader: Reader, options: Options) -> timedelta:
        return self.unit * self.rep.read(reader, options)

    def default(self) -> timedelta:
        return timedelta(0)

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        self.rep.type_info(out, visited)