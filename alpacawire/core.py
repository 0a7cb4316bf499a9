"""Serialize and deserialize dataclass instances field by field.

A dataclass becomes serializable when each field's annotation says how it is
laid out, either with ``Annotated[python_type, FieldType]`` or by naming
another dataclass, which is then written inline as a nested struct::

    @dataclasses.dataclass
    class Point:
        x: Annotated[int, Int(32)]
        y: Annotated[float, Float(32)]

Annotations must be real objects, not strings, so modules that declare such
dataclasses should not use postponed evaluation of annotations.
"""

from __future__ import annotations

import dataclasses
import typing
from typing import Any, BinaryIO, Optional

from .encoding import (
    BadMessageError,
    InvalidArgumentError,
    MessageSizeError,
    Reader,
    crc32,
)
from .options import Options
from .schema import Array, Bool, Char, Duration, EnumField, FieldType, Float, Int, Tuple

_HEADER_FIELD = Int(16, signed=False)
_STRUCT_CACHE: dict[type, "Struct"] = {}


def _resolve(annotation: Any, owner: type, name: str) -> FieldType:
    if isinstance(annotation, str):
        raise TypeError(
            f"field {owner.__name__}.{name} has a string annotation {annotation!r}; "
            "declare the dataclass without postponed annotations"
        )
    if isinstance(annotation, FieldType):
        return annotation
    if typing.get_origin(annotation) is typing.Annotated:
        for extra in annotation.__metadata__:
            if isinstance(extra, FieldType):
                return extra
        annotation = typing.get_args(annotation)[0]
    if isinstance(annotation, type) and dataclasses.is_dataclass(annotation):
        return struct_type(annotation)
    raise TypeError(
        f"field {owner.__name__}.{name} has no wire type; "
        "annotate it with Annotated[..., FieldType] or a dataclass"
    )


def _nominal_size(field_type: FieldType) -> int:
    """In-memory size of a field used in the type signature of a struct."""
    if isinstance(field_type, (Bool, Char)):
        return 1
    if isinstance(field_type, (Int, Float)):
        return field_type.bits // 8
    if isinstance(field_type, EnumField):
        return _nominal_size(field_type.underlying)
    if isinstance(field_type, Duration):
        return _nominal_size(field_type.rep)
    if isinstance(field_type, Array):
        return field_type.length * _nominal_size(field_type.element)
    if isinstance(field_type, Tuple):
        return sum(_nominal_size(element) for element in field_type.elements)
    if isinstance(field_type, Struct):
        return sum(_nominal_size(ft) for _, ft in field_type.fields)
    return 8


class Struct(FieldType):
    """A dataclass whose fields are written one after another, in declaration order."""

    def __init__(self, cls: type):
        if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
            raise TypeError(f"{cls!r} is not a dataclass")
        self.cls = cls
        self._fields: Optional[tuple[tuple[str, FieldType], ...]] = None

    def __repr__(self) -> str:
        return f"Struct({self.cls.__name__})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Struct):
            return NotImplemented
        return self.cls is other.cls

    def __hash__(self) -> int:
        return hash((Struct, self.cls))

    @property
    def fields(self) -> tuple[tuple[str, FieldType], ...]:
        """The (name, field type) pairs of the dataclass, in declaration order."""
        if self._fields is None:
            declared = [f for f in dataclasses.fields(self.cls) if f.init]
            self._fields = tuple(
                (f.name, _resolve(f.type, self.cls, f.name)) for f in declared
            )
        return self._fields

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        """Append every field of ``value`` to ``out``."""
        if not isinstance(value, self.cls):
            raise TypeError(f"expected a {self.cls.__name__}, got {value!r}")
        for name, field_type in self.fields:
            field_type.write(getattr(value, name), out, options)

    def read(self, reader: Reader, options: Options = Options.NONE) -> Any:
        """Read every field; fields past the end of the input take their defaults."""
        return self._read_value(reader, options)

    def _read_value(self, reader: Reader, options: Options) -> Any:
        return self.cls(
            **{name: field_type.read(reader, options) for name, field_type in self.fields}
        )

    def default(self) -> Any:
        """An instance with every field at its default."""
        return self.cls(**{name: field_type.default() for name, field_type in self.fields})

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        """Append the field count, nominal size and field signatures.

        A struct already described earlier in the same signature is written
        as the one-byte index it was given on its first visit.
        """
        if visited is None:
            visited = {}
        if self.cls in visited:
            out.append(visited[self.cls] & 0xFF)
            return
        _HEADER_FIELD.write(len(self.fields) & 0xFFFF, out)
        _HEADER_FIELD.write(_nominal_size(self) & 0xFFFF, out)
        visited[self.cls] = len(visited) + 1
        for _, field_type in self.fields:
            field_type.type_info(out, visited)


def struct_type(cls: type) -> Struct:
    """Return the (cached) :class:`Struct` field type for a dataclass."""
    cached = _STRUCT_CACHE.get(cls)
    if cached is None:
        cached = Struct(cls)
        _STRUCT_CACHE[cls] = cached
    return cached


def type_info(field_type: Any) -> bytes:
    """Return the type signature of a field type or a dataclass."""
    if not isinstance(field_type, FieldType):
        field_type = struct_type(field_type)
    out = bytearray()
    field_type.type_info(out, {})
    return bytes(out)


def version_of(cls: type) -> int:
    """CRC-32 of a dataclass's type signature, used as its version stamp."""
    return crc32(type_info(struct_type(cls)))


def _crc_bytes(value: int, options: Options) -> bytes:
    return value.to_bytes(4, options.byte_order())


def serialize(obj: Any, options: Options = Options.NONE) -> bytes:
    """Encode a dataclass instance, with a version prefix and checksum if asked."""
    struct = struct_type(type(obj))
    out = bytearray()
    has_fields = bool(struct.fields)
    if has_fields and Options.WITH_VERSION in options:
        out += _crc_bytes(version_of(struct.cls), options)
    struct.write(obj, out, options)
    if has_fields and Options.WITH_CHECKSUM in options:
        out += _crc_bytes(crc32(bytes(out)), options)
    return bytes(out)


def _decode(struct: Struct, data: bytes, end: int, options: Options) -> Any:
    start = 0
    order = options.byte_order()
    if struct.fields and Options.WITH_VERSION in options:
        if end < 4:
            raise InvalidArgumentError("input is too short to hold a version stamp")
        stored = int.from_bytes(data[:4], order)
        if stored != version_of(struct.cls):
            raise InvalidArgumentError(
                f"version 0x{stored:08x} does not match {struct.cls.__name__}"
            )
        start = 4
    if Options.WITH_CHECKSUM in options:
        if end < 4:
            raise InvalidArgumentError("input is too short to hold a checksum")
        trailing = int.from_bytes(data[end - 4 : end], order)
        if trailing != crc32(data[: end - 4]):
            raise BadMessageError("checksum does not match the message")
        end -= 4
    return struct.read(Reader(data, start, end), options)


def deserialize(cls: type, data: bytes, options: Options = Options.NONE) -> Any:
    """Decode an instance of ``cls`` from ``data``.

    Bytes beyond the last field are ignored; fields beyond the end of the
    input take their default values.
    """
    data = bytes(data)
    if not data:
        raise MessageSizeError("cannot deserialize from empty input")
    return _decode(struct_type(cls), data, len(data), options)


def _reject_framing(options: Options) -> None:
    if options & (Options.WITH_VERSION | Options.WITH_CHECKSUM):
        raise InvalidArgumentError(
            "version stamps and checksums are not supported for file streams"
        )


def serialize_to_file(obj: Any, stream: BinaryIO, options: Options = Options.NONE) -> int:
    """Write an instance to a binary stream and return the number of bytes written."""
    _reject_framing(options)
    struct = struct_type(type(obj))
    out = bytearray()
    struct.write(obj, out, options)
    stream.write(bytes(out))
    return len(out)


def deserialize_from_file(
    cls: type, stream: BinaryIO, size: int, options: Options = Options.NONE
) -> Any:
    """Read ``size`` bytes from a binary stream and decode an instance of ``cls``."""
    _reject_framing(options)
    if size == 0:
        raise MessageSizeError("cannot deserialize from empty input")
    data = bytes(stream.read(size))
    return _decode(struct_type(cls), data, len(data), options)