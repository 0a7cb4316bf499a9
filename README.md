# alpacawire

Compact binary serialization for dataclass records.

You declare a record as a dataclass and give each field a wire type. Integers of 32 and 64 bits are written as variable-length integers (varints). Integers of 8 and 16 bits, floats, characters and booleans are written at their fixed width. Containers are written as an element count followed by their elements. The encoded form holds no field names and no padding.

## Installing

```
pip install alpacawire
```

## Defining a record

Annotate each field with `Annotated[python_type, FieldType]`. A field annotated with another dataclass is written inline as a nested struct. The annotations must be real objects, so do not use `from __future__ import annotations` in a module that declares records.

```python
from dataclasses import dataclass, field
from typing import Annotated

from alpacawire.core import deserialize, serialize
from alpacawire.mappings import Map
from alpacawire.schema import Float, Int, String, Vector


@dataclass
class Point:
    x: Annotated[int, Int(32)] = 0
    y: Annotated[float, Float(32)] = 0.0


@dataclass
class Config:
    device: Annotated[str, String()] = ""
    width: Annotated[int, Int(16, signed=False)] = 0
    origin: Point = field(default_factory=Point)
    coefficients: Annotated[list, Vector(Float(32))] = field(default_factory=list)
    parameters: Annotated[dict, Map(String(), Int(32))] = field(default_factory=dict)


data = serialize(Config("/dev/video0", 640, Point(1, 0.5), [0.5, -1.0], {"depth": 5}))
config = deserialize(Config, data)
```

`struct_type(cls)` returns the cached `Struct` field type for a dataclass. `type_info(cls_or_field_type)` returns its type signature as bytes. `version_of(cls)` returns the CRC-32 of that signature.

## Wire types

Every wire type is a `FieldType`. It provides `encode(value, options)` and `decode(data, options)` for standalone use, plus `write`, `read`, `default` and `type_info`.

- `alpacawire.schema`:
  - `Bool` and `Char` (a one-character string, one byte).
  - `Int(bits, signed)` with 8, 16, 32 or 64 bits, and `Float(bits)` with 32 or 64 bits.
  - `String`: UTF-8 with a length prefix.
  - `EnumField(enum_type, underlying)`.
  - `Array(element, length)`: fixed length, no count prefix.
  - `Vector(element)` and `Deque(element)`, which is read back as a `collections.deque`.
  - `Tuple(*elements)`.
  - `Duration(unit, rep)`: a `datetime.timedelta` stored as a count of `unit` ticks, milliseconds by default.
- `alpacawire.mappings`:
  - `Map(key, value)` is written in ascending key order; `UnorderedMap` is written in iteration order.
  - `Set(element)` is written de-duplicated in ascending order; `UnorderedSet` is written in iteration order.
- `alpacawire.core`: `Struct`, the field type of a dataclass.

`FieldKind` in `alpacawire.schema` lists the one-byte codes used in type signatures.

## Options

`alpacawire.options.Options` is a flag enum. Its members combine with `|`:

- `Options.BIG_ENDIAN`: write multi-byte values most significant byte first. This also writes 32 and 64 bit integers at full width instead of as varints.
- `Options.FIXED_LENGTH_ENCODING`: write 32 and 64 bit integers at full width.
- `Options.WITH_VERSION`: prefix the message with `version_of` the record's class. Reading it as a record of a different shape raises `InvalidArgumentError`.
- `Options.WITH_CHECKSUM`: append a CRC-32 of everything before it. A message whose checksum does not match raises `BadMessageError`.

```python
from alpacawire.options import Options

framing = Options.WITH_VERSION | Options.WITH_CHECKSUM
data = serialize(config, framing)
config = deserialize(Config, data, framing)
```

## Compatibility

If a message ends early, the fields it does not reach take their default values. This lets a newer record read messages written by an older one. Bytes after the last field the reader declares are ignored, so an older record can also read messages written by a newer one.

## Errors

Decoding failures raise subclasses of `alpacawire.encoding.AlpacaError`, which is itself a `ValueError`:

- `MessageSizeError`: the input is empty.
- `ValueTooLargeError`: a count, length or value needs more bytes than remain.
- `InvalidArgumentError`: the version stamp is missing or does not match, or the data is otherwise malformed.
- `BadMessageError`: the checksum does not match.

## Streams

`serialize_to_file(obj, stream, options)` writes a record to a binary stream and returns the number of bytes written. `deserialize_from_file(cls, stream, size, options)` reads `size` bytes back. Version stamps and checksums are not supported for streams; asking for them raises `InvalidArgumentError`.

## Format strings

`alpacawire.formats.unpack(format, data)` decodes a message into a list of plain Python values, guided by a compact format string. No dataclass is needed.

- Scalar codes:
  - `?` bool and `c` char.
  - `b`/`B`, `h`/`H`, `i`/`I` and `q`/`Q`: signed/unsigned integers of 8, 16, 32 and 64 bits.
  - `f` float, `d` double, `N` size and `s` string.
- Container codes: `[3i]` for an array of three, `[i]` for a vector, `{s:i}` for a map, `{i}` for a set and `(ifs)` for a tuple.

Decoding stops when the data runs out.

## Low-level helpers

`alpacawire.encoding` provides:

- `encode_varint(value, signed)` and `decode_varint(data, offset, end, signed)`.
- `Reader`: a bounded cursor.
- `crc32(data)`.
- `format_bytes(data)`: a hex dump with eight bytes per line.

## What this package does not do

It is a library only. It has no command-line tool. It writes nothing to disk except through a stream you pass it.