"""Low-level wire helpers: errors, varints, a bounded reader, CRC-32 and hex dumps."""

from __future__ import annotations

import zlib
from typing import Optional

_MAX_VARINT_BYTES = 10


class AlpacaError(ValueError):
    """Base class for all errors raised while decoding a message."""


class MessageSizeError(AlpacaError):
    """The input holds no bytes at all."""


class ValueTooLargeError(AlpacaError):
    """A length or value needs more bytes than remain in the input."""


class InvalidArgumentError(AlpacaError):
    """The input does not match what was asked for, such as a version mismatch."""


class BadMessageError(AlpacaError):
    """The trailing checksum does not match the message."""


def _encode_unsigned(value: int) -> bytes:
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_varint(value: int, signed: bool) -> bytes:
    """Encode an integer in the variable-length form.

    Unsigned values use seven bits per byte with a continuation flag.  Signed
    values start with a byte holding the sign (bit 7), a continuation flag
    (bit 6) and the low six bits of the magnitude; when the magnitude does not
    fit in six bits, the whole magnitude follows in the unsigned form.
    """
    if signed:
        magnitude = abs(value)
        first = 0x80 if value < 0 else 0x00
        if magnitude > 0x3F:
            first |= 0x40 | (magnitude & 0x3F)
            return bytes([first]) + _encode_unsigned(magnitude)
        return bytes([first | magnitude])
    if value < 0:
        raise ValueError(f"cannot encode negative value {value} as unsigned")
    return _encode_unsigned(value)


def _decode_unsigned(data: bytes, offset: int, end: int) -> tuple[int, int]:
    value = 0
    shift = 0
    for count in range(_MAX_VARINT_BYTES):
        if offset >= end:
            raise ValueTooLargeError("varint runs past the end of the input")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, offset
        shift += 7
    raise ValueTooLargeError(f"varint is longer than {_MAX_VARINT_BYTES} bytes")


def decode_varint(
    data: bytes, offset: int = 0, end: Optional[int] = None, signed: bool = False
) -> tuple[int, int]:
    """Decode a varint at ``offset``; return the value and the offset after it."""
    if end is None:
        end = len(data)
    if signed:
        if offset >= end:
            raise ValueTooLargeError("varint runs past the end of the input")
        first = data[offset]
        offset += 1
        if first & 0x40:
            magnitude, offset = _decode_unsigned(data, offset, end)
        else:
            magnitude = first & 0x3F
        return (-magnitude if first & 0x80 else magnitude), offset
    return _decode_unsigned(data, offset, end)


class Reader:
    """Cursor over a byte string that never reads past ``end``."""

    def __init__(self, data: bytes, offset: int = 0, end: Optional[int] = None):
        self.data = bytes(data)
        self.end = len(self.data) if end is None else end
        if not 0 <= self.end <= len(self.data):
            raise InvalidArgumentError(
                f"end {self.end} lies outside input of {len(self.data)} bytes"
            )
        if not 0 <= offset <= self.end:
            raise InvalidArgumentError(f"offset {offset} lies outside 0..{self.end}")
        self.offset = offset

    @property
    def remaining(self) -> int:
        """Number of bytes left before ``end``."""
        return self.end - self.offset

    @property
    def at_end(self) -> bool:
        """True once every byte up to ``end`` has been consumed."""
        return self.offset >= self.end

    def read(self, count: int) -> bytes:
        """Consume and return exactly ``count`` bytes."""
        if count < 0:
            raise ValueError("count must not be negative")
        if count > self.remaining:
            raise ValueTooLargeError(
                f"need {count} bytes but only {self.remaining} remain"
            )
        chunk = self.data[self.offset : self.offset + count]
        self.offset += count
        return chunk

    def read_varint(self, signed: bool) -> int:
        """Consume and return one varint."""
        value, self.offset = decode_varint(self.data, self.offset, self.end, signed)
        return value


def crc32(data: bytes) -> int:
    """Standard CRC-32 (IEEE 802.3) of ``data`` as an unsigned 32-bit integer."""
    return zlib.crc32(bytes(data)) & 0xFFFFFFFF


def format_bytes(data: bytes) -> str:
    """Render bytes as a hex dump, eight bytes per line."""
    parts = [f"bytes[{len(data)}]:\n  "]
    for position, byte in enumerate(bytes(data), start=1):
        parts.append(f"0x{byte:02x} ")
        if position % 8 == 0:
            parts.append("\n  ")
    parts.append("\n")
    return "".join(parts)