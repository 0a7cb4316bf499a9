"""Field types for key/value maps and sets of unique values."""

from __future__ import annotations

import dataclasses
from typing import Any, Iterable, Optional

from .encoding import Reader, ValueTooLargeError
from .options import Options
from .schema import FieldKind, FieldType, Int

_SIZE = Int(64, signed=False)


def _read_count(reader: Reader, options: Options, what: str) -> int:
    size = _SIZE.read(reader, options)
    if size > reader.remaining:
        raise ValueTooLargeError(
            f"{what} of {size} entries announced but only {reader.remaining} bytes remain"
        )
    return size


@dataclasses.dataclass(frozen=True)
class Map(FieldType):
    """A map preceded by its entry count, written in ascending key order."""

    key: FieldType
    value: FieldType

    kind = FieldKind.MAP
    _ordered = True

    def _entries(self, value: Any) -> Iterable[tuple[Any, Any]]:
        items = list(value.items())
        if self._ordered:
            items.sort(key=lambda entry: entry[0])
        return items

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        entries = self._entries(value)
        _SIZE.write(len(entries), out, options)
        for key, item in entries:
            self.key.write(key, out, options)
            self.value.write(item, out, options)

    def read(self, reader: Reader, options: Options = Options.NONE) -> dict:
        """Read one map, or an empty map when no bytes remain."""
        return super().read(reader, options)

    def _read_value(self, reader: Reader, options: Options) -> dict:
        size = _read_count(reader, options, "map")
        result: dict = {}
        for _ in range(size):
            key = self.key.read(reader, options)
            item = self.value.read(reader, options)
            # The first occurrence of a key wins, as with an insert.
            result.setdefault(key, item)
        return result

    def default(self) -> dict:
        return {}

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        self.key.type_info(out, visited)
        self.value.type_info(out, visited)


@dataclasses.dataclass(frozen=True)
class UnorderedMap(Map):
    """A map written in its own iteration order."""

    kind = FieldKind.UNORDERED_MAP
    _ordered = False


@dataclasses.dataclass(frozen=True)
class Set(FieldType):
    """A set of unique values preceded by their count, written in ascending order."""

    element: FieldType

    kind = FieldKind.SET
    _ordered = True

    def write(self, value: Any, out: bytearray, options: Options = Options.NONE) -> None:
        unique = list(dict.fromkeys(value))
        if self._ordered:
            unique.sort()
        _SIZE.write(len(unique), out, options)
        for item in unique:
            self.element.write(item, out, options)

    def read(self, reader: Reader, options: Options = Options.NONE) -> set:
        """Read one set, or an empty set when no bytes remain."""
        return super().read(reader, options)

    def _read_value(self, reader: Reader, options: Options) -> set:
        size = _read_count(reader, options, "set")
        return {self.element.read(reader, options) for _ in range(size)}

    def default(self) -> set:
        return set()

    def type_info(self, out: bytearray, visited: Optional[dict] = None) -> None:
        out.append(self.kind)
        self.element.type_info(out, visited)


@dataclasses.dataclass(frozen=True)
class UnorderedSet(Set):
    """A set written in its own iteration order."""

    kind = FieldKind.UNORDERED_SET
    _ordered = False