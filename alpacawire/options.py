"""Flags that select the byte order, integer width and framing of a message."""

from __future__ import annotations

import enum
from typing import Literal


class Options(enum.Flag):
    """Serialization options; combine them with ``|``."""

    NONE = 0
    BIG_ENDIAN = 1
    FIXED_LENGTH_ENCODING = 2
    WITH_VERSION = 4
    WITH_CHECKSUM = 8

    def byte_order(self) -> Literal["little", "big"]:
        """Byte order used for multi-byte values."""
        return "big" if Options.BIG_ENDIAN in self else "little"

    def fixed_width_integers(self) -> bool:
        """Whether 32/64-bit integers are written at full width instead of as varints.

        Big-endian output always uses full width, as does an explicit request
        for fixed length encoding.
        """
        return bool(self & (Options.BIG_ENDIAN | Options.FIXED_LENGTH_ENCODING))