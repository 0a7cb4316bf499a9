"""Compact binary serialization of dataclass records, with varints, version stamps and checksums."""

__version__ = "0.1.0"

__all__ = ["core", "encoding", "formats", "mappings", "options", "schema"]