# src/torrent/errors.py
from typing import Optional


class BencodeError(ValueError):
    """Base class for bencode codec errors."""


class MalformedInputError(BencodeError):
    """Input does not follow the bencode grammar."""

    def __init__(self, message: str, position: Optional[int] = None):
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)
        self.position = position


class KeyNotFoundError(KeyError):
    """A dictionary lookup found no matching key."""

    def __init__(self, key: bytes):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Key not found: {self.key!r}"


class AllocationError(MemoryError):
    """Memory ran out while decoding, encoding or hashing."""


class TorrentError(ValueError):
    """A torrent file could not be read or lacks required structure."""
