# src/torrent/source.py
import io
from typing import BinaryIO, Optional, Union


class ByteSource:
    """Byte reader with a single byte of push-back.

    Wraps either an in-memory buffer or a readable binary stream. This is the
    only I/O the decoder relies on.
    """

    def __init__(self, source: Union[bytes, bytearray, memoryview, BinaryIO]):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        if not hasattr(source, 'read'):
            raise TypeError(f"Expected bytes or a binary stream, not {type(source).__name__}")

        self.stream = source
        self.position = 0
        self._pushed: Optional[int] = None

    def read_byte(self) -> Optional[int]:
        """Return the next byte as an int, or None at end of input."""
        if self._pushed is not None:
            byte, self._pushed = self._pushed, None
            self.position += 1
            return byte

        chunk = self.stream.read(1)
        if not chunk:
            return None
        self.position += 1
        return chunk[0]

    def unread(self, byte: int) -> None:
        """Push one byte back so the next read returns it."""
        if self._pushed is not None:
            raise RuntimeError("Only one byte of push-back is supported")
        self._pushed = byte
        self.position -= 1

    def peek(self) -> Optional[int]:
        byte = self.read_byte()
        if byte is not None:
            self.unread(byte)
        return byte

    def read(self, size: int) -> bytes:
        """Read up to size bytes; fewer are returned only at end of input."""
        if size <= 0:
            return b''

        parts = []
        if self._pushed is not None:
            parts.append(bytes([self._pushed]))
            self._pushed = None
            size -= 1

        while size > 0:
            chunk = self.stream.read(size)
            if not chunk:
                break
            parts.append(chunk)
            size -= len(chunk)

        data = b''.join(parts)
        self.position += len(data)
        return data

    def at_eof(self) -> bool:
        return self.peek() is None
