# src/torrent/bencode.py
from typing import Any, BinaryIO, Union

from src.config import (
    BENCODE_MAX_LOOKAHEAD, BENCODE_MAX_STRING_SIZE, BENCODE_MAX_DEPTH,
    BENCODE_INT_MIN, BENCODE_INT_MAX,
    BENCODE_DICT_START, BENCODE_LIST_START, BENCODE_INT_START,
    BENCODE_DELIMITER, BENCODE_TERMINATOR,
)
from src.torrent.errors import AllocationError, MalformedInputError
from src.torrent.source import ByteSource
from src.torrent.value import BValue, BString, BInteger, BList, BDict, from_python
from src.utils import setup_logger

logger = setup_logger("Bencode")

DICT_START = BENCODE_DICT_START[0]
LIST_START = BENCODE_LIST_START[0]
INT_START = BENCODE_INT_START[0]
DELIMITER = BENCODE_DELIMITER[0]
TERMINATOR = BENCODE_TERMINATOR[0]
MINUS = ord('-')
ZERO = ord('0')
NINE = ord('9')


def _is_digit(byte: int) -> bool:
    return ZERO <= byte <= NINE


class BencodeDecoder:
    def __init__(self, source: Union[bytes, BinaryIO, ByteSource]):
        self.source = source if isinstance(source, ByteSource) else ByteSource(source)
        self.depth = 0

    def decode(self) -> BValue:
        """Main decode function that peeks at the first byte and dispatches to appropriate handler"""
        byte = self.source.peek()
        if byte is None:
            raise MalformedInputError("Unexpected end of input", self.source.position)

        if byte == DICT_START:
            return self._decode_dict()
        elif byte == LIST_START:
            return self._decode_list()
        elif byte == INT_START:
            return self._decode_int()
        elif _is_digit(byte):
            return self._decode_string()
        else:
            raise MalformedInputError(f"Invalid bencode format: {chr(byte)!r}", self.source.position)

    def _expect(self, marker: int) -> None:
        byte = self.source.read_byte()
        if byte != marker:
            raise MalformedInputError(f"Expected {chr(marker)!r}", self.source.position)

    def _enter(self) -> None:
        self.depth += 1
        if self.depth > BENCODE_MAX_DEPTH:
            raise MalformedInputError(f"Nesting deeper than {BENCODE_MAX_DEPTH}", self.source.position)

    def _read_until(self, stop: int, what: str, digits_only: bool = False) -> bytes:
        """Collect bytes up to stop, which is consumed but not returned.

        At most BENCODE_MAX_LOOKAHEAD - 1 bytes are read looking for it.
        """
        run = bytearray()
        for _ in range(BENCODE_MAX_LOOKAHEAD - 1):
            byte = self.source.read_byte()
            if byte is None:
                raise MalformedInputError(f"Unterminated {what}", self.source.position)
            if byte == stop:
                return bytes(run)
            if digits_only and not _is_digit(byte):
                raise MalformedInputError(f"Non-digit {chr(byte)!r} in {what}", self.source.position - 1)
            run.append(byte)
        raise MalformedInputError(f"{what.capitalize()} longer than lookahead budget", self.source.position)

    def _decode_dict(self) -> BDict:
        """Decode a bencoded dictionary"""
        self._expect(DICT_START)
        self._enter()
        pairs = []

        while True:
            byte = self.source.read_byte()
            if byte is None:
                raise MalformedInputError("Unterminated dictionary", self.source.position)
            if byte == TERMINATOR:
                break
            self.source.unread(byte)

            # Keys must be strings
            key = self._decode_string()
            value = self.decode()
            pairs.append((key, value))

        self.depth -= 1
        return BDict(pairs)

    def _decode_list(self) -> BList:
        """Decode a bencoded list"""
        self._expect(LIST_START)
        self._enter()
        items = []

        while True:
            byte = self.source.read_byte()
            if byte is None:
                raise MalformedInputError("Unterminated list", self.source.position)
            if byte == TERMINATOR:
                break
            self.source.unread(byte)

            items.append(self.decode())

        self.depth -= 1
        return BList(items)

    def _decode_int(self) -> BInteger:
        """Decode a bencoded integer"""
        self._expect(INT_START)
        start = self.source.position
        num = self._read_until(TERMINATOR, "integer")

        digits = num[1:] if num[:1] == b'-' else num
        if not digits or not all(_is_digit(b) for b in digits):
            raise MalformedInputError(f"Invalid integer format: {num!r}", start)
        if digits[0] == ZERO and (len(digits) > 1 or num[0] == MINUS):
            raise MalformedInputError(f"Invalid integer format: {num!r}", start)

        value = int(num)
        if value < BENCODE_INT_MIN or value > BENCODE_INT_MAX:
            raise MalformedInputError(f"Integer out of 64-bit range: {num!r}", start)

        return BInteger(value, width=len(num))

    def _decode_string(self) -> BString:
        """Decode a bencoded string"""
        start = self.source.position
        length_str = self._read_until(DELIMITER, "string length", digits_only=True)

        if not length_str:
            raise MalformedInputError(f"Invalid string length: {length_str!r}", start)
        if length_str[0] == ZERO and len(length_str) > 1:
            raise MalformedInputError(f"Invalid string length: {length_str!r}", start)

        length = int(length_str)
        if length > BENCODE_MAX_STRING_SIZE:
            raise MalformedInputError(f"String length {length} exceeds maximum {BENCODE_MAX_STRING_SIZE}", start)

        try:
            data = self.source.read(length)
        except MemoryError as e:
            raise AllocationError(f"Cannot allocate {length} bytes for string") from e
        if len(data) != length:
            raise MalformedInputError("String exceeds data bounds", self.source.position)

        return BString(data)


class BencodeEncoder:
    """Two-pass encoder: measure the tree, then write it into one exact-size buffer."""

    @staticmethod
    def encode(value: BValue) -> bytes:
        length = BencodeEncoder.encoded_length(value)
        try:
            buffer = bytearray(length)
        except MemoryError as e:
            raise AllocationError(f"Cannot allocate {length} bytes for encoding") from e

        end = BencodeEncoder.encode_into(value, buffer, 0)
        if end != length:
            raise RuntimeError(f"Encoder wrote {end} bytes, expected {length}")
        return bytes(buffer)

    @staticmethod
    def encoded_length(value: BValue) -> int:
        """Exact number of bytes encode() will produce for value"""
        if isinstance(value, BString):
            return value.pre_delim_len + 1 + value.post_delim_len
        elif isinstance(value, BInteger):
            return value.width + 2
        elif isinstance(value, BList):
            return 2 + sum(BencodeEncoder.encoded_length(item) for item in value)
        elif isinstance(value, BDict):
            return 2 + sum(
                BencodeEncoder.encoded_length(key) + BencodeEncoder.encoded_length(item)
                for key, item in value.pairs
            )
        else:
            raise TypeError(f"Unsupported type for bencode: {type(value)}")

    @staticmethod
    def encode_into(value: BValue, buffer: bytearray, offset: int) -> int:
        """
        Write value into buffer starting at offset.

        Args:
            value(BValue): the tree to write
            buffer(bytearray): destination, already sized by encoded_length()
            offset(int): where to start writing

        Returns:
            int: offset just past the written bytes
        """
        if isinstance(value, BString):
            return BencodeEncoder._encode_string(value, buffer, offset)
        elif isinstance(value, BInteger):
            return BencodeEncoder._encode_int(value, buffer, offset)
        elif isinstance(value, BList):
            return BencodeEncoder._encode_list(value, buffer, offset)
        elif isinstance(value, BDict):
            return BencodeEncoder._encode_dict(value, buffer, offset)
        else:
            raise TypeError(f"Unsupported type for bencode: {type(value)}")

    @staticmethod
    def _put(buffer: bytearray, offset: int, data: bytes) -> int:
        end = offset + len(data)
        if buffer is None or end > len(buffer):
            raise BufferError(f"Encode buffer too small: need {end} bytes")
        buffer[offset:end] = data
        return end

    @staticmethod
    def _encode_string(value: BString, buffer: bytearray, offset: int) -> int:
        prefix = str(value.post_delim_len).encode('ascii')
        offset = BencodeEncoder._put(buffer, offset, prefix + BENCODE_DELIMITER)
        return BencodeEncoder._put(buffer, offset, value.data)

    @staticmethod
    def _encode_int(value: BInteger, buffer: bytearray, offset: int) -> int:
        text = str(value.value).encode('ascii')
        return BencodeEncoder._put(buffer, offset, BENCODE_INT_START + text + BENCODE_TERMINATOR)

    @staticmethod
    def _encode_list(value: BList, buffer: bytearray, offset: int) -> int:
        offset = BencodeEncoder._put(buffer, offset, BENCODE_LIST_START)
        for item in value:
            offset = BencodeEncoder.encode_into(item, buffer, offset)
        return BencodeEncoder._put(buffer, offset, BENCODE_TERMINATOR)

    @staticmethod
    def _encode_dict(value: BDict, buffer: bytearray, offset: int) -> int:
        # Pairs are written in stored order; sorting is the producer's job
        offset = BencodeEncoder._put(buffer, offset, BENCODE_DICT_START)
        for key, item in value.pairs:
            offset = BencodeEncoder._encode_string(key, buffer, offset)
            offset = BencodeEncoder.encode_into(item, buffer, offset)
        return BencodeEncoder._put(buffer, offset, BENCODE_TERMINATOR)


def decode(source: Union[bytes, BinaryIO, ByteSource]) -> BValue:
    """
    Decode one bencode element.

    Streams are left positioned just past the element. When given a bytes
    object the element must span the whole buffer.

    Raises:
        MalformedInputError: on any grammar violation
    """
    in_memory = isinstance(source, (bytes, bytearray, memoryview))
    decoder = BencodeDecoder(source)
    try:
        value = decoder.decode()
        if in_memory and not decoder.source.at_eof():
            raise MalformedInputError("Trailing data after element", decoder.source.position)
    except MalformedInputError as e:
        logger.debug(f"Decode failed: {e}")
        raise
    return value


def encode(data: Any) -> bytes:
    """Helper function to encode a tree (or plain Python data) to bencode format.

    Trees are written exactly as stored. Plain Python dicts get sorted keys.
    """
    return BencodeEncoder.encode(from_python(data, sort_keys=True))


def encoded_length(value: BValue) -> int:
    return BencodeEncoder.encoded_length(value)


def find(dict_value: BValue, key: bytes) -> BValue:
    """First value stored under key in a dictionary; raises KeyNotFoundError otherwise"""
    if not isinstance(dict_value, BDict):
        raise TypeError(f"Key lookup needs a BDict, not {type(dict_value).__name__}")
    return dict_value.find(key)
