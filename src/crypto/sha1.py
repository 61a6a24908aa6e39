# src/crypto/sha1.py
from typing import List

from src.torrent.errors import AllocationError

BLOCK_SIZE = 64 # bytes
DIGEST_SIZE = 20 # bytes
MASK32 = 0xFFFFFFFF

INITIAL_STATE = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
ROUND_CONSTANTS = (0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC, 0xCA62C1D6)


def rotl32(value: int, count: int) -> int:
    """Rotate a 32-bit word left by count bits"""
    count &= 31
    return ((value << count) | (value >> (32 - count))) & MASK32


def pad_message(message: bytes) -> bytes:
    """
    Apply SHA-1 padding.

    Appends 0x80, zero bytes until the length is 56 mod 64, then the
    original length in bits as a 64-bit big-endian integer.

    Raises:
        AllocationError: if the padded buffer cannot be allocated
    """
    bit_length = (len(message) * 8) & 0xFFFFFFFFFFFFFFFF
    zeros = (55 - len(message)) % BLOCK_SIZE
    try:
        padded = bytearray(len(message) + 1 + zeros + 8)
    except MemoryError as e:
        raise AllocationError(f"Cannot allocate padding for {len(message)} byte message") from e

    padded[:len(message)] = message
    padded[len(message)] = 0x80
    padded[-8:] = bit_length.to_bytes(8, 'big')
    return bytes(padded)


def compress(state: List[int], block: bytes) -> List[int]:
    """Run the 80 rounds for one 64-byte block and return the new state"""
    words = [int.from_bytes(block[i:i + 4], 'big') for i in range(0, BLOCK_SIZE, 4)]
    for j in range(16, 80):
        words.append(rotl32(words[j - 3] ^ words[j - 8] ^ words[j - 14] ^ words[j - 16], 1))

    a, b, c, d, e = state
    for j in range(80):
        if j < 20:
            f = (b & c) | (~b & d)
        elif j < 40:
            f = b ^ c ^ d
        elif j < 60:
            f = (b & c) | (b & d) | (c & d)
        else:
            f = b ^ c ^ d
        k = ROUND_CONSTANTS[j // 20]

        temp = (rotl32(a, 5) + f + e + k + words[j]) & MASK32
        e = d
        d = c
        c = rotl32(b, 30)
        b = a
        a = temp

    return [(h + v) & MASK32 for h, v in zip(state, (a, b, c, d, e))]


class Sha1:
    """Incremental SHA-1, used like the hashlib objects.

    Each instance owns its state, so separate instances can be used from
    separate threads.
    """

    name = 'sha1'
    digest_size = DIGEST_SIZE
    block_size = BLOCK_SIZE

    def __init__(self, data: bytes = b''):
        self._state = list(INITIAL_STATE)
        self._buffer = b''
        self._length = 0
        if data:
            self.update(data)

    def update(self, data: bytes) -> None:
        """Feed more bytes; complete blocks are compressed right away."""
        data = bytes(data)
        self._length += len(data)
        buffer = self._buffer + data

        full = len(buffer) - len(buffer) % BLOCK_SIZE
        for i in range(0, full, BLOCK_SIZE):
            self._state = compress(self._state, buffer[i:i + BLOCK_SIZE])
        self._buffer = buffer[full:]

    def digest(self) -> bytes:
        """Return the 20-byte digest without changing the running state."""
        tail = pad_message(self._buffer)
        # Padding must carry the bit length of everything fed so far
        tail = tail[:-8] + ((self._length * 8) & 0xFFFFFFFFFFFFFFFF).to_bytes(8, 'big')

        state = list(self._state)
        for i in range(0, len(tail), BLOCK_SIZE):
            state = compress(state, tail[i:i + BLOCK_SIZE])
        return b''.join(word.to_bytes(4, 'big') for word in state)

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self) -> 'Sha1':
        clone = Sha1()
        clone._state = list(self._state)
        clone._buffer = self._buffer
        clone._length = self._length
        return clone


def sha1(message: bytes) -> bytes:
    """One-shot SHA-1 digest of message"""
    return Sha1(message).digest()
