import hashlib
import random
import unittest
from unittest.mock import patch
from src.crypto.sha1 import Sha1, sha1, pad_message, rotl32, compress, INITIAL_STATE
from src.torrent.errors import AllocationError

class TestSha1KnownAnswers(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(sha1(b'').hex(), 'da39a3ee5e6b4b0d3255bfef95601890afd80709')

    def test_abc(self):
        self.assertEqual(sha1(b'abc').hex(), 'a9993e364706816aba3e25717850c26c9cd0d89d')

    def test_pangram(self):
        message = b'The quick brown fox jumps over the lazy dog.'
        self.assertEqual(len(message), 44)
        self.assertEqual(sha1(message).hex(), '408d94384216f890ff7a0c3528e8bed1e0b01621')

    def test_pangram_without_period(self):
        self.assertEqual(
            sha1(b'The quick brown fox jumps over the lazy dog').hex(),
            '2fd4e1c67a2d28fced849ee1bb76e7391b93eb12'
        )

    def test_two_block_message(self):
        message = b'abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq'
        self.assertEqual(sha1(message).hex(), '84983e441c3bd26ebaae4aa1f95129e5e54670f1')

    def test_digest_size(self):
        self.assertEqual(len(sha1(b'x' * 1000)), 20)


class TestSha1AgainstHashlib(unittest.TestCase):
    def test_padding_boundaries(self):
        # Lengths around the 55/56/64 byte padding edges
        for length in (1, 54, 55, 56, 57, 63, 64, 65, 119, 120, 128, 200):
            with self.subTest(length=length):
                message = bytes((i * 7) & 0xFF for i in range(length))
                self.assertEqual(sha1(message), hashlib.sha1(message).digest())

    def test_random_messages(self):
        rng = random.Random(1234)
        for _ in range(20):
            message = bytes(rng.getrandbits(8) for _ in range(rng.randint(0, 500)))
            self.assertEqual(sha1(message), hashlib.sha1(message).digest())


class TestSha1Incremental(unittest.TestCase):
    def test_update_in_pieces(self):
        message = bytes(range(256)) * 3
        hasher = Sha1()
        for start in range(0, len(message), 37):
            hasher.update(message[start:start + 37])
        self.assertEqual(hasher.digest(), sha1(message))
        self.assertEqual(hasher.hexdigest(), hashlib.sha1(message).hexdigest())

    def test_digest_does_not_finalize(self):
        hasher = Sha1(b'ab')
        first = hasher.digest()
        self.assertEqual(first, hasher.digest())
        hasher.update(b'c')
        self.assertEqual(hasher.digest(), sha1(b'abc'))

    def test_copy_is_independent(self):
        hasher = Sha1(b'a' * 70)
        clone = hasher.copy()
        clone.update(b'tail')
        self.assertEqual(hasher.digest(), sha1(b'a' * 70))
        self.assertEqual(clone.digest(), sha1(b'a' * 70 + b'tail'))


class TestSha1Internals(unittest.TestCase):
    def test_rotl32(self):
        self.assertEqual(rotl32(0x80000000, 1), 0x00000001)
        self.assertEqual(rotl32(0x12345678, 0), 0x12345678)
        self.assertEqual(rotl32(0x12345678, 32), 0x12345678)
        self.assertEqual(rotl32(0x00000001, 31), 0x80000000)

    def test_pad_message_lengths(self):
        for length in (0, 55, 56, 64):
            with self.subTest(length=length):
                padded = pad_message(b'a' * length)
                self.assertEqual(len(padded) % 64, 0)
                self.assertEqual(padded[length], 0x80)
                self.assertEqual(int.from_bytes(padded[-8:], 'big'), length * 8)
        self.assertEqual(len(pad_message(b'a' * 55)), 64)
        self.assertEqual(len(pad_message(b'a' * 56)), 128)

    def test_compress_wraps_to_32_bits(self):
        state = compress(list(INITIAL_STATE), pad_message(b''))
        self.assertTrue(all(0 <= word <= 0xFFFFFFFF for word in state))

    def test_allocation_failure_raises(self):
        with patch('src.crypto.sha1.bytearray', side_effect=MemoryError, create=True):
            with self.assertRaises(AllocationError):
                sha1(b'abc')
        self.assertIsInstance(AllocationError(), MemoryError)

if __name__ == '__main__':
    unittest.main()
