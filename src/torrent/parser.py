# src/torrent/parser.py

from src.config import INFO_KEY
from src.crypto.sha1 import sha1
from src.torrent.bencode import BencodeDecoder, DICT_START, encode, find
from src.torrent.errors import TorrentError
from src.torrent.value import BDict, BValue
from src.utils import format_hex, setup_logger


class TorrentParser:
    logger = setup_logger("TorrentParser")

    @staticmethod
    def parse_torrent_file(file_path: str) -> BDict:
        """
        Parse a .torrent file from the given path.

        Args:
            file_path (str): Path to the .torrent file

        Returns:
            BDict: the decoded root dictionary
        """
        TorrentParser.logger.info(f"Loading torrent file: {file_path}")
        try:
            with open(file_path, 'rb') as f:
                return TorrentParser._parse_root(BencodeDecoder(f))
        except OSError as e:
            raise TorrentError(f"Error reading torrent file: {e}") from e

    @staticmethod
    def parse_torrent_data(data: bytes) -> BDict:
        """
        Parse raw bencoded torrent data.

        Args:
            data (bytes): Bencoded torrent data

        Returns:
            BDict: the decoded root dictionary
        """
        return TorrentParser._parse_root(BencodeDecoder(data))

    @staticmethod
    def _parse_root(decoder: BencodeDecoder) -> BDict:
        # A torrent is a dictionary at the top level
        first = decoder.source.peek()
        if first != DICT_START:
            raise TorrentError("Torrent root must be a dictionary")
        return decoder.decode()

    @staticmethod
    def encoded_info(root: BValue, key: bytes = INFO_KEY) -> bytes:
        """Re-encode the value stored under key exactly as it appeared in the file"""
        return encode(find(root, key))

    @staticmethod
    def info_hash(root: BValue, key: bytes = INFO_KEY) -> bytes:
        """
        Compute the info hash of a decoded torrent.

        Raises:
            KeyNotFoundError: if the root has no such key
        """
        digest = sha1(TorrentParser.encoded_info(root, key))
        TorrentParser.logger.debug(f"Info hash for key {key!r}: {format_hex(digest)}")
        return digest

    @staticmethod
    def info_hash_hex(root: BValue, key: bytes = INFO_KEY) -> str:
        return format_hex(TorrentParser.info_hash(root, key))
