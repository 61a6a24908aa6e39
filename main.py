#!/usr/bin/env python3
# main.py
import os
import sys
import logging
import argparse
from typing import List, Optional

from src.torrent.parser import TorrentParser
from src.torrent.printer import print_tree
from src.torrent.errors import AllocationError, BencodeError, KeyNotFoundError, TorrentError
from src.crypto.sha1 import sha1
from src.utils import configure_logging, format_hex
from src import config


def load_torrent(file_path: str):
    """Load and parse a torrent file"""
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Torrent file not found: {file_path}")
    return TorrentParser.parse_torrent_file(file_path)


def write_output(path: str, data: bytes) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    logging.info(f"Wrote {len(data)} encoded bytes to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Compute the info hash of a torrent file')
    parser.add_argument('torrent_file', help='Path to the .torrent file')
    parser.add_argument(
        '--key', default=config.INFO_KEY.decode('ascii'),
        help='Top-level key whose value is hashed (default: info)'
    )
    parser.add_argument(
        '--dump', action='store_true',
        help='Print the decoded torrent tree'
    )
    parser.add_argument(
        '--output', nargs='?', const=config.DEFAULT_OUTPUT_PATH, default=None,
        help=f'Write the re-encoded value to a file (default path: {config.DEFAULT_OUTPUT_PATH})'
    )
    parser.add_argument(
        '--log-level', default=config.LOG_LEVEL,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        type=str.upper, help='Logging level'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    key = args.key.encode('utf-8')

    try:
        torrent = load_torrent(args.torrent_file)
        if args.dump:
            print_tree(torrent)

        encoded = TorrentParser.encoded_info(torrent, key)
        if args.output:
            write_output(args.output, encoded)

        print(format_hex(sha1(encoded)))
    except FileNotFoundError as e:
        logging.error(str(e))
        return 1
    except KeyNotFoundError as e:
        logging.error(str(e))
        return 1
    except (BencodeError, TorrentError) as e:
        logging.error(f"Invalid torrent: {e}")
        return 1
    except AllocationError as e:
        logging.error(f"Out of memory: {e}")
        return 1
    except OSError as e:
        logging.error(f"Cannot write output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
