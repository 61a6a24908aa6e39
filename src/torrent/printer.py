# src/torrent/printer.py
from typing import List

from src.config import PRINT_INDENT, PRINT_BLOB_THRESHOLD
from src.torrent.value import BValue, BString, BInteger, BList, BDict


def _text(data: bytes) -> str:
    return data.decode('utf-8', errors='backslashreplace')


def format_tree(value: BValue, indent: int = 0) -> List[str]:
    """
    Render a tree as indented lines for debugging.

    Args:
        value(BValue): the tree to render
        indent(int): leading spaces for the first line

    Returns:
        List[str]: one entry per output line
    """
    pad = ' ' * indent
    if isinstance(value, BString):
        if len(value) >= PRINT_BLOB_THRESHOLD: # assume binary blob
            return [f"{pad}<blob>...</blob>"]
        return [f"{pad}String: {len(value)}, {_text(value.data)}"]

    if isinstance(value, BInteger):
        return [f"{pad}Integer: {value.value}"]

    if isinstance(value, BList):
        lines = [f"{pad}List:"]
        for item in value:
            lines.extend(format_tree(item, indent + PRINT_INDENT))
        return lines

    if isinstance(value, BDict):
        lines = [f"{pad}Dict:"]
        key_pad = ' ' * (indent + PRINT_INDENT)
        for key, item in value.pairs:
            lines.append(f"{key_pad}{_text(key.data)}:")
            lines.extend(format_tree(item, indent + 2 * PRINT_INDENT))
        return lines

    raise TypeError(f"Not a bencode value: {type(value).__name__}")


def print_tree(value: BValue, indent: int = 0) -> None:
    print('\n'.join(format_tree(value, indent)))
