# src/torrent/value.py
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from src.config import BENCODE_INT_MIN, BENCODE_INT_MAX
from src.torrent.errors import KeyNotFoundError


class BValue:
    """Base class for the four bencode element types.

    Nodes are immutable once built and each node is owned by exactly one
    parent, so a decoded document is always a tree.
    """

    __slots__ = ('_owned',)


def _adopt(children: List[BValue]) -> None:
    """Mark children as owned by a new container; a node may have only one parent."""
    seen = set()
    for child in children:
        if getattr(child, '_owned', False) or id(child) in seen:
            raise ValueError(f"{child!r} already belongs to a container")
        seen.add(id(child))
    for child in children:
        child._owned = True


class BString(BValue):
    """A byte string. The payload may be arbitrary binary data."""

    __slots__ = ('_data',)

    def __init__(self, data: bytes):
        if isinstance(data, str):
            data = data.encode('utf-8')
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(f"BString payload must be bytes, not {type(data).__name__}")
        self._data = bytes(data)

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def pre_delim_len(self) -> int:
        """Number of digits in the length prefix"""
        return len(str(len(self._data)))

    @property
    def post_delim_len(self) -> int:
        """Number of payload bytes"""
        return len(self._data)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BString):
            return NotImplemented
        return self._data == other._data

    def __hash__(self) -> int:
        return hash((BString, self._data))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BString({self._data!r})"


class BInteger(BValue):
    """A signed 64-bit integer together with the width it was written with."""

    __slots__ = ('_value', '_width')

    def __init__(self, value: int, width: Optional[int] = None):
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"BInteger value must be int, not {type(value).__name__}")
        if value < BENCODE_INT_MIN or value > BENCODE_INT_MAX:
            raise ValueError(f"Integer out of 64-bit range: {value}")

        canonical = len(str(value))
        if width is None:
            width = canonical
        elif width != canonical:
            # The grammar has no alternate spellings, so any other width is corrupt
            raise ValueError(f"Width {width} does not match integer {value}")

        self._value = value
        self._width = width

    @property
    def value(self) -> int:
        return self._value

    @property
    def width(self) -> int:
        """Characters used to write the integer, sign included"""
        return self._width

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BInteger):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((BInteger, self._value))

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"BInteger({self._value})"


class BList(BValue):
    """An ordered sequence of values."""

    __slots__ = ('_items',)

    def __init__(self, items: Iterable[BValue] = ()):
        items = tuple(items)
        for item in items:
            if not isinstance(item, BValue):
                raise TypeError(f"BList item must be a BValue, not {type(item).__name__}")
        _adopt(list(items))
        self._items = items

    @property
    def items(self) -> Tuple[BValue, ...]:
        return self._items

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BList):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return hash((BList, self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[BValue]:
        return iter(self._items)

    def __getitem__(self, index: int) -> BValue:
        return self._items[index]

    def __repr__(self) -> str:
        return f"BList({list(self._items)!r})"


class BDict(BValue):
    """Key/value pairs kept in the order they were parsed.

    Duplicate keys are stored as-is; lookups return the first match.
    """

    __slots__ = ('_pairs',)

    def __init__(self, pairs: Iterable[Tuple[BString, BValue]] = ()):
        checked: List[Tuple[BString, BValue]] = []
        for key, value in pairs:
            if not isinstance(key, BString):
                raise TypeError(f"BDict key must be a BString, not {type(key).__name__}")
            if not isinstance(value, BValue):
                raise TypeError(f"BDict value must be a BValue, not {type(value).__name__}")
            checked.append((key, value))
        _adopt([node for pair in checked for node in pair])
        self._pairs = tuple(checked)

    @property
    def pairs(self) -> Tuple[Tuple[BString, BValue], ...]:
        return self._pairs

    def keys(self) -> List[bytes]:
        return [key.data for key, _ in self._pairs]

    def values(self) -> List[BValue]:
        return [value for _, value in self._pairs]

    def find(self, key: bytes) -> BValue:
        """
        Return the value stored under the first matching key.

        Args:
            key(bytes): exact key bytes, compared without any normalization

        Returns:
            BValue: a reference into this tree

        Raises:
            KeyNotFoundError: if no key matches
        """
        if isinstance(key, str):
            key = key.encode('utf-8')
        for stored, value in self._pairs:
            if stored.data == key:
                return value
        raise KeyNotFoundError(key)

    def get(self, key: bytes, default: Optional[BValue] = None) -> Optional[BValue]:
        try:
            return self.find(key)
        except KeyNotFoundError:
            return default

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    def __getitem__(self, key: bytes) -> BValue:
        return self.find(key)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BDict):
            return NotImplemented
        return self._pairs == other._pairs

    def __hash__(self) -> int:
        return hash((BDict, self._pairs))

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return f"BDict({list(self._pairs)!r})"


def to_python(value: BValue) -> Any:
    """Convert a tree to bytes/int/list/dict. Later duplicate keys overwrite earlier ones."""
    if isinstance(value, BString):
        return value.data
    if isinstance(value, BInteger):
        return value.value
    if isinstance(value, BList):
        return [to_python(item) for item in value]
    if isinstance(value, BDict):
        return {key.data: to_python(item) for key, item in value.pairs}
    raise TypeError(f"Not a bencode value: {type(value).__name__}")


def from_python(obj: Any, sort_keys: bool = False) -> BValue:
    """
    Build a tree from plain Python objects.

    Args:
        obj: bytes, str (stored as UTF-8), int, list/tuple, dict, or an existing BValue
        sort_keys(bool): order dict keys by their bytes instead of insertion order

    Returns:
        BValue: the new tree; existing BValue nodes are reused untouched
    """
    if isinstance(obj, BValue):
        return obj
    if isinstance(obj, (bytes, bytearray, memoryview, str)):
        return BString(obj)
    if isinstance(obj, bool):
        raise TypeError("Unsupported type for bencode: bool")
    if isinstance(obj, int):
        return BInteger(obj)
    if isinstance(obj, (list, tuple)):
        return BList(from_python(item, sort_keys) for item in obj)
    if isinstance(obj, dict):
        pairs = [(BString(key), from_python(item, sort_keys)) for key, item in obj.items()]
        if sort_keys:
            pairs.sort(key=lambda pair: pair[0].data)
        return BDict(pairs)
    raise TypeError(f"Unsupported type for bencode: {type(obj)}")
