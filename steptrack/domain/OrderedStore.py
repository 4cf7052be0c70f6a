"""Ordered key-value store.

Keeps values sorted by a key extracted from each value and offers the
sorted-access contract of a B+ tree (point lookup, ordered dump, inclusive
range scan) on top of a plain sorted list searched with ``bisect``.

Ordering comes from a ``less(a, b)`` comparator (natural ``<`` by default).
Two keys are considered equal when neither is less than the other, so the
comparator is the only source of key equality.
"""
from __future__ import annotations
from bisect import bisect_left, bisect_right
from functools import cmp_to_key
from typing import Callable, Generic, Iterator, List, Optional, TypeVar

K = TypeVar("K")
V = TypeVar("V")


def _natural_less(a, b) -> bool:
    return a < b


class OrderedStore(Generic[K, V]):
    def __init__(self, key_extractor: Callable[[V], K], less: Optional[Callable[[K, K], bool]] = None):
        self._key_of = key_extractor
        self._less = less or _natural_less
        self._wrap = cmp_to_key(self._compare)
        # Parallel lists: wrapped keys (for bisect) and the stored values
        self._keys: list = []
        self._values: List[V] = []

    def _compare(self, a: K, b: K) -> int:
        if self._less(a, b):
            return -1
        if self._less(b, a):
            return 1
        return 0

    def _same_key(self, a: K, b: K) -> bool:
        return not self._less(a, b) and not self._less(b, a)

    def _locate(self, key: K) -> Optional[int]:
        pos = bisect_left(self._keys, self._wrap(key))
        if pos < len(self._values) and self._same_key(key, self._key_of(self._values[pos])):
            return pos
        return None

    def insert(self, item: V) -> bool:
        '''
        Inserts item keeping key order. An item whose key is already present
        is ignored; returns whether the item was stored.
        '''
        key = self._key_of(item)
        wrapped = self._wrap(key)
        pos = bisect_left(self._keys, wrapped)
        if pos < len(self._values) and self._same_key(key, self._key_of(self._values[pos])):
            return False
        self._keys.insert(pos, wrapped)
        self._values.insert(pos, item)
        return True

    def remove(self, key: K) -> bool:
        pos = self._locate(key)
        if pos is None:
            return False
        del self._keys[pos]
        del self._values[pos]
        return True

    def search(self, key: K) -> Optional[V]:
        '''Returns the stored value (not a copy) for the key, or None.'''
        pos = self._locate(key)
        return self._values[pos] if pos is not None else None

    def contains(self, key: K) -> bool:
        return self._locate(key) is not None

    def range(self, start_key: K, end_key: K) -> List[V]:
        '''Values whose keys fall in [start_key, end_key], in key order.'''
        lo = bisect_left(self._keys, self._wrap(start_key))
        hi = bisect_right(self._keys, self._wrap(end_key))
        return self._values[lo:hi]

    def all_values(self) -> List[V]:
        '''Every stored value in key order. The list is a copy; the values are not.'''
        return list(self._values)

    def keys(self) -> List[K]:
        return [self._key_of(v) for v in self._values]

    def size(self) -> int:
        return len(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._values))

    def __contains__(self, key) -> bool:
        return self.contains(key)

    def __repr__(self) -> str:
        return f"OrderedStore(size={len(self._values)})"
