"""Ordered filename sequences with a sorted lookup index."""

from __future__ import annotations

import os
from bisect import bisect_left
from typing import Iterable, Iterator, Sequence


def byte_order(name: str) -> bytes:
    """Return the sort key that orders names by their on-disk bytes."""
    return os.fsencode(name)


class NameList(Sequence[str]):
    """Ordered sequence of filenames.

    Insertion order is the alignment key between an original list and its
    edited counterpart. The sorted view exists only for membership and
    adjacency checks and is rebuilt lazily after every mutation.
    """

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: list[str] = []
        self._index: tuple[list[str], list[bytes]] | None = None
        for name in names:
            self.add(name)

    def add(self, name: str) -> None:
        """Append a name, keeping insertion order.

        Raises:
            ValueError: If the name is empty.
        """
        if not name:
            raise ValueError("Filenames cannot be empty.")
        self._names.append(name)
        self._index = None

    def sorted_view(self) -> list[str]:
        """Return a byte-lexicographically sorted copy of the names."""
        names, _ = self._sorted_index()
        return list(names)

    def contains(self, name: str) -> bool:
        """Binary-search the sorted view for ``name``."""
        _, keys = self._sorted_index()
        key = byte_order(name)
        index = bisect_left(keys, key)
        return index < len(keys) and keys[index] == key

    def sorted(self) -> "NameList":
        """Return a new list whose primary order is the sorted order."""
        names, _ = self._sorted_index()
        return NameList(names)

    def unique(self) -> "NameList":
        """Return a new list without repeated names, keeping first occurrences."""
        return NameList(dict.fromkeys(self._names))

    def _sorted_index(self) -> tuple[list[str], list[bytes]]:
        if self._index is None:
            ordered = sorted(self._names, key=byte_order)
            self._index = (ordered, [byte_order(name) for name in ordered])
        return self._index

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __getitem__(self, index):  # type: ignore[override]
        return self._names[index]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NameList):
            return self._names == other._names
        if isinstance(other, (list, tuple)):
            return self._names == list(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"NameList({self._names!r})"


__all__ = ["NameList", "byte_order"]
