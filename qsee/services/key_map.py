from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Iterator, Mapping, MutableMapping

from qsee.services.key_order import key_order


class KeyOrderedMap(MutableMapping[str, str]):
    """A str -> str mapping iterated in ``compare_keys`` order.

    Keys live in a sorted list next to a plain dict, so prefix scans start
    with a binary search (``lower_bound``) and walk forward.
    """

    def __init__(self, pairs: Mapping[str, str] | Iterable[tuple[str, str]] | None = None) -> None:
        self._keys: list[str] = []
        self._values: dict[str, str] = {}
        if pairs:
            self.update(pairs)

    def lower_bound(self, key: str) -> int:
        """Position of the first stored key not ordered before ``key``."""
        return bisect_left(self._keys, key_order(key), key=key_order)

    def keys_from(self, key: str) -> Iterator[str]:
        for index in range(self.lower_bound(key), len(self._keys)):
            yield self._keys[index]

    def __setitem__(self, key: str, value: str) -> None:
        if key not in self._values:
            position = self.lower_bound(key)
            self._keys.insert(position, key)
        self._values[key] = value

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __delitem__(self, key: str) -> None:
        del self._values[key]
        del self._keys[self.lower_bound(key)]

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"
