from __future__ import annotations

from collections.abc import ItemsView, Iterator, Mapping
from typing import Any, Callable, Literal

from qsee.domain.models import ParseReport
from qsee.services.key_map import KeyOrderedMap
from qsee.services.key_order import extract_index


DataKind = type[str] | type[int] | type[bool] | type[float] | Literal["size"]

TRUE_TOKENS = frozenset({"TRUE", "ON"})
FALSE_TOKENS = frozenset({"FALSE", "OFF"})


class InputLookupError(LookupError):
    """Raised when a typed query cannot be answered from the parsed input."""


class InputKeyError(InputLookupError, KeyError):
    """Raised when the queried key is not stored."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InputValueError(InputLookupError, ValueError):
    """Raised when a stored value cannot be coerced to the requested type."""


def _to_bool(raw: str) -> bool:
    if raw in TRUE_TOKENS:
        return True
    if raw in FALSE_TOKENS:
        return False
    raise ValueError(f"Invalid boolean input: {raw}")


def _to_size(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise ValueError(f"Invalid size input: {raw}")
    return value


_CONVERTERS: dict[Any, Callable[[str], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: _to_bool,
    "size": _to_size,
}


class InputStore:
    """Parsed entries keyed by fully qualified name, e.g. ``QM.REFERENCE``.

    Keys are kept in ``compare_keys`` order so a key and everything nested
    under it are contiguous; section and list queries scan forward from a
    ``lower_bound`` on the prefix.
    """

    def __init__(self, entries: Mapping[str, str] | None = None) -> None:
        self._dict = KeyOrderedMap(entries)

    # ------------------------------------------------------------------
    # Construction (used while parsing)
    # ------------------------------------------------------------------
    def add_data(
        self,
        key: str,
        value: str,
        report: ParseReport | None = None,
        line: int | None = None,
    ) -> None:
        if key in self._dict and report is not None:
            report.add(
                "DUPLICATE_KEY",
                f"Key {key} already exists in the parsed input. Overwriting.",
                line=line,
                key=key,
            )
        self._dict[key] = value

    def merge_section(
        self,
        subsection: "InputStore | Mapping[str, str]",
        prefix: str = "",
        report: ParseReport | None = None,
    ) -> None:
        for key, value in subsection.items():
            self.add_data(f"{prefix}.{key}" if prefix else key, value, report)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def _keys_with_prefix(self, prefix: str) -> Iterator[str]:
        for key in self._dict.keys_from(prefix):
            if not key.startswith(prefix):
                break
            yield key

    def contains_data(self, key: str) -> bool:
        return key in self._dict

    def contains_section(self, key: str) -> bool:
        return next(self._keys_with_prefix(key + "."), None) is not None

    def contains_list(self, key: str) -> bool:
        return next(self._keys_with_prefix(key + "["), None) is not None

    def get_list_size(self, key: str) -> int:
        if not self.contains_list(key):
            return 0
        start = len(key) + 1
        return 1 + max(extract_index(item, start) for item in self._keys_with_prefix(key + "["))

    def get_data_in_section(self, section: str) -> list[str]:
        prefix = section + "."
        names: dict[str, None] = {}
        for key in self._keys_with_prefix(prefix):
            child = key[len(prefix):].split(".", 1)[0]
            if child:
                names.setdefault(child, None)
        return list(names)

    def get_section(self, section: str) -> KeyOrderedMap:
        prefix = section + "."
        return KeyOrderedMap(
            (key[len(prefix):], self._dict[key]) for key in self._keys_with_prefix(prefix)
        )

    def get_data(self, key: str, kind: DataKind = str) -> Any:
        """Stored value of ``key`` coerced to ``kind``.

        ``kind`` is one of ``str``, ``int``, ``float``, ``bool`` or ``"size"``
        (a non-negative int). Booleans accept only ``TRUE``/``ON`` and
        ``FALSE``/``OFF``.
        """
        converter = _CONVERTERS.get(kind)
        if converter is None:
            raise TypeError(f"Unsupported data kind: {kind!r}")
        try:
            raw = self._dict[key]
        except KeyError:
            raise InputKeyError(f"Data {key} not found") from None
        try:
            return converter(raw)
        except ValueError as exc:
            raise InputValueError(f"Data {key} = {raw!r} is not a valid {_kind_name(kind)}") from exc

    def get(self, key: str, kind: DataKind = str, default: Any = None) -> Any:
        if key not in self._dict:
            return default
        return self.get_data(key, kind)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def items(self) -> ItemsView[str, str]:
        return self._dict.items()

    def keys(self) -> list[str]:
        return list(self._dict)

    def __iter__(self) -> Iterator[str]:
        return iter(self._dict)

    def __len__(self) -> int:
        return len(self._dict)

    def __contains__(self, key: object) -> bool:
        return key in self._dict

    def __repr__(self) -> str:
        return f"InputStore({len(self)} entries)"


def _kind_name(kind: DataKind) -> str:
    return kind if isinstance(kind, str) else kind.__name__
