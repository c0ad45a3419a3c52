from __future__ import annotations

from functools import cmp_to_key


# Largest size value; malformed bracket indices sort after every real index.
INDEX_NAN = 2**64 - 1


def extract_index(key: str, start: int) -> int:
    """Read the digits of a bracket index beginning at ``start`` (just past ``[``).

    Returns ``INDEX_NAN`` when anything but a digit appears before ``]``.
    """
    number = 0
    pos = start
    while pos < len(key) and key[pos] != "]":
        char = key[pos]
        if not ("0" <= char <= "9"):
            return INDEX_NAN
        number = number * 10 + (ord(char) - ord("0"))
        pos += 1
    return number


def _bracket_end(key: str, start: int) -> int:
    end = key.find("]", start)
    return len(key) if end < 0 else end + 1


def compare_keys(a: str, b: str) -> int:
    """Order dotted/bracketed keys.

    ``.`` sorts before ``[``, which sorts before any other character, and
    bracket indices compare numerically, so ``A < A.B < A[2] < A[10] < A0``.
    """
    i = j = 0
    len_a, len_b = len(a), len(b)
    while i < len_a and j < len_b:
        char_a, char_b = a[i], b[j]
        if char_a == "[" and char_b == "[":
            index_a = extract_index(a, i + 1)
            index_b = extract_index(b, j + 1)
            if index_a != index_b:
                return -1 if index_a < index_b else 1
            end_a = _bracket_end(a, i + 1)
            end_b = _bracket_end(b, j + 1)
            # Equal numbers spelled differently ("[02]", "[2]", "[H]", "[O]").
            body_a, body_b = a[i:end_a], b[j:end_b]
            if body_a != body_b:
                return -1 if body_a < body_b else 1
            i, j = end_a, end_b
            continue
        if char_a == "[":
            return 1 if char_b == "." else -1
        if char_b == "[":
            return -1 if char_a == "." else 1
        if char_a != char_b:
            if char_a == ".":
                return -1
            if char_b == ".":
                return 1
            return -1 if char_a < char_b else 1
        i += 1
        j += 1

    if i < len_a:
        return 1
    if j < len_b:
        return -1
    return 0


def key_less(a: str, b: str) -> bool:
    return compare_keys(a, b) < 0


key_order = cmp_to_key(compare_keys)
