from __future__ import annotations

from bisect import bisect_left
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from qsee.domain.models import ParseReport
from qsee.services.input_store import InputStore
from qsee.services.line_classifier import (
    ClassifiedLine,
    LineType,
    classify_line,
    find_separator,
)


# Keys whose values keep their authored case (matched as dotted suffixes).
CASE_SENSITIVE_KEYS: tuple[str, ...] = ("BASIS.BASIS",)

FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "cp1252", "latin-1")


class InputFileError(OSError):
    """Raised when an input file cannot be opened or decoded."""


def reverse_by_dot(key: str) -> str:
    """``"MOLECULE.GEOM"`` -> ``"GEOM.MOLECULE"``; empty segments are dropped."""
    return ".".join(reversed([token for token in key.split(".") if token]))


class CaseSensitivity:
    """Matches keys against dotted suffixes such as ``BASIS.BASIS``.

    Suffixes are stored reversed and sorted, so ``X.BASIS.BASIS`` becomes the
    probe ``BASIS.BASIS.X`` and each of its dot-bounded prefixes is looked up
    with a binary search.
    """

    def __init__(self, suffixes: Iterable[str] = CASE_SENSITIVE_KEYS) -> None:
        self._reversed = sorted({reverse_by_dot(suffix.upper()) for suffix in suffixes})

    def _contains(self, probe: str) -> bool:
        position = bisect_left(self._reversed, probe)
        return position < len(self._reversed) and self._reversed[position] == probe

    def matches(self, key: str) -> bool:
        # Suffix match only: a bare top-level "BASIS" key is not exempt.
        if not self._reversed:
            return False
        segments = reverse_by_dot(key.upper()).split(".")
        for length in range(1, len(segments) + 1):
            if self._contains(".".join(segments[:length])):
                return True
        return False

    @property
    def suffixes(self) -> list[str]:
        return [reverse_by_dot(item) for item in self._reversed]


@dataclass(slots=True)
class ParsedInput:
    store: InputStore
    report: ParseReport = field(default_factory=ParseReport)


class InputParser:
    def __init__(self, case_sensitive_keys: Iterable[str] = CASE_SENSITIVE_KEYS) -> None:
        self.case_sensitivity = CaseSensitivity(case_sensitive_keys)

    @staticmethod
    def classify(lines: Sequence[str], report: ParseReport) -> list[ClassifiedLine]:
        return [
            classify_line(line, report, number) for number, line in enumerate(lines, start=1)
        ]

    def parse(
        self,
        lines: Sequence[str],
        prefix: str = "",
        store: InputStore | None = None,
    ) -> ParsedInput:
        """Parse ``lines`` into a store.

        With ``prefix`` the block is parsed on its own and merged in under
        ``PREFIX.``; passing ``store`` merges into an existing store.
        """
        report = ParseReport()
        prefix = prefix.strip().upper()
        target = store if store is not None else InputStore()
        local = target if not prefix else InputStore()

        classified = self.classify(lines, report)
        section = ""
        index = 0
        while index < len(classified):
            entry = classified[index]
            index += 1

            if entry.kind is LineType.EMPTY:
                continue

            if entry.kind is LineType.SECTION_HEADER:
                section = entry.text[1:-1].strip().upper()
                continue

            if entry.kind is LineType.CONTINUATION:
                report.add(
                    "ORPHAN_LINE",
                    f"Line does not belong to any data entry: {entry.text}",
                    line=entry.number,
                )
                continue

            separator = find_separator(entry.text)
            name = entry.text[:separator].strip().upper()
            key = f"{section}.{name}" if section else name

            parts = [entry.text[separator + 1:].strip()]
            while index < len(classified):
                following = classified[index]
                if following.kind is LineType.CONTINUATION:
                    parts.append(following.text)
                elif following.kind is not LineType.EMPTY:
                    break
                index += 1
            value = "\n".join(part for part in parts if part)

            qualified = f"{prefix}.{key}" if prefix else key
            if value and not self.case_sensitivity.matches(qualified):
                value = value.upper()

            if not value:
                report.add(
                    "EMPTY_VALUE",
                    f"No data entry for {qualified} in input file.",
                    line=entry.number,
                    key=qualified,
                )
                continue

            local.add_data(key, value, report, entry.number)

        if local is not target:
            target.merge_section(local, prefix, report)
        return ParsedInput(store=target, report=report)


def _decode(raw: bytes, encoding: str | None) -> str:
    if encoding:
        return raw.decode(encoding)
    for candidate in FALLBACK_ENCODINGS:
        try:
            return raw.decode(candidate)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


class InputFile:
    """An input file read fully into memory on construction."""

    def __init__(self, path: str | Path, encoding: str | None = None) -> None:
        self.path = Path(path)
        try:
            raw = self.path.read_bytes()
            text = _decode(raw, encoding)
        except (OSError, UnicodeDecodeError, LookupError) as exc:
            raise InputFileError(f"Could not open file: {self.path}") from exc
        self.lines: list[str] = text.split("\n")

    def parse(self, parser: InputParser | None = None) -> ParsedInput:
        return (parser or InputParser()).parse(self.lines)


def parse_lines(lines: Sequence[str]) -> ParsedInput:
    return InputParser().parse(lines)


def parse_text(text: str) -> ParsedInput:
    return parse_lines(text.split("\n"))


def parse_file(path: str | Path, encoding: str | None = None) -> ParsedInput:
    return InputFile(path, encoding).parse()
