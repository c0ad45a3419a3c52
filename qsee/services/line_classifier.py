from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from qsee.domain.models import ParseReport


OPENING_BRACKETS = "([{"
CLOSING_BRACKETS = {")": "(", "]": "[", "}": "{"}
SEPARATORS = "=:"
COMMENT_CHAR = "#"


class LineType(str, Enum):
    EMPTY = "empty"
    SECTION_HEADER = "section_header"
    DATA_ENTRY = "data_entry"
    CONTINUATION = "continuation"


@dataclass(frozen=True, slots=True)
class ClassifiedLine:
    kind: LineType
    text: str
    number: int | None = None


def find_separator(
    line: str,
    report: ParseReport | None = None,
    line_number: int | None = None,
) -> int:
    """Index of the first ``=`` or ``:`` outside ``()``, ``[]`` and ``{}``, else -1.

    An unmatched closing bracket ends the scan with -1 and a warning.
    """
    stack: list[str] = []
    for index, char in enumerate(line):
        if char in OPENING_BRACKETS:
            stack.append(char)
        elif char in CLOSING_BRACKETS:
            if not stack:
                if report is not None:
                    report.add(
                        "UNMATCHED_BRACKET",
                        f"Unmatched closing bracket '{char}' in line: {line}",
                        line=line_number,
                    )
                return -1
            top = stack.pop()
            if top != CLOSING_BRACKETS[char] and report is not None:
                report.add(
                    "UNMATCHED_BRACKET",
                    f"Bracket '{top}' closed by '{char}' in line: {line}",
                    line=line_number,
                )
        elif char in SEPARATORS and not stack:
            return index
    return -1


def strip_comment(line: str) -> str:
    depth = 0
    for index, char in enumerate(line):
        if char in OPENING_BRACKETS:
            depth += 1
        elif char in CLOSING_BRACKETS:
            depth = max(0, depth - 1)
        elif char == COMMENT_CHAR and depth == 0:
            return line[:index]
    return line


def is_section_header(text: str) -> bool:
    return text.startswith("[") and text.find("]") == len(text) - 1


def classify_line(
    line: str,
    report: ParseReport | None = None,
    line_number: int | None = None,
) -> ClassifiedLine:
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_CHAR):
        return ClassifiedLine(LineType.EMPTY, "", line_number)

    text = strip_comment(stripped).strip()
    if not text:
        return ClassifiedLine(LineType.EMPTY, "", line_number)

    if is_section_header(text):
        return ClassifiedLine(LineType.SECTION_HEADER, text, line_number)

    if find_separator(text, report, line_number) >= 0:
        return ClassifiedLine(LineType.DATA_ENTRY, text, line_number)

    return ClassifiedLine(LineType.CONTINUATION, text, line_number)
