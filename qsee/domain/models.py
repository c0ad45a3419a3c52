from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


Severity = Literal["warning", "error"]
DiagnosticCode = Literal[
    "UNMATCHED_BRACKET",
    "DUPLICATE_KEY",
    "EMPTY_VALUE",
    "ORPHAN_LINE",
]


class Diagnostic(BaseModel):
    severity: Severity = "warning"
    code: DiagnosticCode
    message: str
    line: int | None = Field(default=None, ge=1)
    key: str | None = None

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        return f"{where}{self.message}"


class ParseReport(BaseModel):
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def add(
        self,
        code: DiagnosticCode,
        message: str,
        *,
        line: int | None = None,
        key: str | None = None,
        severity: Severity = "warning",
    ) -> None:
        self.diagnostics.append(
            Diagnostic(severity=severity, code=code, message=message, line=line, key=key)
        )

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.code == code]

    @property
    def has_warnings(self) -> bool:
        return any(d.severity == "warning" for d in self.diagnostics)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == "error" for d in self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)


class ViewMode(str, Enum):
    ISOMETRIC = "isometric"
    XY = "xy"
    XZ = "xz"
    YZ = "yz"


class Atom(BaseModel):
    element: str
    x: float
    y: float
    z: float


class InputParameter(BaseModel):
    section: str
    key: str
    value: str


class InputFileData(BaseModel):
    filename: str
    title: str = ""
    charge: int = 0
    multiplicity: int = 1
    atoms: list[Atom] = Field(default_factory=list)
    parameters: list[InputParameter] = Field(default_factory=list)
    diagnostics: list[Diagnostic] = Field(default_factory=list)

    @property
    def formula(self) -> str:
        """Element composition with carbon and hydrogen first, e.g. ``C6H12O6``."""
        counts = Counter(atom.element for atom in self.atoms)
        parts: list[str] = []
        for element in ("C", "H"):
            count = counts.pop(element, 0)
            if count:
                parts.append(element + (str(count) if count > 1 else ""))
        for element in sorted(counts):
            count = counts[element]
            parts.append(element + (str(count) if count > 1 else ""))
        return "".join(parts)

    def parameters_by_section(self) -> dict[str, list[InputParameter]]:
        grouped: dict[str, list[InputParameter]] = {}
        for param in self.parameters:
            grouped.setdefault(param.section, []).append(param)
        return grouped
