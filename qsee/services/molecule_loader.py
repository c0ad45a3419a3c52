from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from qsee.domain.models import Atom, InputFileData, InputParameter
from qsee.services.input_parser import InputFile, InputParser, ParsedInput
from qsee.services.input_store import InputLookupError


CHARGE_KEY = "MOLECULE.CHARGE"
MULTIPLICITY_KEY = "MOLECULE.MULT"
GEOMETRY_KEYS = ("MOLECULE.GEOM", "GEOMETRY")
GLOBAL_SECTION = "GLOBAL"


class MoleculeLoadError(RuntimeError):
    """Raised when reserved molecule keys hold values of the wrong type."""


def scan_title(lines: Sequence[str]) -> str:
    """First non-empty comment before the first section header."""
    for raw_line in lines:
        line = raw_line.lstrip(" \t")
        if not line.strip():
            continue
        if line.startswith("#"):
            comment = line[1:].strip()
            if comment:
                return comment
        elif line.startswith("["):
            break
    return ""


def parse_geometry(text: str) -> list[Atom]:
    atoms: list[Atom] = []
    for line in text.splitlines():
        tokens = line.split()
        if len(tokens) < 4:
            continue
        try:
            x, y, z = (float(token) for token in tokens[1:4])
        except ValueError:
            continue
        atoms.append(Atom(element=tokens[0], x=x, y=y, z=z))
    return atoms


class MoleculeLoaderService:
    def __init__(self, parser: InputParser | None = None) -> None:
        self.parser = parser or InputParser()

    def load(self, path: str | Path) -> InputFileData:
        input_file = InputFile(path)
        parsed = input_file.parse(self.parser)
        return self.build(str(path), input_file.lines, parsed)

    def build(self, filename: str, lines: Sequence[str], parsed: ParsedInput) -> InputFileData:
        store = parsed.store
        try:
            charge = store.get(CHARGE_KEY, int, 0)
            multiplicity = store.get(MULTIPLICITY_KEY, int, 1)
        except InputLookupError as exc:
            raise MoleculeLoadError(f"Invalid molecule settings in {filename}: {exc}") from exc

        geometry = ""
        for key in GEOMETRY_KEYS:
            if store.contains_data(key):
                geometry = store.get_data(key)
                break

        parameters: list[InputParameter] = []
        for full_key, value in store.items():
            if full_key in GEOMETRY_KEYS:
                continue
            section, dot, key = full_key.partition(".")
            if not dot:
                section, key = GLOBAL_SECTION, full_key
            parameters.append(InputParameter(section=section, key=key, value=value))

        return InputFileData(
            filename=filename,
            title=scan_title(lines),
            charge=charge,
            multiplicity=multiplicity,
            atoms=parse_geometry(geometry),
            parameters=parameters,
            diagnostics=list(parsed.report.diagnostics),
        )
