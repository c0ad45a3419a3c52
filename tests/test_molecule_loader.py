from __future__ import annotations

import pytest

from qsee.services.input_parser import InputFileError, parse_text
from qsee.services.molecule_loader import (
    MoleculeLoadError,
    MoleculeLoaderService,
    parse_geometry,
    scan_title,
)


WATER = """\

   #   Water molecule test
[Molecule]
charge = -1
mult = 2
geom:
  O  0.000  0.000  0.1173
  H  0.000  0.7572 -0.4692
  H  0.000 -0.7572 -0.4692

[QM]
reference = rhf
job = scf

[BASIS]
basis = cc-pVDZ
"""


def _build(text: str, filename: str = "water.inp"):
    parsed = parse_text(text)
    return MoleculeLoaderService().build(filename, text.splitlines(), parsed)


def test_build_reads_molecule_and_parameters() -> None:
    data = _build(WATER)

    assert data.filename == "water.inp"
    assert data.title == "Water molecule test"
    assert data.charge == -1
    assert data.multiplicity == 2
    assert data.formula == "H2O"
    assert [atom.element for atom in data.atoms] == ["O", "H", "H"]
    assert data.atoms[1].y == pytest.approx(0.7572)
    assert data.atoms[2].z == pytest.approx(-0.4692)

    assert [(p.section, p.key, p.value) for p in data.parameters] == [
        ("BASIS", "BASIS", "cc-pVDZ"),
        ("MOLECULE", "CHARGE", "-1"),
        ("MOLECULE", "MULT", "2"),
        ("QM", "JOB", "SCF"),
        ("QM", "REFERENCE", "RHF"),
    ]
    assert data.diagnostics == []


def test_defaults_when_molecule_keys_missing() -> None:
    data = _build("[QM]\njob = scf\n")

    assert data.charge == 0
    assert data.multiplicity == 1
    assert data.atoms == []
    assert data.title == ""


def test_top_level_geometry_key_and_global_section() -> None:
    data = _build("units = angstrom\ngeometry:\n  C 0 0 0\n  O 0 0 1.2\n  O 0 0 -1.2\n")

    assert data.formula == "CO2"
    assert [(p.section, p.key) for p in data.parameters] == [("GLOBAL", "UNITS")]


def test_invalid_charge_raises_load_error() -> None:
    with pytest.raises(MoleculeLoadError, match="water.inp"):
        _build("[MOLECULE]\ncharge = neutral\n")


def test_diagnostics_are_carried_over() -> None:
    data = _build("[QM]\njob = scf\njob = rt\n")

    assert [d.code for d in data.diagnostics] == ["DUPLICATE_KEY"]


def test_parse_geometry_skips_short_and_malformed_lines() -> None:
    atoms = parse_geometry("O 0 0 0\nH 1 2\nH x 0 0\nCL 1.0 2.0 3.0 extra\n")

    assert [(a.element, a.x, a.y, a.z) for a in atoms] == [
        ("O", 0.0, 0.0, 0.0),
        ("CL", 1.0, 2.0, 3.0),
    ]


def test_scan_title_stops_at_first_section() -> None:
    assert scan_title(["#", "  # First comment", "# Second"]) == "First comment"
    assert scan_title(["[QM]", "# After section"]) == ""
    assert scan_title(["job = scf", "# comment after data"]) == "comment after data"


def test_formula_orders_carbon_hydrogen_then_alphabetical() -> None:
    data = _build("geometry:\n  O 0 0 0\n  N 0 0 1\n  H 0 1 0\n  C 1 0 0\n  C 2 0 0\n")

    assert data.formula == "C2HNO"


def test_load_reads_file(tmp_path) -> None:
    path = tmp_path / "water.inp"
    path.write_text(WATER, encoding="utf-8")

    data = MoleculeLoaderService().load(path)
    assert data.filename == str(path)
    assert len(data.atoms) == 3

    with pytest.raises(InputFileError):
        MoleculeLoaderService().load(tmp_path / "missing.inp")
