from __future__ import annotations

import io
import json

import pytest

from qsee.main import build_parser, main
from qsee.services.paths import HOME_ENV
from qsee.services.view_settings import VIEW_ENV


WATER = """\
# Water
[Molecule]
charge = 0
mult = 1
geom:
  O 0.0 0.0 0.0
  H 0.0 0.76 -0.47
  H 0.0 -0.76 -0.47

[QM]
reference = rhf
"""


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(HOME_ENV, str(tmp_path / "home"))
    monkeypatch.delenv(VIEW_ENV, raising=False)


def _write(tmp_path, text: str, name: str = "water.inp"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def _actions(tmp_path) -> list[dict]:
    log_path = tmp_path / "home" / "logs" / "actions.log"
    return [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]


def test_parser_accepts_view_flags_and_positional_view() -> None:
    parser = build_parser()

    assert parser.parse_args(["a.inp", "-xz"]).view_flag == "xz"
    assert parser.parse_args(["a.inp", "yz"]).view == "yz"
    args = parser.parse_args(["a.inp"])
    assert args.view is None and args.view_flag is None


def test_list_prints_store_in_key_order(tmp_path) -> None:
    path = _write(tmp_path, WATER)
    out = io.StringIO()

    assert main([str(path), "--list"], out=out) == 0

    assert out.getvalue().splitlines() == [
        "MOLECULE.CHARGE = 0",
        "MOLECULE.GEOM = O 0.0 0.0 0.0",
        "    H 0.0 0.76 -0.47",
        "    H 0.0 -0.76 -0.47",
        "MOLECULE.MULT = 1",
        "QM.REFERENCE = RHF",
    ]


def test_missing_file_fails(tmp_path) -> None:
    assert main([str(tmp_path / "missing.inp")], out=io.StringIO()) == 1


def test_no_atoms_fails(tmp_path) -> None:
    path = _write(tmp_path, "[QM]\nreference = rhf\n")

    assert main([str(path), "--no-action-log"], out=io.StringIO()) == 1


def test_invalid_charge_fails(tmp_path) -> None:
    path = _write(tmp_path, "[MOLECULE]\ncharge = neutral\n")

    assert main([str(path), "--no-action-log"], out=io.StringIO()) == 1


def test_strict_fails_on_parse_warnings(tmp_path, caplog) -> None:
    path = _write(tmp_path, WATER + "reference = uhf\n")

    assert main([str(path), "--strict", "--list"], out=io.StringIO()) == 1
    assert "already exists" in caplog.text


def test_warnings_are_logged_but_not_fatal(tmp_path, caplog) -> None:
    path = _write(tmp_path, WATER + "reference = uhf\n")
    out = io.StringIO()

    assert main([str(path), "--list"], out=out) == 0
    assert "QM.REFERENCE = UHF" in out.getvalue()
    assert "line 12" in caplog.text


def test_view_runs_for_requested_frames(tmp_path) -> None:
    path = _write(tmp_path, WATER)
    out = io.StringIO()

    assert main([str(path), "-xz", "--frames", "2", "--no-color"], out=out) == 0

    output = out.getvalue()
    assert output.count("\033_Ga=T") == 2
    assert "Formula:      H2O" in output
    actions = _actions(tmp_path)
    assert [entry["action"] for entry in actions] == ["load", "view"]
    assert actions[0]["formula"] == "H2O"
    assert actions[1]["view"] == "xz"
    assert actions[1]["frames"] == 2


def test_view_mode_from_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv(VIEW_ENV, "yz")
    path = _write(tmp_path, WATER)

    assert main([str(path), "--frames", "1"], out=io.StringIO()) == 0
    assert _actions(tmp_path)[-1]["view"] == "yz"


def test_no_action_log_leaves_no_file(tmp_path) -> None:
    path = _write(tmp_path, WATER)

    assert main([str(path), "--frames", "1", "--no-action-log"], out=io.StringIO()) == 0
    assert not (tmp_path / "home" / "logs" / "actions.log").exists()
