from __future__ import annotations

from pathlib import Path
from typing import Any, TextIO

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from qsee.domain.models import InputFileData
from qsee.services.paths import templates_dir as default_templates_dir


STYLE = {
    "RESET": "\033[0m",
    "BOLD": "\033[1m",
    "DIM": "\033[2m",
    "CYAN": "\033[36m",
    "YELLOW": "\033[33m",
    "GREEN": "\033[32m",
    "MAGENTA": "\033[35m",
    "WHITE": "\033[97m",
    "BLUE": "\033[34m",
}
PLAIN_STYLE = {name: "" for name in STYLE}

SECTION_ORDER = ("QM", "BASIS", "SCF", "MISC", "INTS")
HIDDEN_SECTIONS = frozenset({"MOLECULE"})
CLEAR_LINE = "\033[K"
TEMPLATE_NAME = "info_panel.txt.j2"


class InfoPanelRenderer:
    def __init__(self, template_root: Path | None = None, *, color: bool = True) -> None:
        self.template_root = template_root or default_templates_dir()
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_root)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        self.style = STYLE if color else PLAIN_STYLE

    @staticmethod
    def _section_blocks(data: InputFileData, text_width: int) -> list[dict[str, Any]]:
        grouped = data.parameters_by_section()
        for hidden in HIDDEN_SECTIONS:
            grouped.pop(hidden, None)

        blocks: list[dict[str, Any]] = []
        ordered = [name for name in SECTION_ORDER if grouped.get(name)]
        ordered += [name for name in grouped if name not in SECTION_ORDER and grouped[name]]
        for name in ordered:
            lines = []
            for param in grouped[name]:
                value = param.value.replace("\n", " ")
                lines.append(f"     {param.key}: {value}"[:text_width])
            blocks.append(
                {
                    "name": name,
                    "color": "GREEN" if name in SECTION_ORDER else "MAGENTA",
                    "lines": lines,
                }
            )
        return blocks

    def render(self, data: InputFileData, image_column: int, min_width: int = 30) -> list[str]:
        """Panel text for the columns left of the image, one string per row."""
        text_width = max(min_width, image_column - 4)
        template = self.env.get_template(TEMPLATE_NAME)
        text = template.render(
            s=self.style,
            data=data,
            display_name=Path(data.filename).name,
            rule="━" * 38,
            thin_rule="─" * 29,
            sections=self._section_blocks(data, text_width),
        )
        return text.split("\n")


def print_at(stream: TextIO, row: int, col: int, text: str) -> None:
    stream.write(f"\033[{row};{col}H{text}")


def display_info_panel(stream: TextIO, lines: list[str]) -> None:
    for row, line in enumerate(lines, start=1):
        print_at(stream, row, 1, CLEAR_LINE + line)
    stream.flush()
