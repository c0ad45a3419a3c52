from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable, Sequence, TextIO

from qsee.services.action_log import ActionLogService
from qsee.services.info_panel import InfoPanelRenderer
from qsee.services.input_parser import InputFile, InputFileError
from qsee.services.molecule_loader import MoleculeLoadError, MoleculeLoaderService
from qsee.services.view_settings import ViewerSettings, resolve_view_mode
from qsee.services.viewer import MoleculeViewer


LOGGER = logging.getLogger("qsee")
LOG_FORMAT = "[%(asctime)s] %(levelname)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    epilog = """\
examples:
  %(prog)s water.inp              Isometric 3/4 view
  %(prog)s water.inp -xz          Look down the Y axis
  %(prog)s water.inp --list       Print every parsed key and exit
"""
    parser = argparse.ArgumentParser(
        prog="qsee",
        description="Preview the molecule of a ChronusQ input file in the terminal.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", help="Path to the .inp file")
    parser.add_argument("view", nargs="?", help="View plane: xy, xz, yz or isometric")
    parser.add_argument("-xy", dest="view_flag", action="store_const", const="xy",
                        help="View the XY plane (camera along Z)")
    parser.add_argument("-xz", dest="view_flag", action="store_const", const="xz",
                        help="View the XZ plane (camera along Y)")
    parser.add_argument("-yz", dest="view_flag", action="store_const", const="yz",
                        help="View the YZ plane (camera along X)")
    parser.add_argument("--list", action="store_true",
                        help="Print the parsed keys in store order and exit")
    parser.add_argument("--frames", type=int, default=None,
                        help="Stop after this many frames (default: run until Ctrl+C)")
    parser.add_argument("--strict", action="store_true",
                        help="Fail when the input produces any parse warning")
    parser.add_argument("--no-color", action="store_true",
                        help="Plain text info panel")
    parser.add_argument("--no-action-log", action="store_true",
                        help="Do not append to the action log")
    return parser


def cmd_list(store_items: Iterable[tuple[str, str]], out: TextIO) -> int:
    for key, value in store_items:
        lines = value.split("\n")
        out.write(f"{key} = {lines[0]}\n")
        for continuation in lines[1:]:
            out.write(f"    {continuation}\n")
    return 0


def main(argv: Sequence[str] | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    if out is None:
        out = sys.stdout
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        input_file = InputFile(args.input)
    except InputFileError as exc:
        LOGGER.error("%s", exc)
        return 1

    parsed = input_file.parse()
    for diagnostic in parsed.report.diagnostics:
        LOGGER.warning("%s: %s", args.input, diagnostic)
    if args.strict and parsed.report.diagnostics:
        LOGGER.error("%d parse warning(s) in %s", len(parsed.report), args.input)
        return 1

    if args.list:
        return cmd_list(parsed.store.items(), out)

    try:
        data = MoleculeLoaderService().build(args.input, input_file.lines, parsed)
    except MoleculeLoadError as exc:
        LOGGER.error("%s", exc)
        return 1

    action_log = ActionLogService(enabled=not args.no_action_log)
    action_log.log_load(data)
    if not data.atoms:
        LOGGER.error("No atoms found in input file.")
        return 1
    LOGGER.info("Loaded %d atoms (%s)", len(data.atoms), data.formula)

    settings = ViewerSettings(
        view_mode=resolve_view_mode(args.view_flag or args.view),
        max_frames=args.frames,
    )
    viewer = MoleculeViewer(
        data, out, settings, panel=InfoPanelRenderer(color=not args.no_color)
    )
    previous_handlers = viewer.install_signal_handlers()
    try:
        frames = viewer.run()
    finally:
        viewer.restore_signal_handlers(previous_handlers)
    action_log.log_event("view", file=args.input, view=settings.view_mode.value, frames=frames)
    LOGGER.info("Exited cleanly after %d frame(s).", frames)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
