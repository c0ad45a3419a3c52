from __future__ import annotations

import math
import signal
import time
from typing import Any, Callable, TextIO

from qsee.domain.models import InputFileData
from qsee.services.frame_buffer import FrameBuffer, element_color
from qsee.services.info_panel import InfoPanelRenderer, display_info_panel
from qsee.services.kitty_graphics import clear_graphics, display_frame
from qsee.services.projection import center_atoms, fit_scale, project_atoms
from qsee.services.view_settings import ViewerSettings


ENTER_ALT_SCREEN = "\033[?1049h"
EXIT_ALT_SCREEN = "\033[?1049l"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
CLEAR_SCREEN = "\033[2J"
CURSOR_HOME = "\033[H"

TWO_PI = 2.0 * math.pi


class MoleculeViewer:
    """Spins the molecule around Y and redraws the image and info panel each frame."""

    def __init__(
        self,
        data: InputFileData,
        stream: TextIO,
        settings: ViewerSettings | None = None,
        *,
        panel: InfoPanelRenderer | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.data = data
        self.stream = stream
        self.settings = settings or ViewerSettings()
        self.clock = clock
        self.sleep = sleep
        self.running = True
        self.angle = 0.0
        self.frame_count = 0

        self.points = center_atoms(data.atoms)
        self.elements = [atom.element for atom in data.atoms]
        self.scale = fit_scale(
            self.points,
            self.settings.width,
            self.settings.height,
            self.settings.atom_radius,
        )
        renderer = panel or InfoPanelRenderer()
        self.panel_lines = renderer.render(
            data, self.settings.text_columns, self.settings.min_text_width
        )

    def stop(self, *_args: object) -> None:
        self.running = False

    def install_signal_handlers(self) -> dict[int, Any]:
        """Route SIGINT/SIGTERM to ``stop``; returns the handlers they replaced."""
        previous: dict[int, Any] = {}
        for signum in (signal.SIGINT, signal.SIGTERM):
            previous[signum] = signal.signal(signum, self.stop)
        return previous

    @staticmethod
    def restore_signal_handlers(previous: dict[int, Any]) -> None:
        for signum, handler in previous.items():
            signal.signal(signum, handler)

    def advance(self, dt: float) -> float:
        self.angle += self.settings.rotation_speed * dt
        if self.angle > TWO_PI:
            self.angle -= TWO_PI
        return self.angle

    def render_frame(self) -> FrameBuffer:
        settings = self.settings
        buffer = FrameBuffer(settings.width, settings.height)
        projected = project_atoms(
            self.points,
            self.elements,
            angle=self.angle,
            mode=settings.view_mode,
            width=settings.width,
            height=settings.height,
            scale=self.scale,
        )
        for atom in projected:
            buffer.draw_circle_outline(
                atom.x, atom.y, settings.atom_radius, element_color(atom.element)
            )
        return buffer

    def _enter(self) -> None:
        self.stream.write(ENTER_ALT_SCREEN + HIDE_CURSOR + CLEAR_SCREEN + CURSOR_HOME)
        self.stream.flush()

    def _leave(self) -> None:
        clear_graphics(self.stream)
        self.stream.write(SHOW_CURSOR + EXIT_ALT_SCREEN)
        self.stream.flush()

    def run(self) -> int:
        """Animate until stopped or ``max_frames`` is reached; returns frames drawn."""
        settings = self.settings
        last_time = self.clock()
        self._enter()
        try:
            while self.running:
                if settings.max_frames is not None and self.frame_count >= settings.max_frames:
                    break
                self.stream.write(CURSOR_HOME)
                frame_start = self.clock()
                self.advance(frame_start - last_time)
                last_time = frame_start

                display_frame(self.stream, self.render_frame(), settings.text_columns)
                display_info_panel(self.stream, self.panel_lines)
                self.frame_count += 1

                elapsed = self.clock() - frame_start
                if elapsed < settings.frame_seconds:
                    self.sleep(settings.frame_seconds - elapsed)
        finally:
            self._leave()
        return self.frame_count
