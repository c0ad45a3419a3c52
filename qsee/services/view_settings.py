from __future__ import annotations

import math
import os

from pydantic import BaseModel, Field

from qsee.domain.models import ViewMode


VIEW_ENV = "QSEE_VIEW"
DEFAULT_VIEW = ViewMode.ISOMETRIC


class ViewerSettings(BaseModel):
    width: int = Field(default=256, gt=0)
    height: int = Field(default=256, gt=0)
    atom_radius: int = Field(default=12, ge=1)
    fps: int = Field(default=30, gt=0, le=240)
    # One full turn every six seconds.
    rotation_speed: float = math.pi / 3.0
    text_columns: int = Field(default=42, ge=1)
    min_text_width: int = Field(default=30, ge=1)
    view_mode: ViewMode = DEFAULT_VIEW
    max_frames: int | None = Field(default=None, ge=0)

    @property
    def frame_seconds(self) -> float:
        return 1.0 / self.fps


def normalize_view_mode(raw: object) -> ViewMode | None:
    if raw is None:
        return None
    if isinstance(raw, ViewMode):
        return raw
    text = str(raw).strip().lower().lstrip("-")
    if not text:
        return None
    aliases = {"iso": "isometric", "3/4": "isometric", "default": "isometric"}
    text = aliases.get(text, text)
    try:
        return ViewMode(text)
    except ValueError:
        return None


def resolve_view_mode(cli: str | None = None, env: str | None = None) -> ViewMode:
    """First valid mode from the CLI flag, the environment, then the default."""
    if env is None:
        env = os.getenv(VIEW_ENV)
    for candidate in (cli, env):
        normalized = normalize_view_mode(candidate)
        if normalized is not None:
            return normalized
    return DEFAULT_VIEW
