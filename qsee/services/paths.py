from __future__ import annotations

import os
from pathlib import Path


HOME_ENV = "QSEE_HOME"


def app_root() -> Path:
    return Path(__file__).resolve().parents[1]


def templates_dir() -> Path:
    return app_root() / "templates"


def user_data_dir() -> Path:
    configured = (os.getenv(HOME_ENV) or "").strip()
    if configured:
        return Path(configured).expanduser()
    appdata = os.getenv("APPDATA")
    if appdata:
        return Path(appdata) / "qsee"
    return Path.home() / ".qsee"


def action_log_path() -> Path:
    return user_data_dir() / "logs" / "actions.log"
