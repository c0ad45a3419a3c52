from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from qsee.domain.models import InputFileData
from qsee.services.paths import action_log_path


class ActionLogService:
    """Append-only JSON-lines record of files loaded and viewed."""

    def __init__(self, log_path: Path | None = None, enabled: bool = True) -> None:
        if log_path is None:
            log_path = action_log_path()
        self.log_path = log_path.expanduser()
        self.enabled = enabled

    def log_event(self, action: str, **fields: Any) -> None:
        if not self.enabled:
            return
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "action": action,
        }
        payload.update(fields)
        self._append_json_line(payload)

    def log_load(self, data: InputFileData) -> None:
        self.log_event(
            "load",
            file=data.filename,
            formula=data.formula,
            atoms=len(data.atoms),
            parameters=len(data.parameters),
            warnings=len(data.diagnostics),
        )

    def _append_json_line(self, payload: dict[str, Any]) -> None:
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with self.log_path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(payload, sort_keys=True) + "\n")
        except OSError:
            # The log is best effort; viewing continues without it.
            return
