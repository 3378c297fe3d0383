"""Run-scoped diagnostic sink: leveled log lines and failure snapshots."""

from __future__ import annotations

import re
import time
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from linkpilot.storage import append_log

_LEVEL_ORDER = {"error": 0, "warn": 1, "info": 2, "debug": 3}
_NAME_RE = re.compile(r"[^a-z0-9]+")
RECENT_LINES = 200


@dataclass
class DiagnosticSink:
    """Collects log lines and snapshots for one batch run.

    A sink is created per run and passed to every component; there is no
    process-wide logging state. Snapshot capture is fire-and-forget: any
    failure while writing an artifact is logged and otherwise ignored.
    """

    log_path: Path | None = None
    evidence_dir: Path | None = None
    level: str = "info"
    entries: deque[str] = field(default_factory=lambda: deque(maxlen=RECENT_LINES))
    artifacts: list[str] = field(default_factory=list)

    def enabled(self, level: str) -> bool:
        return _LEVEL_ORDER.get(level, 2) <= _LEVEL_ORDER.get(self.level, 2)

    def log(self, level: str, message: str) -> None:
        if not self.enabled(level):
            return
        stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
        line = f"{stamp} {level.upper():5} {message}"
        self.entries.append(line)
        if self.log_path is not None:
            try:
                append_log(self.log_path, line)
            except OSError:
                pass

    def debug(self, message: str) -> None:
        self.log("debug", message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def warn(self, message: str) -> None:
        self.log("warn", message)

    def error(self, message: str) -> None:
        self.log("error", message)

    def capture(self, page: Any, name: str, *, full_page: bool = False) -> str:
        if page is None or self.evidence_dir is None:
            return ""
        path = self.evidence_dir / f"{_artifact_stem(name)}.png"
        try:
            self.evidence_dir.mkdir(parents=True, exist_ok=True)
            page.screenshot(path=str(path), full_page=full_page)
        except Exception as exc:
            self.debug(f"screenshot {path.name} failed: {exc}")
            return ""
        self.artifacts.append(str(path))
        self.debug(f"screenshot saved: {path}")
        return str(path)

    def snapshot_html(self, page: Any, name: str) -> str:
        if page is None or self.evidence_dir is None:
            return ""
        path = self.evidence_dir / f"{_artifact_stem(name)}.html"
        try:
            self.evidence_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(str(page.content() or ""), encoding="utf-8")
        except Exception as exc:
            self.debug(f"html snapshot {path.name} failed: {exc}")
            return ""
        self.artifacts.append(str(path))
        return str(path)


def _artifact_stem(name: str) -> str:
    clean = _NAME_RE.sub("-", str(name or "snapshot").lower()).strip("-") or "snapshot"
    return f"{clean}-{int(time.time() * 1000)}"
