"""File storage helpers for run artifacts."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


RUNS_DIR = Path("runs")


@dataclass(frozen=True)
class RunContext:
    run_id: str
    run_dir: Path
    run_log: Path
    evidence_dir: Path
    results_path: Path


def create_run_context(runs_dir: Path | None = None) -> RunContext:
    base_dir = runs_dir or RUNS_DIR
    base_dir.mkdir(parents=True, exist_ok=True)
    run_dir: Path | None = None
    run_id = ""
    for attempt in range(100):
        base = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
        suffix = f"-{attempt:02d}" if attempt else ""
        run_id = f"{base}{suffix}"
        candidate = base_dir / run_id
        if candidate.exists():
            continue
        candidate.mkdir(parents=True, exist_ok=False)
        run_dir = candidate
        break
    if run_dir is None:
        raise RuntimeError("Could not allocate unique run directory")
    evidence_dir = run_dir / "evidence"
    evidence_dir.mkdir(parents=True, exist_ok=True)
    return RunContext(
        run_id=run_id,
        run_dir=run_dir,
        run_log=run_dir / "linkpilot.log",
        evidence_dir=evidence_dir,
        results_path=run_dir / "results.json",
    )


def append_log(path: Path, message: str) -> None:
    with path.open("a", encoding="utf-8") as fh:
        fh.write(message.rstrip() + "\n")


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(payload, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def write_status(
    *,
    run_id: str,
    run_dir: Path,
    result: str,
    results_path: Path,
    state: str = "completed",
    items_total: int | None = None,
    items_failed: int | None = None,
    error: str | None = None,
    status_path: Path,
) -> None:
    payload: dict[str, Any] = {
        "run_id": run_id,
        "run_dir": str(run_dir),
        "result": result,
        "state": state,
        "results_path": str(results_path),
        "updated_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if items_total is not None:
        payload["items_total"] = items_total
    if items_failed is not None:
        payload["items_failed"] = items_failed
    if error:
        payload["error"] = error
    write_json(status_path, payload)


def status_payload(status_path: Path) -> dict[str, Any]:
    if not status_path.exists():
        return {"status": "no-runs"}
    return read_json(status_path)


def tail_lines(path: Path, line_count: int) -> list[str]:
    if not path.exists():
        return []
    with path.open("r", encoding="utf-8") as fh:
        lines = fh.readlines()
    return [line.rstrip("\n") for line in lines[-line_count:]]
