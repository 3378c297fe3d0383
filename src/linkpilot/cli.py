"""CLI entrypoint for linkpilot."""

from __future__ import annotations

import argparse
import json
import os
from dataclasses import replace
from pathlib import Path
from typing import Any

from linkpilot.batch import parse_requests, run_batch
from linkpilot.config import RuntimeConfig, load_runtime_config
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import AutomationError, ConfigurationError
from linkpilot.models import Credentials
from linkpilot.storage import (
    RunContext,
    append_log,
    create_run_context,
    read_json,
    status_payload,
    tail_lines,
    write_json,
    write_status,
)

_ENV_CREDENTIALS = {
    "username": "LINKPILOT_USERNAME",
    "password": "LINKPILOT_PASSWORD",
    "two_factor_code": "LINKPILOT_TWO_FACTOR_CODE",
}
_ENV_FLAGS = {
    "use_2fa": "LINKPILOT_USE_2FA",
    "headless": "LINKPILOT_HEADLESS",
    "session_cookie_storage": "LINKPILOT_SESSION_COOKIE_STORAGE",
}


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.command == "run":
        run_command(
            Path(args.items),
            credentials_path=Path(args.credentials) if args.credentials else None,
            continue_on_fail=args.continue_on_fail,
            headed=args.headed,
        )
        return
    if args.command == "status":
        print(json.dumps(status_payload(_status_path(load_runtime_config())), indent=2, ensure_ascii=False))
        return
    if args.command == "logs":
        logs_command(args.tail)
        return

    parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="linkpilot", description="Social-network browser automation CLI.")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a batch: linkpilot run ITEMS.json")
    run_parser.add_argument("items", type=str, help="JSON array of {resource, operation, url, params}")
    run_parser.add_argument(
        "--credentials",
        type=str,
        default="",
        help="JSON credentials file. Defaults to LINKPILOT_USERNAME / LINKPILOT_PASSWORD.",
    )
    run_parser.add_argument(
        "--continue-on-fail",
        action="store_true",
        help="Record failed items as error entries instead of aborting the batch.",
    )
    run_parser.add_argument(
        "--headed",
        action="store_true",
        help="Show the browser window (allows manual checkpoint resolution).",
    )

    subparsers.add_parser("status", help="Show latest run status")

    logs_parser = subparsers.add_parser("logs", help="Tail log for latest run")
    logs_parser.add_argument("--tail", type=int, default=200)
    return parser


def run_command(
    items_path: Path,
    *,
    credentials_path: Path | None,
    continue_on_fail: bool,
    headed: bool,
) -> list[dict[str, Any]]:
    config = load_runtime_config()
    try:
        requests = parse_requests(_read_json_file(items_path, "items"))
        credentials = load_credentials(credentials_path)
    except ConfigurationError as exc:
        raise SystemExit(f"Invalid input: {exc}")
    if headed:
        credentials = replace(credentials, headless=False)

    ctx = create_run_context(config.runs_dir)
    status_path = _status_path(config)
    sink = DiagnosticSink(log_path=ctx.run_log, evidence_dir=ctx.evidence_dir, level=config.log_level)
    append_log(ctx.run_log, f"run_id={ctx.run_id}")
    append_log(ctx.run_log, f"items={len(requests)} continue_on_fail={continue_on_fail}")
    append_log(ctx.run_log, f"credentials={credentials!r}")
    write_status(
        run_id=ctx.run_id,
        run_dir=ctx.run_dir,
        result="running",
        results_path=ctx.results_path,
        state="running",
        items_total=len(requests),
        status_path=status_path,
    )

    try:
        report = run_batch(
            requests,
            credentials,
            config=config,
            sink=sink,
            continue_on_fail=continue_on_fail,
        )
    except AutomationError as exc:
        _mark_failed(ctx, status_path, items_total=len(requests), error=str(exc))
        detail = f" (diagnostic: {exc.diagnostic})" if exc.diagnostic else ""
        raise SystemExit(f"{type(exc).__name__}: {exc}{detail}. Inspect {ctx.run_log}")
    except Exception as exc:
        append_log(ctx.run_log, f"unexpected error: {type(exc).__name__}: {exc}")
        _mark_failed(ctx, status_path, items_total=len(requests), error=f"{type(exc).__name__}: {exc}")
        raise SystemExit(f"Run failed: {type(exc).__name__}: {exc}. Inspect {ctx.run_log}") from exc

    write_json(ctx.results_path, report.results)
    if report.login is not None:
        write_json(ctx.run_dir / "login.json", report.login.to_dict())
    write_status(
        run_id=ctx.run_id,
        run_dir=ctx.run_dir,
        result="partial" if report.failed else "success",
        results_path=ctx.results_path,
        items_total=len(requests),
        items_failed=report.failed,
        status_path=status_path,
    )
    print(json.dumps(report.results, indent=2, ensure_ascii=False))
    return report.results


def load_credentials(path: Path | None) -> Credentials:
    if path is not None:
        data = _read_json_file(path, "credentials")
        if not isinstance(data, dict):
            raise ConfigurationError("Credentials file must contain a JSON object")
        return Credentials.from_dict(data)
    payload: dict[str, Any] = {}
    for key, env_name in _ENV_CREDENTIALS.items():
        value = os.getenv(env_name)
        if value is not None:
            payload[key] = value
    for key, env_name in _ENV_FLAGS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            payload[key] = raw.strip().lower() in ("1", "true", "yes", "on")
    if "username" not in payload or "password" not in payload:
        raise ConfigurationError("Provide --credentials FILE or set LINKPILOT_USERNAME and LINKPILOT_PASSWORD")
    return Credentials.from_dict(payload)


def logs_command(tail_count: int) -> None:
    payload = status_payload(_status_path(load_runtime_config()))
    if payload.get("status") == "no-runs":
        raise SystemExit("No runs available yet.")
    run_log = Path(payload["run_dir"]) / "linkpilot.log"
    print("\n".join(tail_lines(run_log, tail_count)))


def _mark_failed(ctx: RunContext, status_path: Path, *, items_total: int, error: str) -> None:
    write_status(
        run_id=ctx.run_id,
        run_dir=ctx.run_dir,
        result="failed",
        results_path=ctx.results_path,
        state="failed",
        items_total=items_total,
        error=error,
        status_path=status_path,
    )


def _status_path(config: RuntimeConfig) -> Path:
    return config.runs_dir / "status.json"


def _read_json_file(path: Path, label: str) -> Any:
    if not path.exists():
        raise ConfigurationError(f"{label} file not found: {path}")
    try:
        return read_json(path)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"{label} file is not valid JSON: {exc}") from exc


if __name__ == "__main__":
    main()
