"""Batch orchestration: one session, sequential work items, one close."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from linkpilot.auth import LoginOutcome, ensure_authenticated, probe_session
from linkpilot.config import RuntimeConfig
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import AuthWallError, AutomationError, ConfigurationError
from linkpilot.executor import execute
from linkpilot.models import ActionContext, ActionRequest, Credentials
from linkpilot.web_common import playwright_available
from linkpilot.web_session import BrowserSession, close_session, open_session

OpenSessionFn = Callable[..., BrowserSession]
AuthenticateFn = Callable[..., LoginOutcome]


@dataclass
class BatchReport:
    results: list[dict[str, Any]] = field(default_factory=list)
    failed: int = 0
    login: LoginOutcome | None = None

    @property
    def total(self) -> int:
        return len(self.results)


def parse_requests(items: Sequence[Any]) -> list[ActionRequest]:
    if not isinstance(items, (list, tuple)):
        raise ConfigurationError("Work items must be a JSON array")
    requests: list[ActionRequest] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ConfigurationError(f"Work item {index} must be an object")
        requests.append(ActionRequest.from_dict(item, item_index=index))
    return requests


def error_record(item_index: int, exc: BaseException) -> dict[str, Any]:
    body: dict[str, Any] = {"error": str(exc)}
    diagnostic = getattr(exc, "diagnostic", "")
    if diagnostic:
        body["diagnostic"] = diagnostic
    return {"item": item_index, "json": body}


def _default_playwright() -> Any:
    if not playwright_available():
        raise ConfigurationError(
            "Playwright is not installed. Install with: python3 -m pip install playwright "
            "&& python3 -m playwright install chromium"
        )
    from playwright.sync_api import sync_playwright

    return sync_playwright()


def run_batch(
    requests: Sequence[ActionRequest],
    credentials: Credentials,
    *,
    config: RuntimeConfig,
    sink: DiagnosticSink,
    continue_on_fail: bool = False,
    playwright_factory: Callable[[], Any] = _default_playwright,
    open_session_fn: OpenSessionFn = open_session,
    authenticate_fn: AuthenticateFn = ensure_authenticated,
) -> BatchReport:
    """Authenticate once and run every request on the shared page.

    The browser session is closed exactly once, whether the batch finishes,
    an item aborts it, or login itself fails.
    """
    report = BatchReport()
    with playwright_factory() as playwright_obj:
        session = open_session_fn(playwright_obj, credentials, config=config, sink=sink)
        try:
            report.login = authenticate_fn(session, credentials, config=config, sink=sink)
            sink.info(f"authenticated ({' -> '.join(report.login.trail)})")
            ctx = ActionContext(page=session.page, config=config, sink=sink)
            for request in requests:
                try:
                    _refresh_if_expired(session, credentials, config=config, sink=sink, authenticate_fn=authenticate_fn)
                    result = execute(ctx, request)
                except AutomationError as exc:
                    if not continue_on_fail:
                        raise
                    report.failed += 1
                    report.results.append(error_record(request.item_index, exc))
                    continue
                report.results.append({"item": request.item_index, "json": result.to_dict()})
        finally:
            close_session(session, sink)
    sink.info(f"batch finished: {report.total} items, {report.failed} failed")
    return report


def _refresh_if_expired(
    session: BrowserSession,
    credentials: Credentials,
    *,
    config: RuntimeConfig,
    sink: DiagnosticSink,
    authenticate_fn: AuthenticateFn,
) -> None:
    if not session.expired():
        return
    sink.info("session timeout budget reached; re-checking authentication")
    if probe_session(session.page, config=config, sink=sink):
        session.started_monotonic = time.monotonic()
        return
    sink.warn("session no longer authenticated; logging in again")
    session.authenticated = False
    try:
        authenticate_fn(session, credentials, config=config, sink=sink)
    except AutomationError as exc:
        raise AuthWallError(f"Session expired and could not be re-established: {exc}") from exc
    session.started_monotonic = time.monotonic()
