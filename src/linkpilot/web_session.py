"""Browser session lifecycle: launch, storage-state persistence and close."""

from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from linkpilot.config import RuntimeConfig
from linkpilot.constants import BROWSER_ARGS, DEFAULT_USER_AGENT, DEFAULT_VIEWPORT
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import ConfigurationError
from linkpilot.models import Credentials


@dataclass
class BrowserSession:
    browser: Any
    context: Any
    page: Any
    identity: str
    established_at: str
    timeout_ms: int
    state_path: Path | None = None
    started_monotonic: float = 0.0
    authenticated: bool = False
    closed: bool = False

    def expired(self, now: float | None = None) -> bool:
        if self.timeout_ms <= 0:
            return False
        current = time.monotonic() if now is None else now
        return (current - self.started_monotonic) * 1000 > self.timeout_ms


def session_identity(identifier: str) -> str:
    return hashlib.sha256(identifier.strip().lower().encode("utf-8")).hexdigest()[:16]


def open_session(
    playwright_obj: Any,
    credentials: Credentials,
    *,
    config: RuntimeConfig,
    sink: DiagnosticSink,
) -> BrowserSession:
    identity = session_identity(credentials.identifier)
    browser = playwright_obj.chromium.launch(headless=credentials.headless, args=list(BROWSER_ARGS))
    try:
        context_kwargs: dict[str, Any] = {
            "viewport": dict(DEFAULT_VIEWPORT),
            "user_agent": DEFAULT_USER_AGENT,
        }
        state_path: Path | None = None
        if credentials.persist_session:
            state_path = config.sessions_dir / f"{identity}.json"
            if state_path.exists():
                context_kwargs["storage_state"] = str(state_path)
                sink.info(f"reusing stored session state {state_path}")
        context = browser.new_context(**context_kwargs)
        page = context.new_page()
        page.set_default_timeout(config.navigation_timeout_ms)
        page.set_default_navigation_timeout(config.navigation_timeout_ms)
    except Exception:
        browser.close()
        raise
    sink.info(f"browser session opened (headless={credentials.headless})")
    return BrowserSession(
        browser=browser,
        context=context,
        page=page,
        identity=identity,
        established_at=datetime.now(timezone.utc).isoformat(),
        timeout_ms=config.session_timeout_ms,
        state_path=state_path,
        started_monotonic=time.monotonic(),
    )


def ensure_owner(session: BrowserSession, credentials: Credentials) -> None:
    if session.identity != session_identity(credentials.identifier):
        raise ConfigurationError("Browser session belongs to different credentials")


def save_session_state(session: BrowserSession, sink: DiagnosticSink) -> bool:
    if session.state_path is None or not session.authenticated or session.closed:
        return False
    try:
        session.state_path.parent.mkdir(parents=True, exist_ok=True)
        session.context.storage_state(path=str(session.state_path))
    except Exception as exc:
        sink.warn(f"could not persist session state: {exc}")
        return False
    sink.info(f"session state saved to {session.state_path}")
    return True


def close_session(session: BrowserSession, sink: DiagnosticSink) -> None:
    if session.closed:
        return
    save_session_state(session, sink)
    session.closed = True
    try:
        session.browser.close()
    except Exception as exc:
        sink.warn(f"browser close failed: {exc}")
        return
    sink.info("browser session closed")
