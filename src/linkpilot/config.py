"""Runtime configuration loaded from LINKPILOT_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from linkpilot.constants import (
    ACTION_SETTLE_MS,
    CHECKPOINT_CLICK_SETTLE_MS,
    CHECKPOINT_GRACE_SECONDS,
    CHECKPOINT_MAX_DEPTH,
    DEFAULT_BASE_URL,
    ELEMENT_TIMEOUT_MS,
    FEED_MAX_SCROLL_ITERATIONS,
    FEED_PATH,
    FEED_SCROLL_INCREMENT,
    FEED_SCROLL_PAUSE_MS,
    LOGIN_PATH,
    NAVIGATION_ATTEMPTS,
    NAVIGATION_RETRY_DELAY_MS,
    NAVIGATION_TIMEOUT_MS,
    PROFILE_STABILIZE_MS,
    TYPING_DELAY_MS,
)
from linkpilot.web_common import is_valid_url, join_url

LOG_LEVELS = ("debug", "info", "warn", "error")


@dataclass(frozen=True)
class RuntimeConfig:
    base_url: str = DEFAULT_BASE_URL
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    element_timeout_ms: int = ELEMENT_TIMEOUT_MS
    action_settle_ms: int = ACTION_SETTLE_MS
    typing_delay_ms: int = TYPING_DELAY_MS
    navigation_attempts: int = NAVIGATION_ATTEMPTS
    navigation_retry_delay_ms: int = NAVIGATION_RETRY_DELAY_MS
    profile_stabilize_ms: int = PROFILE_STABILIZE_MS
    checkpoint_max_depth: int = CHECKPOINT_MAX_DEPTH
    checkpoint_grace_seconds: float = CHECKPOINT_GRACE_SECONDS
    checkpoint_click_settle_ms: int = CHECKPOINT_CLICK_SETTLE_MS
    feed_scroll_increment: int = FEED_SCROLL_INCREMENT
    feed_scroll_pause_ms: int = FEED_SCROLL_PAUSE_MS
    feed_max_scroll_iterations: int = FEED_MAX_SCROLL_ITERATIONS
    session_timeout_minutes: float = 30.0
    log_level: str = "info"
    runs_dir: Path = Path("runs")

    @property
    def login_url(self) -> str:
        return join_url(self.base_url, LOGIN_PATH)

    @property
    def feed_url(self) -> str:
        return join_url(self.base_url, FEED_PATH)

    @property
    def sessions_dir(self) -> Path:
        return self.runs_dir / "sessions"

    @property
    def session_timeout_ms(self) -> int:
        return int(self.session_timeout_minutes * 60 * 1000)


def load_runtime_config() -> RuntimeConfig:
    base_url = str(os.getenv("LINKPILOT_BASE_URL", DEFAULT_BASE_URL) or DEFAULT_BASE_URL).strip()
    if not is_valid_url(base_url):
        raise SystemExit(f"LINKPILOT_BASE_URL is not a valid http(s) URL: {base_url}")

    log_level = str(os.getenv("LINKPILOT_LOG_LEVEL", "info")).strip().lower()
    if log_level not in LOG_LEVELS:
        log_level = "info"

    return RuntimeConfig(
        base_url=base_url.rstrip("/"),
        navigation_timeout_ms=_env_ms("LINKPILOT_NAVIGATION_TIMEOUT_SECONDS", NAVIGATION_TIMEOUT_MS, 1000, 120000),
        element_timeout_ms=_env_ms("LINKPILOT_ELEMENT_TIMEOUT_SECONDS", ELEMENT_TIMEOUT_MS, 250, 60000),
        action_settle_ms=_env_int("LINKPILOT_ACTION_SETTLE_MS", ACTION_SETTLE_MS, 0, 10000),
        typing_delay_ms=_env_int("LINKPILOT_TYPING_DELAY_MS", TYPING_DELAY_MS, 0, 500),
        navigation_attempts=_env_int("LINKPILOT_NAVIGATION_ATTEMPTS", NAVIGATION_ATTEMPTS, 1, 10),
        navigation_retry_delay_ms=_env_int(
            "LINKPILOT_NAVIGATION_RETRY_DELAY_MS", NAVIGATION_RETRY_DELAY_MS, 0, 30000
        ),
        profile_stabilize_ms=_env_int("LINKPILOT_PROFILE_STABILIZE_MS", PROFILE_STABILIZE_MS, 0, 30000),
        checkpoint_max_depth=_env_int("LINKPILOT_CHECKPOINT_MAX_DEPTH", CHECKPOINT_MAX_DEPTH, 1, 10),
        checkpoint_grace_seconds=_env_float(
            "LINKPILOT_CHECKPOINT_GRACE_SECONDS", CHECKPOINT_GRACE_SECONDS, 0.0, 600.0
        ),
        checkpoint_click_settle_ms=_env_int(
            "LINKPILOT_CHECKPOINT_CLICK_SETTLE_MS", CHECKPOINT_CLICK_SETTLE_MS, 0, 30000
        ),
        feed_scroll_increment=_env_int("LINKPILOT_FEED_SCROLL_INCREMENT", FEED_SCROLL_INCREMENT, 100, 10000),
        feed_scroll_pause_ms=_env_int("LINKPILOT_FEED_SCROLL_PAUSE_MS", FEED_SCROLL_PAUSE_MS, 0, 10000),
        feed_max_scroll_iterations=_env_int(
            "LINKPILOT_FEED_MAX_SCROLL_ITERATIONS", FEED_MAX_SCROLL_ITERATIONS, 1, 100
        ),
        session_timeout_minutes=_env_float("LINKPILOT_SESSION_TIMEOUT_MINUTES", 30.0, 1.0, 240.0),
        log_level=log_level,
        runs_dir=Path(os.getenv("LINKPILOT_RUNS_DIR", "runs") or "runs"),
    )


def _env_float(name: str, default: float, low: float, high: float) -> float:
    raw = os.getenv(name, "")
    try:
        value = float(raw) if str(raw).strip() else default
    except ValueError:
        value = default
    return max(low, min(high, value))


def _env_int(name: str, default: int, low: int, high: int) -> int:
    return int(_env_float(name, float(default), float(low), float(high)))


def _env_ms(name: str, default_ms: int, low_ms: int, high_ms: int) -> int:
    seconds = _env_float(name, default_ms / 1000.0, low_ms / 1000.0, high_ms / 1000.0)
    return int(seconds * 1000)
