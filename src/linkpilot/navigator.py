"""Page loading with bounded retries and alternate wait strategies."""

from __future__ import annotations

from typing import Any

from linkpilot.config import RuntimeConfig
from linkpilot.diagnostics import DiagnosticSink


def goto(
    page: Any,
    url: str,
    *,
    config: RuntimeConfig,
    sink: DiagnosticSink,
    max_attempts: int | None = None,
) -> bool:
    """Load ``url`` waiting for the network to settle; False once attempts run out."""
    attempts = max(1, int(max_attempts if max_attempts is not None else config.navigation_attempts))
    for attempt in range(1, attempts + 1):
        sink.debug(f"navigating to {url} (attempt {attempt}/{attempts})")
        try:
            page.goto(url, wait_until="networkidle", timeout=config.navigation_timeout_ms)
            return True
        except Exception as exc:
            sink.warn(f"navigation to {url} failed (attempt {attempt}/{attempts}): {exc}")
        if attempt < attempts:
            pause(page, config.navigation_retry_delay_ms)
    sink.error(f"navigation to {url} failed after {attempts} attempts")
    return False


def goto_loose(page: Any, url: str, *, config: RuntimeConfig, sink: DiagnosticSink) -> bool:
    """DOM-ready navigation for pages usable before network activity settles."""
    sink.debug(f"navigating to {url} (domcontentloaded)")
    try:
        page.goto(url, wait_until="domcontentloaded", timeout=config.navigation_timeout_ms)
        return True
    except Exception as exc:
        sink.warn(f"domcontentloaded navigation to {url} failed: {exc}; trying plain load")
    try:
        page.goto(url, timeout=config.navigation_timeout_ms * 2)
        return True
    except Exception as exc:
        sink.warn(f"plain navigation to {url} failed: {exc}")
    return False


def await_transition(page: Any, *, config: RuntimeConfig, sink: DiagnosticSink, label: str) -> None:
    """Wait for the page to settle after a submit; a missing navigation is tolerated."""
    try:
        page.wait_for_load_state("networkidle", timeout=config.navigation_timeout_ms)
    except Exception as exc:
        sink.info(f"{label}: no navigation settle detected ({exc}); continuing")
        pause(page, config.action_settle_ms)


def pause(page: Any, ms: int) -> None:
    if ms <= 0:
        return
    page.wait_for_timeout(int(ms))
