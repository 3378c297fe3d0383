"""Shared helpers for clicking, typing and scrolling."""

from __future__ import annotations

from typing import Any

from linkpilot.resolver import ResolvedElement


def click(target: ResolvedElement, *, timeout_ms: int) -> None:
    target.locator.click(timeout=timeout_ms)


def type_into(target: ResolvedElement, text: str, *, delay_ms: int, timeout_ms: int, clear: bool = True) -> None:
    locator = target.locator
    locator.click(timeout=timeout_ms)
    if clear:
        locator.fill("", timeout=timeout_ms)
    if delay_ms > 0:
        locator.press_sequentially(text, delay=delay_ms, timeout=timeout_ms)
    else:
        locator.fill(text, timeout=timeout_ms)


def press_enter(target: ResolvedElement, *, timeout_ms: int) -> None:
    target.locator.press("Enter", timeout=timeout_ms)


def scroll_page(page: Any, amount: int) -> None:
    step = max(80, int(amount))
    page.evaluate("(step) => window.scrollBy(0, step)", step)


def page_text(page: Any) -> str:
    try:
        return str(page.content() or "")
    except Exception:
        return ""
