"""Ordered fallback-selector resolution.

``resolve`` walks a SelectorSpec in order and returns the first candidate
whose element is present, visible and enabled. Running out of candidates is
an ordinary outcome (``None``): callers use it to switch to another strategy.
No retries happen here; retry policy belongs to callers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from linkpilot.diagnostics import DiagnosticSink
from linkpilot.models import ElementState, SelectorSpec
from linkpilot.web_common import collapse_ws


@dataclass(frozen=True)
class ResolvedElement:
    selector: str
    locator: Any
    state: ElementState


def element_state(locator: Any) -> ElementState:
    try:
        present = locator.count() > 0
    except Exception:
        present = False
    if not present:
        return ElementState(present=False, visible=False, enabled=False)
    try:
        visible = bool(locator.is_visible())
    except Exception:
        visible = False
    try:
        enabled = bool(locator.is_enabled())
    except Exception:
        enabled = False
    return ElementState(present=True, visible=visible, enabled=enabled)


def resolve(
    page: Any,
    spec: SelectorSpec,
    *,
    timeout_ms: int,
    sink: DiagnosticSink | None = None,
    scope: Any | None = None,
) -> ResolvedElement | None:
    root = scope if scope is not None else page
    for selector in spec:
        locator = root.locator(selector).first
        try:
            locator.wait_for(state="attached", timeout=timeout_ms)
        except Exception:
            if sink is not None:
                sink.debug(f"{spec.name}: no match for {selector}")
            continue
        state = element_state(locator)
        if state.interactable:
            if sink is not None:
                sink.debug(f"{spec.name}: resolved via {selector}")
            return ResolvedElement(selector=selector, locator=locator, state=state)
        if sink is not None:
            sink.debug(f"{spec.name}: {selector} matched but not interactable ({state})")
    if sink is not None:
        sink.debug(f"{spec.name}: all {len(spec)} candidates failed")
    return None


def probe(page: Any, spec: SelectorSpec, *, scope: Any | None = None) -> ResolvedElement | None:
    """Zero-wait variant of ``resolve`` for landmark checks."""
    root = scope if scope is not None else page
    for selector in spec:
        locator = root.locator(selector).first
        state = element_state(locator)
        if state.interactable:
            return ResolvedElement(selector=selector, locator=locator, state=state)
    return None


def resolve_all(page: Any, spec: SelectorSpec, *, scope: Any | None = None) -> list[ResolvedElement]:
    root = scope if scope is not None else page
    found: list[ResolvedElement] = []
    for selector in spec:
        group = root.locator(selector)
        try:
            total = group.count()
        except Exception:
            continue
        for index in range(total):
            locator = group.nth(index)
            state = element_state(locator)
            if state.interactable:
                found.append(ResolvedElement(selector=f"{selector} >> nth={index}", locator=locator, state=state))
    return found


def element_text(locator: Any) -> str:
    for reader in ("inner_text", "text_content"):
        fn = getattr(locator, reader, None)
        if not callable(fn):
            continue
        try:
            value = fn()
        except Exception:
            continue
        text = collapse_ws(value)
        if text:
            return text
    return ""


def element_attr(locator: Any, name: str) -> str:
    try:
        return str(locator.get_attribute(name) or "")
    except Exception:
        return ""


def find_button_by_text(
    page: Any,
    words: Iterable[str],
    *,
    scope_selector: str,
    include_aria_label: bool = False,
) -> tuple[ResolvedElement, str] | None:
    """Scan buttons for visible text containing one of ``words``.

    Vocabulary order wins over document order: every button is checked
    against the first word before the second word is tried.
    """
    group = page.locator(scope_selector)
    try:
        total = group.count()
    except Exception:
        return None
    candidates: list[tuple[Any, str]] = []
    for index in range(total):
        locator = group.nth(index)
        label = element_text(locator).lower()
        if include_aria_label:
            label = f"{label} {element_attr(locator, 'aria-label').lower()}".strip()
        if label:
            candidates.append((locator, label))
    for word in words:
        needle = word.lower()
        for locator, label in candidates:
            if needle not in label:
                continue
            state = element_state(locator)
            if state.interactable:
                return ResolvedElement(selector=f"{scope_selector} >> text={word}", locator=locator, state=state), word
    return None


def attempted_trail(*specs: SelectorSpec) -> tuple[str, ...]:
    trail: list[str] = []
    for spec in specs:
        trail.extend(spec.candidates)
    return tuple(trail)
