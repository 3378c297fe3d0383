"""In-memory stand-ins for Playwright pages and locators.

Elements are registered with the exact selector strings they should match;
no CSS is parsed. Comma-separated selector lists match the union of parts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from linkpilot.config import RuntimeConfig


class FakeTimeoutError(Exception):
    pass


@dataclass
class FakeElement:
    selectors: tuple[str, ...]
    text: str = ""
    attrs: dict[str, str] = field(default_factory=dict)
    visible: bool = True
    enabled: bool = True
    children: list["FakeElement"] = field(default_factory=list)
    on_click: Callable[["FakeElement"], None] | None = None
    value: str = ""
    clicks: int = 0

    def matches(self, selector: str) -> bool:
        return selector in self.selectors


def _parts(selector: str) -> list[str]:
    return [part.strip() for part in selector.split(",") if part.strip()]


def _walk(elements: list[FakeElement]) -> list[FakeElement]:
    found: list[FakeElement] = []
    for element in elements:
        found.append(element)
        found.extend(_walk(element.children))
    return found


class FakeLocator:
    def __init__(self, roots: Callable[[], list[FakeElement]], selector: str, index: int | None = None) -> None:
        self._roots = roots
        self._selector = selector
        self._index = index

    def _all(self) -> list[FakeElement]:
        parts = _parts(self._selector)
        return [el for el in _walk(self._roots()) if any(el.matches(part) for part in parts)]

    def _one(self) -> FakeElement | None:
        items = self._all()
        index = self._index or 0
        if index >= len(items):
            return None
        return items[index]

    def _require(self) -> FakeElement:
        element = self._one()
        if element is None:
            raise FakeTimeoutError(f"Timeout 1ms exceeded waiting for {self._selector}")
        return element

    @property
    def first(self) -> "FakeLocator":
        return FakeLocator(self._roots, self._selector, 0)

    def nth(self, index: int) -> "FakeLocator":
        return FakeLocator(self._roots, self._selector, index)

    def count(self) -> int:
        if self._index is not None:
            return 1 if self._one() is not None else 0
        return len(self._all())

    def wait_for(self, state: str = "visible", timeout: int | None = None) -> None:
        self._require()

    def is_visible(self) -> bool:
        element = self._one()
        return bool(element and element.visible)

    def is_enabled(self) -> bool:
        element = self._one()
        return bool(element and element.enabled)

    def click(self, timeout: int | None = None) -> None:
        element = self._require()
        element.clicks += 1
        if element.on_click is not None:
            element.on_click(element)

    def fill(self, value: str, timeout: int | None = None) -> None:
        self._require().value = value

    def press_sequentially(self, text: str, delay: int = 0, timeout: int | None = None) -> None:
        element = self._require()
        element.value += text

    def press(self, key: str, timeout: int | None = None) -> None:
        element = self._require()
        if key == "Enter" and element.on_click is not None:
            element.on_click(element)

    def inner_text(self) -> str:
        return self._require().text

    def text_content(self) -> str:
        return self._require().text

    def get_attribute(self, name: str) -> str | None:
        return self._require().attrs.get(name)

    def locator(self, selector: str) -> "FakeLocator":
        return FakeLocator(lambda: list(self._require().children), selector)


class FakePage:
    def __init__(self, url: str = "about:blank", elements: list[FakeElement] | None = None) -> None:
        self.url = url
        self.elements: list[FakeElement] = list(elements or [])
        self.gotos: list[tuple[str, str]] = []
        self.waits: list[int] = []
        self.scrolls: list[int] = []
        self.screenshots: list[str] = []
        self.html = ""
        self.goto_failures = 0
        self.routes: dict[str, Callable[["FakePage"], None]] = {}
        self.on_scroll: Callable[["FakePage"], None] | None = None
        self.on_wait: Callable[["FakePage", int], None] | None = None

    def add(self, *elements: FakeElement) -> None:
        self.elements.extend(elements)

    def locator(self, selector: str) -> FakeLocator:
        return FakeLocator(lambda: self.elements, selector)

    def goto(self, url: str, wait_until: str = "load", timeout: int | None = None) -> None:
        self.gotos.append((url, wait_until))
        if self.goto_failures > 0:
            self.goto_failures -= 1
            raise FakeTimeoutError(f"Timeout {timeout}ms exceeded navigating to {url}")
        self.url = url
        route = self.routes.get(url)
        if route is not None:
            route(self)

    def wait_for_load_state(self, state: str = "load", timeout: int | None = None) -> None:
        return None

    def wait_for_timeout(self, ms: int) -> None:
        self.waits.append(ms)
        if self.on_wait is not None:
            self.on_wait(self, ms)

    def evaluate(self, script: str, arg: Any = None) -> Any:
        self.scrolls.append(int(arg or 0))
        if self.on_scroll is not None:
            self.on_scroll(self)
        return None

    def content(self) -> str:
        return self.html

    def screenshot(self, path: str = "", full_page: bool = False) -> None:
        self.screenshots.append(path)
        with open(path, "wb") as fh:
            fh.write(b"\x89PNG")

    def title(self) -> str:
        return "Fake"

    def set_default_timeout(self, ms: int) -> None:
        return None

    def set_default_navigation_timeout(self, ms: int) -> None:
        return None


def button(*selectors: str, text: str = "", **kwargs: Any) -> FakeElement:
    return FakeElement(selectors=tuple(selectors), text=text, **kwargs)


def fast_config(**overrides: Any) -> RuntimeConfig:
    settings: dict[str, Any] = {
        "base_url": "https://social.test",
        "action_settle_ms": 0,
        "typing_delay_ms": 0,
        "navigation_retry_delay_ms": 0,
        "profile_stabilize_ms": 0,
        "checkpoint_click_settle_ms": 0,
        "checkpoint_grace_seconds": 0.0,
        "feed_scroll_pause_ms": 0,
        "element_timeout_ms": 10,
        "navigation_timeout_ms": 10,
    }
    settings.update(overrides)
    return RuntimeConfig(**settings)
