"""Data models and strict parsing for credentials and work items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from linkpilot.config import RuntimeConfig
from linkpilot.constants import ALLOWED_RESOURCES
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import ConfigurationError


CREDENTIAL_KEYS = (
    "username",
    "password",
    "use_2fa",
    "two_factor_code",
    "headless",
    "session_cookie_storage",
)


@dataclass(frozen=True)
class Credentials:
    identifier: str
    secret: str = field(repr=False)
    two_factor_enabled: bool = False
    two_factor_code: str = field(default="", repr=False)
    headless: bool = True
    persist_session: bool = True

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Credentials":
        extra = sorted(set(payload.keys()) - set(CREDENTIAL_KEYS))
        if extra:
            raise ConfigurationError(f"Invalid credential keys: extra={extra}")
        identifier = _expect_str(payload, "username").strip()
        secret = _expect_str(payload, "password")
        if not identifier or not secret:
            raise ConfigurationError("Credentials require a non-empty username and password")
        return cls(
            identifier=identifier,
            secret=secret,
            two_factor_enabled=_expect_bool(payload, "use_2fa", False),
            two_factor_code=_expect_str(payload, "two_factor_code", "").strip(),
            headless=_expect_bool(payload, "headless", True),
            persist_session=_expect_bool(payload, "session_cookie_storage", True),
        )


@dataclass(frozen=True)
class SelectorSpec:
    """Ordered locator candidates for one logical UI target."""

    name: str
    candidates: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError(f"SelectorSpec '{self.name}' must have at least one candidate")
        if any(not str(item).strip() for item in self.candidates):
            raise ValueError(f"SelectorSpec '{self.name}' contains a blank candidate")

    def __iter__(self) -> Iterator[str]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def joined(self) -> str:
        return ", ".join(self.candidates)


@dataclass(frozen=True)
class ElementState:
    present: bool
    visible: bool
    enabled: bool

    @property
    def interactable(self) -> bool:
        return self.present and self.visible and self.enabled


@dataclass(frozen=True)
class ActionRequest:
    resource: str
    operation: str
    url: str | None = None
    params: dict[str, Any] = field(default_factory=dict)
    item_index: int = 0

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any], item_index: int = 0) -> "ActionRequest":
        resource = _expect_str(payload, "resource").strip().lower()
        if resource not in ALLOWED_RESOURCES:
            raise ConfigurationError(
                f"Invalid resource '{resource}'. Must be one of {list(ALLOWED_RESOURCES)}"
            )
        operation = _expect_str(payload, "operation").strip()
        if not operation:
            raise ConfigurationError("'operation' must be a non-empty string")
        url = payload.get("url")
        if url is not None and not isinstance(url, str):
            raise ConfigurationError("'url' must be a string")
        params = payload.get("params", {})
        if not isinstance(params, dict):
            raise ConfigurationError("'params' must be an object")
        return cls(
            resource=resource,
            operation=operation,
            url=(url or "").strip() or None,
            params=dict(params),
            item_index=item_index,
        )

    def param_str(self, key: str, default: str = "") -> str:
        value = self.params.get(key, default)
        if value is None:
            return default
        return str(value)

    def param_int(self, key: str, default: int) -> int:
        value = self.params.get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Parameter '{key}' must be an integer") from exc


@dataclass(frozen=True)
class ActionResult:
    success: bool
    action: str
    payload: dict[str, Any] = field(default_factory=dict)
    diagnostic: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success, "action": self.action}
        data.update(self.payload)
        if self.diagnostic:
            data["diagnostic"] = self.diagnostic
        return data


@dataclass
class CheckpointContext:
    url: str
    depth: int = 0
    attempted_buttons: list[str] = field(default_factory=list)
    attempted_inputs: list[str] = field(default_factory=list)

    def descend(self, url: str) -> "CheckpointContext":
        return CheckpointContext(
            url=url,
            depth=self.depth + 1,
            attempted_buttons=list(self.attempted_buttons),
            attempted_inputs=list(self.attempted_inputs),
        )

    def trail(self) -> tuple[str, ...]:
        return tuple(
            [f"input={item}" for item in self.attempted_inputs]
            + [f"button={item}" for item in self.attempted_buttons]
        )


def _expect_str(payload: Mapping[str, Any], key: str, default: str | None = None) -> str:
    if key not in payload:
        if default is None:
            raise ConfigurationError(f"'{key}' is required")
        return default
    value = payload[key]
    if value is None and default is not None:
        return default
    if not isinstance(value, str):
        raise ConfigurationError(f"'{key}' must be a string")
    return value


def _expect_bool(payload: Mapping[str, Any], key: str, default: bool) -> bool:
    value = payload.get(key, default)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' must be a boolean")
    return value


@dataclass(frozen=True)
class ActionContext:
    """What every action receives: the shared page plus run-scoped settings."""

    page: Any
    config: RuntimeConfig
    sink: DiagnosticSink
