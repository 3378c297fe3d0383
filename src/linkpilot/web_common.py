"""Shared helpers for URL classification and page access."""

from __future__ import annotations

import importlib.util
from urllib.parse import urlparse

from linkpilot.constants import (
    AUTHENTICATED_URL_MARKERS,
    AUTHWALL_URL_MARKERS,
    CHECKPOINT_URL_MARKERS,
    COMPANY_URL_MARKERS,
    POST_URL_MARKERS,
    PROFILE_URL_MARKERS,
    SIGNED_OUT_URL_MARKERS,
)


def collapse_ws(value: object) -> str:
    return " ".join(str(value or "").split())


def normalize_url(raw: str) -> str:
    return str(raw or "").strip().rstrip(".,;:!?)]}\"'")


def is_valid_url(text: str) -> bool:
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def join_url(base_url: str, path: str) -> str:
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def _path_of(url: str) -> str:
    try:
        parsed = urlparse(str(url or ""))
    except ValueError:
        return ""
    return (parsed.path or "/").lower()


def _path_has(url: str, markers: tuple[str, ...]) -> bool:
    path = _path_of(url)
    return any(marker in path for marker in markers)


def is_post_url(url: str) -> bool:
    return is_valid_url(url) and _path_has(url, POST_URL_MARKERS)


def is_profile_url(url: str) -> bool:
    return is_valid_url(url) and _path_has(url, PROFILE_URL_MARKERS)


def is_company_url(url: str) -> bool:
    return is_valid_url(url) and _path_has(url, COMPANY_URL_MARKERS)


def is_checkpoint_url(url: str) -> bool:
    return _path_has(url, CHECKPOINT_URL_MARKERS)


def is_authenticated_url(url: str) -> bool:
    if is_checkpoint_url(url):
        return False
    path = _path_of(url)
    return any(path == marker or path.startswith(marker + "/") for marker in AUTHENTICATED_URL_MARKERS)


def is_authwall_url(url: str) -> bool:
    return _path_has(url, AUTHWALL_URL_MARKERS) or is_checkpoint_url(url)


def is_signed_out_url(url: str) -> bool:
    return _path_has(url, SIGNED_OUT_URL_MARKERS)


def playwright_available() -> bool:
    return importlib.util.find_spec("playwright.sync_api") is not None



def safe_page_url(page: object) -> str:
    try:
        return str(getattr(page, "url", "") or "")
    except Exception:
        return ""


def is_timeout_error(exc: BaseException) -> bool:
    name = exc.__class__.__name__.lower()
    if "timeout" in name:
        return True
    msg = str(exc).lower()
    return "timeout" in msg and "exceeded" in msg
