"""Read-only data extraction driven by selector chains.

Every function here reads from a page (or a container locator) and returns
plain data. Field lookups use the same SelectorSpec chains as the actions:
the first candidate producing a non-empty value wins.
"""

from __future__ import annotations

import re
from typing import Any, Mapping

from linkpilot import selector_chains as chains
from linkpilot.constants import LIKE_ACTIVE_CLASSES
from linkpilot.models import SelectorSpec
from linkpilot.resolver import element_attr, element_text

_SCAN_LIMIT = 10
_CONNECTIONS_RE = re.compile(r"\d[\d,.]*\+?")
_SEE_MORE_RE = re.compile(r"\b(?:see|show) more\b|…more", flags=re.IGNORECASE)

PROFILE_FIELDS: dict[str, SelectorSpec] = {
    "name": chains.PROFILE_NAME,
    "headline": chains.PROFILE_HEADLINE,
    "location": chains.PROFILE_LOCATION,
    "about": chains.PROFILE_ABOUT,
}
PROFILE_LISTS: dict[str, SelectorSpec] = {
    "experience": chains.PROFILE_EXPERIENCE,
    "education": chains.PROFILE_EDUCATION,
    "skills": chains.PROFILE_SKILLS,
}
POST_FIELDS: dict[str, SelectorSpec] = {
    "authorName": chains.POST_AUTHOR_NAME,
    "authorHeadline": chains.POST_AUTHOR_HEADLINE,
    "postText": chains.POST_TEXT,
    "postDate": chains.POST_DATE,
}
FEED_ITEM_FIELDS: dict[str, SelectorSpec] = {
    "author": chains.POST_AUTHOR_NAME,
    "content": chains.POST_TEXT,
    "timestamp": chains.POST_DATE,
    "engagement": chains.POST_ENGAGEMENT,
}


def first_text(root: Any, spec: SelectorSpec) -> str:
    for selector in spec:
        group = root.locator(selector)
        try:
            total = min(group.count(), _SCAN_LIMIT)
        except Exception:
            continue
        for index in range(total):
            text = element_text(group.nth(index))
            if text:
                return text
    return ""


def first_attr(root: Any, spec: SelectorSpec, attr: str) -> str:
    for selector in spec:
        group = root.locator(selector)
        try:
            total = min(group.count(), _SCAN_LIMIT)
        except Exception:
            continue
        for index in range(total):
            value = element_attr(group.nth(index), attr).strip()
            if value:
                return value
    return ""


def all_texts(root: Any, spec: SelectorSpec, *, limit: int = 50) -> list[str]:
    for selector in spec:
        group = root.locator(selector)
        try:
            total = min(group.count(), limit)
        except Exception:
            continue
        texts = [text for text in (element_text(group.nth(i)) for i in range(total)) if text]
        if texts:
            return texts
    return []


def extract_record(root: Any, fields: Mapping[str, SelectorSpec]) -> dict[str, str]:
    return {key: first_text(root, spec) for key, spec in fields.items()}


def count_matches(root: Any, spec: SelectorSpec) -> int:
    try:
        return int(root.locator(spec.joined()).count())
    except Exception:
        return 0


def is_pressed(locator: Any) -> bool:
    if element_attr(locator, "aria-pressed").strip().lower() == "true":
        return True
    classes = element_attr(locator, "class").split()
    return any(cls == marker or cls.endswith(marker) for cls in classes for marker in LIKE_ACTIVE_CLASSES)


def clean_about(text: str) -> str:
    return " ".join(_SEE_MORE_RE.sub("", text).split())


def connections_count(text: str) -> str:
    match = _CONNECTIONS_RE.search(text or "")
    return match.group(0) if match else (text or "")


def extract_profile(page: Any) -> dict[str, Any]:
    record: dict[str, Any] = extract_record(page, PROFILE_FIELDS)
    record["about"] = clean_about(record.get("about", ""))
    record["connections"] = connections_count(first_text(page, chains.PROFILE_CONNECTIONS))
    for key, spec in PROFILE_LISTS.items():
        record[key] = all_texts(page, spec)
    return record


def extract_post(root: Any) -> dict[str, Any]:
    record: dict[str, Any] = extract_record(root, POST_FIELDS)
    record["authorProfileUrl"] = first_attr(root, chains.POST_AUTHOR_LINK, "href")
    like = None
    for selector in chains.LIKE_BUTTON:
        candidate = root.locator(selector).first
        try:
            if candidate.count() > 0:
                like = candidate
                break
        except Exception:
            continue
    record["isLiked"] = bool(like is not None and is_pressed(like))
    return record


def extract_feed_item(container: Any) -> dict[str, Any]:
    record: dict[str, Any] = extract_record(container, FEED_ITEM_FIELDS)
    record["postUrl"] = first_attr(container, chains.POST_LINK, "href")
    urn = element_attr(container, "data-urn").strip()
    if urn:
        record["urn"] = urn
    return record
