"""Dispatch of work items to resource operations."""

from __future__ import annotations

from typing import Callable

from linkpilot import feed_actions, post_actions, profile_actions
from linkpilot.errors import AutomationError, ConfigurationError, UIDriftError
from linkpilot.models import ActionContext, ActionRequest, ActionResult
from linkpilot.web_common import is_timeout_error

ActionFn = Callable[[ActionContext, ActionRequest], ActionResult]

OPERATIONS: dict[tuple[str, str], ActionFn] = {
    ("post", "like"): post_actions.like_post,
    ("post", "comment"): post_actions.comment_on_post,
    ("post", "share"): post_actions.share_post,
    ("post", "getInfo"): post_actions.get_post_info,
    ("profile", "connect"): profile_actions.connect_with_profile,
    ("profile", "follow"): profile_actions.follow_profile,
    ("profile", "message"): profile_actions.message_profile,
    ("profile", "getInfo"): profile_actions.get_profile_info,
    ("feed", "getPosts"): feed_actions.get_feed_posts,
}
UNSUPPORTED: dict[tuple[str, str], str] = {
    ("feed", "monitor"): "Feed monitoring is not supported; schedule repeated feed/getPosts runs instead",
}


def lookup(resource: str, operation: str) -> ActionFn:
    key = (resource, operation)
    if key in UNSUPPORTED:
        raise ConfigurationError(UNSUPPORTED[key])
    fn = OPERATIONS.get(key)
    if fn is None:
        known = sorted(op for res, op in OPERATIONS if res == resource)
        raise ConfigurationError(f"Unknown operation '{operation}' for resource '{resource}'. Known: {known}")
    return fn


def execute(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    """Run one work item; failures carry a screenshot path in ``diagnostic``."""
    fn = lookup(request.resource, request.operation)
    label = f"{request.resource}-{request.operation}"
    ctx.sink.info(f"item {request.item_index}: {label} {request.url or ''}".rstrip())
    try:
        result = fn(ctx, request)
    except AutomationError as exc:
        _record_failure(ctx, exc, label, request.item_index)
        raise
    except Exception as exc:
        if is_timeout_error(exc):
            wrapped: AutomationError = UIDriftError(f"{label} timed out: {exc}")
        else:
            wrapped = AutomationError(f"{label} failed: {exc}")
        _record_failure(ctx, wrapped, label, request.item_index)
        raise wrapped from exc
    ctx.sink.info(f"item {request.item_index}: {label} -> {result.action}")
    return result


def _record_failure(ctx: ActionContext, exc: AutomationError, label: str, item_index: int) -> None:
    if not exc.diagnostic:
        exc.diagnostic = ctx.sink.capture(ctx.page, f"{label}-error")
    ctx.sink.error(f"item {item_index}: {label} failed: {exc}")
