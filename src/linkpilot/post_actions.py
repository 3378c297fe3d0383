"""Post operations: like, comment, share and read."""

from __future__ import annotations

from typing import Any

from linkpilot import selector_chains as chains
from linkpilot.constants import EMPTY_POST_NOTE
from linkpilot.errors import ConfigurationError, NavigationError, UIDriftError
from linkpilot.extraction import extract_post, is_pressed
from linkpilot.models import ActionContext, ActionRequest, ActionResult
from linkpilot.navigator import goto, pause
from linkpilot.resolver import ResolvedElement, attempted_trail, probe, resolve
from linkpilot.web_common import is_post_url, normalize_url
from linkpilot.web_interaction import click, type_into


def require_post_url(request: ActionRequest) -> str:
    url = normalize_url(request.url or request.param_str("postUrl"))
    if not url:
        raise ConfigurationError(f"post/{request.operation} requires a post URL")
    if not is_post_url(url):
        raise ConfigurationError(f"Invalid post URL: {url}")
    return url


def open_post(ctx: ActionContext, url: str) -> Any:
    """Navigate to the post and return its container, or the page when none matched."""
    if not goto(ctx.page, url, config=ctx.config, sink=ctx.sink):
        raise NavigationError(f"Could not load post {url}", url=url)
    container = resolve(ctx.page, chains.POST_CONTAINER, timeout_ms=ctx.config.element_timeout_ms, sink=ctx.sink)
    if container is None:
        ctx.sink.warn(f"post container not found on {url}; searching the whole page")
        return None
    return container.locator


def _require(ctx: ActionContext, spec: Any, message: str, *, scope: Any = None) -> ResolvedElement:
    found = resolve(ctx.page, spec, timeout_ms=ctx.config.element_timeout_ms, sink=ctx.sink, scope=scope)
    if found is None and scope is not None:
        found = resolve(ctx.page, spec, timeout_ms=ctx.config.element_timeout_ms, sink=ctx.sink)
    if found is None:
        raise UIDriftError(message, attempted=attempted_trail(spec))
    return found


def like_post(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_post_url(request)
    scope = open_post(ctx, url)
    like = _require(ctx, chains.LIKE_BUTTON, "Like button not found - the post layout may have changed", scope=scope)
    if is_pressed(like.locator):
        ctx.sink.info(f"post already liked: {url}")
        return ActionResult(True, "liked", {"url": url})
    click(like, timeout_ms=ctx.config.element_timeout_ms)
    pause(ctx.page, ctx.config.action_settle_ms)
    if not is_pressed(like.locator):
        raise UIDriftError("Like action did not register", attempted=(like.selector,))
    ctx.sink.info(f"liked post {url}")
    return ActionResult(True, "liked", {"url": url})


def comment_on_post(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    text = request.param_str("commentText").strip()
    if not text:
        raise ConfigurationError("post/comment requires params.commentText")
    url = require_post_url(request)
    scope = open_post(ctx, url)
    timeout = ctx.config.element_timeout_ms
    opener = _require(ctx, chains.COMMENT_BUTTON, "Comment button not found", scope=scope)
    click(opener, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    box = _require(ctx, chains.COMMENT_TEXTBOX, "Comment box not found after opening the comment panel", scope=scope)
    type_into(box, text, delay_ms=ctx.config.typing_delay_ms, timeout_ms=timeout)
    submit = _require(ctx, chains.COMMENT_SUBMIT, "Comment submit button not found", scope=scope)
    click(submit, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms * 2)
    ctx.sink.info(f"commented on post {url}")
    return ActionResult(True, "commented", {"url": url, "comment": text})


def share_post(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_post_url(request)
    text = request.param_str("shareText").strip()
    scope = open_post(ctx, url)
    timeout = ctx.config.element_timeout_ms
    opener = _require(ctx, chains.SHARE_BUTTON, "Share button not found", scope=scope)
    click(opener, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    dialog = _require(ctx, chains.SHARE_DIALOG, "Share dialog did not open")
    if text:
        field = resolve(ctx.page, chains.SHARE_TEXTAREA, timeout_ms=timeout, sink=ctx.sink, scope=dialog.locator)
        if field is None:
            raise UIDriftError("Share text field not found", attempted=attempted_trail(chains.SHARE_TEXTAREA))
        type_into(field, text, delay_ms=ctx.config.typing_delay_ms, timeout_ms=timeout)
    submit = _require(ctx, chains.SHARE_SUBMIT, "Share submit button not found", scope=dialog.locator)
    click(submit, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    ctx.sink.info(f"shared post {url}")
    payload: dict[str, Any] = {"url": url}
    if text:
        payload["shareText"] = text
    return ActionResult(True, "shared", payload)


def get_post_info(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_post_url(request)
    scope = open_post(ctx, url)
    data = extract_post(scope if scope is not None else ctx.page)
    data["url"] = url
    if not data.get("authorName") and not data.get("postText"):
        if probe(ctx.page, chains.POST_CONTAINER) is None:
            ctx.sink.warn(f"no post content found on {url}")
        data["extractionNote"] = EMPTY_POST_NOTE
    return ActionResult(True, "post info retrieved", {"data": data})
