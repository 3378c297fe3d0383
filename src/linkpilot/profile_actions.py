"""Profile operations: connect, follow, message and read.

Profile pages keep loading long after the DOM is ready, so they use the
loose navigator plus a stabilisation pause, and check for an auth wall
before touching anything.
"""

from __future__ import annotations

from typing import Any

from linkpilot import selector_chains as chains
from linkpilot.constants import (
    ANY_BUTTON,
    LAST_PRIMARY_BUTTON,
    LIMITED_PROFILE_NOTE,
    PENDING_MARKERS,
    PRIMARY_BUTTONS,
)
from linkpilot.errors import AuthWallError, ConfigurationError, NavigationError, UIDriftError
from linkpilot.extraction import extract_profile
from linkpilot.models import ActionContext, ActionRequest, ActionResult
from linkpilot.navigator import goto_loose, pause
from linkpilot.resolver import ResolvedElement, attempted_trail, element_state, find_button_by_text, probe, resolve
from linkpilot.web_common import is_authwall_url, is_company_url, is_profile_url, normalize_url, safe_page_url
from linkpilot.web_interaction import click, page_text, type_into

_CONNECT_WORDS = ("connect",)


def require_profile_url(request: ActionRequest, *, allow_company: bool = False) -> str:
    url = normalize_url(request.url or request.param_str("profileUrl"))
    if not url:
        raise ConfigurationError(f"profile/{request.operation} requires a profile URL")
    if not (is_profile_url(url) or (allow_company and is_company_url(url))):
        raise ConfigurationError(f"Invalid profile URL: {url}")
    return url


def open_profile(ctx: ActionContext, url: str) -> None:
    if not goto_loose(ctx.page, url, config=ctx.config, sink=ctx.sink):
        raise NavigationError(f"Could not load profile {url}", url=url)
    pause(ctx.page, ctx.config.profile_stabilize_ms)
    check_auth_wall(ctx)


def check_auth_wall(ctx: ActionContext) -> None:
    current = safe_page_url(ctx.page)
    if is_authwall_url(current) or probe(ctx.page, chains.AUTHWALL_LANDMARK) is not None:
        raise AuthWallError(f"Hit an auth wall at {current}; the session is not authenticated", url=current)


def find_connect_button(ctx: ActionContext) -> ResolvedElement | None:
    timeout = ctx.config.element_timeout_ms
    found = resolve(ctx.page, chains.PROFILE_CONNECT_BUTTON, timeout_ms=timeout, sink=ctx.sink)
    if found is not None:
        return found
    ctx.sink.debug("connect chain exhausted; scanning primary buttons")
    match = find_button_by_text(ctx.page, _CONNECT_WORDS, scope_selector=PRIMARY_BUTTONS)
    if match is not None:
        return match[0]
    ctx.sink.debug("no primary connect button; scanning every button")
    match = find_button_by_text(ctx.page, _CONNECT_WORDS, scope_selector=ANY_BUTTON, include_aria_label=True)
    if match is not None:
        return match[0]
    return None


def find_send_button(ctx: ActionContext) -> ResolvedElement | None:
    timeout = ctx.config.element_timeout_ms
    found = resolve(ctx.page, chains.SEND_CONNECTION_BUTTON, timeout_ms=timeout, sink=ctx.sink)
    if found is not None:
        return found
    found = probe(ctx.page, chains.MODAL_PRIMARY_BUTTON)
    if found is not None:
        return found
    group = ctx.page.locator(LAST_PRIMARY_BUTTON)
    try:
        total = group.count()
    except Exception:
        return None
    if total <= 0:
        return None
    last = group.nth(total - 1)
    state = element_state(last)
    if not state.interactable:
        return None
    return ResolvedElement(selector=f"{LAST_PRIMARY_BUTTON} >> nth={total - 1}", locator=last, state=state)


def has_pending_indicator(page: Any) -> bool:
    text = page_text(page).lower()
    return any(marker in text for marker in PENDING_MARKERS)


def connect_with_profile(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_profile_url(request)
    message = (request.param_str("connectionMessage") or request.param_str("message")).strip()
    open_profile(ctx, url)
    timeout = ctx.config.element_timeout_ms
    connect = find_connect_button(ctx)
    if connect is None:
        ctx.sink.capture(ctx.page, "connect-button-missing")
        raise UIDriftError(
            "Could not connect: connect button not found (already connected, pending, or layout changed)",
            attempted=attempted_trail(chains.PROFILE_CONNECT_BUTTON) + (PRIMARY_BUTTONS, ANY_BUTTON),
        )
    click(connect, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)

    add_note_found = False
    if message:
        add_note = resolve(ctx.page, chains.ADD_NOTE_BUTTON, timeout_ms=timeout, sink=ctx.sink)
        if add_note is None:
            raise UIDriftError("Add a note button not found", attempted=attempted_trail(chains.ADD_NOTE_BUTTON))
        add_note_found = True
        click(add_note, timeout_ms=timeout)
        pause(ctx.page, ctx.config.action_settle_ms // 2)
        field = resolve(ctx.page, chains.CONNECTION_MESSAGE_FIELD, timeout_ms=timeout, sink=ctx.sink)
        if field is None:
            raise UIDriftError(
                "Connection note field not found", attempted=attempted_trail(chains.CONNECTION_MESSAGE_FIELD)
            )
        type_into(field, message, delay_ms=ctx.config.typing_delay_ms, timeout_ms=timeout)

    send = find_send_button(ctx)
    if send is None:
        raise UIDriftError(
            "Send invitation button not found",
            attempted=attempted_trail(chains.SEND_CONNECTION_BUTTON, chains.MODAL_PRIMARY_BUTTON)
            + (LAST_PRIMARY_BUTTON,),
        )
    click(send, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    pending = has_pending_indicator(ctx.page)
    if not pending:
        ctx.sink.warn(f"no pending indicator after sending invitation to {url}")
    ctx.sink.info(f"connection request sent to {url}")
    return ActionResult(
        True,
        "connection request sent",
        {
            "url": url,
            "message": message,
            "uiState": {
                "connectButtonFound": True,
                "addNoteButtonFound": add_note_found,
                "sendButtonFound": True,
                "hasPendingIndicator": pending,
            },
        },
    )


def follow_profile(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_profile_url(request, allow_company=True)
    open_profile(ctx, url)
    follow = resolve(ctx.page, chains.PROFILE_FOLLOW_BUTTON, timeout_ms=ctx.config.element_timeout_ms, sink=ctx.sink)
    if follow is None:
        raise UIDriftError(
            "Follow button not found (already following or layout changed)",
            attempted=attempted_trail(chains.PROFILE_FOLLOW_BUTTON),
        )
    click(follow, timeout_ms=ctx.config.element_timeout_ms)
    pause(ctx.page, ctx.config.action_settle_ms)
    ctx.sink.info(f"followed {url}")
    return ActionResult(True, "followed", {"url": url})


def message_profile(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    text = request.param_str("message").strip()
    if not text:
        raise ConfigurationError("profile/message requires params.message")
    url = require_profile_url(request)
    open_profile(ctx, url)
    timeout = ctx.config.element_timeout_ms
    opener = resolve(ctx.page, chains.PROFILE_MESSAGE_BUTTON, timeout_ms=timeout, sink=ctx.sink)
    if opener is None:
        raise UIDriftError("Message button not found", attempted=attempted_trail(chains.PROFILE_MESSAGE_BUTTON))
    click(opener, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    compose = resolve(ctx.page, chains.MESSAGE_COMPOSE, timeout_ms=timeout, sink=ctx.sink)
    if compose is None:
        raise UIDriftError("Message compose box not found", attempted=attempted_trail(chains.MESSAGE_COMPOSE))
    type_into(compose, text, delay_ms=ctx.config.typing_delay_ms, timeout_ms=timeout)
    send = resolve(ctx.page, chains.MESSAGE_SEND, timeout_ms=timeout, sink=ctx.sink)
    if send is None:
        raise UIDriftError("Message send button not found", attempted=attempted_trail(chains.MESSAGE_SEND))
    click(send, timeout_ms=timeout)
    pause(ctx.page, ctx.config.action_settle_ms)
    ctx.sink.info(f"messaged {url}")
    return ActionResult(True, "message sent", {"url": url, "message": text})


def get_profile_info(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    url = require_profile_url(request)
    open_profile(ctx, url)
    landmark = resolve(ctx.page, chains.PROFILE_LANDMARK, timeout_ms=ctx.config.element_timeout_ms, sink=ctx.sink)
    data = extract_profile(ctx.page)
    data["url"] = url
    if not data.get("name") and not data.get("headline"):
        if landmark is None and not is_profile_url(safe_page_url(ctx.page)):
            raise UIDriftError(
                f"Profile content not found at {safe_page_url(ctx.page)}",
                attempted=attempted_trail(chains.PROFILE_LANDMARK, chains.PROFILE_NAME),
            )
        ctx.sink.warn(f"limited profile view for {url}")
        data["extractionNote"] = LIMITED_PROFILE_NOTE
    return ActionResult(True, "profile info retrieved", {"data": data})
