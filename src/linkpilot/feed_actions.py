"""Feed listing with bounded scroll-and-poll."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from linkpilot import selector_chains as chains
from linkpilot.constants import EMPTY_FEED_NOTE, FEED_DEFAULT_POST_COUNT
from linkpilot.errors import ConfigurationError, NavigationError
from linkpilot.extraction import count_matches, extract_feed_item
from linkpilot.models import ActionContext, ActionRequest, ActionResult, SelectorSpec
from linkpilot.navigator import goto, pause
from linkpilot.web_common import is_valid_url, normalize_url
from linkpilot.web_interaction import scroll_page

STOP_DESIRED = "desired"
STOP_BUDGET = "budget"
STOP_STALL = "stall"


@dataclass(frozen=True)
class ScrollOutcome:
    count: int
    iterations: int
    stop_reason: str


def scroll_and_poll(
    page: Any,
    spec: SelectorSpec,
    *,
    desired: int,
    max_iterations: int,
    increment: int,
    pause_ms: int,
) -> ScrollOutcome:
    """Scroll until ``desired`` containers exist, the budget runs out, or the count stalls."""
    count = count_matches(page, spec)
    if count >= desired:
        return ScrollOutcome(count=count, iterations=0, stop_reason=STOP_DESIRED)
    previous = count
    for iteration in range(1, max_iterations + 1):
        scroll_page(page, increment)
        pause(page, pause_ms)
        count = count_matches(page, spec)
        if count >= desired:
            return ScrollOutcome(count=count, iterations=iteration, stop_reason=STOP_DESIRED)
        if count == previous:
            return ScrollOutcome(count=count, iterations=iteration, stop_reason=STOP_STALL)
        previous = count
    return ScrollOutcome(count=count, iterations=max_iterations, stop_reason=STOP_BUDGET)


def collect_feed_items(page: Any, spec: SelectorSpec, limit: int) -> list[dict[str, Any]]:
    group = page.locator(spec.joined())
    try:
        total = min(group.count(), limit)
    except Exception:
        return []
    items: list[dict[str, Any]] = []
    for index in range(total):
        record = extract_feed_item(group.nth(index))
        if any(record.get(key) for key in ("author", "content", "postUrl")):
            items.append(record)
    return items


def get_feed_posts(ctx: ActionContext, request: ActionRequest) -> ActionResult:
    desired = request.param_int("postCount", FEED_DEFAULT_POST_COUNT)
    if desired < 1:
        raise ConfigurationError("params.postCount must be at least 1")
    url = normalize_url(request.url or "") or ctx.config.feed_url
    if not is_valid_url(url):
        raise ConfigurationError(f"Invalid feed URL: {url}")
    if not goto(ctx.page, url, config=ctx.config, sink=ctx.sink):
        raise NavigationError(f"Could not load feed {url}", url=url)
    outcome = scroll_and_poll(
        ctx.page,
        chains.POST_CONTAINER,
        desired=desired,
        max_iterations=ctx.config.feed_max_scroll_iterations,
        increment=ctx.config.feed_scroll_increment,
        pause_ms=ctx.config.feed_scroll_pause_ms,
    )
    ctx.sink.info(
        f"feed scroll stopped ({outcome.stop_reason}) after {outcome.iterations} iterations "
        f"with {outcome.count} containers"
    )
    posts = collect_feed_items(ctx.page, chains.POST_CONTAINER, desired)
    payload: dict[str, Any] = {
        "count": len(posts),
        "posts": posts,
        "scroll": {"iterations": outcome.iterations, "stopReason": outcome.stop_reason},
    }
    if not posts:
        ctx.sink.warn(f"no feed posts collected from {url}")
        payload["note"] = EMPTY_FEED_NOTE
    return ActionResult(True, "feed posts retrieved", payload)
