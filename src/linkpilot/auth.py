"""Session establishment: login, two-factor and verification checkpoints.

The establisher is a small state machine. Every entered state is appended to
``trail`` so a failed login reports exactly how far it got:

    start -> credentials_submitted -> [two_factor_pending] -> [security_checkpoint]
          -> authenticated | failed

Checkpoints are resolved recursively, one depth level per distinct checkpoint
URL, up to ``checkpoint_max_depth``. A checkpoint that does not advance is
handed to the operator when the browser is visible and is fatal otherwise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from linkpilot import selector_chains as chains
from linkpilot.config import RuntimeConfig
from linkpilot.constants import CHECKPOINT_BUTTON_WORDS, CHECKPOINT_TEXT_BUTTONS
from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import (
    AutomationError,
    CheckpointError,
    ConfigurationError,
    LoginError,
    NavigationError,
    UIDriftError,
)
from linkpilot.models import CheckpointContext, Credentials
from linkpilot.navigator import await_transition, goto, pause
from linkpilot.resolver import ResolvedElement, attempted_trail, find_button_by_text, probe, resolve, resolve_all
from linkpilot.web_common import (
    is_authenticated_url,
    is_authwall_url,
    is_checkpoint_url,
    is_signed_out_url,
    safe_page_url,
)
from linkpilot.web_interaction import click, press_enter, type_into
from linkpilot.web_session import BrowserSession, ensure_owner

STATE_START = "start"
STATE_CREDENTIALS_SUBMITTED = "credentials_submitted"
STATE_TWO_FACTOR_PENDING = "two_factor_pending"
STATE_SECURITY_CHECKPOINT = "security_checkpoint"
STATE_AUTHENTICATED = "authenticated"
STATE_FAILED = "failed"


@dataclass
class LoginOutcome:
    state: str
    url: str
    trail: list[str] = field(default_factory=list)
    checkpoint_depth: int = 0
    reused_session: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "url": self.url,
            "trail": list(self.trail),
            "checkpoint_depth": self.checkpoint_depth,
            "reused_session": self.reused_session,
        }


def is_authenticated(page: Any, *, timeout_ms: int = 0, sink: DiagnosticSink | None = None) -> bool:
    """URL on an authenticated surface, or an authenticated landmark present."""
    url = safe_page_url(page)
    if is_authenticated_url(url):
        return True
    if is_authwall_url(url):
        return False
    if timeout_ms > 0:
        landmark = resolve(page, chains.AUTHENTICATED_LANDMARK, timeout_ms=timeout_ms, sink=sink)
    else:
        landmark = probe(page, chains.AUTHENTICATED_LANDMARK)
    return landmark is not None


def probe_session(page: Any, *, config: RuntimeConfig, sink: DiagnosticSink) -> bool:
    if not goto(page, config.feed_url, config=config, sink=sink, max_attempts=1):
        return False
    return is_authenticated(page, timeout_ms=config.element_timeout_ms, sink=sink)


def logout(page: Any, *, config: RuntimeConfig, sink: DiagnosticSink) -> bool:
    if not goto(page, config.feed_url, config=config, sink=sink):
        raise NavigationError("Could not load the feed before signing out", url=config.feed_url)
    menu = resolve(page, chains.PROFILE_MENU, timeout_ms=config.element_timeout_ms, sink=sink)
    if menu is None:
        raise UIDriftError("Profile menu not found", attempted=attempted_trail(chains.PROFILE_MENU))
    click(menu, timeout_ms=config.element_timeout_ms)
    pause(page, config.action_settle_ms)
    sign_out = resolve(page, chains.SIGN_OUT, timeout_ms=config.element_timeout_ms, sink=sink)
    if sign_out is None:
        raise UIDriftError("Sign out control not found", attempted=attempted_trail(chains.SIGN_OUT))
    click(sign_out, timeout_ms=config.element_timeout_ms)
    await_transition(page, config=config, sink=sink, label="sign out")
    url = safe_page_url(page)
    signed_out = is_signed_out_url(url) or not is_authenticated_url(url)
    sink.info(f"sign out finished at {url} (signed_out={signed_out})")
    return signed_out


class SessionEstablisher:
    def __init__(
        self,
        page: Any,
        credentials: Credentials,
        *,
        config: RuntimeConfig,
        sink: DiagnosticSink,
    ) -> None:
        self.page = page
        self.credentials = credentials
        self.config = config
        self.sink = sink
        self.trail: list[str] = []
        self.checkpoint_depth = 0

    @property
    def state(self) -> str:
        return self.trail[-1] if self.trail else ""

    def establish(self) -> LoginOutcome:
        try:
            self._enter(STATE_START)
            self._submit_credentials()
            two_factor = self._two_factor_input()
            if two_factor is not None:
                self._enter(STATE_TWO_FACTOR_PENDING)
                self._submit_two_factor(two_factor)
            if self._checkpoint_present():
                self._enter(STATE_SECURITY_CHECKPOINT)
                self._resolve_checkpoint(CheckpointContext(url=safe_page_url(self.page)))
            if not is_authenticated(self.page, timeout_ms=self.config.element_timeout_ms, sink=self.sink):
                url = safe_page_url(self.page)
                raise LoginError(f"Login might have failed. Current URL: {url}", url=url, trail=tuple(self.trail))
        except AutomationError as exc:
            self._enter(STATE_FAILED)
            if not exc.diagnostic:
                exc.diagnostic = self.sink.capture(self.page, "login-failure")
            self.sink.error(f"login failed ({' -> '.join(self.trail)}): {exc}")
            raise
        except Exception as exc:
            self._enter(STATE_FAILED)
            url = safe_page_url(self.page)
            diagnostic = self.sink.capture(self.page, "login-failure")
            self.sink.error(f"login failed ({' -> '.join(self.trail)}): {type(exc).__name__}: {exc}")
            error = LoginError(f"Login failed: {exc}", url=url, trail=tuple(self.trail))
            error.diagnostic = diagnostic
            raise error from exc
        self._enter(STATE_AUTHENTICATED)
        return LoginOutcome(
            state=STATE_AUTHENTICATED,
            url=safe_page_url(self.page),
            trail=list(self.trail),
            checkpoint_depth=self.checkpoint_depth,
        )

    def _enter(self, state: str) -> None:
        self.trail.append(state)
        self.sink.debug(f"login state -> {state}")

    def _submit_credentials(self) -> None:
        login_url = self.config.login_url
        if not goto(self.page, login_url, config=self.config, sink=self.sink):
            raise NavigationError(f"Could not load the login page {login_url}", url=login_url)
        timeout = self.config.element_timeout_ms
        username = resolve(self.page, chains.LOGIN_USERNAME, timeout_ms=timeout, sink=self.sink)
        password = resolve(self.page, chains.LOGIN_PASSWORD, timeout_ms=timeout, sink=self.sink)
        if username is None or password is None:
            raise LoginError(
                "Login form not found",
                url=safe_page_url(self.page),
                trail=attempted_trail(chains.LOGIN_USERNAME, chains.LOGIN_PASSWORD),
            )
        delay = self.config.typing_delay_ms
        type_into(username, self.credentials.identifier, delay_ms=delay, timeout_ms=timeout)
        type_into(password, self.credentials.secret, delay_ms=delay, timeout_ms=timeout)
        submit = resolve(self.page, chains.LOGIN_SUBMIT, timeout_ms=timeout, sink=self.sink)
        if submit is None:
            self.sink.info("login submit button not found; pressing Enter in the password field")
            press_enter(password, timeout_ms=timeout)
        else:
            click(submit, timeout_ms=timeout)
        await_transition(self.page, config=self.config, sink=self.sink, label="login submit")
        self._enter(STATE_CREDENTIALS_SUBMITTED)

    def _two_factor_input(self) -> ResolvedElement | None:
        if is_authenticated_url(safe_page_url(self.page)):
            return None
        if self.credentials.two_factor_enabled:
            return resolve(
                self.page, chains.TWO_FACTOR_INPUT, timeout_ms=self.config.element_timeout_ms, sink=self.sink
            )
        return probe(self.page, chains.TWO_FACTOR_INPUT)

    def _submit_two_factor(self, target: ResolvedElement) -> None:
        code = self.credentials.two_factor_code
        if not code:
            raise ConfigurationError("Two-factor authentication code is required but not provided")
        timeout = self.config.element_timeout_ms
        type_into(target, code, delay_ms=self.config.typing_delay_ms, timeout_ms=timeout)
        submit = resolve(self.page, chains.TWO_FACTOR_SUBMIT, timeout_ms=timeout, sink=self.sink)
        if submit is None:
            press_enter(target, timeout_ms=timeout)
        else:
            click(submit, timeout_ms=timeout)
        await_transition(self.page, config=self.config, sink=self.sink, label="two-factor submit")

    def _checkpoint_present(self) -> bool:
        url = safe_page_url(self.page)
        if is_checkpoint_url(url):
            return True
        if is_authenticated_url(url):
            return False
        return probe(self.page, chains.CHALLENGE_INPUT) is not None

    def _resolve_checkpoint(self, ctx: CheckpointContext) -> None:
        self.checkpoint_depth = max(self.checkpoint_depth, ctx.depth)
        self.sink.warn(f"security checkpoint at depth {ctx.depth}: {ctx.url}")
        self.sink.capture(self.page, f"checkpoint-{ctx.depth}")
        self.sink.snapshot_html(self.page, f"checkpoint-{ctx.depth}")
        if ctx.depth >= self.config.checkpoint_max_depth:
            self._await_manual_resolution(ctx, "checkpoint depth limit reached")
            return
        self._fill_checkpoint_inputs(ctx)
        if self._click_checkpoint_button(ctx):
            await_transition(self.page, config=self.config, sink=self.sink, label="checkpoint submit")
            pause(self.page, self.config.checkpoint_click_settle_ms)
        current = safe_page_url(self.page)
        if not is_checkpoint_url(current):
            self.sink.info(f"checkpoint cleared, now at {current}")
            return
        if current != ctx.url:
            self._resolve_checkpoint(ctx.descend(current))
            return
        self._await_manual_resolution(ctx, "checkpoint did not advance")

    def _fill_checkpoint_inputs(self, ctx: CheckpointContext) -> None:
        timeout = self.config.element_timeout_ms
        for target in resolve_all(self.page, chains.CHECKPOINT_TEXT_INPUTS):
            try:
                target.locator.fill(self.credentials.identifier, timeout=timeout)
            except Exception as exc:
                self.sink.debug(f"checkpoint input {target.selector} not fillable: {exc}")
                continue
            ctx.attempted_inputs.append(target.selector)

    def _click_checkpoint_button(self, ctx: CheckpointContext) -> bool:
        match = find_button_by_text(self.page, CHECKPOINT_BUTTON_WORDS, scope_selector=CHECKPOINT_TEXT_BUTTONS)
        if match is not None:
            target, label = match[0], f"text:{match[1]}"
        else:
            target = probe(self.page, chains.CHECKPOINT_GENERIC_BUTTONS)
            if target is None:
                self.sink.warn("no checkpoint button found")
                return False
            label = target.selector
        ctx.attempted_buttons.append(label)
        try:
            click(target, timeout_ms=self.config.element_timeout_ms)
        except Exception as exc:
            self.sink.warn(f"checkpoint button {label} click failed: {exc}")
            return False
        self.sink.info(f"clicked checkpoint button {label}")
        return True

    def _await_manual_resolution(self, ctx: CheckpointContext, reason: str) -> None:
        url = safe_page_url(self.page)
        if self.credentials.headless:
            raise CheckpointError(
                f"Security checkpoint could not be passed automatically ({reason}) at {url}. "
                "Rerun with headless disabled to complete the verification manually.",
                url=url,
                depth=ctx.depth,
                attempted=ctx.trail(),
            )
        grace = self.config.checkpoint_grace_seconds
        self.sink.warn(f"{reason}; waiting {grace:g}s for manual verification in the browser window")
        pause(self.page, int(grace * 1000))
        url = safe_page_url(self.page)
        if is_checkpoint_url(url):
            raise CheckpointError(
                f"Still on security checkpoint after waiting {grace:g}s: {url}",
                url=url,
                depth=ctx.depth,
                attempted=ctx.trail(),
            )
        self.sink.info(f"checkpoint resolved manually, now at {url}")


def ensure_authenticated(
    session: BrowserSession,
    credentials: Credentials,
    *,
    config: RuntimeConfig,
    sink: DiagnosticSink,
) -> LoginOutcome:
    """Reuse stored session state when it is still valid, otherwise log in."""
    ensure_owner(session, credentials)
    if session.state_path is not None and session.state_path.exists():
        if probe_session(session.page, config=config, sink=sink):
            sink.info("stored session state is still authenticated")
            session.authenticated = True
            return LoginOutcome(
                state=STATE_AUTHENTICATED,
                url=safe_page_url(session.page),
                trail=[STATE_START, STATE_AUTHENTICATED],
                reused_session=True,
            )
        sink.info("stored session state is no longer valid; logging in")
    outcome = SessionEstablisher(session.page, credentials, config=config, sink=sink).establish()
    session.authenticated = True
    return outcome
