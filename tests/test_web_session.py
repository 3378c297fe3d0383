import tempfile
import unittest
from pathlib import Path

from fake_browser import FakePage, fast_config

from linkpilot.diagnostics import DiagnosticSink
from linkpilot.errors import ConfigurationError
from linkpilot.models import Credentials
from linkpilot.web_session import close_session, ensure_owner, open_session, session_identity


class _Context:
    def __init__(self, page: FakePage) -> None:
        self.page = page
        self.saved: list[str] = []

    def new_page(self) -> FakePage:
        return self.page

    def storage_state(self, path: str) -> None:
        self.saved.append(path)
        Path(path).write_text("{}", encoding="utf-8")


class _Browser:
    def __init__(self) -> None:
        self.page = FakePage()
        self.context_kwargs: dict = {}
        self.context = _Context(self.page)
        self.closed = 0

    def new_context(self, **kwargs) -> _Context:
        self.context_kwargs = kwargs
        return self.context

    def close(self) -> None:
        self.closed += 1


class _Chromium:
    def __init__(self) -> None:
        self.browser = _Browser()
        self.launch_kwargs: dict = {}

    def launch(self, **kwargs) -> _Browser:
        self.launch_kwargs = kwargs
        return self.browser


class _Playwright:
    def __init__(self) -> None:
        self.chromium = _Chromium()


CREDS = Credentials(identifier="Jane@Example.test", secret="hunter2", headless=False)


class WebSessionTests(unittest.TestCase):
    def test_open_uses_stored_state_and_headless_flag(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config = fast_config(runs_dir=Path(tmp))
            state_path = config.sessions_dir / f"{session_identity(CREDS.identifier)}.json"
            state_path.parent.mkdir(parents=True)
            state_path.write_text("{}", encoding="utf-8")
            pw = _Playwright()
            session = open_session(pw, CREDS, config=config, sink=DiagnosticSink())
        self.assertFalse(pw.chromium.launch_kwargs["headless"])
        self.assertIn("--no-sandbox", pw.chromium.launch_kwargs["args"])
        self.assertEqual(pw.chromium.browser.context_kwargs["storage_state"], str(state_path))
        self.assertEqual(session.state_path, state_path)

    def test_close_saves_state_once_and_is_idempotent(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            pw = _Playwright()
            session = open_session(pw, CREDS, config=fast_config(runs_dir=Path(tmp)), sink=DiagnosticSink())
            self.assertNotIn("storage_state", pw.chromium.browser.context_kwargs)
            session.authenticated = True
            close_session(session, DiagnosticSink())
            close_session(session, DiagnosticSink())
            self.assertTrue(session.state_path is not None and session.state_path.exists())
        self.assertEqual(pw.chromium.browser.closed, 1)
        self.assertEqual(len(pw.chromium.browser.context.saved), 1)

    def test_unauthenticated_session_state_is_not_saved(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            pw = _Playwright()
            session = open_session(pw, CREDS, config=fast_config(runs_dir=Path(tmp)), sink=DiagnosticSink())
            close_session(session, DiagnosticSink())
        self.assertEqual(pw.chromium.browser.context.saved, [])

    def test_identity_is_case_insensitive_and_owner_checked(self) -> None:
        self.assertEqual(session_identity("Jane@Example.test"), session_identity(" jane@example.test"))
        pw = _Playwright()
        with tempfile.TemporaryDirectory() as tmp:
            session = open_session(pw, CREDS, config=fast_config(runs_dir=Path(tmp)), sink=DiagnosticSink())
        ensure_owner(session, CREDS)
        with self.assertRaises(ConfigurationError):
            ensure_owner(session, Credentials(identifier="bob@example.test", secret="x"))

    def test_session_expiry(self) -> None:
        pw = _Playwright()
        with tempfile.TemporaryDirectory() as tmp:
            session = open_session(
                pw, CREDS, config=fast_config(runs_dir=Path(tmp), session_timeout_minutes=1.0), sink=DiagnosticSink()
            )
        self.assertFalse(session.expired(now=session.started_monotonic + 30))
        self.assertTrue(session.expired(now=session.started_monotonic + 61))


if __name__ == "__main__":
    unittest.main()
