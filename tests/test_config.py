import os
import unittest
from pathlib import Path
from unittest.mock import patch

from linkpilot.config import RuntimeConfig, load_runtime_config
from linkpilot.constants import NAVIGATION_TIMEOUT_MS


class RuntimeConfigTests(unittest.TestCase):
    def test_defaults_without_environment(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            config = load_runtime_config()
        self.assertEqual(config.navigation_timeout_ms, NAVIGATION_TIMEOUT_MS)
        self.assertEqual(config.login_url, "https://www.linkedin.com/login")
        self.assertEqual(config.feed_url, "https://www.linkedin.com/feed/")

    def test_values_are_clamped(self) -> None:
        env = {
            "LINKPILOT_NAVIGATION_TIMEOUT_SECONDS": "9999",
            "LINKPILOT_CHECKPOINT_MAX_DEPTH": "0",
            "LINKPILOT_CHECKPOINT_GRACE_SECONDS": "45",
            "LINKPILOT_FEED_SCROLL_INCREMENT": "junk",
        }
        with patch.dict(os.environ, env, clear=True):
            config = load_runtime_config()
        self.assertEqual(config.navigation_timeout_ms, 120000)
        self.assertEqual(config.checkpoint_max_depth, 1)
        self.assertEqual(config.checkpoint_grace_seconds, 45.0)
        self.assertEqual(config.feed_scroll_increment, 1000)

    def test_invalid_base_url_exits(self) -> None:
        with patch.dict(os.environ, {"LINKPILOT_BASE_URL": "ftp://nope"}, clear=True):
            with self.assertRaises(SystemExit):
                load_runtime_config()

    def test_unknown_log_level_falls_back_to_info(self) -> None:
        with patch.dict(os.environ, {"LINKPILOT_LOG_LEVEL": "loud"}, clear=True):
            self.assertEqual(load_runtime_config().log_level, "info")

    def test_derived_paths(self) -> None:
        config = RuntimeConfig(base_url="https://social.test/", runs_dir=Path("out"), session_timeout_minutes=2)
        self.assertEqual(config.login_url, "https://social.test/login")
        self.assertEqual(config.sessions_dir, Path("out") / "sessions")
        self.assertEqual(config.session_timeout_ms, 120000)


if __name__ == "__main__":
    unittest.main()
