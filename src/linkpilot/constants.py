"""Shared constants: URL patterns, wait defaults and text vocabularies."""

from __future__ import annotations

DEFAULT_BASE_URL = "https://www.linkedin.com"

LOGIN_PATH = "/login"
FEED_PATH = "/feed/"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_VIEWPORT = {"width": 1280, "height": 800}
BROWSER_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")

# Wait defaults in milliseconds.
NAVIGATION_TIMEOUT_MS = 15000
ELEMENT_TIMEOUT_MS = 5000
ACTION_SETTLE_MS = 2000
TYPING_DELAY_MS = 50
NAVIGATION_ATTEMPTS = 3
NAVIGATION_RETRY_DELAY_MS = 1000
PROFILE_STABILIZE_MS = 5000

CHECKPOINT_MAX_DEPTH = 3
CHECKPOINT_GRACE_SECONDS = 30.0
CHECKPOINT_CLICK_SETTLE_MS = 3000

FEED_SCROLL_INCREMENT = 1000
FEED_SCROLL_PAUSE_MS = 1000
FEED_MAX_SCROLL_ITERATIONS = 10
FEED_DEFAULT_POST_COUNT = 10

ALLOWED_RESOURCES = ("post", "profile", "feed")

# URL fragments.
CHECKPOINT_URL_MARKERS = ("/checkpoint",)
AUTHENTICATED_URL_MARKERS = ("/feed", "/home")
AUTHWALL_URL_MARKERS = ("/authwall", "/login", "/uas/login", "/signup")
POST_URL_MARKERS = ("/feed/update/", "/posts/")
PROFILE_URL_MARKERS = ("/in/",)
COMPANY_URL_MARKERS = ("/company/",)
SIGNED_OUT_URL_MARKERS = ("/login", "/logout", "/m/logout")

CHECKPOINT_BUTTON_WORDS = (
    "continue",
    "verify",
    "next",
    "submit",
    "confirm",
    "allow",
    "proceed",
    "sign in",
    "send code",
)

PENDING_MARKERS = ("pending", "request sent", "invitation sent")

LIMITED_PROFILE_NOTE = "Limited profile data available - the site may be showing a restricted view"
EMPTY_FEED_NOTE = "No feed posts could be collected from the current page"
EMPTY_POST_NOTE = "Limited post data available - the post layout may have changed"

# Free-text scan scopes (joined selectors, not fallback chains).
CHECKPOINT_TEXT_BUTTONS = "button, a.artdeco-button"
PRIMARY_BUTTONS = "button.artdeco-button--primary, button.primary-action-button"
ANY_BUTTON = "button"
LAST_PRIMARY_BUTTON = "button.artdeco-button--primary"

LIKE_ACTIVE_CLASSES = ("react-button--active", "--active")
