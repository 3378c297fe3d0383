"""Error taxonomy for session establishment and UI actions."""

from __future__ import annotations


class AutomationError(RuntimeError):
    """Base class; ``diagnostic`` holds a snapshot path when one was captured."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.diagnostic = ""


class ConfigurationError(AutomationError):
    pass


class NavigationError(AutomationError):
    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class UIDriftError(AutomationError):
    def __init__(self, message: str, *, attempted: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.attempted = attempted


class CheckpointError(AutomationError):
    def __init__(
        self, message: str, *, url: str = "", depth: int = 0, attempted: tuple[str, ...] = ()
    ) -> None:
        super().__init__(message)
        self.url = url
        self.depth = depth
        self.attempted = attempted


class AuthWallError(AutomationError):
    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class LoginError(AutomationError):
    def __init__(self, message: str, *, url: str = "", trail: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.url = url
        self.trail = trail
