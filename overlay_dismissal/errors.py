"""Exception types raised by the overlay dismissal coordinator."""
from __future__ import annotations

from typing import Sequence


class OverlayDismissalError(Exception):
    """Base class for coordinator errors."""


class ConfigurationError(OverlayDismissalError):
    """Raised when the coordinator is wired with an unusable configuration."""


class MissingActionError(ConfigurationError):
    """Raised at activation when the action table is incomplete."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"Action table is missing callable(s): {', '.join(self.missing)}")


class ProfileFetchError(OverlayDismissalError):
    """Raised when the current user's profile cannot be retrieved."""


class AuthenticationError(OverlayDismissalError):
    """Raised by the token middleware when a request cannot be authenticated."""
