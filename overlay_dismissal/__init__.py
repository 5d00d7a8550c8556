"""Overlay dismissal coordinator: closes modals, pop-overs and the side menu on global input."""
from __future__ import annotations

from overlay_dismissal.auth_middleware import StaticUserAuthenticator, TokenAuthenticator
from overlay_dismissal.command_dispatcher import ActionTable, CommandDispatcher
from overlay_dismissal.dismissal_engine import (
    COMMAND_ORDER,
    ESCAPE_KEY_CODE,
    Command,
    MenuDismissalPolicy,
    Trigger,
    decide,
)
from overlay_dismissal.errors import (
    AuthenticationError,
    ConfigurationError,
    MissingActionError,
    OverlayDismissalError,
)
from overlay_dismissal.input_lifecycle import InputListenerLifecycle
from overlay_dismissal.overlay_state import (
    AuthContext,
    FocusContext,
    NotificationState,
    OverlaySnapshot,
    OverlayStateStore,
    OverlayVisibilityState,
)

__version__ = "0.3.0"

__all__ = [
    "ActionTable",
    "AuthContext",
    "AuthenticationError",
    "COMMAND_ORDER",
    "Command",
    "CommandDispatcher",
    "ConfigurationError",
    "ESCAPE_KEY_CODE",
    "FocusContext",
    "InputListenerLifecycle",
    "MenuDismissalPolicy",
    "MissingActionError",
    "NotificationState",
    "OverlayDismissalError",
    "OverlaySnapshot",
    "OverlayStateStore",
    "OverlayVisibilityState",
    "StaticUserAuthenticator",
    "TokenAuthenticator",
    "Trigger",
    "decide",
]
