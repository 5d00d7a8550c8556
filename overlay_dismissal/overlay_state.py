"""Shared overlay state container.

The store is the only writer of overlay visibility, focus, auth and notification
state. Readers take immutable snapshots; writers go through the open/close/focus
methods, which are serialized with a re-entrant lock so a background profile
fetch can publish results while the GUI thread is reading.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

_LOGGER = logging.getLogger("OverlayDismissal.Store")

StoreListener = Callable[["OverlayStateStore"], None]


@dataclass(frozen=True)
class OverlayVisibilityState:
    is_pop_over_open: bool = False
    is_modal_open: bool = False
    is_boards_menu_open: bool = False


@dataclass(frozen=True)
class FocusContext:
    """Whether the current interaction originated inside an overlay."""

    is_focus_on_pop_hover: bool = False
    is_focus_on_modal: bool = False
    is_focus_on_boards_menu: bool = False


@dataclass(frozen=True)
class AuthContext:
    is_authenticated: bool = False
    full_name: str = ""
    token: Optional[str] = None


@dataclass(frozen=True)
class NotificationState:
    error_messages: Tuple[str, ...] = ()


@dataclass(frozen=True)
class OverlaySnapshot:
    """Visibility and focus flags read together for a single decision."""

    visibility: OverlayVisibilityState = field(default_factory=OverlayVisibilityState)
    focus: FocusContext = field(default_factory=FocusContext)

    @classmethod
    def of(
        cls,
        *,
        is_pop_over_open: bool = False,
        is_modal_open: bool = False,
        is_boards_menu_open: bool = False,
        is_focus_on_pop_hover: bool = False,
        is_focus_on_modal: bool = False,
        is_focus_on_boards_menu: bool = False,
    ) -> "OverlaySnapshot":
        return cls(
            visibility=OverlayVisibilityState(
                is_pop_over_open=is_pop_over_open,
                is_modal_open=is_modal_open,
                is_boards_menu_open=is_boards_menu_open,
            ),
            focus=FocusContext(
                is_focus_on_pop_hover=is_focus_on_pop_hover,
                is_focus_on_modal=is_focus_on_modal,
                is_focus_on_boards_menu=is_focus_on_boards_menu,
            ),
        )


class OverlayStateStore:
    """Thread-safe owner of overlay flags with change notification."""

    def __init__(
        self,
        *,
        visibility: Optional[OverlayVisibilityState] = None,
        focus: Optional[FocusContext] = None,
        auth: Optional[AuthContext] = None,
        notifications: Optional[NotificationState] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._visibility = visibility or OverlayVisibilityState()
        self._focus = focus or FocusContext()
        self._auth = auth or AuthContext()
        self._notifications = notifications or NotificationState()
        self._listeners: List[StoreListener] = []

    # Readers -------------------------------------------------------------

    @property
    def visibility(self) -> OverlayVisibilityState:
        with self._lock:
            return self._visibility

    @property
    def focus(self) -> FocusContext:
        with self._lock:
            return self._focus

    @property
    def auth(self) -> AuthContext:
        with self._lock:
            return self._auth

    @property
    def notifications(self) -> NotificationState:
        with self._lock:
            return self._notifications

    def snapshot(self) -> OverlaySnapshot:
        with self._lock:
            return OverlaySnapshot(visibility=self._visibility, focus=self._focus)

    # Subscriptions -------------------------------------------------------

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    # Writers -------------------------------------------------------------

    def open_pop_over(self) -> None:
        self._update_visibility(is_pop_over_open=True)

    def close_pop_over(self) -> None:
        # Leaving the pop-over also drops the focus marker that belonged to it.
        self._update(
            visibility=dict(is_pop_over_open=False),
            focus=dict(is_focus_on_pop_hover=False),
            reason="close_pop_over",
        )

    def open_modal(self) -> None:
        self._update_visibility(is_modal_open=True)

    def close_all_modals(self) -> None:
        self._update(
            visibility=dict(is_modal_open=False),
            focus=dict(is_focus_on_modal=False),
            reason="close_all_modals",
        )

    def open_boards_menu(self) -> None:
        self._update_visibility(is_boards_menu_open=True)

    def close_boards_menu(self) -> None:
        self._update(
            visibility=dict(is_boards_menu_open=False),
            focus=dict(is_focus_on_boards_menu=False),
            reason="close_boards_menu",
        )

    def toggle_boards_menu(self) -> None:
        with self._lock:
            target = not self._visibility.is_boards_menu_open
        self._update_visibility(is_boards_menu_open=target)

    def set_pop_over_focus(self, focused: bool) -> None:
        self._update(focus=dict(is_focus_on_pop_hover=bool(focused)), reason="pop_over_focus")

    def set_modal_focus(self, focused: bool) -> None:
        self._update(focus=dict(is_focus_on_modal=bool(focused)), reason="modal_focus")

    def set_boards_menu_focus(self, focused: bool) -> None:
        self._update(focus=dict(is_focus_on_boards_menu=bool(focused)), reason="boards_menu_focus")

    def set_auth(self, auth: AuthContext) -> None:
        with self._lock:
            if auth == self._auth:
                return
            self._auth = auth
        self._notify("set_auth")

    def set_full_name(self, full_name: str) -> None:
        with self._lock:
            if self._auth.full_name == full_name:
                return
            self._auth = replace(self._auth, full_name=full_name)
        self._notify("set_full_name")

    def push_error(self, message: str) -> None:
        with self._lock:
            self._notifications = NotificationState(
                error_messages=self._notifications.error_messages + (str(message),)
            )
        _LOGGER.debug("Error notification queued: %s", message)
        self._notify("push_error")

    def clear_errors(self) -> None:
        with self._lock:
            if not self._notifications.error_messages:
                return
            self._notifications = NotificationState()
        self._notify("clear_errors")

    def _update_visibility(self, **changes: bool) -> None:
        self._update(visibility=changes, reason="open")

    def _update(
        self,
        *,
        visibility: Optional[dict] = None,
        focus: Optional[dict] = None,
        reason: str,
    ) -> None:
        with self._lock:
            new_visibility = replace(self._visibility, **visibility) if visibility else self._visibility
            new_focus = replace(self._focus, **focus) if focus else self._focus
            if new_visibility == self._visibility and new_focus == self._focus:
                # Closing an already-closed overlay is a no-op.
                return
            self._visibility = new_visibility
            self._focus = new_focus
        self._notify(reason)

    def _notify(self, reason: str) -> None:
        with self._lock:
            listeners = list(self._listeners)
        _LOGGER.debug("Store changed (reason=%s); notifying %d listener(s)", reason, len(listeners))
        for listener in listeners:
            listener(self)
