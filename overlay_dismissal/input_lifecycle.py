from __future__ import annotations

import logging
from typing import Callable, Optional

from overlay_dismissal.command_dispatcher import CommandDispatcher
from overlay_dismissal.dismissal_engine import (
    DEFAULT_POLICY,
    CommandSet,
    MenuDismissalPolicy,
    Trigger,
    decide,
)
from overlay_dismissal.event_source import CLICK, KEYDOWN, DocumentEventSource, InputEvent
from overlay_dismissal.overlay_state import AuthContext, OverlaySnapshot

_LOGGER = logging.getLogger("OverlayDismissal.Lifecycle")


class InputListenerLifecycle:
    """Attaches the document click/key handlers while the host is active."""

    def __init__(
        self,
        *,
        event_source: DocumentEventSource,
        dispatcher: CommandDispatcher,
        snapshot_fn: Callable[[], OverlaySnapshot],
        auth_fn: Callable[[], AuthContext],
        policy: MenuDismissalPolicy = DEFAULT_POLICY,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._event_source = event_source
        self._dispatcher = dispatcher
        self._snapshot = snapshot_fn
        self._auth = auth_fn
        self._policy = policy
        self._logger = logger or _LOGGER
        self._attached = False
        self._activation_count = 0
        self._last_commands: CommandSet = frozenset()

    @property
    def attached(self) -> bool:
        return self._attached

    @property
    def last_commands(self) -> CommandSet:
        """Commands decided for the most recent document event."""
        return self._last_commands

    @property
    def policy(self) -> MenuDismissalPolicy:
        return self._policy

    def activate(self) -> bool:
        """Bind listeners and request the user profile; returns False on duplicate activation."""
        if self._attached:
            self._logger.warning(
                "Duplicate activation ignored; listeners already attached (activation #%d)",
                self._activation_count,
            )
            return False
        self._dispatcher.actions.validate()
        self._event_source.bind(CLICK, self.handle_document_click)
        self._event_source.bind(KEYDOWN, self.handle_esc_key)
        self._attached = True
        self._activation_count += 1
        self._logger.debug("Document listeners attached (activation #%d)", self._activation_count)
        auth = self._auth()
        if auth.is_authenticated:
            self._dispatcher.fetch_user()
        return True

    def deactivate(self) -> bool:
        if not self._attached:
            self._logger.debug("Deactivate requested while detached; nothing to unbind")
            return False
        # Flip the flag first so an in-flight delivery cannot dispatch.
        self._attached = False
        self._event_source.unbind(CLICK, self.handle_document_click)
        self._event_source.unbind(KEYDOWN, self.handle_esc_key)
        self._logger.debug("Document listeners detached")
        return True

    def handle_document_click(self, event: Optional[InputEvent] = None) -> CommandSet:
        return self._handle(Trigger.click(), reason="document_click")

    def handle_esc_key(self, event: InputEvent) -> CommandSet:
        code = getattr(event, "key_code", None)
        if code is None:
            return frozenset()
        return self._handle(Trigger.key(code), reason=f"keydown:{code}")

    def _handle(self, trigger: Trigger, *, reason: str) -> CommandSet:
        if not self._attached:
            return frozenset()
        commands = decide(self._snapshot(), trigger, self._policy)
        self._last_commands = commands
        if commands:
            self._dispatcher.dispatch(commands, reason=reason)
        return commands
