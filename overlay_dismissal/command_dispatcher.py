from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Callable, Dict, Optional

from overlay_dismissal.dismissal_engine import Command, CommandSet, ordered
from overlay_dismissal.errors import MissingActionError

_LOGGER = logging.getLogger("OverlayDismissal.Dispatcher")

Action = Callable[[], object]


@dataclass
class ActionTable:
    """Capability table of externally supplied actions."""

    close_pop_over: Optional[Action] = None
    close_all_modals: Optional[Action] = None
    close_boards_menu: Optional[Action] = None
    fetch_user: Optional[Action] = None

    def validate(self) -> None:
        missing = [item.name for item in fields(self) if not callable(getattr(self, item.name))]
        if missing:
            raise MissingActionError(missing)

    @classmethod
    def noop(cls) -> "ActionTable":
        def _noop() -> None:
            return None

        return cls(
            close_pop_over=_noop,
            close_all_modals=_noop,
            close_boards_menu=_noop,
            fetch_user=_noop,
        )


_COMMAND_ACTIONS: Dict[Command, str] = {
    Command.CLOSE_ALL_MODALS: "close_all_modals",
    Command.CLOSE_POP_OVER: "close_pop_over",
    Command.CLOSE_BOARDS_MENU: "close_boards_menu",
}


class CommandDispatcher:
    """Invokes one action per command in modal, pop-over, menu order."""

    def __init__(self, actions: ActionTable) -> None:
        self._actions = actions

    @property
    def actions(self) -> ActionTable:
        return self._actions

    def dispatch(self, commands: CommandSet, *, reason: str = "") -> int:
        """Run the actions for ``commands``; returns how many were invoked."""
        if not commands:
            return 0
        invoked = 0
        for command in ordered(commands):
            name = _COMMAND_ACTIONS[command]
            action = getattr(self._actions, name)
            _LOGGER.debug("Dispatching %s (reason=%s)", command.value, reason or "unspecified")
            try:
                action()
            except Exception:
                _LOGGER.exception("Action %s failed while handling %s", name, reason or "event")
                raise
            invoked += 1
        return invoked

    def fetch_user(self) -> None:
        _LOGGER.debug("Dispatching fetchUser")
        self._actions.fetch_user()
