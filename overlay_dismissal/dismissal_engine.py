"""Pure decision logic mapping overlay flags plus an input trigger to close commands.

Each overlay is evaluated independently, so a single click can close the modal
layer and the pop-over together. Nothing in here touches Qt or the store.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from overlay_dismissal.overlay_state import OverlaySnapshot

ESCAPE_KEY_CODE = 27


class Command(enum.Enum):
    CLOSE_ALL_MODALS = "closeAllModals"
    CLOSE_POP_OVER = "closePopOver"
    CLOSE_BOARDS_MENU = "closeBoardsMenu"


CommandSet = FrozenSet[Command]
EMPTY_COMMANDS: CommandSet = frozenset()

# Evaluation and dispatch order.
COMMAND_ORDER: Tuple[Command, ...] = (
    Command.CLOSE_ALL_MODALS,
    Command.CLOSE_POP_OVER,
    Command.CLOSE_BOARDS_MENU,
)


@dataclass(frozen=True)
class Trigger:
    kind: str
    code: Optional[int] = None

    @classmethod
    def click(cls) -> "Trigger":
        return cls(kind="click")

    @classmethod
    def key(cls, code: int) -> "Trigger":
        return cls(kind="key", code=code)

    @property
    def qualifies(self) -> bool:
        if self.kind == "click":
            return True
        if self.kind == "key":
            return self.code == ESCAPE_KEY_CODE
        return False


@dataclass(frozen=True)
class MenuDismissalPolicy:
    """How the side menu reacts to qualifying triggers.

    ``dismiss_on_click`` controls whether a plain click closes the menu (Escape
    always does). ``focus_aware`` suppresses the close while the interaction
    originated inside the menu, mirroring the modal and pop-over rules.
    """

    dismiss_on_click: bool = True
    focus_aware: bool = False


DEFAULT_POLICY = MenuDismissalPolicy()
ESCAPE_ONLY_FOCUS_AWARE_POLICY = MenuDismissalPolicy(dismiss_on_click=False, focus_aware=True)


def decide(
    snapshot: OverlaySnapshot,
    trigger: Trigger,
    policy: MenuDismissalPolicy = DEFAULT_POLICY,
) -> CommandSet:
    """Return the commands a trigger should produce for the given overlay state."""
    if not trigger.qualifies:
        return EMPTY_COMMANDS

    visibility = snapshot.visibility
    focus = snapshot.focus
    commands = set()
    if visibility.is_modal_open and not focus.is_focus_on_modal:
        commands.add(Command.CLOSE_ALL_MODALS)
    if visibility.is_pop_over_open and not focus.is_focus_on_pop_hover:
        commands.add(Command.CLOSE_POP_OVER)
    if visibility.is_boards_menu_open and _menu_rule_applies(trigger, snapshot, policy):
        commands.add(Command.CLOSE_BOARDS_MENU)
    return frozenset(commands)


def ordered(commands: CommandSet) -> Tuple[Command, ...]:
    """Return ``commands`` in dispatch order."""
    return tuple(command for command in COMMAND_ORDER if command in commands)


def _menu_rule_applies(trigger: Trigger, snapshot: OverlaySnapshot, policy: MenuDismissalPolicy) -> bool:
    if trigger.kind == "click" and not policy.dismiss_on_click:
        return False
    if policy.focus_aware and snapshot.focus.is_focus_on_boards_menu:
        return False
    return True
