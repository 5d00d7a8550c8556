from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from overlay_dismissal.overlay_state import OverlayVisibilityState

HEADER = "header"
POP_OVER = "pop_over"
BOARDS_MENU = "boards_menu"
MODAL_LAYER = "modal_layer"


@dataclass(frozen=True)
class OverlayPresence:
    header: bool = True
    pop_over: bool = False
    boards_menu: bool = False
    modal_layer: bool = False

    def as_dict(self) -> dict[str, bool]:
        return {
            HEADER: self.header,
            POP_OVER: self.pop_over,
            BOARDS_MENU: self.boards_menu,
            MODAL_LAYER: self.modal_layer,
        }


def project_presence(visibility: OverlayVisibilityState) -> OverlayPresence:
    return OverlayPresence(
        header=True,
        pop_over=visibility.is_pop_over_open,
        boards_menu=visibility.is_boards_menu_open,
        modal_layer=visibility.is_modal_open,
    )


@dataclass
class PresenceTarget:
    """Thin adapter around one widget's show/hide calls."""

    is_visible_fn: Callable[[], bool]
    show_fn: Callable[[], None]
    hide_fn: Callable[[], None]
    raise_fn: Optional[Callable[[], None]] = None


class PresenceHelper:
    """Applies overlay presence to injected widget adapters and logs transitions."""

    def __init__(self, log_fn: Callable[..., None]) -> None:
        self._last: Optional[OverlayPresence] = None
        self._log = log_fn

    @property
    def last(self) -> Optional[OverlayPresence]:
        return self._last

    def apply(self, visibility: OverlayVisibilityState, targets: Mapping[str, PresenceTarget]) -> OverlayPresence:
        presence = project_presence(visibility)
        for name, show in presence.as_dict().items():
            target = targets.get(name)
            if target is None:
                continue
            if show:
                if not target.is_visible_fn():
                    target.show_fn()
                    if target.raise_fn is not None:
                        target.raise_fn()
            elif target.is_visible_fn():
                target.hide_fn()
        if presence != self._last:
            shown = [name for name, show in presence.as_dict().items() if show]
            self._log("Overlay presence set to %s", ", ".join(shown))
            self._last = presence
        return presence
