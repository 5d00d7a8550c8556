from __future__ import annotations

from overlay_dismissal.overlay_state import OverlayVisibilityState
from overlay_dismissal.presence import (
    BOARDS_MENU,
    HEADER,
    MODAL_LAYER,
    POP_OVER,
    OverlayPresence,
    PresenceHelper,
    PresenceTarget,
    project_presence,
)


class _FakeWidget:
    def __init__(self, visible: bool = False) -> None:
        self.visible = visible
        self.calls: list[str] = []

    def target(self) -> PresenceTarget:
        return PresenceTarget(
            is_visible_fn=lambda: self.visible,
            show_fn=self._show,
            hide_fn=self._hide,
            raise_fn=lambda: self.calls.append("raise"),
        )

    def _show(self) -> None:
        self.visible = True
        self.calls.append("show")

    def _hide(self) -> None:
        self.visible = False
        self.calls.append("hide")


def test_projection_follows_flags_and_header_is_always_present():
    assert project_presence(OverlayVisibilityState()) == OverlayPresence()
    presence = project_presence(
        OverlayVisibilityState(is_pop_over_open=True, is_modal_open=True, is_boards_menu_open=True)
    )
    assert presence == OverlayPresence(header=True, pop_over=True, boards_menu=True, modal_layer=True)


def test_apply_shows_and_hides_targets():
    logs = []
    helper = PresenceHelper(lambda msg, *args: logs.append(msg % args))
    widgets = {name: _FakeWidget(visible=True) for name in (HEADER, POP_OVER, BOARDS_MENU, MODAL_LAYER)}
    targets = {name: widget.target() for name, widget in widgets.items()}

    helper.apply(OverlayVisibilityState(is_pop_over_open=True), targets)

    assert widgets[HEADER].calls == []
    assert widgets[POP_OVER].calls == []
    assert widgets[BOARDS_MENU].calls == ["hide"]
    assert widgets[MODAL_LAYER].calls == ["hide"]
    assert logs == ["Overlay presence set to header, pop_over"]


def test_apply_logs_only_on_change():
    logs = []
    helper = PresenceHelper(lambda msg, *args: logs.append(msg))
    widget = _FakeWidget()
    targets = {MODAL_LAYER: widget.target()}

    helper.apply(OverlayVisibilityState(is_modal_open=True), targets)
    helper.apply(OverlayVisibilityState(is_modal_open=True), targets)

    assert widget.calls == ["show", "raise"]
    assert len(logs) == 1
    assert helper.last == OverlayPresence(modal_layer=True)
