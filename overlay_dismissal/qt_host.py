"""Qt host window rendering the header, pop-over, side menu and modal layer."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from overlay_dismissal.coordinator import DismissalCoordinator
from overlay_dismissal.dismissal_engine import Command
from overlay_dismissal.presence import (
    BOARDS_MENU,
    HEADER,
    MODAL_LAYER,
    POP_OVER,
    PresenceHelper,
    PresenceTarget,
)

_HOST_LOGGER = logging.getLogger("OverlayDismissal.Host")


class StoreBridge(QObject):
    """Re-emits store changes on the GUI thread."""

    changed = pyqtSignal()

    def notify(self, _store=None) -> None:
        self.changed.emit()


class HoverFrame(QFrame):
    """Frame that reports pointer enter/leave so focus flags follow the pointer."""

    def __init__(self, on_hover: Callable[[bool], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._on_hover = on_hover
        self.setFrameShape(QFrame.Shape.StyledPanel)

    def enterEvent(self, event) -> None:  # type: ignore[override]
        self._on_hover(True)
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:  # type: ignore[override]
        self._on_hover(False)
        super().leaveEvent(event)


def _target(widget: QWidget) -> PresenceTarget:
    return PresenceTarget(
        # isVisible() is False for every child until the window is shown.
        is_visible_fn=lambda: not widget.isHidden(),
        show_fn=widget.show,
        hide_fn=widget.hide,
        raise_fn=widget.raise_,
    )


class DismissalHostWindow(QWidget):
    """Mounts the coordinator while shown and mirrors store state into widgets."""

    def __init__(self, coordinator: DismissalCoordinator, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._coordinator = coordinator
        store = coordinator.store
        self.setWindowTitle("Overlay dismissal")
        self.resize(720, 480)

        self.header = QFrame(self)
        header_layout = QHBoxLayout(self.header)
        self.user_label = QLabel(self.header)
        self.boards_button = QPushButton("Boards", self.header)
        self.info_button = QPushButton("Info", self.header)
        self.modal_button = QPushButton("Create board", self.header)
        header_layout.addWidget(self.boards_button)
        header_layout.addStretch(1)
        header_layout.addWidget(self.user_label)
        header_layout.addWidget(self.info_button)
        header_layout.addWidget(self.modal_button)

        self.pop_over = HoverFrame(store.set_pop_over_focus, self)
        QVBoxLayout(self.pop_over).addWidget(QLabel("Pop-over", self.pop_over))
        self.boards_menu = HoverFrame(store.set_boards_menu_focus, self)
        QVBoxLayout(self.boards_menu).addWidget(QLabel("Boards", self.boards_menu))
        self.modal_layer = HoverFrame(store.set_modal_focus, self)
        QVBoxLayout(self.modal_layer).addWidget(QLabel("Modal", self.modal_layer))
        self.error_label = QLabel(self)
        self.error_label.setWordWrap(True)

        layout = QVBoxLayout(self)
        layout.addWidget(self.header)
        body = QHBoxLayout()
        body.addWidget(self.boards_menu)
        body.addStretch(1)
        body.addWidget(self.pop_over)
        layout.addLayout(body)
        layout.addWidget(self.modal_layer)
        layout.addWidget(self.error_label)
        layout.addStretch(1)

        self.boards_button.clicked.connect(self._handle_boards_button)
        self.info_button.clicked.connect(store.open_pop_over)
        self.modal_button.clicked.connect(store.open_modal)

        self._presence = PresenceHelper(_HOST_LOGGER.debug)
        self._targets: Dict[str, PresenceTarget] = {
            HEADER: _target(self.header),
            POP_OVER: _target(self.pop_over),
            BOARDS_MENU: _target(self.boards_menu),
            MODAL_LAYER: _target(self.modal_layer),
        }
        self._bridge = StoreBridge(self)
        self._bridge.changed.connect(self.refresh)
        self._unsubscribe = store.subscribe(self._bridge.notify)
        self.refresh()

    @property
    def coordinator(self) -> DismissalCoordinator:
        return self._coordinator

    def _handle_boards_button(self) -> None:
        # The press that started this click already closed the menu.
        if Command.CLOSE_BOARDS_MENU in self._coordinator.lifecycle.last_commands:
            return
        self._coordinator.store.toggle_boards_menu()

    def refresh(self) -> None:
        store = self._coordinator.store
        self._presence.apply(store.visibility, self._targets)
        auth = store.auth
        self.user_label.setText(auth.full_name if auth.is_authenticated else "")
        messages = store.notifications.error_messages
        self.error_label.setText("\n".join(messages))
        self.error_label.setVisible(bool(messages))

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        if not self._coordinator.mounted:
            self._coordinator.mount()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._coordinator.unmount()
        self._unsubscribe()
        super().closeEvent(event)
