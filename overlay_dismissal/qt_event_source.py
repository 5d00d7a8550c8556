"""Application-wide Qt event filter exposing clicks and key presses as document events."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PyQt6.QtCore import QEvent, QObject, Qt
from PyQt6.QtGui import QWindow
from PyQt6.QtWidgets import QApplication

from overlay_dismissal.dismissal_engine import ESCAPE_KEY_CODE
from overlay_dismissal.event_source import CLICK, EVENT_KINDS, KEYDOWN, Handler, InputEvent

_LOGGER = logging.getLogger("OverlayDismissal.Host.Events")


def translate_key(key: int) -> int:
    """Map a Qt key value onto the numeric key codes the decision engine expects."""
    if key == Qt.Key.Key_Escape.value:
        return ESCAPE_KEY_CODE
    return int(key)


class QtDocumentEventSource(QObject):
    """Watches the top-level windows of a QApplication.

    Qt routes every press through the owning ``QWindow`` before the target
    widget, so filtering on window receivers yields one document event per
    physical click or key press.
    """

    def __init__(self, app: Optional[QApplication] = None) -> None:
        super().__init__()
        self._app = app or QApplication.instance()
        self._handlers: Dict[str, List[Handler]] = {kind: [] for kind in EVENT_KINDS}
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def bind(self, kind: str, handler: Handler) -> None:
        if kind not in self._handlers:
            raise ValueError(f"Unsupported document event kind '{kind}'")
        self._handlers[kind].append(handler)
        self._sync_filter()

    def unbind(self, kind: str, handler: Handler) -> None:
        handlers = self._handlers.get(kind)
        if handlers and handler in handlers:
            handlers.remove(handler)
        self._sync_filter()

    def _sync_filter(self) -> None:
        if self._app is None:
            return
        wanted = any(self._handlers.values())
        if wanted and not self._installed:
            self._app.installEventFilter(self)
            self._installed = True
            _LOGGER.debug("Installed application event filter")
        elif not wanted and self._installed:
            self._app.removeEventFilter(self)
            self._installed = False
            _LOGGER.debug("Removed application event filter")

    def eventFilter(self, obj, event) -> bool:  # type: ignore[override]
        if not isinstance(obj, QWindow):
            return False
        event_type = event.type()
        if event_type == QEvent.Type.MouseButtonPress:
            self._deliver(InputEvent(kind=CLICK))
        elif event_type == QEvent.Type.KeyPress and not event.isAutoRepeat():
            self._deliver(InputEvent(kind=KEYDOWN, key_code=translate_key(event.key())))
        return False

    def _deliver(self, event: InputEvent) -> None:
        for handler in tuple(self._handlers[event.kind]):
            handler(event)
