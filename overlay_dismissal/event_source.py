"""Document-level input streams the lifecycle binds its handlers to."""
from __future__ import annotations

import collections
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional, Protocol, Tuple

_LOGGER = logging.getLogger("OverlayDismissal.Events")

CLICK = "click"
KEYDOWN = "keydown"
EVENT_KINDS = (CLICK, KEYDOWN)


@dataclass(frozen=True)
class InputEvent:
    kind: str
    key_code: Optional[int] = None


Handler = Callable[[InputEvent], None]


class DocumentEventSource(Protocol):
    def bind(self, kind: str, handler: Handler) -> None: ...

    def unbind(self, kind: str, handler: Handler) -> None: ...


def _validate_kind(kind: str) -> str:
    if kind not in EVENT_KINDS:
        raise ValueError(f"Unsupported document event kind '{kind}'")
    return kind


class QueuedDocumentEventSource:
    """In-process event stream delivering events one at a time in arrival order.

    Events posted from inside a handler are queued behind the event being
    handled. Handlers are looked up at delivery time, so an event that was
    queued before ``unbind`` never reaches the detached handler.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {kind: [] for kind in EVENT_KINDS}
        self._queue: Deque[InputEvent] = collections.deque()
        self._lock = threading.RLock()
        self._delivering = False

    def bind(self, kind: str, handler: Handler) -> None:
        with self._lock:
            self._handlers[_validate_kind(kind)].append(handler)

    def unbind(self, kind: str, handler: Handler) -> None:
        with self._lock:
            handlers = self._handlers[_validate_kind(kind)]
            if handler in handlers:
                handlers.remove(handler)

    def handler_count(self, kind: Optional[str] = None) -> int:
        with self._lock:
            if kind is not None:
                return len(self._handlers[_validate_kind(kind)])
            return sum(len(handlers) for handlers in self._handlers.values())

    def post_click(self) -> None:
        self.post(InputEvent(kind=CLICK))

    def post_key(self, key_code: int) -> None:
        self.post(InputEvent(kind=KEYDOWN, key_code=int(key_code)))

    def post(self, event: InputEvent) -> None:
        _validate_kind(event.kind)
        with self._lock:
            self._queue.append(event)
            if self._delivering:
                return
            self._delivering = True
        try:
            self._drain()
        except Exception:
            with self._lock:
                dropped = len(self._queue)
                self._queue.clear()
            if dropped:
                _LOGGER.warning("Discarding %d queued event(s) after handler failure", dropped)
            raise
        finally:
            with self._lock:
                self._delivering = False

    def _drain(self) -> None:
        while True:
            with self._lock:
                if not self._queue:
                    return
                event = self._queue.popleft()
                handlers = tuple(self._handlers[event.kind])
            if not handlers:
                _LOGGER.debug("Dropping %s event; no handler attached", event.kind)
            for handler in handlers:
                handler(event)


class RecordingEventSource:
    """Event source that only records bind/unbind calls; used to audit listener leaks."""

    def __init__(self) -> None:
        self.bound: List[Tuple[str, Handler]] = []
        self.calls: List[Tuple[str, str]] = []

    def bind(self, kind: str, handler: Handler) -> None:
        self.bound.append((_validate_kind(kind), handler))
        self.calls.append(("bind", kind))

    def unbind(self, kind: str, handler: Handler) -> None:
        entry = (_validate_kind(kind), handler)
        if entry in self.bound:
            self.bound.remove(entry)
        self.calls.append(("unbind", kind))
