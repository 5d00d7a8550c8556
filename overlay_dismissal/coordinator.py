"""Wires the store, dispatcher, lifecycle and profile fetch behind mount/unmount."""
from __future__ import annotations

import logging
from typing import Optional

from overlay_dismissal.command_dispatcher import ActionTable, CommandDispatcher
from overlay_dismissal.dismissal_config import DismissalConfig
from overlay_dismissal.event_source import DocumentEventSource
from overlay_dismissal.input_lifecycle import InputListenerLifecycle
from overlay_dismissal.overlay_state import OverlayStateStore
from overlay_dismissal.profile_client import ProfileFetcher

_LOGGER = logging.getLogger("OverlayDismissal.Coordinator")


def store_action_table(store: OverlayStateStore, fetch_user) -> ActionTable:
    return ActionTable(
        close_pop_over=store.close_pop_over,
        close_all_modals=store.close_all_modals,
        close_boards_menu=store.close_boards_menu,
        fetch_user=fetch_user,
    )


class DismissalCoordinator:
    """Host-facing facade: ``mount`` on show, ``unmount`` on teardown."""

    def __init__(
        self,
        store: OverlayStateStore,
        event_source: DocumentEventSource,
        config: Optional[DismissalConfig] = None,
        *,
        actions: Optional[ActionTable] = None,
        fetcher: Optional[ProfileFetcher] = None,
    ) -> None:
        self.store = store
        self.config = config or DismissalConfig()
        if actions is None:
            self.fetcher = fetcher or ProfileFetcher(
                store,
                base_url=self.config.api_base_url,
                timeout=self.config.fetch_timeout_seconds,
            )
            actions = store_action_table(store, self.fetcher)
        else:
            self.fetcher = fetcher
        self.dispatcher = CommandDispatcher(actions)
        self.lifecycle = InputListenerLifecycle(
            event_source=event_source,
            dispatcher=self.dispatcher,
            snapshot_fn=store.snapshot,
            auth_fn=lambda: store.auth,
            policy=self.config.menu_policy,
        )

    @property
    def mounted(self) -> bool:
        return self.lifecycle.attached

    def mount(self) -> bool:
        _LOGGER.debug(
            "Mounting dismissal coordinator (menu dismiss_on_click=%s focus_aware=%s)",
            self.config.menu_dismiss_on_click,
            self.config.menu_focus_aware,
        )
        return self.lifecycle.activate()

    def unmount(self) -> bool:
        detached = self.lifecycle.deactivate()
        if self.fetcher is not None:
            self.fetcher.tracker.log_state("at unmount")
        return detached

    def shutdown(self, *, timeout: float = 2.0) -> None:
        self.unmount()
        if self.fetcher is not None:
            self.fetcher.tracker.join_all(timeout=timeout)
