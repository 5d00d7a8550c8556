from __future__ import annotations

import threading

from overlay_dismissal.overlay_state import (
    AuthContext,
    FocusContext,
    OverlaySnapshot,
    OverlayStateStore,
    OverlayVisibilityState,
)


def test_open_and_close_round_trip_notifies_listeners():
    store = OverlayStateStore()
    seen = []
    store.subscribe(lambda s: seen.append(s.visibility))

    store.open_modal()
    store.open_pop_over()
    store.close_all_modals()

    assert store.visibility == OverlayVisibilityState(is_pop_over_open=True)
    assert len(seen) == 3


def test_close_on_closed_overlay_is_noop():
    store = OverlayStateStore()
    seen = []
    store.subscribe(lambda s: seen.append(1))

    store.close_pop_over()
    store.close_all_modals()
    store.close_boards_menu()

    assert seen == []


def test_closing_overlay_clears_its_focus_only():
    store = OverlayStateStore(
        visibility=OverlayVisibilityState(is_pop_over_open=True, is_modal_open=True),
        focus=FocusContext(is_focus_on_pop_hover=True, is_focus_on_modal=True),
    )

    store.close_pop_over()

    assert store.focus == FocusContext(is_focus_on_pop_hover=False, is_focus_on_modal=True)
    assert store.visibility.is_modal_open is True


def test_snapshot_is_immutable_copy():
    store = OverlayStateStore()
    before = store.snapshot()
    store.open_boards_menu()
    assert before == OverlaySnapshot()
    assert store.snapshot().visibility.is_boards_menu_open is True


def test_toggle_boards_menu():
    store = OverlayStateStore()
    store.toggle_boards_menu()
    assert store.visibility.is_boards_menu_open is True
    store.toggle_boards_menu()
    assert store.visibility.is_boards_menu_open is False


def test_errors_keep_arrival_order():
    store = OverlayStateStore()
    store.push_error("first")
    store.push_error("second")
    assert store.notifications.error_messages == ("first", "second")
    store.clear_errors()
    assert store.notifications.error_messages == ()


def test_full_name_update_preserves_auth_flags():
    store = OverlayStateStore(auth=AuthContext(is_authenticated=True, token="abc"))
    store.set_full_name("Moustapha Amadou Diouf")
    assert store.auth == AuthContext(is_authenticated=True, full_name="Moustapha Amadou Diouf", token="abc")


def test_unsubscribe_stops_notifications():
    store = OverlayStateStore()
    seen = []
    unsubscribe = store.subscribe(lambda s: seen.append(1))
    unsubscribe()
    store.open_modal()
    assert seen == []


def test_concurrent_writers_do_not_lose_errors():
    store = OverlayStateStore()

    def _writer(idx: int) -> None:
        for n in range(50):
            store.push_error(f"{idx}-{n}")

    threads = [threading.Thread(target=_writer, args=(idx,)) for idx in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(store.notifications.error_messages) == 200
