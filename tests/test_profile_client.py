from __future__ import annotations

import pytest
import requests

from overlay_dismissal import profile_client
from overlay_dismissal.errors import ProfileFetchError
from overlay_dismissal.overlay_state import AuthContext, OverlayStateStore
from overlay_dismissal.profile_client import ProfileFetcher, fetch_profile


class _FakeResponse:
    def __init__(self, payload=None, *, status_error=None, json_error=None) -> None:
        self._payload = payload
        self._status_error = status_error
        self._json_error = json_error
        self.closed = False

    def raise_for_status(self) -> None:
        if self._status_error is not None:
            raise self._status_error

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    def close(self) -> None:
        self.closed = True


class _FakeSession:
    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.requests = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def test_fetch_profile_sends_jwt_header_and_reads_fullname():
    session = _FakeSession(_FakeResponse({"_id": 1, "fullname": "Moustapha Amadou Diouf"}))

    name = fetch_profile("http://localhost:3001/", "token-1", timeout=3, session_factory=lambda: session)

    assert name == "Moustapha Amadou Diouf"
    request = session.requests[0]
    assert request["url"] == "http://localhost:3001/api/v1/users/"
    assert request["headers"]["Authorization"] == "JWT token-1"
    assert request["timeout"] == 3
    assert session.closed is True
    assert session.response.closed is True


def test_fetch_profile_wraps_request_errors():
    session = _FakeSession(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(ProfileFetchError, match="refused"):
        fetch_profile("http://api", "token", session_factory=lambda: session)
    assert session.closed is True


def test_fetch_profile_wraps_http_status_errors():
    response = _FakeResponse(status_error=requests.exceptions.HTTPError("401 Unauthorized"))
    with pytest.raises(ProfileFetchError, match="401"):
        fetch_profile("http://api", "token", session_factory=lambda: _FakeSession(response))


def test_fetch_profile_rejects_invalid_json_and_missing_name():
    bad_json = _FakeResponse(json_error=ValueError("no json"))
    with pytest.raises(ProfileFetchError):
        fetch_profile("http://api", "token", session_factory=lambda: _FakeSession(bad_json))
    nameless = _FakeResponse({"_id": 1})
    with pytest.raises(ProfileFetchError, match="full name"):
        fetch_profile("http://api", "token", session_factory=lambda: _FakeSession(nameless))


def test_fetch_profile_requires_token():
    with pytest.raises(ProfileFetchError, match="token"):
        fetch_profile("http://api", None, session_factory=lambda: pytest.fail("no request expected"))


def test_fetcher_publishes_full_name():
    store = OverlayStateStore(auth=AuthContext(is_authenticated=True, token="abc"))
    session = _FakeSession(_FakeResponse({"fullName": "Ada Lovelace"}))
    fetcher = ProfileFetcher(store, base_url="http://api", session_factory=lambda: session, run_inline=True)

    fetcher()

    assert store.auth.full_name == "Ada Lovelace"
    assert store.notifications.error_messages == ()
    assert fetcher.requests_issued == 1


def test_fetcher_failure_goes_to_error_channel_without_retry():
    store = OverlayStateStore(auth=AuthContext(is_authenticated=True, token="abc"))
    sessions = []

    def _factory():
        session = _FakeSession(error=requests.exceptions.Timeout("timed out"))
        sessions.append(session)
        return session

    fetcher = ProfileFetcher(store, base_url="http://api", session_factory=_factory, run_inline=True)
    fetcher.start()

    assert len(sessions) == 1
    assert len(store.notifications.error_messages) == 1
    assert "timed out" in store.notifications.error_messages[0]


def test_fetcher_runs_on_worker_thread():
    store = OverlayStateStore(auth=AuthContext(is_authenticated=True, token="abc"))
    session = _FakeSession(_FakeResponse({"fullname": "Grace Hopper"}))
    fetcher = ProfileFetcher(store, base_url="http://api", session_factory=lambda: session)

    fetcher.start()
    fetcher.tracker.join_all(timeout=5.0)

    assert store.auth.full_name == "Grace Hopper"
    assert fetcher.tracker.live_workers == []


def test_default_session_sets_user_agent():
    session = profile_client._create_http_session()
    try:
        assert "OverlayDismissal" in session.headers["User-Agent"]
    finally:
        session.close()
