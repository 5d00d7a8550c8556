"""Fetches the authenticated user's profile for the header."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

import requests
from requests import exceptions as requests_exceptions

from overlay_dismissal.errors import ProfileFetchError
from overlay_dismissal.overlay_state import OverlayStateStore
from overlay_dismissal.worker_tracker import WorkerTracker

USERS_ENDPOINT = "/api/v1/users/"
AUTH_SCHEME = "JWT"
_DEFAULT_USER_AGENT = "OverlayDismissal/profile-fetch"

_LOGGER = logging.getLogger("OverlayDismissal.Profile")

SessionFactory = Callable[[], "requests.Session"]


def build_auth_header(token: str) -> str:
    return f"{AUTH_SCHEME} {token}"


def _create_http_session() -> requests.Session:
    session = requests.Session()
    session.headers["User-Agent"] = _DEFAULT_USER_AGENT
    return session


def _extract_full_name(payload: Mapping[str, Any]) -> str:
    for key in ("fullname", "fullName", "full_name"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise ProfileFetchError("Profile response did not include a full name")


def fetch_profile(
    base_url: str,
    token: Optional[str],
    *,
    timeout: float = 5.0,
    session_factory: SessionFactory = _create_http_session,
) -> str:
    """Return the current user's full name or raise ProfileFetchError."""
    if not token:
        raise ProfileFetchError("No bearer token available for profile fetch")
    url = base_url.rstrip("/") + USERS_ENDPOINT
    session = session_factory()
    response = None
    try:
        response = session.get(
            url,
            headers={"Authorization": build_auth_header(token), "Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except requests_exceptions.RequestException as exc:
        raise ProfileFetchError(f"Profile request failed: {exc}") from exc
    except ValueError as exc:
        raise ProfileFetchError(f"Unable to parse profile response: {exc}") from exc
    finally:
        if response is not None:
            response.close()
        session.close()
    if not isinstance(payload, Mapping):
        raise ProfileFetchError("Profile response was not a JSON object")
    return _extract_full_name(payload)


class ProfileFetcher:
    """Fire-and-forget profile fetch that publishes into the store.

    Failures are reported through the store's error notifications and are not
    retried.
    """

    def __init__(
        self,
        store: OverlayStateStore,
        *,
        base_url: str,
        timeout: float = 5.0,
        tracker: Optional[WorkerTracker] = None,
        session_factory: SessionFactory = _create_http_session,
        run_inline: bool = False,
    ) -> None:
        self._store = store
        self._base_url = base_url
        self._timeout = timeout
        self._tracker = tracker or WorkerTracker(_LOGGER)
        self._session_factory = session_factory
        self._run_inline = run_inline
        self._requests_issued = 0

    @property
    def requests_issued(self) -> int:
        return self._requests_issued

    @property
    def tracker(self) -> WorkerTracker:
        return self._tracker

    def __call__(self) -> None:
        self.start()

    def start(self) -> None:
        self._requests_issued += 1
        if self._run_inline:
            self._run()
            return
        self._tracker.spawn(self._run, name=f"OverlayDismissal-ProfileFetch-{self._requests_issued}")

    def _run(self) -> None:
        token = self._store.auth.token
        try:
            full_name = fetch_profile(
                self._base_url,
                token,
                timeout=self._timeout,
                session_factory=self._session_factory,
            )
        except ProfileFetchError as exc:
            _LOGGER.warning("Profile fetch failed: %s", exc)
            self._store.push_error(str(exc))
            return
        _LOGGER.debug("Profile fetched for %s", full_name)
        self._store.set_full_name(full_name)
