"""Bearer-token middleware used by the profile endpoint the coordinator talks to."""
from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from overlay_dismissal.errors import AuthenticationError
from overlay_dismissal.profile_client import AUTH_SCHEME

_LOGGER = logging.getLogger("OverlayDismissal.Auth")

VerifyFn = Callable[[str], Optional[Any]]
NextFn = Callable[[Any], Any]


def extract_token(headers: Mapping[str, str]) -> str:
    raw = None
    for key, value in headers.items():
        if key.lower() == "authorization":
            raw = value
            break
    if not raw:
        raise AuthenticationError("Missing Authorization header")
    scheme, _, token = raw.strip().partition(" ")
    if scheme != AUTH_SCHEME or not token.strip():
        raise AuthenticationError(f"Authorization header must use the '{AUTH_SCHEME} <token>' scheme")
    return token.strip()


class TokenAuthenticator:
    """Populates ``request.user`` from a verified token or rejects the request."""

    def __init__(self, verify_token: VerifyFn) -> None:
        self._verify = verify_token

    def authenticate(self, request: Any) -> Any:
        token = extract_token(getattr(request, "headers", None) or {})
        user = self._verify(token)
        if user is None:
            _LOGGER.info("Rejected request with unknown token")
            raise AuthenticationError("Token could not be verified")
        request.user = user
        return user

    def __call__(self, request: Any, next_fn: NextFn) -> Any:
        self.authenticate(request)
        return next_fn(request)


class StaticUserAuthenticator(TokenAuthenticator):
    """Deterministic stand-in that assigns a fixed user without checking headers."""

    def __init__(self, user: Any) -> None:
        super().__init__(lambda _token: user)
        self._user = user

    def authenticate(self, request: Any) -> Any:
        request.user = self._user
        return self._user
