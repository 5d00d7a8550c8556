from __future__ import annotations

import types

import pytest

from overlay_dismissal import auth_middleware


@pytest.fixture
def stub_user():
    return types.SimpleNamespace(id=1, fullname="Moustapha Amadou Diouf")


@pytest.fixture
def stubbed_authenticator(monkeypatch, stub_user):
    """Replace token verification with a deterministic user assignment."""

    def _fake_authenticate(self, request):
        request.user = stub_user
        return stub_user

    monkeypatch.setattr(auth_middleware.TokenAuthenticator, "authenticate", _fake_authenticate)
    return stub_user
