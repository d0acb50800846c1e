from datetime import timedelta

import pytest

from seascape.core.exceptions import AuthenticationError
from seascape.core.security import create_access_token, verify_token
from seascape.core.session import Role, Session


def test_token_round_trip():
    payload = verify_token(create_access_token({"sub": "u-1", "email": "a@example.com"}))

    assert payload["sub"] == "u-1"
    assert payload["aud"] == "authenticated"


def test_expired_token_is_rejected():
    token = create_access_token({"sub": "u-1"}, expires_delta=timedelta(seconds=-5))

    with pytest.raises(AuthenticationError):
        verify_token(token)


def test_token_without_subject_is_rejected():
    with pytest.raises(AuthenticationError):
        verify_token(create_access_token({"email": "a@example.com"}))


def test_session_roles():
    session = Session(user_id="u-1", access_token="t").with_roles(["admin", "superhero"])

    assert session.roles == frozenset({Role.ADMIN})
    assert session.is_admin
    assert session.is_staff
    assert not session.is_owner
