"""Unit tests for unsigned identity assertions."""

import json

import pytest

from identity.tokens import (
    b64url,
    identity_claims,
    make_unsigned_jwt,
    split_display_name,
)
from models.config import User
from tests.unit.utils.auth_helpers import b64url_decode, read_unsigned_jwt


def test_b64url_has_no_padding() -> None:
    """Test base64url encoding used by JWT segments."""
    assert b64url(b"a") == "YQ"
    assert b64url_decode("YQ") == b"a"


def test_unsigned_jwt_structure() -> None:
    """Test header, claims and empty signature of the token."""
    token = make_unsigned_jwt({"sub": "user-1"})
    header, claims, signature = token.split(".")
    assert json.loads(b64url_decode(header)) == {"alg": "none", "typ": "JWT"}
    assert json.loads(b64url_decode(claims)) == {"sub": "user-1"}
    assert signature == ""
    assert read_unsigned_jwt(token) == {"sub": "user-1"}


@pytest.mark.parametrize(
    "display_name,expected",
    [
        ("Alice Smith", ("Alice", "Smith")),
        ("Alice van Dyke", ("Alice", "van Dyke")),
        ("Cher", ("Cher", "User")),
        ("", ("Unknown", "User")),
    ],
)
def test_split_display_name(display_name: str, expected: tuple[str, str]) -> None:
    """Test splitting display names into given and family name."""
    assert split_display_name(display_name) == expected


def test_identity_claims_of_configured_user() -> None:
    """Test claims built from user profile."""
    user = User(
        id="user-1",
        display_name="Alice Smith",
        user_principal_name="alice@example.com",
        mail="alice.smith@example.com",
    )
    claims = identity_claims("http://issuer", "web-app", "user-1", user, 60, now=1000)
    assert claims == {
        "iss": "http://issuer",
        "aud": "web-app",
        "sub": "user-1",
        "email": "alice@example.com",
        "name": "Alice Smith",
        "given_name": "Alice",
        "family_name": "Smith",
        "iat": 1000,
        "exp": 1060,
    }


def test_identity_claims_of_unknown_subject() -> None:
    """Test placeholder profile of subjects that are not configured users."""
    claims = identity_claims("http://issuer", "web-app", "someone", None, 60)
    assert claims["sub"] == "someone"
    assert claims["email"] == "unknown@dev.local"
    assert claims["name"] == "Unknown User"
    assert claims["exp"] - claims["iat"] == 60
