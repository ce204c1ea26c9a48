"""Unsigned identity assertions.

WARNING: ID tokens built here use `alg: none` and carry no signature.
Any party can forge them. They exist so that OIDC client libraries can be
exercised locally and must never be accepted by a production service.
"""

import base64
import json
import time
from typing import Any, Optional

import constants
from models.config import User


def b64url(data: bytes) -> str:
    """Encode bytes as base64url without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def make_unsigned_jwt(claims: dict[str, Any]) -> str:
    """Serialize claims into three-segment JWT with empty signature."""
    header = {"alg": constants.ID_TOKEN_SIGNING_ALGORITHM, "typ": "JWT"}
    encoded_header = b64url(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    encoded_claims = b64url(json.dumps(claims, separators=(",", ":")).encode("utf-8"))
    return f"{encoded_header}.{encoded_claims}."


def split_display_name(display_name: str) -> tuple[str, str]:
    """Split display name into given name and family name.

    Examples:
        >>> split_display_name("Alice van Dyke")
        ('Alice', 'van Dyke')
        >>> split_display_name("Cher")
        ('Cher', 'User')
    """
    parts = display_name.split()
    given_name = parts[0] if parts else constants.UNKNOWN_SUBJECT_GIVEN_NAME
    family_name = (
        " ".join(parts[1:]) if len(parts) > 1 else constants.UNKNOWN_SUBJECT_FAMILY_NAME
    )
    return given_name, family_name


def identity_claims(
    issuer: str,
    audience: str,
    subject_id: str,
    user: Optional[User],
    lifetime: int,
    now: Optional[int] = None,
) -> dict[str, Any]:
    """Build claims of ID token for the subject.

    Subjects that are not configured users get a placeholder profile.
    """
    issued_at = int(time.time()) if now is None else now
    if user is None:
        email = constants.UNKNOWN_SUBJECT_EMAIL
        name = constants.UNKNOWN_SUBJECT_NAME
        given_name = constants.UNKNOWN_SUBJECT_GIVEN_NAME
        family_name = constants.UNKNOWN_SUBJECT_FAMILY_NAME
    else:
        email = user.user_principal_name or user.mail or constants.UNKNOWN_SUBJECT_EMAIL
        name = user.display_name or constants.UNKNOWN_SUBJECT_NAME
        given_name, family_name = split_display_name(name)

    return {
        "iss": issuer,
        "aud": audience,
        "sub": subject_id,
        "email": email,
        "name": name,
        "given_name": given_name,
        "family_name": family_name,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
