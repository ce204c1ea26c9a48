"""Authentication utility functions."""

import base64
import binascii


class CredentialFormatError(ValueError):
    """Authorization header can not be parsed."""


def split_authorization_header(header: str) -> tuple[str, str]:
    """Split Authorization header into scheme and credentials.

    Args:
        header: The authorization header value.

    Returns:
        Lower-cased scheme and the credentials part.

    Raises:
        CredentialFormatError: If the header does not have the
        `<scheme> <credentials>` shape.
    """
    scheme_and_token = header.strip().split()
    if len(scheme_and_token) != 2:
        raise CredentialFormatError("No token found in Authorization header")
    return scheme_and_token[0].lower(), scheme_and_token[1]


def decode_basic_credentials(token: str) -> tuple[str, str]:
    """Decode credentials of HTTP Basic authentication.

    Args:
        token: Base64 encoded `user:password` pair.

    Returns:
        The user (application id) and password (secret).

    Raises:
        CredentialFormatError: If the token is not valid base64 or has no colon.
    """
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise CredentialFormatError("Invalid basic credentials encoding") from e

    application_id, separator, secret = decoded.partition(":")
    if not separator or not application_id:
        raise CredentialFormatError("Basic credentials must be applicationId:secret")
    return application_id, secret
