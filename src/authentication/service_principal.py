"""Authentication of service principals.

Behavior:
- `Authorization: Bearer mock_access_token_<applicationId>` is accepted when
  an enabled principal with that application id exists.
- `Authorization: Basic <base64(applicationId:secret)>` is accepted when the
  pair matches a credential record exactly and the principal is enabled.

WARNING: the bearer format is guessable. Anybody who knows an application
id can impersonate the principal. This is a mock for local development and
must never be exposed as a real identity provider.
"""

from typing import Optional

import constants
from authentication.interface import (
    ANONYMOUS,
    AuthInterface,
    AuthOutcome,
    AuthStatus,
    invalid,
)
from authentication.utils import (
    CredentialFormatError,
    decode_basic_credentials,
    split_authorization_header,
)
from log import get_logger
from store.principals import CredentialTable, PrincipalDirectory

logger = get_logger(__name__)


class ServicePrincipalAuthenticator(
    AuthInterface
):  # pylint: disable=too-few-public-methods
    """Authenticate requests as service principals."""

    def __init__(
        self, principals: PrincipalDirectory, credentials: CredentialTable
    ) -> None:
        """Initialize the authenticator.

        Args:
            principals: Directory of service principals.
            credentials: Table of their secrets.
        """
        self.principals = principals
        self.credentials = credentials

    def authenticate(self, authorization_header: Optional[str]) -> AuthOutcome:
        """Authenticate request by its Authorization header.

        Args:
            authorization_header: Header value or None when absent.

        Returns:
            AuthOutcome: ANONYMOUS when no credential was sent, AUTHENTICATED
            with the principal, or INVALID with the reason of rejection.
        """
        if authorization_header is None or not authorization_header.strip():
            return ANONYMOUS

        try:
            scheme, token = split_authorization_header(authorization_header)
        except CredentialFormatError as e:
            return invalid(str(e))

        match scheme:
            case "bearer":
                return self._authenticate_bearer(token)
            case "basic":
                return self._authenticate_basic(token)
            case _:
                return invalid(f"Unsupported authentication scheme: {scheme}")

    def _authenticate_bearer(self, token: str) -> AuthOutcome:
        if not token.startswith(constants.MOCK_ACCESS_TOKEN_PREFIX):
            return invalid("Unrecognized bearer token")
        application_id = token[len(constants.MOCK_ACCESS_TOKEN_PREFIX) :]
        principal = self.principals.get_enabled(application_id)
        if principal is None:
            return invalid("Unknown or disabled service principal")
        logger.debug("Bearer token accepted for %s", application_id)
        return AuthOutcome(status=AuthStatus.AUTHENTICATED, principal=principal)

    def _authenticate_basic(self, token: str) -> AuthOutcome:
        try:
            application_id, secret = decode_basic_credentials(token)
        except CredentialFormatError as e:
            return invalid(str(e))

        if not self.credentials.verify(application_id, secret):
            logger.debug("Invalid credentials for %s", application_id)
            return invalid("Invalid service principal credentials")

        principal = self.principals.get_enabled(application_id)
        if principal is None:
            return invalid("Service principal is disabled")
        logger.debug("Basic credentials accepted for %s", application_id)
        return AuthOutcome(status=AuthStatus.AUTHENTICATED, principal=principal)
