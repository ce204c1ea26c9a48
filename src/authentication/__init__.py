"""This package contains authentication code and modules."""

import logging

from authentication.interface import AuthInterface
from authentication.service_principal import ServicePrincipalAuthenticator
from store.principals import CredentialTable, PrincipalDirectory

logger = logging.getLogger(__name__)


def get_authenticator(
    principals: PrincipalDirectory, credentials: CredentialTable
) -> AuthInterface:
    """Create the authentication method used by the authorization gate.

    Parameters:
        principals (PrincipalDirectory): Known service principals.
        credentials (CredentialTable): Secrets of the service principals.

    Returns:
        AuthInterface: An instance implementing AuthInterface.
    """
    logger.debug(
        "Initializing service principal authentication for %d principal(s)",
        len(principals),
    )
    return ServicePrincipalAuthenticator(principals, credentials)
