"""Abstract base class for all authentication method implementations.

Contract: subclasses implement `authenticate(header) -> AuthOutcome`. A
missing credential is not an error at this level; the outcome tells the
caller whether the request was anonymous, authenticated, or carried a
credential that could not be accepted.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from store.principals import ServicePrincipal


class AuthStatus(Enum):
    """Result kinds of authentication."""

    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
    INVALID = "invalid"


@dataclass(frozen=True)
class AuthOutcome:
    """Authentication result.

    Attributes:
        status: Result kind.
        principal: Authenticated principal, set only for AUTHENTICATED.
        reason: Why the credential was rejected, set only for INVALID.
    """

    status: AuthStatus
    principal: Optional[ServicePrincipal] = None
    reason: str = ""

    @property
    def authenticated(self) -> bool:
        """Return True when a principal was authenticated."""
        return self.status is AuthStatus.AUTHENTICATED


ANONYMOUS = AuthOutcome(status=AuthStatus.ANONYMOUS)


def invalid(reason: str) -> AuthOutcome:
    """Return outcome for a credential that was sent but not accepted."""
    return AuthOutcome(status=AuthStatus.INVALID, reason=reason)


class AuthInterface(ABC):  # pylint: disable=too-few-public-methods
    """Base class for all authentication method implementations."""

    @abstractmethod
    def authenticate(self, authorization_header: Optional[str]) -> AuthOutcome:
        """Authenticate request by its Authorization header.

        Parameters:
            authorization_header: Value of the Authorization header, None
            when the header is absent.

        Returns:
            AuthOutcome: The authentication result.
        """
