"""Service principals and their credentials.

Both tables are built once from configuration and never change afterwards.
Secrets live only in `CredentialTable`; nothing that renders responses
holds a reference to it.
"""

import secrets
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Optional

from log import get_logger
from models.config import ServiceAccount

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResourceScopePermission:
    """Verbs granted on a resource scope (resource group name or `*`)."""

    scope: str
    verbs: frozenset[str]


@dataclass(frozen=True)
class ServicePrincipal:
    """Non-interactive caller identity."""

    object_id: str
    application_id: str
    display_name: str
    description: str
    enabled: bool
    permissions: tuple[ResourceScopePermission, ...]
    graph_permissions: frozenset[str]


@dataclass(frozen=True)
class CredentialRecord:
    """Secret of one service principal."""

    application_id: str
    secret: str

    def __repr__(self) -> str:
        """Return representation that does not leak the secret."""
        return f"CredentialRecord(application_id={self.application_id!r}, secret='**********')"


def principal_from_config(account: ServiceAccount) -> ServicePrincipal:
    """Build service principal from configured service account."""
    return ServicePrincipal(
        object_id=account.id or account.application_id,
        application_id=account.application_id,
        display_name=account.display_name,
        description=account.description,
        enabled=account.account_enabled,
        permissions=tuple(
            ResourceScopePermission(
                scope=permission.resource_group, verbs=frozenset(permission.permissions)
            )
            for permission in account.permissions
        ),
        graph_permissions=frozenset(account.graph_permissions),
    )


class PrincipalDirectory:
    """Read-only table of service principals keyed by application id."""

    def __init__(self, principals: Iterable[ServicePrincipal]) -> None:
        """Initialize the table."""
        self._by_application_id = MappingProxyType(
            {principal.application_id: principal for principal in principals}
        )
        logger.debug("Principal directory with %d entries", len(self._by_application_id))

    def __len__(self) -> int:
        """Return number of principals."""
        return len(self._by_application_id)

    def all(self) -> tuple[ServicePrincipal, ...]:
        """Return all principals in configuration order."""
        return tuple(self._by_application_id.values())

    def get(self, application_id: str) -> Optional[ServicePrincipal]:
        """Return principal with given application id, if any."""
        return self._by_application_id.get(application_id)

    def get_enabled(self, application_id: str) -> Optional[ServicePrincipal]:
        """Return enabled principal with given application id, if any."""
        principal = self._by_application_id.get(application_id)
        if principal is None or not principal.enabled:
            return None
        return principal

    def find(self, key: str) -> Optional[ServicePrincipal]:
        """Find principal by object id first, then by application id."""
        for principal in self._by_application_id.values():
            if principal.object_id == key:
                return principal
        return self._by_application_id.get(key)


class CredentialTable:
    """Read-only table of service principal secrets."""

    def __init__(self, records: Iterable[CredentialRecord]) -> None:
        """Initialize the table."""
        self._by_application_id = MappingProxyType(
            {record.application_id: record for record in records}
        )

    def verify(self, application_id: str, secret: str) -> bool:
        """Check application id and secret pair.

        Empty secrets never verify, so a service account configured without
        a secret can authenticate only with a bearer token.
        """
        record = self._by_application_id.get(application_id)
        if record is None or not record.secret or not secret:
            return False
        return secrets.compare_digest(
            record.secret.encode("utf-8"), secret.encode("utf-8")
        )


def build_principal_tables(
    accounts: Iterable[ServiceAccount],
) -> tuple[PrincipalDirectory, CredentialTable]:
    """Split configured service accounts into principals and credentials."""
    accounts = list(accounts)
    directory = PrincipalDirectory(principal_from_config(a) for a in accounts)
    credentials = CredentialTable(
        CredentialRecord(
            application_id=a.application_id, secret=a.secret.get_secret_value()
        )
        for a in accounts
    )
    return directory, credentials
