"""Authorization resolvers for service principal permissions."""

from abc import ABC, abstractmethod
import logging
from typing import Iterable, Mapping

import constants
from store.principals import ResourceScopePermission, ServicePrincipal

logger = logging.getLogger(__name__)


def permitted(
    permissions: Iterable[ResourceScopePermission], scope: str, verb: str
) -> bool:
    """Evaluate resource-scoped permissions.

    The verb is permitted on the scope iff some entry has scope equal to
    the requested one or `*`, and its verbs contain the requested verb or
    `*`. An empty permission set permits nothing.

    Parameters:
        permissions: Permission entries of a principal.
        scope (str): Resource scope, i.e. the resource group name.
        verb (str): Requested verb such as `read` or `start`.

    Returns:
        bool: True when the verb is permitted.
    """
    for permission in permissions:
        if permission.scope not in (scope, constants.PERMISSION_WILDCARD):
            continue
        if verb in permission.verbs or constants.PERMISSION_WILDCARD in permission.verbs:
            return True
    return False


class AccessResolver(ABC):  # pylint: disable=too-few-public-methods
    """Base class for all access resolution strategies."""

    @abstractmethod
    def check_access(self, principal: ServicePrincipal, scope: str, verb: str) -> bool:
        """Check whether the principal may perform the verb on the scope.

        Parameters:
            principal (ServicePrincipal): Authenticated principal.
            scope (str): Target of the request.
            verb (str): Requested verb.

        Returns:
            bool: True when access is granted.
        """


class ResourceScopeAccessResolver(AccessResolver):  # pylint: disable=too-few-public-methods
    """Resolver for resource-management requests scoped by resource group."""

    def check_access(self, principal: ServicePrincipal, scope: str, verb: str) -> bool:
        """Check resource group permissions of the principal."""
        if permitted(principal.permissions, scope, verb):
            logger.debug(
                "Access granted: '%s' can perform '%s' on '%s'",
                principal.application_id,
                verb,
                scope,
            )
            return True

        logger.debug(
            "Access denied: '%s' cannot perform '%s' on '%s'",
            principal.application_id,
            verb,
            scope,
        )
        return False


class GraphAccessResolver(AccessResolver):  # pylint: disable=too-few-public-methods
    """Resolver for directory requests.

    The scope is the lower-cased name of the directory collection
    (`users`, `serviceprincipals`). Collections without an entry in the
    lookup table need no Graph permission.
    """

    def __init__(self, required: Mapping[str, frozenset[str]]) -> None:
        """Initialize the resolver.

        Parameters:
            required: Collection name mapped to the Graph permissions any of
            which grants read access to it.
        """
        self._required = dict(required)

    def check_access(self, principal: ServicePrincipal, scope: str, verb: str) -> bool:
        """Check Graph permissions of the principal."""
        required = self._required.get(scope)
        if required is None:
            return True
        held = principal.graph_permissions
        if constants.PERMISSION_WILDCARD in held or held & required:
            logger.debug(
                "Access granted: '%s' can %s %s", principal.application_id, verb, scope
            )
            return True

        logger.debug(
            "Access denied: '%s' holds none of %s",
            principal.application_id,
            sorted(required),
        )
        return False


DEFAULT_GRAPH_REQUIREMENTS: Mapping[str, frozenset[str]] = {
    "users": constants.GRAPH_USER_READ_PERMISSIONS,
    "serviceprincipals": constants.GRAPH_APPLICATION_READ_PERMISSIONS,
}
