"""Authorization gate in front of resource-management and directory routes.

Anonymous reads are permitted for backward compatibility with clients that
never sent credentials. What happens with anonymous writes and with
credentials that can not be accepted is configurable, see
`AuthorizationConfiguration`.
"""

import re
from dataclasses import dataclass
from typing import Any, Optional

import constants
from authentication.interface import AuthInterface, AuthStatus
from authorization.resolvers import (
    DEFAULT_GRAPH_REQUIREMENTS,
    AccessResolver,
    GraphAccessResolver,
    ResourceScopeAccessResolver,
)
from log import get_logger
from mappers.arm import resolve_action
from models.config import AuthorizationConfiguration
from routes.pattern import split_path
from specs.models import ApiFamily
from store.principals import ServicePrincipal

logger = get_logger(__name__)

RESOURCE_GROUP_IN_ID = re.compile(r"/resourceGroups/([^/]+)", re.IGNORECASE)

READ_METHODS = frozenset({"GET", "HEAD"})


class AuthenticationFailure(Exception):
    """Request must carry valid credentials."""


class PermissionDenied(Exception):
    """Authenticated principal may not perform the request."""

    def __init__(self, principal: ServicePrincipal, scope: str, verb: str) -> None:
        """Initialize the exception."""
        super().__init__(
            f"The client '{principal.application_id}' does not have "
            f"authorization to perform '{verb}' over scope '{scope}'"
        )
        self.principal = principal
        self.scope = scope
        self.verb = verb


@dataclass(frozen=True)
class GateDecision:
    """Principal on whose behalf the request runs, None for anonymous."""

    principal: Optional[ServicePrincipal] = None

    @property
    def anonymous(self) -> bool:
        """Return True for anonymous requests."""
        return self.principal is None


def derive_verb(method: str, path_pattern: str, operation_id: str) -> str:
    """Return the verb a resource-management request needs.

    Examples:
        >>> derive_verb("GET", "/subscriptions/{s}/resourcegroups", "")
        'read'
        >>> derive_verb("POST", "/x/virtualMachines/{vmName}/powerOff", "")
        'stop'
    """
    method = method.upper()
    if method in READ_METHODS:
        return constants.VERB_READ
    if method == "DELETE":
        return constants.VERB_DELETE
    if method == "POST":
        action = resolve_action(path_pattern, operation_id)
        if action is not None:
            return constants.ARM_ACTION_VERBS[action]
    return constants.VERB_WRITE


def graph_collection(path_pattern: str) -> str:
    """Return lower-cased name of directory collection addressed by pattern."""
    segments = [s for s in split_path(path_pattern) if s]
    return segments[0].lower() if segments else ""


def resource_group_of(item: Any) -> Optional[str]:
    """Return resource group named in the `id` of rendered resource."""
    if not isinstance(item, dict):
        return None
    found = RESOURCE_GROUP_IN_ID.search(str(item.get("id", "")))
    return found.group(1) if found else None


class AuthorizationGate:
    """Authenticate requests and check their permissions."""

    def __init__(
        self,
        authenticator: AuthInterface,
        config: AuthorizationConfiguration,
        resource_resolver: Optional[AccessResolver] = None,
        graph_resolver: Optional[AccessResolver] = None,
    ) -> None:
        """Initialize the gate.

        Parameters:
            authenticator: Authentication method for the Authorization header.
            config: Anonymous access and Graph permission settings.
            resource_resolver: Resolver for resource-management requests.
            graph_resolver: Resolver for directory requests.
        """
        self.authenticator = authenticator
        self.config = config
        self.resource_resolver = resource_resolver or ResourceScopeAccessResolver()
        self.graph_resolver = graph_resolver or GraphAccessResolver(
            DEFAULT_GRAPH_REQUIREMENTS
        )

    def authenticate(self, authorization_header: Optional[str]) -> GateDecision:
        """Authenticate the request.

        Raises:
            AuthenticationFailure: If credentials were sent but could not be
            accepted and such requests are not degraded to anonymous.
        """
        outcome = self.authenticator.authenticate(authorization_header)
        match outcome.status:
            case AuthStatus.AUTHENTICATED:
                return GateDecision(principal=outcome.principal)
            case AuthStatus.INVALID:
                if not self.config.invalid_credentials_as_anonymous:
                    raise AuthenticationFailure(outcome.reason)
                logger.debug("Treating rejected credentials as anonymous: %s", outcome.reason)
                return GateDecision()
            case _:
                return GateDecision()

    def check(
        self,
        authorization_header: Optional[str],
        family: ApiFamily,
        method: str,
        path_pattern: str,
        operation_id: str,
        params: dict[str, str],
    ) -> GateDecision:
        """Decide whether the request may proceed.

        Parameters:
            authorization_header: Value of the Authorization header.
            family: API family of the matched route.
            method: HTTP method of the request.
            path_pattern: Pattern of the matched route.
            operation_id: Operation id of the matched route.
            params: Merged path and query parameters.

        Returns:
            GateDecision: The principal the request runs for.

        Raises:
            AuthenticationFailure: Credentials are missing or invalid.
            PermissionDenied: The principal lacks the needed permission.
        """
        decision = self.authenticate(authorization_header)
        if family is ApiFamily.RESOURCE_MANAGEMENT:
            verb = derive_verb(method, path_pattern, operation_id)
        else:
            verb = (
                constants.VERB_READ
                if method.upper() in READ_METHODS
                else constants.VERB_WRITE
            )

        principal = decision.principal
        if principal is None:
            if verb == constants.VERB_READ or self.config.anonymous_writes:
                return decision
            raise AuthenticationFailure(
                f"Credentials are required to perform '{verb}'"
            )

        match family:
            case ApiFamily.RESOURCE_MANAGEMENT:
                scope = params.get("resourceGroupName")
                if scope is None and verb == constants.VERB_READ:
                    # unscoped lists are filtered item by item
                    return decision
                scope = scope or constants.PERMISSION_WILDCARD
                if not self.resource_resolver.check_access(principal, scope, verb):
                    raise PermissionDenied(principal, scope, verb)
            case ApiFamily.DIRECTORY:
                if self.config.enforce_graph_permissions:
                    scope = graph_collection(path_pattern)
                    if not self.graph_resolver.check_access(principal, scope, verb):
                        raise PermissionDenied(principal, scope, verb)
        return decision

    def filter_visible(
        self, decision: GateDecision, family: ApiFamily, payload: Any
    ) -> Any:
        """Drop list items the principal may not read.

        Only resource-management lists of authenticated requests are
        filtered; items whose id names no resource group are kept.
        """
        if (
            decision.principal is None
            or family is not ApiFamily.RESOURCE_MANAGEMENT
            or not isinstance(payload, dict)
            or not isinstance(payload.get("value"), list)
        ):
            return payload

        visible = []
        for item in payload["value"]:
            group = resource_group_of(item)
            if group is None or self.resource_resolver.check_access(
                decision.principal, group, constants.VERB_READ
            ):
                visible.append(item)
        return {**payload, "value": visible}
