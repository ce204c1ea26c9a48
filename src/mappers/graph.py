"""Responses of the directory (Microsoft Graph) API."""

import uuid
from typing import Any

import constants
from log import get_logger
from mappers.types import ResourceNotFoundError, UnsupportedOperationError
from models.config import User
from routes.pattern import split_path
from store.data_store import DataStore
from store.principals import ServicePrincipal

logger = get_logger(__name__)

# Graph names of optional user profile fields, omitted when empty
USER_FIELDS = (
    ("id", "id"),
    ("displayName", "display_name"),
    ("userPrincipalName", "user_principal_name"),
    ("mail", "mail"),
    ("jobTitle", "job_title"),
    ("department", "department"),
    ("officeLocation", "office_location"),
    ("userType", "user_type"),
)


def render_user(user: User) -> dict[str, Any]:
    """Render user in Graph format, omitting empty optional fields."""
    rendered: dict[str, Any] = {}
    for graph_name, field_name in USER_FIELDS:
        value = getattr(user, field_name)
        if value:
            rendered[graph_name] = value
    rendered["accountEnabled"] = user.account_enabled
    return rendered


def render_service_principal(principal: ServicePrincipal) -> dict[str, Any]:
    """Render service principal in Graph format."""
    return {
        "id": principal.object_id,
        "appId": principal.application_id,
        "displayName": principal.display_name,
        "description": principal.description,
        "accountEnabled": principal.enabled,
        "servicePrincipalType": "Application",
    }


def apply_top(items: list[Any], params: dict[str, str]) -> list[Any]:
    """Limit list by the `$top` query parameter; invalid values are ignored."""
    top = params.get("$top", "")
    if top.isdigit() and int(top) > 0:
        return items[: int(top)]
    return items


def collection_list(context: str, items: list[Any]) -> dict[str, Any]:
    """Wrap items into Graph collection response."""
    return {"@odata.context": context, "value": items}


def map_graph_response(
    operation_id: str,
    path_pattern: str,
    method: str,
    params: dict[str, str],
    data: DataStore,
) -> Any:
    """Render response of directory operation.

    Lookup keys are tried as object id first, then as the human readable
    name (user principal name or application id).

    Raises:
        ResourceNotFoundError: If the addressed object does not exist.
        UnsupportedOperationError: If the method is not emulated.
    """
    segments = [segment for segment in split_path(path_pattern.lower()) if segment]
    collection = segments[0] if segments else ""
    # anything below /collection/{id} is a navigation property
    navigation = len(segments) > 2
    method = method.upper()
    logger.debug("Graph %s %s (%s)", method, path_pattern, operation_id)

    match collection:
        case "users":
            return _map_users(method, params, data, navigation)
        case "serviceprincipals":
            return _map_service_principals(method, params, data, navigation)
        case _:
            return {"value": []}


def _map_users(
    method: str, params: dict[str, str], data: DataStore, navigation: bool
) -> Any:
    key = params.get("user-id") or params.get("id", "")

    match method:
        case "GET":
            if not key:
                users = [render_user(user) for user in data.users()]
                return collection_list(
                    constants.GRAPH_USERS_CONTEXT, apply_top(users, params)
                )
            user = data.find_user(key)
            if user is None:
                raise ResourceNotFoundError(f"user not found: {key}")
            if navigation:
                return {"value": []}
            return render_user(user)
        case "POST":
            return {
                "id": key or str(uuid.uuid4()),
                "userPrincipalName": params.get("userPrincipalName", ""),
                "displayName": params.get("displayName", ""),
            }
        case _:
            raise UnsupportedOperationError(f"unsupported method: {method}")


def _map_service_principals(
    method: str, params: dict[str, str], data: DataStore, navigation: bool
) -> Any:
    key = params.get("servicePrincipal-id") or params.get("id", "")

    if method != "GET":
        raise UnsupportedOperationError(f"unsupported method: {method}")

    if not key:
        principals = [render_service_principal(p) for p in data.service_principals()]
        return collection_list(
            constants.GRAPH_SERVICE_PRINCIPALS_CONTEXT, apply_top(principals, params)
        )
    principal = data.find_service_principal(key)
    if principal is None:
        raise ResourceNotFoundError(f"service principal not found: {key}")
    if navigation:
        return {"value": []}
    return render_service_principal(principal)
