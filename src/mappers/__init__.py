"""Response mappers, one per API family."""

from typing import Any, Mapping

from mappers.arm import map_arm_response
from mappers.graph import map_graph_response
from mappers.types import UnsupportedOperationError
from routes.types import RouteHandler
from specs.models import ApiFamily


def map_identity_response(
    operation_id: str,
    path_pattern: str,
    method: str,
    params: dict[str, str],
    data: Any,
) -> Any:
    """Reject schema-described identity operations.

    Identity endpoints need interactive state and are served by dedicated
    handlers, not by routes compiled from API descriptions.
    """
    _ = (path_pattern, method, params, data)
    raise UnsupportedOperationError(
        f"Identity endpoint not implemented: {operation_id}"
    )


FAMILY_HANDLERS: Mapping[ApiFamily, RouteHandler] = {
    ApiFamily.RESOURCE_MANAGEMENT: map_arm_response,
    ApiFamily.DIRECTORY: map_graph_response,
    ApiFamily.IDENTITY: map_identity_response,
}
