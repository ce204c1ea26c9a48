"""Handlers for health REST API endpoints.

These endpoints are used to check if service is live and prepared to accept
requests. Note that these endpoints can be accessed using GET or HEAD HTTP
methods. For HEAD HTTP method, just the HTTP response code is used.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from app.context import MockContext, get_context
from models.responses import LivenessResponse, ReadinessResponse

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["health"])


get_readiness_responses: dict[int | str, dict[str, Any]] = {
    200: ReadinessResponse.openapi_response(),
}

get_liveness_responses: dict[int | str, dict[str, Any]] = {
    200: LivenessResponse.openapi_response(),
}


@router.get("/readiness", responses=get_readiness_responses)
def readiness_probe_get_method(
    context: Annotated[MockContext, Depends(get_context)],
) -> ReadinessResponse:
    """
    Handle the readiness probe endpoint, returning service readiness.

    The service is ready as soon as the mock context has been built. The
    identity endpoints work even when no API description was loaded, so an
    empty routing table is reported in the reason but does not make the
    service unready.
    """
    logger.info("Response to /readiness endpoint")

    routes = context.dispatcher.route_count
    if routes:
        reason = "Service is ready"
    else:
        reason = "Service is ready, no spec-driven routes loaded"
    return ReadinessResponse(ready=True, reason=reason, routes=routes)


@router.get("/liveness", responses=get_liveness_responses)
def liveness_probe_get_method() -> LivenessResponse:
    """
    Return the liveness status of the service.

    Returns:
        LivenessResponse: Indicates that the service is alive.
    """
    logger.info("Response to /liveness endpoint")

    return LivenessResponse(alive=True)
