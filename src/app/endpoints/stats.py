"""Handler for REST API call to provide statistics about mock data."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from app.context import MockContext, get_context
from models.responses import StatisticsResponse

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["mock"])


get_stats_responses: dict[int | str, dict[str, Any]] = {
    200: StatisticsResponse.openapi_response(),
}


@router.get("/stats", responses=get_stats_responses)
def stats_endpoint_handler(
    context: Annotated[MockContext, Depends(get_context)],
) -> StatisticsResponse:
    """
    Handle request to the /mock/azure/stats endpoint.

    Returns:
        StatisticsResponse: Counts of virtual machines by state and of users.
    """
    logger.info("Response to /mock/azure/stats endpoint")

    statistics = context.data.statistics()
    return StatisticsResponse(
        total_vms=statistics.total_vms,
        running_vms=statistics.running_vms,
        stopped_vms=statistics.stopped_vms,
        total_users=statistics.total_users,
    )
