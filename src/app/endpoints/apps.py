"""Handlers for app registration REST API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

import constants
from app.context import MockContext, get_context
from identity.oauth2 import OAuthProtocolError
from models.requests import AppRegistrationRequest
from models.responses import (
    AppRegistrationListResponse,
    AppRegistrationResponse,
    OAuthErrorResponse,
)

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["apps"])


get_apps_responses: dict[int | str, dict[str, Any]] = {
    200: AppRegistrationListResponse.openapi_response(),
}

post_apps_responses: dict[int | str, dict[str, Any]] = {
    201: AppRegistrationResponse.openapi_response(),
    400: {
        "description": OAuthErrorResponse.description,
        "model": OAuthErrorResponse,
    },
}


@router.get("/apps", responses=get_apps_responses)
def list_apps_endpoint_handler(
    context: Annotated[MockContext, Depends(get_context)],
) -> AppRegistrationListResponse:
    """
    Handle request to list registered OAuth2 clients.

    Client secrets are never part of the response.
    """
    logger.info("Response to /mock/azure/apps endpoint")

    registrations = [
        AppRegistrationResponse.from_caller(caller)
        for caller in context.identity.list_callers()
    ]
    return AppRegistrationListResponse(value=registrations, count=len(registrations))


@router.post(
    "/apps", status_code=status.HTTP_201_CREATED, responses=post_apps_responses
)
def register_app_endpoint_handler(
    registration: AppRegistrationRequest,
    context: Annotated[MockContext, Depends(get_context)],
) -> AppRegistrationResponse:
    """
    Handle request to register an OAuth2 client.

    Registering an already known client id replaces the registration.

    Raises:
        OAuthProtocolError: If the client id is missing.
    """
    if not registration.client_id:
        raise OAuthProtocolError(
            constants.OAUTH_INVALID_REQUEST, "client_id is required"
        )
    caller = context.identity.register_caller(registration.to_caller())
    return AppRegistrationResponse.from_caller(caller)
