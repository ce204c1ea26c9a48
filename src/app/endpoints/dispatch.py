"""Catch-all handler serving routes compiled from API descriptions.

Every request not answered by a dedicated endpoint is resolved by the
dispatcher, checked by the authorization gate and answered by the response
mapper of the API family the matched route belongs to.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

import constants
from app.context import MockContext, get_context
from authorization.gate import AuthenticationFailure, PermissionDenied
from mappers.types import MappingError, ResourceNotFoundError, UnsupportedOperationError
from models.responses import (
    AbstractErrorResponse,
    ForbiddenResponse,
    InternalServerErrorResponse,
    MethodNotAllowedResponse,
    NotFoundResponse,
    UnauthorizedResponse,
)
from routes.types import Outcome
from specs.models import ApiFamily

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["dispatch"])


def not_found_code(family: ApiFamily) -> str:
    """Return error code used by the family for missing resources."""
    if family is ApiFamily.DIRECTORY:
        return constants.GRAPH_NOT_FOUND_CODE
    return constants.ARM_NOT_FOUND_CODE


def forbidden_code(family: ApiFamily) -> str:
    """Return error code used by the family for denied access."""
    if family is ApiFamily.DIRECTORY:
        return constants.GRAPH_FORBIDDEN_CODE
    return constants.ARM_FORBIDDEN_CODE


@router.api_route(
    "/{full_path:path}",
    methods=[*constants.ROUTE_METHODS, *constants.EXTRA_DISPATCH_METHODS],
    include_in_schema=False,
)
def dispatch_endpoint_handler(
    request: Request,
    context: Annotated[MockContext, Depends(get_context)],
) -> Response:
    """
    Handle request addressed to a spec-driven route.

    Path parameters take precedence over query parameters of the same
    name. A mapper answering with no payload yields an empty 200 response.
    """
    response = dispatch_request(request, context)
    if request.method == "HEAD":
        return without_body(response)
    return response


def without_body(response: Response) -> Response:
    """Return response with the status and headers of the given one only."""
    headers = {
        key: value
        for key, value in response.headers.items()
        if key.lower() != "content-length"
    }
    return Response(status_code=response.status_code, headers=headers)


def dispatch_request(request: Request, context: MockContext) -> Response:
    """Resolve, authorize and map one request.

    HEAD requests are served by GET routes; the body is dropped by the
    caller.
    """
    method = request.method
    lookup_method = "GET" if method == "HEAD" else method
    path = request.url.path
    resolution = context.dispatcher.resolve(lookup_method, path)

    if resolution.outcome is Outcome.METHOD_NOT_ALLOWED:
        allowed = resolution.allowed_methods
        return MethodNotAllowedResponse(method=method, allowed=allowed).to_response(
            headers={"Allow": ", ".join(allowed)}
        )
    route = resolution.route
    if resolution.outcome is not Outcome.MATCHED or route is None:
        logger.debug("No route for %s %s", method, path)
        return NotFoundResponse(
            code=constants.ARM_NOT_FOUND_CODE,
            cause=f"No route matches {method} {path}",
        ).to_response()

    params = {**dict(request.query_params), **resolution.params}
    logger.debug("%s %s matched %s (%s)", method, path, route.path, route.operation_id)

    error: AbstractErrorResponse
    headers = None
    try:
        decision = context.gate.check(
            request.headers.get("authorization"),
            route.family,
            method,
            route.path,
            route.operation_id,
            params,
        )
        payload = route.handler(
            route.operation_id, route.path, lookup_method, params, context.data
        )
    except AuthenticationFailure as e:
        logger.info("Request %s %s not authenticated: %s", method, path, e)
        error = UnauthorizedResponse(cause=str(e))
        headers = {"WWW-Authenticate": "Bearer"}
    except PermissionDenied as e:
        logger.info("Request %s %s denied: %s", method, path, e)
        error = ForbiddenResponse(code=forbidden_code(route.family), cause=str(e))
    except ResourceNotFoundError as e:
        error = NotFoundResponse(code=not_found_code(route.family), cause=str(e))
    except UnsupportedOperationError as e:
        logger.warning("Operation %s is not emulated: %s", route.operation_id, e)
        error = InternalServerErrorResponse.unsupported_operation(route.operation_id)
    except MappingError as e:
        logger.error("Mapping of %s %s failed: %s", method, path, e)
        error = InternalServerErrorResponse.generic()
    else:
        if payload is None:
            return Response(status_code=200)
        return JSONResponse(context.gate.filter_visible(decision, route.family, payload))

    return error.to_response(headers=headers)
