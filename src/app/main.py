"""Definition of FastAPI based web service."""

import os
from typing import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import constants
from app import routers
from app.context import MockContext
from identity.oauth2 import OAuthProtocolError
from log import get_logger
from models.responses import InternalServerErrorResponse, OAuthErrorResponse

logger = get_logger(__name__)


async def global_exception_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """Middleware to handle uncaught exceptions from all endpoints.

    Any exception not handled by an endpoint is turned into the generic
    internal error response; the traceback is logged, never returned.
    HTTPException passes through unchanged.
    """
    try:
        response = await call_next(request)
        return response
    except HTTPException:
        raise
    except Exception:  # pylint: disable=broad-exception-caught
        logger.exception("Uncaught exception in endpoint %s", request.url.path)
        return InternalServerErrorResponse.generic().to_response()


async def oauth_protocol_error_handler(
    request: Request, exc: OAuthProtocolError
) -> JSONResponse:
    """Render OAuth2 protocol violations in the OAuth2 error format."""
    logger.info(
        "OAuth2 request to %s rejected: %s", request.url.path, exc.description
    )
    return OAuthErrorResponse(
        status_code=exc.status_code,
        error=exc.error,
        error_description=exc.description,
    ).to_response()


def create_app(context: MockContext) -> FastAPI:
    """Create the web service around an already built mock context.

    Parameters:
        context: Component graph the request handlers work with.

    Returns:
        FastAPI: The application, with the context in `app.state.context`.
    """
    service_name = context.configuration.name

    app = FastAPI(
        title=f"{service_name} service - OpenAPI",
        summary=f"{service_name} service API specification.",
        description="Mock of the resource-management, directory and identity "
        "APIs for local development.",
        version=constants.SERVICE_VERSION,
        license_info={
            "name": "Apache 2.0",
            "url": "https://www.apache.org/licenses/LICENSE-2.0.html",
        },
        servers=[
            {"url": "http://localhost:8090/", "description": "Locally running service"}
        ],
    )
    app.state.context = context

    cors = context.configuration.service.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.allow_origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.middleware("http")(global_exception_middleware)
    app.add_exception_handler(OAuthProtocolError, oauth_protocol_error_handler)

    logger.info("Including routers")
    routers.include_routers(app)
    return app


def app_factory() -> FastAPI:
    """Create the web service from the configuration file named in environment.

    Used by uvicorn worker processes, which do not share memory with the
    process that parsed the command line.
    """
    filename = os.environ.get(
        constants.CONFIGURATION_FILE_ENV_VAR, constants.DEFAULT_CONFIGURATION_FILE
    )
    return create_app(MockContext.from_file(filename))
