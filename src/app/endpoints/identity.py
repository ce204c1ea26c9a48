"""Handlers for the OIDC/OAuth2 identity provider endpoints.

These endpoints bypass the spec-driven dispatcher and the authorization
gate. Every protocol violation is raised as `OAuthProtocolError` and
rendered by the application exception handler as an OAuth2 error body.
"""

import html
import logging
from typing import Annotated, Any, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.concurrency import run_in_threadpool

import constants
from app.context import MockContext, get_context
from identity.discovery import (
    AUTHORIZATION_PATH,
    TOKEN_PATH,
    USERINFO_PATH,
    discovery_document,
    resolve_issuer,
)
from identity.oauth2 import OAuthProtocolError, UserSelectionPrompt
from models.responses import (
    DiscoveryResponse,
    OAuthErrorResponse,
    TokenResponse,
    UserInfoResponse,
)

logger = logging.getLogger("app.endpoints.handlers")
router = APIRouter(tags=["identity"])

LEGACY_PREFIX = "/mock/azure/entra"

oauth_error_responses: dict[int | str, dict[str, Any]] = {
    400: {"description": OAuthErrorResponse.description, "model": OAuthErrorResponse},
    401: {"description": OAuthErrorResponse.description, "model": OAuthErrorResponse},
}


def request_issuer(request: Request, context: MockContext) -> str:
    """Return issuer as seen by the client of the request."""
    return resolve_issuer(
        context.configuration.identity.issuer,
        request.headers,
        request.url.scheme,
        request.url.netloc,
    )


@router.get(
    "/.well-known/openid-configuration",
    responses={200: DiscoveryResponse.openapi_response()},
)
@router.get("/common/v2.0/.well-known/openid-configuration", include_in_schema=False)
@router.get("/{tenant}/v2.0/.well-known/openid-configuration", include_in_schema=False)
def discovery_endpoint_handler(
    request: Request,
    context: Annotated[MockContext, Depends(get_context)],
) -> DiscoveryResponse:
    """
    Handle request for OpenID provider metadata.

    The same document is served for every tenant.
    """
    issuer = request_issuer(request, context)
    logger.debug("Discovery document requested, issuer %s", issuer)
    return DiscoveryResponse(
        **discovery_document(issuer, context.configuration.identity.scopes_supported)
    )


def render_user_selection(path: str, prompt: UserSelectionPrompt) -> str:
    """Render page listing users, each linking back to the authorize endpoint."""
    params = {
        "client_id": prompt.client_id,
        "redirect_uri": prompt.redirect_uri,
        "response_type": prompt.response_type,
    }
    if prompt.scope:
        params["scope"] = prompt.scope
    if prompt.state:
        params["state"] = prompt.state

    items = []
    for user in prompt.users:
        link = f"{path}?{urlencode({**params, 'user_id': user.id})}"
        label = user.display_name or user.user_principal_name or user.id
        items.append(
            f'<li><a href="{html.escape(link)}">{html.escape(label)}</a> '
            f"{html.escape(user.user_principal_name)}</li>"
        )
    if not items:
        items.append("<li>No users configured</li>")

    return (
        "<!DOCTYPE html>\n<html><head><title>Sign in</title></head><body>\n"
        f"<h1>Sign in to {html.escape(prompt.client_id)}</h1>\n"
        "<ul>\n" + "\n".join(items) + "\n</ul>\n</body></html>\n"
    )


@router.get(AUTHORIZATION_PATH, response_class=HTMLResponse, responses=oauth_error_responses)
@router.get(
    f"{LEGACY_PREFIX}/authorize", response_class=HTMLResponse, include_in_schema=False
)
def authorize_endpoint_handler(  # pylint: disable=too-many-arguments,too-many-positional-arguments
    request: Request,
    context: Annotated[MockContext, Depends(get_context)],
    client_id: str = "",
    redirect_uri: str = "",
    response_type: str = "",
    scope: str = "",
    state: str = "",
    user_id: Optional[str] = None,
) -> Response:
    """
    Handle authorization request.

    Without `user_id` a page for interactive user selection is returned.
    With `user_id` an authorization code is issued and the client is
    redirected to `redirect_uri` with `code` and `state` appended.
    """
    result = context.identity.authorize(
        client_id=client_id,
        redirect_uri=redirect_uri,
        response_type=response_type,
        scope=scope,
        state=state,
        user_id=user_id,
    )
    if isinstance(result, UserSelectionPrompt):
        logger.info("User selection requested by %s", client_id)
        return HTMLResponse(render_user_selection(request.url.path, result))

    logger.info("Authorization code issued to %s for user %s", client_id, user_id)
    return RedirectResponse(result.location, status_code=status.HTTP_302_FOUND)


async def read_token_request(request: Request) -> dict[str, str]:
    """Read token request parameters from form or JSON body.

    Raises:
        OAuthProtocolError: If a JSON body is malformed.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            body = await request.json()
        except ValueError as e:
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_REQUEST, "malformed JSON body"
            ) from e
        if not isinstance(body, dict):
            raise OAuthProtocolError(
                constants.OAUTH_INVALID_REQUEST, "JSON body must be an object"
            )
        return {str(key): str(value) for key, value in body.items() if value is not None}

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.post(
    TOKEN_PATH,
    response_model_exclude_none=True,
    responses={200: TokenResponse.openapi_response(), **oauth_error_responses},
)
@router.post(
    f"{LEGACY_PREFIX}/token", response_model_exclude_none=True, include_in_schema=False
)
async def token_endpoint_handler(
    request: Request,
    response: Response,
    context: Annotated[MockContext, Depends(get_context)],
) -> TokenResponse:
    """
    Handle token request.

    Parameters are read from `application/x-www-form-urlencoded` body; a
    JSON body with the same keys is accepted too. Client credentials may be
    sent in the body or with HTTP Basic authentication.
    """
    params = await read_token_request(request)
    issuer = request_issuer(request, context)
    grant = await run_in_threadpool(
        context.identity.redeem, params, issuer, request.headers.get("authorization")
    )
    response.headers["Cache-Control"] = "no-store"
    response.headers["Pragma"] = "no-cache"
    return TokenResponse(**grant.to_dict())


@router.get(
    USERINFO_PATH,
    responses={200: UserInfoResponse.openapi_response(), **oauth_error_responses},
)
@router.get(f"{LEGACY_PREFIX}/userinfo", include_in_schema=False)
def userinfo_endpoint_handler(
    context: Annotated[MockContext, Depends(get_context)],
    authorization: Annotated[Optional[str], Header()] = None,
) -> UserInfoResponse:
    """
    Handle request for profile of the user behind a bearer token.

    Raises:
        OAuthProtocolError: If the bearer token is missing.
    """
    return UserInfoResponse(**context.identity.userinfo(authorization))
