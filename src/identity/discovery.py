"""OIDC discovery document."""

from typing import Any, Iterable, Optional

from starlette.datastructures import Headers

import constants

AUTHORIZATION_PATH = "/oauth2/v2.0/authorize"
TOKEN_PATH = "/oauth2/v2.0/token"
USERINFO_PATH = "/oidc/userinfo"


def base_url(headers: Headers, default_scheme: str, default_host: str) -> str:
    """Return scheme and host the client used to reach the service.

    A `X-Forwarded-Proto: https` header set by a TLS terminating proxy
    switches the scheme to https.
    """
    scheme = default_scheme
    if headers.get("x-forwarded-proto", "").lower() == "https":
        scheme = "https"
    host = headers.get("host") or default_host
    return f"{scheme}://{host}"


def resolve_issuer(
    configured: Optional[str], headers: Headers, default_scheme: str, default_host: str
) -> str:
    """Return configured issuer or the one derived from request headers."""
    if configured:
        return configured.rstrip("/")
    return base_url(headers, default_scheme, default_host)


def discovery_document(issuer: str, scopes: Iterable[str]) -> dict[str, Any]:
    """Build OpenID provider metadata."""
    return {
        "issuer": issuer,
        "authorization_endpoint": issuer + AUTHORIZATION_PATH,
        "token_endpoint": issuer + TOKEN_PATH,
        "userinfo_endpoint": issuer + USERINFO_PATH,
        "response_types_supported": [constants.RESPONSE_TYPE_CODE],
        "id_token_signing_alg_values_supported": [
            constants.ID_TOKEN_SIGNING_ALGORITHM
        ],
        "scopes_supported": list(scopes),
    }
