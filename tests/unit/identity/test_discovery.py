"""Unit tests for the OIDC discovery document."""

from starlette.datastructures import Headers

from identity.discovery import base_url, discovery_document, resolve_issuer


def test_base_url_from_host_header() -> None:
    """Test that the Host header wins over the default host."""
    headers = Headers({"host": "mock.example:8090"})
    assert base_url(headers, "http", "testserver") == "http://mock.example:8090"


def test_base_url_behind_tls_proxy() -> None:
    """Test the X-Forwarded-Proto header."""
    headers = Headers({"host": "mock.example", "x-forwarded-proto": "HTTPS"})
    assert base_url(headers, "http", "testserver") == "https://mock.example"


def test_base_url_defaults() -> None:
    """Test request without Host header."""
    assert base_url(Headers({}), "http", "testserver") == "http://testserver"


def test_configured_issuer_wins() -> None:
    """Test that a configured issuer ignores request headers."""
    headers = Headers({"host": "mock.example"})
    assert resolve_issuer("https://login.example/", headers, "http", "x") == (
        "https://login.example"
    )
    assert resolve_issuer(None, headers, "http", "x") == "http://mock.example"


def test_discovery_document() -> None:
    """Test endpoints announced by the discovery document."""
    document = discovery_document("http://localhost:8090", ["openid", "email"])
    assert document == {
        "issuer": "http://localhost:8090",
        "authorization_endpoint": "http://localhost:8090/oauth2/v2.0/authorize",
        "token_endpoint": "http://localhost:8090/oauth2/v2.0/token",
        "userinfo_endpoint": "http://localhost:8090/oidc/userinfo",
        "response_types_supported": ["code"],
        "id_token_signing_alg_values_supported": ["none"],
        "scopes_supported": ["openid", "email"],
    }
