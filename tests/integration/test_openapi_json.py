"""Tests the OpenAPI specification served by the service."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

URL = "/openapi.json"


@pytest.fixture(name="spec")
def spec_fixture(client: TestClient) -> dict[str, Any]:
    """OpenAPI specification retrieved from the running service."""
    response = client.get(URL)
    assert response.status_code == 200

    # this line ensures that response payload contains proper JSON
    payload = response.json()
    assert payload is not None, "Incorrect response"
    return payload


def test_openapi_top_level_info(spec: dict[str, Any]) -> None:
    """Check that top level metadata is present."""
    assert spec["openapi"].startswith("3.")
    info = spec["info"]
    assert info["title"] == "Mockzure service - OpenAPI"
    assert info["version"] == "1.0.0"
    assert info["license"]["name"] == "Apache 2.0"
    assert spec["servers"][0]["url"] == "http://localhost:8090/"


@pytest.mark.parametrize(
    "path,method,expected_codes",
    [
        ("/.well-known/openid-configuration", "get", {"200"}),
        ("/oauth2/v2.0/authorize", "get", {"200", "400", "401"}),
        ("/oauth2/v2.0/token", "post", {"200", "400", "401"}),
        ("/oidc/userinfo", "get", {"200", "400", "401"}),
        ("/mock/azure/apps", "get", {"200"}),
        ("/mock/azure/apps", "post", {"201", "400"}),
        ("/mock/azure/stats", "get", {"200"}),
        ("/readiness", "get", {"200"}),
        ("/liveness", "get", {"200"}),
    ],
)
def test_paths_and_responses_exist(
    spec: dict[str, Any], path: str, method: str, expected_codes: set[str]
) -> None:
    """Check that dedicated endpoints are documented with their responses."""
    paths = spec["paths"]
    assert path in paths
    assert method in paths[path]
    responses = paths[path][method]["responses"]
    assert expected_codes.issubset(set(responses))


def test_catch_all_route_is_not_documented(spec: dict[str, Any]) -> None:
    """Check that neither the catch-all nor the legacy aliases are documented."""
    for path in spec["paths"]:
        assert "full_path" not in path
        assert not path.startswith("/mock/azure/entra")
