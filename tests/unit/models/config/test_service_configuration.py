"""Unit tests for ServiceConfiguration and CORSConfiguration models."""

import pytest

from pydantic import ValidationError

from models.config import CORSConfiguration, ServiceConfiguration


def test_service_configuration_constructor() -> None:
    """
    Verify that the ServiceConfiguration constructor sets default
    values for all fields.
    """
    s = ServiceConfiguration()  # pyright: ignore[reportCallIssue]
    assert s is not None

    assert s.host == "localhost"
    assert s.port == 8090
    assert s.workers == 1
    assert s.color_log is True
    assert s.access_log is True
    assert s.cors == CORSConfiguration()  # pyright: ignore[reportCallIssue]


def test_service_configuration_port_value() -> None:
    """Test the ServiceConfiguration port value validation."""
    with pytest.raises(ValidationError, match="Input should be greater than 0"):
        ServiceConfiguration(port=-1)  # pyright: ignore[reportCallIssue]

    with pytest.raises(ValueError, match="Port value should be less than 65536"):
        ServiceConfiguration(port=100000)  # pyright: ignore[reportCallIssue]


def test_service_configuration_workers_value() -> None:
    """Test the ServiceConfiguration workers value validation."""
    with pytest.raises(ValidationError, match="Input should be greater than 0"):
        ServiceConfiguration(workers=0)  # pyright: ignore[reportCallIssue]


def test_service_configuration_single_worker() -> None:
    """Test that more worker processes are rejected.

    Authorization codes issued by one worker could not be redeemed by
    another one.
    """
    with pytest.raises(ValidationError, match="Only one worker is supported"):
        ServiceConfiguration(workers=4)  # pyright: ignore[reportCallIssue]


def test_service_configuration_unknown_field() -> None:
    """Test that unknown keys are rejected."""
    with pytest.raises(ValidationError, match="Extra inputs are not permitted"):
        ServiceConfiguration(tls=True)  # pyright: ignore[reportCallIssue]


def test_cors_default_configuration() -> None:
    """Test the CORS configuration."""
    cfg = CORSConfiguration()  # pyright: ignore[reportCallIssue]
    assert cfg.allow_origins == ["*"]
    assert cfg.allow_credentials is False
    assert cfg.allow_methods == ["*"]
    assert cfg.allow_headers == ["*"]


def test_cors_credentials_with_explicit_origins() -> None:
    """Test that credentials can be enabled for explicit origins."""
    cfg = CORSConfiguration(
        allow_origins=["http://localhost:3000"], allow_credentials=True
    )
    assert cfg.allow_credentials is True


def test_cors_credentials_with_wildcard_origin() -> None:
    """Test the CORS configuration validation."""
    expected = (
        "Value error, Invalid CORS configuration: "
        "allow_credentials can not be set to true when allow origins contains the '\\*' wildcard."
    )
    with pytest.raises(ValueError, match=expected):
        CORSConfiguration(allow_origins=["*"], allow_credentials=True)
