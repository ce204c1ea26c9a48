"""Unit tests for the Uvicorn runner implementation."""

import logging

import pytest
from pytest_mock import MockerFixture

from models.config import ServiceConfiguration
from runners.uvicorn import start_uvicorn


def test_start_uvicorn(mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the function to start Uvicorn server using de-facto default configuration."""
    monkeypatch.delenv("MOCKZURE_LOG_LEVEL", raising=False)
    configuration = ServiceConfiguration(
        host="localhost", port=8090, workers=1
    )  # pyright: ignore[reportCallIssue]

    # don't start real Uvicorn server
    mocked_run = mocker.patch("uvicorn.run")
    start_uvicorn(configuration)
    mocked_run.assert_called_once_with(
        "app.main:app_factory",
        factory=True,
        host="localhost",
        port=8090,
        workers=1,
        log_level=logging.INFO,
        use_colors=True,
        access_log=True,
    )


def test_start_uvicorn_different_settings(
    mocker: MockerFixture, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test the function to start Uvicorn server using custom configuration."""
    monkeypatch.setenv("MOCKZURE_LOG_LEVEL", "DEBUG")
    configuration = ServiceConfiguration(
        host="0.0.0.0", port=1234, workers=1, color_log=False, access_log=False
    )  # pyright: ignore[reportCallIssue]

    mocked_run = mocker.patch("uvicorn.run")
    start_uvicorn(configuration)
    mocked_run.assert_called_once_with(
        "app.main:app_factory",
        factory=True,
        host="0.0.0.0",
        port=1234,
        workers=1,
        log_level=logging.DEBUG,
        use_colors=False,
        access_log=False,
    )
