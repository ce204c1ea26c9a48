"""Unit tests for the registry of OAuth2 callers."""

from models.config import RegisteredCaller
from store.callers import CallerRegistry


def test_registry_starts_with_configured_callers() -> None:
    """Test initial content of the registry."""
    registry = CallerRegistry([RegisteredCaller(client_id="a"), RegisteredCaller(client_id="b")])
    assert [c.client_id for c in registry.all()] == ["a", "b"]
    assert registry.get("a") is not None
    assert registry.get("missing") is None


def test_register_adds_and_replaces() -> None:
    """Test that registering a known client id replaces the registration."""
    registry = CallerRegistry()
    registry.register(RegisteredCaller(client_id="spa", name="First"))
    registry.register(RegisteredCaller(client_id="spa", name="Second"))

    assert len(registry.all()) == 1
    caller = registry.get("spa")
    assert caller is not None
    assert caller.name == "Second"


def test_all_returns_snapshot() -> None:
    """Test that the returned list is not the internal storage."""
    registry = CallerRegistry()
    snapshot = registry.all()
    registry.register(RegisteredCaller(client_id="late"))
    assert snapshot == []


def test_default_scopes() -> None:
    """Test that callers get the openid, profile and email scopes by default."""
    assert RegisteredCaller(client_id="x").scopes == ["openid", "profile", "email"]
