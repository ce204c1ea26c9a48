"""Unit tests for path pattern compilation and matching."""

import pytest

from routes.pattern import (
    PatternError,
    compile_pattern,
    literal_prefix,
    split_path,
)

VM_PATTERN = (
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
    "/providers/Microsoft.Compute/virtualMachines/{vmName}"
)


def test_split_path() -> None:
    """Test that the leading slash is dropped and empty segments are kept."""
    assert split_path("/users/abc") == ["users", "abc"]
    assert split_path("/users/") == ["users", ""]
    assert split_path("users") == ["users"]


@pytest.mark.parametrize(
    "pattern,expected",
    [
        ("/users", "/users"),
        ("/users/{user-id}", "/users/"),
        ("/users/{user-id}/memberOf", "/users/"),
        ("/{tenant}/keys", "/"),
    ],
)
def test_literal_prefix(pattern: str, expected: str) -> None:
    """Test literal prefix of patterns with and without placeholders."""
    assert literal_prefix(pattern) == expected


def test_exact_pattern_matches_only_itself() -> None:
    """Test that a pattern without placeholders matches by equality."""
    compiled = compile_pattern("/providers/Microsoft.Compute/operations")
    assert compiled.is_exact
    assert compiled.match("/providers/Microsoft.Compute/operations") == (True, {})
    assert compiled.match("/providers/Microsoft.Compute/operations/x") == (False, {})
    assert compiled.match("/providers/microsoft.compute/operations") == (False, {})


def test_parameterized_pattern_captures_segments() -> None:
    """Test that every placeholder captures exactly one segment."""
    compiled = compile_pattern(VM_PATTERN)
    assert not compiled.is_exact
    assert compiled.param_names.count(None) == 4

    matched, params = compiled.match(
        "/subscriptions/sub-1/resourceGroups/rg-dev"
        "/providers/Microsoft.Compute/virtualMachines/vm-web-01"
    )
    assert matched is True
    assert params == {
        "subscriptionId": "sub-1",
        "resourceGroupName": "rg-dev",
        "vmName": "vm-web-01",
    }


def test_placeholder_does_not_span_segments() -> None:
    """Test that matching is whole-path with equal segment counts."""
    compiled = compile_pattern("/users/{user-id}")
    assert compiled.match("/users/a/b") == (False, {})
    assert compiled.match("/users") == (False, {})


def test_empty_capture_is_rejected() -> None:
    """Test that a placeholder never captures an empty segment."""
    compiled = compile_pattern("/users/{user-id}")
    assert compiled.match("/users/") == (False, {})


def test_failed_match_returns_no_partial_parameters() -> None:
    """Test that a literal mismatch after a capture discards the capture."""
    compiled = compile_pattern("/users/{user-id}/memberOf")
    assert compiled.match("/users/alice/ownedObjects") == (False, {})


def test_literal_segments_are_case_sensitive() -> None:
    """Test that literal segments are compared exactly."""
    compiled = compile_pattern("/subscriptions/{subscriptionId}/resourcegroups")
    assert compiled.match("/subscriptions/s/resourcegroups")[0] is True
    assert compiled.match("/subscriptions/s/resourceGroups")[0] is False


@pytest.mark.parametrize(
    "pattern",
    [
        "users/{id}",
        "/users/{id",
        "/users/prefix{id}",
        "/users/{}",
        "/a/{id}/b/{id}",
    ],
)
def test_malformed_patterns_are_rejected(pattern: str) -> None:
    """Test that malformed patterns raise PatternError."""
    with pytest.raises(PatternError):
        compile_pattern(pattern)


def test_pattern_error_is_value_error() -> None:
    """Test that PatternError can be handled as ValueError."""
    with pytest.raises(ValueError, match="must start with"):
        compile_pattern("relative/path")
