"""Unit tests for the selection of response mappers."""

import pytest

from mappers import FAMILY_HANDLERS, map_identity_response
from mappers.arm import map_arm_response
from mappers.graph import map_graph_response
from mappers.types import UnsupportedOperationError
from specs.models import ApiFamily


def test_every_family_has_handler() -> None:
    """Test that routes of every API family can be compiled."""
    assert set(FAMILY_HANDLERS) == set(ApiFamily)
    assert FAMILY_HANDLERS[ApiFamily.RESOURCE_MANAGEMENT] is map_arm_response
    assert FAMILY_HANDLERS[ApiFamily.DIRECTORY] is map_graph_response


def test_identity_operations_are_not_implemented() -> None:
    """Test that described identity operations are refused."""
    with pytest.raises(
        UnsupportedOperationError, match="Identity endpoint not implemented: getJwks"
    ):
        map_identity_response(
            "getJwks", "/common/discovery/v2.0/keys", "GET", {}, None
        )
