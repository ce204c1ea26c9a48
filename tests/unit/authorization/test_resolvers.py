"""Unit tests for the authorization resolvers."""

import pytest

from authorization.resolvers import (
    DEFAULT_GRAPH_REQUIREMENTS,
    GraphAccessResolver,
    ResourceScopeAccessResolver,
    permitted,
)
from store.principals import ResourceScopePermission, ServicePrincipal


def principal(
    permissions: tuple[ResourceScopePermission, ...] = (),
    graph_permissions: frozenset[str] = frozenset(),
) -> ServicePrincipal:
    """Build service principal with given permissions."""
    return ServicePrincipal(
        object_id="sp-1",
        application_id="app-1",
        display_name="Test",
        description="",
        enabled=True,
        permissions=permissions,
        graph_permissions=graph_permissions,
    )


def grant(scope: str, *verbs: str) -> ResourceScopePermission:
    """Build permission entry."""
    return ResourceScopePermission(scope=scope, verbs=frozenset(verbs))


class TestPermitted:
    """Test cases for evaluation of resource-scoped permissions."""

    def test_empty_permission_set_permits_nothing(self) -> None:
        """Test that principals without permissions can do nothing."""
        assert not permitted([], "rg-dev", "read")

    @pytest.mark.parametrize(
        "entries,scope,verb,expected",
        [
            ((grant("rg-dev", "read"),), "rg-dev", "read", True),
            ((grant("rg-dev", "read"),), "rg-dev", "write", False),
            ((grant("rg-dev", "read"),), "rg-prod", "read", False),
            ((grant("*", "read"),), "rg-prod", "read", True),
            ((grant("rg-dev", "*"),), "rg-dev", "restart", True),
            ((grant("*", "*"),), "anything", "delete", True),
            ((grant("rg-dev", "read"), grant("rg-prod", "stop")), "rg-prod", "stop", True),
            ((grant("rg-dev", "read"), grant("rg-prod", "stop")), "rg-prod", "read", False),
        ],
    )
    def test_scope_and_verb_matching(
        self,
        entries: tuple[ResourceScopePermission, ...],
        scope: str,
        verb: str,
        expected: bool,
    ) -> None:
        """Test that scope and verb must both match, each possibly via `*`."""
        assert permitted(entries, scope, verb) is expected

    def test_entries_are_independent(self) -> None:
        """Test that a verb of one entry does not apply to another scope."""
        entries = (grant("rg-dev", "write"), grant("rg-prod", "read"))
        assert not permitted(entries, "rg-prod", "write")


class TestResourceScopeAccessResolver:
    """Test cases for ResourceScopeAccessResolver."""

    def test_check_access(self) -> None:
        """Test that the resolver delegates to the permission evaluation."""
        resolver = ResourceScopeAccessResolver()
        sp = principal(permissions=(grant("rg-dev", "read", "start"),))
        assert resolver.check_access(sp, "rg-dev", "start")
        assert not resolver.check_access(sp, "rg-dev", "delete")


class TestGraphAccessResolver:
    """Test cases for GraphAccessResolver."""

    @pytest.fixture(name="resolver")
    def resolver_fixture(self) -> GraphAccessResolver:
        """Resolver with the default Graph requirements."""
        return GraphAccessResolver(DEFAULT_GRAPH_REQUIREMENTS)

    def test_user_read_permission(self, resolver: GraphAccessResolver) -> None:
        """Test that User.Read.All grants access to users only."""
        sp = principal(graph_permissions=frozenset({"User.Read.All"}))
        assert resolver.check_access(sp, "users", "read")
        assert not resolver.check_access(sp, "serviceprincipals", "read")

    def test_directory_read_permission(self, resolver: GraphAccessResolver) -> None:
        """Test that Directory.Read.All grants access to both collections."""
        sp = principal(graph_permissions=frozenset({"Directory.Read.All"}))
        assert resolver.check_access(sp, "users", "read")
        assert resolver.check_access(sp, "serviceprincipals", "read")

    def test_wildcard_permission(self, resolver: GraphAccessResolver) -> None:
        """Test that `*` grants everything."""
        sp = principal(graph_permissions=frozenset({"*"}))
        assert resolver.check_access(sp, "serviceprincipals", "read")

    def test_no_permission(self, resolver: GraphAccessResolver) -> None:
        """Test that principals without Graph permissions are denied."""
        assert not resolver.check_access(principal(), "users", "read")

    def test_unlisted_collection_needs_no_permission(
        self, resolver: GraphAccessResolver
    ) -> None:
        """Test collections without requirements."""
        assert resolver.check_access(principal(), "groups", "read")
