"""Resolution of request method and path to a compiled route.

Routes without placeholders are kept in a dictionary keyed by literal
path. Parameterized routes are grouped by the literal prefix that precedes
their first placeholder; groups are tried from the longest prefix to the
shortest one and routes within a group in compile order. The tables never
change after `register`, so `resolve` takes no lock.
"""

from types import MappingProxyType
from typing import Mapping

from log import get_logger
from routes.pattern import literal_prefix
from routes.types import Outcome, Resolution, Route

logger = get_logger(__name__)


class Dispatcher:
    """Immutable routing table."""

    def __init__(self) -> None:
        """Initialize empty routing table."""
        self._exact: Mapping[str, Mapping[str, Route]] = MappingProxyType({})
        self._groups: tuple[tuple[str, tuple[Route, ...]], ...] = ()
        self._registered = False

    @property
    def route_count(self) -> int:
        """Return number of registered routes."""
        exact = sum(len(methods) for methods in self._exact.values())
        return exact + sum(len(routes) for _, routes in self._groups)

    def register(self, routes: list[Route]) -> None:
        """Build the routing table.

        When two routes share method and literal path, the first compiled
        one wins and the duplicate is logged.

        Parameters:
            routes (list[Route]): Routes in compile order.

        Raises:
            RuntimeError: If called more than once.
        """
        if self._registered:
            raise RuntimeError("routes are already registered")

        exact: dict[str, dict[str, Route]] = {}
        groups: dict[str, list[Route]] = {}
        for route in routes:
            if route.pattern.is_exact:
                methods = exact.setdefault(route.path, {})
                if route.method in methods:
                    logger.debug(
                        "Duplicate route %s %s ignored", route.method, route.path
                    )
                    continue
                methods[route.method] = route
            else:
                groups.setdefault(literal_prefix(route.path), []).append(route)

        self._exact = MappingProxyType(
            {path: MappingProxyType(methods) for path, methods in exact.items()}
        )
        self._groups = tuple(
            (prefix, tuple(group))
            for prefix, group in sorted(
                groups.items(), key=lambda item: len(item[0]), reverse=True
            )
        )
        self._registered = True
        logger.info(
            "Registered %d exact paths and %d parameterized groups",
            len(self._exact),
            len(self._groups),
        )

    def resolve(self, method: str, path: str) -> Resolution:
        """Find the route serving the request.

        Parameters:
            method (str): HTTP method of the request.
            path (str): Request path without query string. A single trailing
                slash is ignored.

        Returns:
            Resolution: MATCHED with route and parameters, METHOD_NOT_ALLOWED
            with the methods that would match, or NOT_FOUND.
        """
        method = method.upper()
        if len(path) > 1 and path.endswith("/"):
            path = path[:-1]

        allowed: set[str] = set()

        methods = self._exact.get(path)
        if methods is not None:
            route = methods.get(method)
            if route is not None:
                return Resolution(outcome=Outcome.MATCHED, route=route)
            allowed.update(methods)

        for prefix, group in self._groups:
            if not path.startswith(prefix):
                continue
            for route in group:
                matched, params = route.pattern.match(path)
                if not matched:
                    continue
                if route.method == method:
                    return Resolution(
                        outcome=Outcome.MATCHED, route=route, params=params
                    )
                allowed.add(route.method)

        if allowed:
            return Resolution(
                outcome=Outcome.METHOD_NOT_ALLOWED,
                allowed_methods=tuple(sorted(allowed)),
            )
        return Resolution(outcome=Outcome.NOT_FOUND)
