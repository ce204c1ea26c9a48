"""Types shared by the route compiler and the dispatcher."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from routes.pattern import CompiledPattern
from specs.models import ApiFamily

# handler(operation_id, path_pattern, method, params, data) -> payload
RouteHandler = Callable[[str, str, str, dict[str, str], Any], Any]


@dataclass(frozen=True)
class Route:
    """One (method, path pattern) pair bound to a family handler."""

    method: str
    path: str
    family: ApiFamily
    operation_id: str
    tags: tuple[str, ...]
    handler: RouteHandler = field(compare=False, repr=False)
    pattern: CompiledPattern = field(compare=False, repr=False)


class Outcome(Enum):
    """Result kinds of route resolution."""

    MATCHED = "matched"
    NOT_FOUND = "not_found"
    METHOD_NOT_ALLOWED = "method_not_allowed"


@dataclass(frozen=True)
class Resolution:
    """Answer of the dispatcher for one request.

    Attributes:
        outcome: Whether a route matched, and if not, why.
        route: Matched route, set only for MATCHED.
        params: Parameters captured from the path.
        allowed_methods: Methods whose routes match the path, set only for
            METHOD_NOT_ALLOWED.
    """

    outcome: Outcome
    route: Optional[Route] = None
    params: dict[str, str] = field(default_factory=dict)
    allowed_methods: tuple[str, ...] = ()
