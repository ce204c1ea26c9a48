"""Compilation of API description documents into routes."""

from typing import Any, Iterator, Mapping

import constants
from log import get_logger
from routes.pattern import PatternError, compile_pattern
from routes.types import Route, RouteHandler
from specs.models import ApiFamily, SpecDocument

logger = get_logger(__name__)

# number of routes shown in the per-document summary
SAMPLE_ROUTES = 3


class CompileError(Exception):
    """Operation descriptor can not be turned into a route."""


def synthesize_operation_id(method: str, path: str) -> str:
    """Build operation id for operation that does not declare one.

    The id is derived from method and path only, so two different
    operations never share a synthesized id.

    Examples:
        >>> synthesize_operation_id("GET", "/users/{user-id}")
        'GET__users_{user-id}'
    """
    return f"{method}_{path.replace('/', '_')}"


def iter_operations(path_item: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield (METHOD, operation) pairs of path item in canonical order.

    Method keys are matched case-insensitively; keys that are not HTTP
    methods (`parameters`, `summary`, extensions) are ignored.
    """
    by_method = {
        key.upper(): value for key, value in path_item.items() if isinstance(key, str)
    }
    for method in constants.ROUTE_METHODS:
        if method in by_method:
            yield method, by_method[method]


class RouteCompiler:
    """Turn decoded documents into an ordered list of routes."""

    def __init__(self, handlers: Mapping[ApiFamily, RouteHandler]) -> None:
        """Initialize the compiler.

        Parameters:
            handlers: Handler bound to every route of the given family.
        """
        self.handlers = handlers
        self.skipped = 0

    def compile(self, documents: list[SpecDocument]) -> list[Route]:
        """Compile all operations of all documents.

        Routes are emitted in document order, then path order within a
        document, then in the GET, POST, PUT, DELETE, PATCH order within a
        path. Malformed operations are logged and skipped.

        Parameters:
            documents (list[SpecDocument]): Decoded documents.

        Returns:
            list[Route]: Compiled routes.
        """
        routes: list[Route] = []
        for document in documents:
            compiled = list(self._compile_document(document))
            routes.extend(compiled)
            logger.info(
                "Compiled %d routes from %s spec %s",
                len(compiled),
                document.family.value,
                document.name,
            )
            for route in compiled[:SAMPLE_ROUTES]:
                logger.debug("  %s %s -> %s", route.method, route.path, route.operation_id)
        logger.info("Compiled %d routes, skipped %d", len(routes), self.skipped)
        return routes

    def _compile_document(self, document: SpecDocument) -> Iterator[Route]:
        handler = self.handlers.get(document.family)
        if handler is None:
            logger.warning(
                "No handler for %s family, skipping spec %s",
                document.family.value,
                document.name,
            )
            return

        for path, path_item in document.paths.items():
            if not isinstance(path_item, Mapping):
                self._skip(document, path, "", CompileError("path item is not a mapping"))
                continue
            for method, operation in iter_operations(path_item):
                try:
                    yield self.compile_operation(
                        document.family, handler, path, method, operation
                    )
                except CompileError as e:
                    self._skip(document, path, method, e)

    def _skip(
        self, document: SpecDocument, path: Any, method: str, error: Exception
    ) -> None:
        self.skipped += 1
        logger.warning(
            "Skipping %s %s in spec %s: %s", method or "*", path, document.name, error
        )

    @staticmethod
    def compile_operation(
        family: ApiFamily,
        handler: RouteHandler,
        path: Any,
        method: str,
        operation: Any,
    ) -> Route:
        """Compile one operation descriptor into a route.

        Raises:
            CompileError: If the operation is malformed.
        """
        if not isinstance(path, str):
            raise CompileError(f"path {path!r} is not a string")
        if not isinstance(operation, Mapping):
            raise CompileError("operation is not a mapping")

        operation_id = operation.get("operationId")
        if operation_id is None or operation_id == "":
            operation_id = synthesize_operation_id(method, path)
        elif not isinstance(operation_id, str):
            raise CompileError(f"operationId {operation_id!r} is not a string")

        tags = operation.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise CompileError("tags is not a list of strings")

        try:
            pattern = compile_pattern(path)
        except PatternError as e:
            raise CompileError(str(e)) from e

        return Route(
            method=method,
            path=path,
            family=family,
            operation_id=operation_id,
            tags=tuple(tags),
            handler=handler,
            pattern=pattern,
        )
