"""Errors raised by response mappers."""


class MappingError(Exception):
    """Request can not be answered with a payload."""


class ResourceNotFoundError(MappingError):
    """Addressed resource does not exist."""


class UnsupportedOperationError(MappingError):
    """Operation is declared by the API description but not emulated."""
