"""Errors raised by generated clients at run time."""

from typing import Any


class RuntimeSupportError(Exception):
    """Base class for errors raised by the runtime support library."""


class SelectionError(RuntimeSupportError, TypeError):
    """A selection was built in a way the static types would have rejected."""


class ResponseDecodeError(RuntimeSupportError, ValueError):
    """A response payload does not match the selection it was requested with."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


class MissingFieldError(ResponseDecodeError):
    """A field is absent from the response payload."""


class GraphQLError(RuntimeSupportError):
    """The server answered with GraphQL errors."""

    def __init__(self, message: str, errors: list[dict[str, Any]]):
        self.message = message
        self.errors = errors
        super().__init__(message)
