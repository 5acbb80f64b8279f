"""Runtime support library imported by generated client modules.

Schema-independent: every generated module imports this package as ``_rt``
and builds its tokens, builders, response wrappers and accessors on the
classes below.
"""

from .client import Client
from .errors import (
    GraphQLError,
    MissingFieldError,
    ResponseDecodeError,
    RuntimeSupportError,
    SelectionError,
)
from .request import Request
from .response import (
    Accessor,
    Decoder,
    ListOf,
    Nullable,
    ObjectOf,
    Response,
    Scalar,
)
from .selection import (
    FieldToken,
    Nested,
    Selected,
    SelectedField,
    SelectionBuilder,
    SelectionSet,
    Unselected,
)
from .transport import (
    ApiKeyAuth,
    Auth,
    BasicAuth,
    BearerAuth,
    GraphQLPayload,
    HTTPTransport,
    NoAuth,
    Transport,
)

__all__ = [
    # Selection
    "FieldToken",
    "Nested",
    "Selected",
    "SelectedField",
    "SelectionBuilder",
    "SelectionSet",
    "Unselected",
    # Responses
    "Accessor",
    "Decoder",
    "ListOf",
    "Nullable",
    "ObjectOf",
    "Response",
    "Scalar",
    # Requests and dispatch
    "Client",
    "Request",
    # Transport
    "Auth",
    "ApiKeyAuth",
    "BasicAuth",
    "BearerAuth",
    "GraphQLPayload",
    "HTTPTransport",
    "NoAuth",
    "Transport",
    # Errors
    "GraphQLError",
    "MissingFieldError",
    "ResponseDecodeError",
    "RuntimeSupportError",
    "SelectionError",
]
