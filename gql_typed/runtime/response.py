"""Response wrappers, field accessors and value decoders.

Generated response classes subclass Response and declare one accessor per
schema field. Each accessor is an instance of a generated Accessor subclass
whose ``__get__`` signature states which selections may read it; the
decoding itself happens here.
"""

import sys
from functools import lru_cache
from typing import Any, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from .errors import MissingFieldError, ResponseDecodeError


class Decoder:
    """Turns a JSON value into the Python value an accessor returns."""

    def decode(self, raw: Any, module: str, path: str) -> Any:
        raise NotImplementedError


@lru_cache(maxsize=None)
def _adapter(py_type: type) -> TypeAdapter[Any]:
    return TypeAdapter(py_type)


class Scalar(Decoder):
    """A built-in scalar, validated with pydantic.

    Validation is strict. Strict float still accepts integral JSON numbers
    (but not strings or booleans).
    """

    def __init__(self, py_type: type):
        self.py_type = py_type

    def decode(self, raw: Any, module: str, path: str) -> Any:
        try:
            return _adapter(self.py_type).validate_python(raw, strict=True)
        except ValidationError as e:
            raise ResponseDecodeError(
                path, f"expected {self.py_type.__name__}, got {raw!r}"
            ) from e

    def __repr__(self) -> str:
        return f"Scalar({self.py_type.__name__})"


class Nullable(Decoder):
    """``inner`` or null."""

    def __init__(self, inner: Decoder):
        self.inner = inner

    def decode(self, raw: Any, module: str, path: str) -> Any:
        if raw is None:
            return None
        return self.inner.decode(raw, module, path)

    def __repr__(self) -> str:
        return f"Nullable({self.inner!r})"


class ListOf(Decoder):
    """A JSON array of ``inner``."""

    def __init__(self, inner: Decoder):
        self.inner = inner

    def decode(self, raw: Any, module: str, path: str) -> Any:
        if not isinstance(raw, list):
            raise ResponseDecodeError(path, f"expected a list, got {raw!r}")
        return [self.inner.decode(item, module, f"{path}[{i}]") for i, item in enumerate(raw)]

    def __repr__(self) -> str:
        return f"ListOf({self.inner!r})"


class ObjectOf(Decoder):
    """A JSON object wrapped in the named response class.

    The class is looked up by name in the module of the accessor, so
    response classes may refer to themselves and to classes defined later.
    """

    def __init__(self, response_class: str):
        self.response_class = response_class

    def decode(self, raw: Any, module: str, path: str) -> Any:
        if not isinstance(raw, Mapping):
            raise ResponseDecodeError(path, f"expected an object, got {raw!r}")
        cls = getattr(sys.modules[module], self.response_class)
        return cls(raw, path=path)

    def __repr__(self) -> str:
        return f"ObjectOf({self.response_class!r})"


class Response:
    """Base class of generated response wrappers.

    Wraps the JSON object answering one selection. Which accessors may be
    used is decided by the type checker from the wrapper's type parameters.
    Wrappers compare equal by payload and, like the JSON objects they wrap,
    are unhashable.
    """

    def __init__(self, data: Mapping[str, Any], *, path: str = "data"):
        if not isinstance(data, Mapping):
            raise ResponseDecodeError(path, f"expected an object, got {data!r}")
        self._gql_data = data
        self._gql_path = path

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Response):
            return NotImplemented
        return type(self) is type(other) and self._gql_data == other._gql_data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._gql_data)!r})"


class Accessor:
    """Base class of generated field accessors.

    Subclasses only add a typed ``__get__`` that delegates to ``_gql_read``.
    """

    def __init__(self, field_name: str, decoder: Decoder):
        self.field_name = field_name
        self.decoder = decoder
        self._gql_module = ""

    def __set_name__(self, owner: type, name: str):
        self._gql_module = owner.__module__

    def _gql_read(self, obj: Optional[Response]) -> Any:
        if obj is None:
            return self
        path = f"{obj._gql_path}.{self.field_name}"
        try:
            raw = obj._gql_data[self.field_name]
        except KeyError:
            raise MissingFieldError(path, "field missing from response") from None
        return self.decoder.decode(raw, self._gql_module, path)

    def __repr__(self) -> str:
        return f"<accessor {self.field_name}: {self.decoder!r}>"
