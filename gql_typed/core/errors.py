"""Errors raised while parsing schemas and generating code."""

from pathlib import Path

from .model import SourceLocation


class SchemaError(Exception):
    """Base class for problems found in user-supplied schema text."""

    def __init__(self, message: str, location: SourceLocation | None = None):
        self.message = message
        self.location = location
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.location}: {self.message}"


class SchemaSyntaxError(SchemaError):
    """Malformed schema text."""


class DuplicateDefinitionError(SchemaError):
    """A type, field or root operation was declared twice."""


class UnresolvedTypeError(SchemaError):
    """A field type names a type the schema does not declare."""


class InvariantViolation(RuntimeError):
    """The generator was handed a model the parser could not have produced."""


class CodegenOutputError(Exception):
    """Generated code could not be written to its destination."""

    def __init__(self, path: str | Path, cause: OSError):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"cannot write generated code to {self.path}: {cause}")
