"""Core modules for typed GraphQL client generation."""

from .errors import (
    CodegenOutputError,
    DuplicateDefinitionError,
    InvariantViolation,
    SchemaError,
    SchemaSyntaxError,
    UnresolvedTypeError,
)
from .generator import CodeGenerator, generate
from .model import (
    Field,
    ListType,
    NamedType,
    NonNullType,
    ScalarType,
    SchemaModel,
    SourceLocation,
    TypeDefinition,
    TypeRef,
    named_type,
)
from .parser import SchemaParser, parse, parse_file, parse_path

__all__ = [
    # Schema model
    "Field",
    "ListType",
    "NamedType",
    "NonNullType",
    "ScalarType",
    "SchemaModel",
    "SourceLocation",
    "TypeDefinition",
    "TypeRef",
    "named_type",
    # Parser
    "SchemaParser",
    "parse",
    "parse_file",
    "parse_path",
    # Generator
    "CodeGenerator",
    "generate",
    # Errors
    "CodegenOutputError",
    "DuplicateDefinitionError",
    "InvariantViolation",
    "SchemaError",
    "SchemaSyntaxError",
    "UnresolvedTypeError",
]
