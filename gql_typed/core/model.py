"""Schema model for the supported GraphQL subset.

The parser builds a SchemaModel once; the generator only reads it. All
classes are frozen dataclasses. References between object types are kept
by name and looked up in SchemaModel.types, so self-referencing and mutually
referencing types need no cyclic ownership.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union


class ScalarType(Enum):
    """Built-in scalar types."""
    STRING = "String"
    INT = "Int"
    FLOAT = "Float"
    BOOLEAN = "Boolean"
    ID = "ID"

    @classmethod
    def lookup(cls, name: str) -> "ScalarType | None":
        """Return the scalar called ``name``, or None for any other name."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(frozen=True)
class SourceLocation:
    """1-based position inside a named schema source."""
    source: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.source}:{self.line}:{self.column}"


@dataclass(frozen=True)
class NamedType:
    """Reference to a scalar or an object type by name."""
    name: str

    @property
    def scalar(self) -> ScalarType | None:
        return ScalarType.lookup(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ListType:
    """``[T]``"""
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullType:
    """``T!``"""
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"{self.of_type}!"


TypeRef = Union[NamedType, ListType, NonNullType]


def named_type(ref: TypeRef) -> NamedType:
    """Strip list and non-null wrappers."""
    while not isinstance(ref, NamedType):
        ref = ref.of_type
    return ref


@dataclass(frozen=True)
class Field:
    """A field of an object type."""
    name: str
    type: TypeRef
    description: str | None = None
    location: SourceLocation | None = field(default=None, compare=False)


@dataclass(frozen=True)
class TypeDefinition:
    """An object type with its fields in declaration order."""
    name: str
    fields: tuple[Field, ...]
    description: str | None = None
    location: SourceLocation | None = field(default=None, compare=False)

    def field(self, name: str) -> Field | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class SchemaModel:
    """A complete, reference-resolved schema.

    Attributes:
        types: Object types by name, in declaration order (read-only)
        query_type: Name of the root query type
    """
    types: Mapping[str, TypeDefinition]
    query_type: str

    def __post_init__(self):
        object.__setattr__(self, "types", MappingProxyType(dict(self.types)))

    def lookup_type(self, name: str) -> TypeDefinition | None:
        """Look up an object type by name."""
        return self.types.get(name)

    def fields_of(self, type_def: TypeDefinition | str) -> tuple[Field, ...]:
        """Return the fields of a type given by definition or name."""
        if isinstance(type_def, str):
            found = self.lookup_type(type_def)
            if found is None:
                raise KeyError(type_def)
            type_def = found
        return type_def.fields

    def root_query_type(self) -> TypeDefinition:
        """Return the definition of the root query type."""
        root = self.lookup_type(self.query_type)
        if root is None:
            raise KeyError(self.query_type)
        return root
