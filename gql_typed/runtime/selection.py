"""Selection accumulators shared by all generated modules.

A generated builder is generic over one parameter per field of its type.
Each parameter is one of the markers below:

    Unselected    the field is not part of the selection
    Selected      a scalar field is selected
    Nested[R]     an object field is selected; R is the response type
                  of its sub-selection

Builders are immutable. ``_gql_extend`` returns a new builder holding the
value-level selection, and the generated ``select`` overloads give that new
builder its static type, so the two always change together.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Optional, TypeVar

from .errors import SelectionError
from .response import Response

_R = TypeVar("_R", bound=Response)

INDENT = "  "


class Selected:
    """Marker: a scalar field is part of the selection."""


class Unselected:
    """Marker: a field is not part of the selection."""


class Nested(Generic[_R]):
    """Marker: an object field is selected with a sub-selection answered by ``_R``."""


class FieldToken:
    """Base class of generated field tokens.

    Tokens carry no instance state; the class identifies the field.
    """

    __slots__ = ()

    type_name: ClassVar[str] = ""
    field_name: ClassVar[str] = ""
    is_object: ClassVar[bool] = False
    # Object fields only: the type their sub-selection must be made on
    target_type: ClassVar[str] = ""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"<field {self.type_name}.{self.field_name}>"


@dataclass(frozen=True)
class SelectedField:
    """One selected field and, for object fields, its sub-selection."""
    name: str
    selection: Optional["SelectionSet"] = None

    def render(self, depth: int) -> list[str]:
        indent = INDENT * depth
        if self.selection is None:
            return [f"{indent}{self.name}"]
        lines = [f"{indent}{self.name} {{"]
        lines.extend(self.selection.render_lines(depth + 1))
        lines.append(f"{indent}}}")
        return lines


@dataclass(frozen=True)
class SelectionSet:
    """Value-level selection on one object type, in schema field order."""
    type_name: str
    fields: tuple[SelectedField, ...] = ()

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(f.name for f in self.fields)

    def render_lines(self, depth: int = 1) -> list[str]:
        lines: list[str] = []
        for selected in self.fields:
            lines.extend(selected.render(depth))
        return lines

    def render(self, depth: int = 1) -> str:
        """Render the selection as GraphQL text."""
        return "\n".join(self.render_lines(depth))


class SelectionBuilder(Generic[_R]):
    """Base class of generated selection builders.

    ``_R`` is the response wrapper type a request built from this selection
    is answered with.
    """

    _gql_type: ClassVar[str] = ""
    _gql_field_order: ClassVar[tuple[str, ...]] = ()

    def __init__(self, fields: tuple[SelectedField, ...] = ()):
        self._gql_fields = fields

    @property
    def selection_set(self) -> SelectionSet:
        return SelectionSet(self._gql_type, self._gql_fields)

    def _gql_extend(
        self,
        token: FieldToken,
        selection: Optional["SelectionBuilder[Any]"] = None,
    ) -> Any:
        """Return a new builder with ``token``'s field added to the selection.

        The generated ``select`` overloads give the result its static type.
        """
        if not isinstance(token, FieldToken) or token.type_name != self._gql_type:
            raise SelectionError(f"{token!r} is not a field of {self._gql_type}")

        sub: SelectionSet | None = None
        if token.is_object:
            if selection is None:
                raise SelectionError(
                    f"{token.type_name}.{token.field_name} is an object field "
                    "and needs a sub-selection"
                )
            if not isinstance(selection, SelectionBuilder):
                raise SelectionError(f"expected a selection builder, got {selection!r}")
            sub = selection.selection_set
            if sub.type_name != token.target_type:
                raise SelectionError(
                    f"{token.type_name}.{token.field_name} expects a selection on "
                    f"{token.target_type}, got one on {sub.type_name}"
                )
            if not sub.fields:
                raise SelectionError(
                    f"sub-selection for {token.type_name}.{token.field_name} is empty"
                )
        elif selection is not None:
            raise SelectionError(
                f"{token.type_name}.{token.field_name} is a scalar field "
                "and takes no sub-selection"
            )

        by_name = {f.name: f for f in self._gql_fields}
        by_name[token.field_name] = SelectedField(token.field_name, sub)
        ordered = tuple(by_name[name] for name in self._gql_field_order if name in by_name)
        return type(self)(ordered)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionBuilder):
            return NotImplemented
        return self.selection_set == other.selection_set

    def __hash__(self) -> int:
        return hash(self.selection_set)

    def __repr__(self) -> str:
        names = ", ".join(f.name for f in self._gql_fields)
        return f"{type(self).__name__}({names})"
