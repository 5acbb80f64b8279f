"""Request descriptor sent by the client."""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .errors import SelectionError
from .response import Response
from .selection import SelectionSet

_R = TypeVar("_R", bound=Response)


@dataclass(frozen=True)
class Request(Generic[_R]):
    """A query on the root type, answered with ``response_type``.

    Built by the generated ``request()`` method of the root selection
    builder, so ``_R`` is the response wrapper matching ``selection``.
    """
    selection: SelectionSet
    response_type: type[_R]
    operation_name: Optional[str] = None

    def __post_init__(self):
        if not self.selection.fields:
            raise SelectionError(f"cannot request an empty selection on {self.selection.type_name}")

    @property
    def document(self) -> str:
        """The GraphQL query document."""
        header = "query"
        if self.operation_name:
            header = f"query {self.operation_name}"
        return f"{header} {{\n{self.selection.render(1)}\n}}"

    def __str__(self) -> str:
        return self.document
