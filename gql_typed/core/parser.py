"""GraphQL schema parser.

Tokenizes schema text with graphql-core's Lexer and parses the supported
subset with a recursive-descent parser:

    document    := definition+ EOF
    definition  := description? (type_def | schema_def)
    schema_def  := "schema" "{" ("query" ":" Name)+ "}"
    type_def    := "type" Name "{" field_def+ "}"
    field_def   := description? Name ":" type_ref
    type_ref    := (Name | "[" type_ref "]") "!"?

References are resolved only after every source has been read, so forward,
self and mutual references are allowed. The first error found is raised.
"""

import logging
import os
from dataclasses import dataclass

from graphql.error import GraphQLSyntaxError
from graphql.language import Lexer, Source, Token, TokenKind

from .errors import (
    DuplicateDefinitionError,
    SchemaSyntaxError,
    UnresolvedTypeError,
)
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

logger = logging.getLogger(__name__)

SCHEMA_FILE_SUFFIXES = (".graphql", ".graphqls")

# Definitions of the full schema language this parser recognizes but rejects
UNSUPPORTED_DEFINITIONS = {
    "enum", "interface", "union", "input", "scalar", "directive", "extend",
}

DEFAULT_QUERY_TYPE = "Query"


@dataclass
class _RootOperation:
    type_name: str
    location: SourceLocation


class _SourceParser:
    """Recursive-descent parser over the tokens of one source."""

    def __init__(self, text: str, source_name: str):
        self.source_name = source_name
        self._lexer = Lexer(Source(text, source_name))

    # -- token helpers ------------------------------------------------------

    @property
    def _token(self) -> Token:
        return self._lexer.token

    def _advance(self) -> Token:
        try:
            return self._lexer.advance()
        except GraphQLSyntaxError as e:
            line, column = (e.locations[0].line, e.locations[0].column) if e.locations else (0, 0)
            raise SchemaSyntaxError(
                e.message, SourceLocation(self.source_name, line, column)
            ) from e

    def _location(self, token: Token | None = None) -> SourceLocation:
        token = token or self._token
        return SourceLocation(self.source_name, token.line, token.column)

    def _error(self, message: str, token: Token | None = None) -> SchemaSyntaxError:
        return SchemaSyntaxError(message, self._location(token))

    @staticmethod
    def _describe(token: Token) -> str:
        if token.kind == TokenKind.EOF:
            return "end of input"
        if token.kind == TokenKind.NAME:
            return f"name '{token.value}'"
        if token.kind in (TokenKind.STRING, TokenKind.BLOCK_STRING):
            return "string"
        if token.value is not None:
            return f"{token.kind.value} '{token.value}'"
        return f"'{token.kind.value}'"

    def _peek(self, kind: TokenKind) -> bool:
        return self._token.kind == kind

    def _expect(self, kind: TokenKind, what: str) -> Token:
        token = self._token
        if token.kind != kind:
            raise self._error(f"Expected {what}, found {self._describe(token)}.")
        self._advance()
        return token

    def _expect_name(self, what: str) -> Token:
        token = self._expect(TokenKind.NAME, what)
        if token.value.startswith("__"):
            raise self._error(
                f"Name '{token.value}' is reserved: names beginning with '__' "
                "belong to GraphQL introspection.",
                token,
            )
        return token

    def _expect_keyword(self, keyword: str) -> Token:
        token = self._token
        if token.kind != TokenKind.NAME or token.value != keyword:
            raise self._error(f"Expected '{keyword}', found {self._describe(token)}.")
        self._advance()
        return token

    # -- grammar ------------------------------------------------------------

    def parse_document(self, sink: "SchemaParser"):
        self._expect(TokenKind.SOF, "start of input")
        while not self._peek(TokenKind.EOF):
            self._parse_definition(sink)

    def _parse_description(self) -> str | None:
        if self._token.kind in (TokenKind.STRING, TokenKind.BLOCK_STRING):
            return self._advance_value()
        return None

    def _advance_value(self) -> str:
        value = self._token.value
        self._advance()
        return value or ""

    def _parse_definition(self, sink: "SchemaParser"):
        description = self._parse_description()
        token = self._token
        if token.kind != TokenKind.NAME:
            raise self._error(
                f"Expected a type definition, found {self._describe(token)}."
            )
        if token.value == "type":
            sink._add_type(self._parse_type_definition(description))
        elif token.value == "schema":
            if description is not None:
                raise self._error("A schema definition cannot have a description.", token)
            self._parse_schema_definition(sink)
        elif token.value in UNSUPPORTED_DEFINITIONS:
            raise self._error(f"'{token.value}' definitions are not supported.")
        else:
            raise self._error(
                f"Expected a type definition, found {self._describe(token)}."
            )

    def _parse_schema_definition(self, sink: "SchemaParser"):
        start = self._expect_keyword("schema")
        self._expect(TokenKind.BRACE_L, "'{'")
        operations: dict[str, _RootOperation] = {}
        while True:
            op_token = self._expect(TokenKind.NAME, "a root operation")
            if op_token.value != "query":
                raise self._error(
                    f"Root operation '{op_token.value}' is not supported; "
                    "only 'query' is.",
                    op_token,
                )
            if op_token.value in operations:
                raise DuplicateDefinitionError(
                    f"Root operation '{op_token.value}' is declared twice.",
                    self._location(op_token),
                )
            self._expect(TokenKind.COLON, "':'")
            type_token = self._expect_name("a type name")
            operations[op_token.value] = _RootOperation(
                type_token.value, self._location(type_token)
            )
            if self._peek(TokenKind.BRACE_R):
                break
        self._advance()
        sink._set_root(operations["query"], self._location(start))

    def _parse_type_definition(self, description: str | None) -> TypeDefinition:
        start = self._expect_keyword("type")
        name = self._expect_name("a type name")
        if self._peek(TokenKind.AT):
            raise self._error("Directives are not supported.")
        if self._token.kind == TokenKind.NAME and self._token.value == "implements":
            raise self._error("Interfaces are not supported.")
        self._expect(TokenKind.BRACE_L, "'{'")

        fields: list[Field] = []
        seen: set[str] = set()
        while True:
            f = self._parse_field_definition()
            if f.name in seen:
                raise DuplicateDefinitionError(
                    f"Field '{name.value}.{f.name}' is declared twice.", f.location
                )
            seen.add(f.name)
            fields.append(f)
            if self._peek(TokenKind.BRACE_R):
                break
            if self._peek(TokenKind.EOF):
                raise self._error(
                    f"Expected '}}' to close type '{name.value}', found end of input."
                )
        self._advance()

        return TypeDefinition(
            name=name.value,
            fields=tuple(fields),
            description=description,
            location=self._location(start),
        )

    def _parse_field_definition(self) -> Field:
        description = self._parse_description()
        name = self._expect_name("a field name")
        if self._peek(TokenKind.PAREN_L):
            raise self._error("Field arguments are not supported.")
        self._expect(TokenKind.COLON, "':'")
        type_ref = self._parse_type_ref()
        if self._peek(TokenKind.AT):
            raise self._error("Directives are not supported.")
        if self._peek(TokenKind.EQUALS):
            raise self._error("Default values are not supported on object fields.")
        return Field(
            name=name.value,
            type=type_ref,
            description=description,
            location=self._location(name),
        )

    def _parse_type_ref(self) -> TypeRef:
        ref: TypeRef
        if self._peek(TokenKind.BRACKET_L):
            self._advance()
            ref = ListType(self._parse_type_ref())
            self._expect(TokenKind.BRACKET_R, "']'")
        else:
            ref = NamedType(self._expect_name("a type").value)
        if self._peek(TokenKind.BANG):
            self._advance()
            ref = NonNullType(ref)
        return ref


class SchemaParser:
    """Parses schema sources into a SchemaModel.

    Usage:
        parser = SchemaParser()
        parser.add_source(text, "schema.graphql")
        model = parser.build()
    """

    def __init__(self):
        self._types: dict[str, TypeDefinition] = {}
        self._root: _RootOperation | None = None
        self._root_declared_at: SourceLocation | None = None
        self._last_source: str = "<schema>"
        self._eof_location: SourceLocation | None = None

    def add_source(self, text: str, source_name: str = "<schema>") -> "SchemaParser":
        """Parse one schema source and collect its definitions."""
        logger.debug("Parsing schema source %s", source_name)
        parser = _SourceParser(text, source_name)
        parser.parse_document(self)
        self._last_source = source_name
        self._eof_location = parser._location()
        return self

    def add_file(self, path: str | os.PathLike) -> "SchemaParser":
        """Read and parse a schema file."""
        source_name = os.fspath(path)
        with open(path, "rb") as f:
            raw = f.read()
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            line = raw.count(b"\n", 0, e.start) + 1
            column = e.start - raw.rfind(b"\n", 0, e.start)
            raise SchemaSyntaxError(
                f"Schema file is not valid UTF-8: {e.reason}.",
                SourceLocation(source_name, line, column),
            ) from e
        return self.add_source(content, source_name)

    def build(self) -> SchemaModel:
        """Resolve references and return the finished model."""
        if not self._types:
            raise SchemaSyntaxError(
                "Expected at least one type definition.",
                self._eof_location or SourceLocation(self._last_source, 1, 1),
            )
        self._resolve_references()
        query_type = self._resolve_root()
        model = SchemaModel(types=dict(self._types), query_type=query_type)
        logger.debug(
            "Built schema model: %d types, root query type %s",
            len(model.types), query_type,
        )
        return model

    def _add_type(self, type_def: TypeDefinition):
        if ScalarType.lookup(type_def.name) is not None:
            raise DuplicateDefinitionError(
                f"Type '{type_def.name}' conflicts with the built-in scalar of the same name.",
                type_def.location,
            )
        existing = self._types.get(type_def.name)
        if existing is not None:
            raise DuplicateDefinitionError(
                f"Type '{type_def.name}' is already declared at {existing.location}.",
                type_def.location,
            )
        self._types[type_def.name] = type_def

    def _set_root(self, operation: _RootOperation, location: SourceLocation):
        if self._root is not None:
            raise DuplicateDefinitionError(
                f"Schema definition is already declared at {self._root_declared_at}.",
                location,
            )
        self._root = operation
        self._root_declared_at = location

    def _resolve_references(self):
        for type_def in self._types.values():
            for f in type_def.fields:
                target = named_type(f.type)
                if target.scalar is None and target.name not in self._types:
                    raise UnresolvedTypeError(
                        f"Field '{type_def.name}.{f.name}' refers to unknown type "
                        f"'{target.name}'.",
                        f.location,
                    )

    def _resolve_root(self) -> str:
        if self._root is not None:
            if self._root.type_name not in self._types:
                raise UnresolvedTypeError(
                    f"Root query type '{self._root.type_name}' is not a declared object type.",
                    self._root.location,
                )
            return self._root.type_name
        if DEFAULT_QUERY_TYPE in self._types:
            return DEFAULT_QUERY_TYPE
        return next(iter(self._types))


def parse(text: str, source_name: str = "<schema>") -> SchemaModel:
    """Parse schema text into a SchemaModel."""
    return SchemaParser().add_source(text, source_name).build()


def parse_file(path: str | os.PathLike) -> SchemaModel:
    """Parse a single schema file."""
    return SchemaParser().add_file(path).build()


def collect_schema_files(path: str | os.PathLike) -> list[str]:
    """Collect schema files from a file or directory path."""
    path = os.fspath(path)
    if os.path.isfile(path):
        return [path]
    files = []
    for root, _, filenames in os.walk(path):
        for filename in filenames:
            if filename.endswith(SCHEMA_FILE_SUFFIXES):
                files.append(os.path.join(root, filename))
    return sorted(files)


def parse_path(path: str | os.PathLike) -> SchemaModel:
    """Parse a schema file, or every schema file below a directory, into one model."""
    parser = SchemaParser()
    for file_path in collect_schema_files(path):
        parser.add_file(file_path)
    return parser.build()
