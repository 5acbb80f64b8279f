"""Code generator for typed GraphQL clients.

Renders a Jinja2 template to produce one Python module from a SchemaModel.
For every object type ``T`` the module contains:

    T             namespace class whose attributes are the field tokens
    TSelection    selection builder, generic over one parameter per field
    TResponse     response wrapper, generic over the same parameters
    _T<F>Field    one token class per field
    _T<F>Accessor one descriptor class per field; its ``__get__`` only
                  accepts a TResponse whose parameter for that field is
                  Selected (or Nested[R] for object fields)

Supports custom templates via the template_dir parameter:
    generator = CodeGenerator(model, template_dir="./my_templates")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import ast
import keyword
import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .errors import CodegenOutputError, InvariantViolation
from .model import ListType, NamedType, NonNullType, ScalarType, SchemaModel, TypeRef

logger = logging.getLogger(__name__)

TEMPLATE_NAME = "client.py.j2"
DEFAULT_RUNTIME_MODULE = "gql_typed.runtime"

PYTHON_SCALARS = {
    ScalarType.STRING: "str",
    ScalarType.INT: "int",
    ScalarType.FLOAT: "float",
    ScalarType.BOOLEAN: "bool",
    ScalarType.ID: "str",
}

# Module-level names the generated code relies on
RESERVED_MODULE_NAMES = {"_t", "_rt", "annotations"} | set(PYTHON_SCALARS.values())

# Attribute names used by the runtime base classes
RESERVED_ATTRIBUTE_PREFIX = "_gql_"

# Control characters other than newline and tab cannot appear raw in source
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

SELECTED = "_rt.Selected"
UNSELECTED = "_rt.Unselected"
ANY = "_t.Any"


def pascal_case(name: str) -> str:
    """Convert camelCase or snake_case to PascalCase."""
    parts = re.split(r"_+", name)
    return "".join(p[:1].upper() + p[1:] for p in parts if p) or "Field"


def safe_docstring(text: str) -> str:
    """Escape text for use in docstrings."""
    if not text:
        return ""
    text = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    text = _CONTROL_CHARS.sub(lambda m: f"\\x{ord(m.group()):02x}", text)
    if text.endswith('"'):
        text += " "
    return text


class _Names:
    """Hands out unique Python identifiers in a deterministic order."""

    def __init__(self, reserved: set[str] | frozenset[str] = frozenset()):
        self._taken = set(reserved)

    def claim(self, wanted: str) -> str:
        name = wanted
        while name in self._taken or keyword.iskeyword(name):
            name += "_"
        self._taken.add(name)
        return name


@dataclass
class FieldPlan:
    """Everything the template needs to emit one field."""
    graphql_name: str
    attr: str
    index: int
    is_object: bool
    token_class: str
    accessor_class: str
    target_type: str
    owner_type: str
    value_type: str
    decoder: str
    builder_return: str
    sub_selection_type: str
    sdl_type: str
    description: str


@dataclass
class TypePlan:
    """Everything the template needs to emit one object type."""
    graphql_name: str
    namespace: str
    response: str
    builder: str
    bound: str
    params: list[str]
    fields: list[FieldPlan]
    is_root: bool
    description: str

    @property
    def params_str(self) -> str:
        return ", ".join(self.params)

    @property
    def empty_args(self) -> str:
        return ", ".join([UNSELECTED] * len(self.params))

    @property
    def any_args(self) -> str:
        return ", ".join([ANY] * len(self.params))

    @property
    def field_order(self) -> str:
        names = ", ".join(repr(f.graphql_name) for f in self.fields)
        return f"({names},)" if len(self.fields) == 1 else f"({names})"


class CodeGenerator:
    """Generates a typed client module from a SchemaModel.

    Generation is a pure function of the model and the options: the same
    input always produces byte-identical output.

    Example:
        generator = CodeGenerator(model, runtime_module="gql_typed.runtime")
        source = generator.generate()
        generator.write("generated/starwars.py")
    """

    def __init__(
        self,
        model: SchemaModel,
        *,
        template_dir: Optional[str] = None,
        runtime_module: str = DEFAULT_RUNTIME_MODULE,
    ):
        """Initialize the code generator.

        Args:
            model: The parsed schema
            template_dir: Optional directory with custom Jinja2 templates.
                          Templates here override the built-in templates.
            runtime_module: Import path of the runtime support library
        """
        self.model = model
        self.template_dir = template_dir
        self.runtime_module = runtime_module

        loaders = []
        if template_dir:
            template_path = Path(template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
        loaders.append(PackageLoader("gql_typed", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["safe_docstring"] = safe_docstring

    def generate(self) -> str:
        """Render the client module and return its source."""
        plans = self._plan_types()
        root = next(p for p in plans if p.is_root)
        template = self.env.get_template(TEMPLATE_NAME)
        content = template.render(
            runtime_module=self.runtime_module,
            types=plans,
            root=root,
            typevars=self._typevars,
            exports=sorted(
                name for p in plans for name in (p.namespace, p.builder, p.response)
            ),
        )

        try:
            ast.parse(content)
        except (SyntaxError, ValueError) as e:
            raise InvariantViolation(
                f"Generated invalid Python: {e}\nTemplate: {TEMPLATE_NAME}"
            ) from e

        logger.debug("Generated %d lines for %d types", content.count("\n"), len(plans))
        return content

    def write(self, output_path: str | os.PathLike) -> Path:
        """Generate the module and write it to ``output_path``."""
        content = self.generate()
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise CodegenOutputError(path, e) from e
        logger.debug("Wrote %s", path)
        return path

    # -- planning -----------------------------------------------------------

    def _check_model(self):
        """Re-check what the parser guarantees."""
        if self.model.lookup_type(self.model.query_type) is None:
            raise InvariantViolation(
                f"Root query type {self.model.query_type!r} is not in the model"
            )
        for type_def in self.model.types.values():
            if not type_def.fields:
                raise InvariantViolation(f"Type {type_def.name!r} has no fields")
            for f in type_def.fields:
                self._target_of(f.type, f"{type_def.name}.{f.name}")

    def _target_of(self, ref: TypeRef, where: str) -> NamedType:
        while not isinstance(ref, NamedType):
            ref = ref.of_type
        if ref.scalar is None and self.model.lookup_type(ref.name) is None:
            raise InvariantViolation(f"{where} refers to unresolved type {ref.name!r}")
        return ref

    def _plan_types(self) -> list[TypePlan]:
        self._check_model()
        types = list(self.model.types.values())
        names = _Names(RESERVED_MODULE_NAMES)

        namespaces = {t.name: names.claim(t.name) for t in types}
        responses = {t.name: names.claim(f"{t.name}Response") for t in types}
        builders = {t.name: names.claim(f"{t.name}Selection") for t in types}
        bounds = {t.name: names.claim(f"_{t.name}R") for t in types}

        max_fields = max(len(t.fields) for t in types)
        self._typevars = [names.claim(f"_F{i}") for i in range(max_fields)]

        plans = []
        for t in types:
            params = self._typevars[:len(t.fields)]
            attrs = _Names()
            field_plans = []
            for index, f in enumerate(t.fields):
                attr = f.name
                if attr.startswith(RESERVED_ATTRIBUTE_PREFIX):
                    attr += "_"
                attr = attrs.claim(attr)
                stem = f"_{t.name}{pascal_case(f.name)}"
                target = self._target_of(f.type, f"{t.name}.{f.name}")
                is_object = target.scalar is None

                marker = f"_rt.Nested[{bounds[target.name]}]" if is_object else SELECTED
                owner_args = [ANY] * len(params)
                owner_args[index] = marker
                builder_args = list(params)
                builder_args[index] = marker

                field_plans.append(FieldPlan(
                    graphql_name=f.name,
                    attr=attr,
                    index=index,
                    is_object=is_object,
                    token_class=names.claim(f"{stem}Field"),
                    accessor_class=names.claim(f"{stem}Accessor"),
                    target_type=target.name,
                    owner_type=f"{responses[t.name]}[{', '.join(owner_args)}]",
                    value_type=self._value_type(f.type, bounds),
                    decoder=self._decoder(f.type, responses),
                    builder_return=f"{builders[t.name]}[{', '.join(builder_args)}]",
                    sub_selection_type=(
                        f"_rt.SelectionBuilder[{bounds[target.name]}]" if is_object else ""
                    ),
                    sdl_type=str(f.type),
                    description=f.description or "",
                ))

            plans.append(TypePlan(
                graphql_name=t.name,
                namespace=namespaces[t.name],
                response=responses[t.name],
                builder=builders[t.name],
                bound=bounds[t.name],
                params=params,
                fields=field_plans,
                is_root=t.name == self.model.query_type,
                description=t.description or "",
            ))
        return plans

    def _value_type(self, ref: TypeRef, bounds: dict[str, str], nullable: bool = True) -> str:
        """Python type of a field value, e.g. ``_t.Optional[_t.List[str]]``."""
        if isinstance(ref, NonNullType):
            return self._value_type(ref.of_type, bounds, nullable=False)
        if isinstance(ref, ListType):
            inner = f"_t.List[{self._value_type(ref.of_type, bounds)}]"
        elif ref.scalar is not None:
            inner = PYTHON_SCALARS[ref.scalar]
        else:
            inner = bounds[ref.name]
        return f"_t.Optional[{inner}]" if nullable else inner

    def _decoder(self, ref: TypeRef, responses: dict[str, str], nullable: bool = True) -> str:
        """Runtime decoder expression mirroring ``_value_type``."""
        if isinstance(ref, NonNullType):
            return self._decoder(ref.of_type, responses, nullable=False)
        if isinstance(ref, ListType):
            inner = f"_rt.ListOf({self._decoder(ref.of_type, responses)})"
        elif ref.scalar is not None:
            inner = f"_rt.Scalar({PYTHON_SCALARS[ref.scalar]})"
        else:
            inner = f"_rt.ObjectOf({responses[ref.name]!r})"
        return f"_rt.Nullable({inner})" if nullable else inner


def generate(model: SchemaModel, **options) -> str:
    """Generate a typed client module for ``model``."""
    return CodeGenerator(model, **options).generate()
