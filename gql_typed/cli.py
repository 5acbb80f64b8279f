"""Command-line interface for gql-typed."""

import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click

from .core.errors import CodegenOutputError, SchemaError
from .core.generator import DEFAULT_RUNTIME_MODULE, CodeGenerator
from .core.model import SchemaModel, named_type
from .core.parser import parse_path

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    try:
        if archive_path.suffix == ".zip":
            with zipfile.ZipFile(archive_path, "r") as zip_ref:
                zip_ref.extractall(temp_dir)
        elif archive_path.name.endswith((".tar.gz", ".tgz")):
            with tarfile.open(archive_path, "r:gz") as tar_ref:
                tar_ref.extractall(temp_dir, filter="data")
        else:
            raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    except BaseException:
        shutil.rmtree(temp_dir)
        raise
    return temp_dir


def load_schema(schema_path: Path, verbose: bool) -> SchemaModel:
    """Parse a schema file, directory or archive, mapping errors to click errors."""
    temp_dir = None
    try:
        actual_path = schema_path
        if schema_path.is_file() and schema_path.name.lower().endswith(ARCHIVE_SUFFIXES):
            click.echo(f"Extracting archive {schema_path.name}...")
            temp_dir = extract_archive(schema_path)
            actual_path = Path(temp_dir)
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}")

        click.echo("Parsing schema...")
        return parse_path(actual_path)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e
    except (OSError, zipfile.BadZipFile, tarfile.TarError) as e:
        raise click.ClickException(f"cannot read schema {schema_path}: {e}") from e
    finally:
        if temp_dir:
            shutil.rmtree(temp_dir)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
@click.version_option(package_name="gql-typed")
def main():
    """Typed GraphQL client generator for Python.

    Generate query builders whose responses only expose the selected fields.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--output",
    "-o",
    required=True,
    type=click.Path(dir_okay=False),
    help="Output file for the generated module (e.g., starwars_client.py).",
)
@click.option(
    "--template-dir",
    "-t",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory with Jinja2 templates overriding client.py.j2.",
)
@click.option(
    "--runtime-module",
    default=DEFAULT_RUNTIME_MODULE,
    show_default=True,
    help="Import path of the runtime support library in generated code.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(schema: str, output: str, template_dir: str | None, runtime_module: str, verbose: bool):
    """Generate a typed client module from a GraphQL schema.

    Examples:

        gql-typed generate --schema ./schema.graphql --output ./starwars_client.py

        gql-typed generate -s ./schema -o ./client.py -t ./templates
    """
    _configure_logging(verbose)
    schema_path = Path(schema).resolve()
    output_path = Path(output).resolve()

    if verbose:
        click.echo(f"Schema: {schema_path}")
        click.echo(f"Output: {output_path}")

    model = load_schema(schema_path, verbose)
    if verbose:
        click.echo(f"  Types: {len(model.types)}")
        click.echo(f"  Root query type: {model.query_type}")

    click.echo("Generating code...")
    generator = CodeGenerator(model, template_dir=template_dir, runtime_module=runtime_module)
    try:
        generator.write(output_path)
    except CodegenOutputError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Done! Generated client for {len(model.types)} types in {output_path}")


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True),
    help="Path to GraphQL schema file, directory, or archive (.zip, .tar.gz, .tgz).",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def check(schema: str, verbose: bool):
    """Parse and validate a schema without generating code."""
    _configure_logging(verbose)
    model = load_schema(Path(schema).resolve(), verbose)

    for type_def in model.types.values():
        marker = " (root)" if type_def.name == model.query_type else ""
        click.echo(f"type {type_def.name}{marker}")
        for f in type_def.fields:
            kind = "scalar" if named_type(f.type).scalar else "object"
            click.echo(f"  {f.name}: {f.type}  [{kind}]")

    click.echo(f"OK: {len(model.types)} types, root query type {model.query_type}")


if __name__ == "__main__":
    main()
