#!/usr/bin/env python3
"""
CLI for validating data against shapecheck schema documents.

Usage:
    shapecheck validate schema.yaml --data '{"name": "Ann"}'
    shapecheck validate schema.yaml --data @payload.json --mode cleanup
    shapecheck validate s3://bucket/schemas/user.yaml --data @user.json
    shapecheck lint schema.yaml
    shapecheck types
    shapecheck --version

Exit codes for ``validate``:
    0  data is valid (sanitized data printed as JSON)
    1  data is invalid (error messages printed)
    2  the schema document itself is broken
"""

import importlib
import importlib.util
import json
import logging
import sys
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import typer
import yaml

from shapecheck import __version__
from shapecheck.exceptions import SchemaDefinitionError
from shapecheck.meta_schema import lint_schema_document
from shapecheck.registry import parse_schema_document, read_schema_document
from shapecheck.types import available_types, register_type
from shapecheck.validator import SchemaValidator

logger = logging.getLogger(__name__)

EXIT_INVALID = 1
EXIT_SCHEMA_ERROR = 2

# Create the main app
app = typer.Typer(
    name="shapecheck",
    help="shapecheck - Schema-driven validation of nested data",
    no_args_is_help=True,
    add_completion=False,
)


class ModeOption(str, Enum):
    """Extra-field policy choices for the CLI."""
    strict = "strict"
    cleanup = "cleanup"
    ignore = "ignore"


def parse_data(value: Optional[str]) -> Any:
    """
    Parse input data from a JSON string, @file.json or stdin ("-").

    Args:
        value: JSON string, @file.json path or "-"

    Returns:
        Parsed JSON value (any JSON type)

    Raises:
        typer.Exit: On parse error
    """
    if value is None:
        return None

    if value == "-":
        source = "stdin"
        text = sys.stdin.read()
    elif value.startswith("@"):
        path = Path(value[1:])
        if not path.exists():
            typer.echo(f"Error: Data file not found: {path}", err=True)
            raise typer.Exit(EXIT_SCHEMA_ERROR)
        source = str(path)
        text = path.read_text(encoding="utf-8")
    else:
        source = "--data"
        text = value

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        typer.echo(f"Error: Invalid JSON in {source}: {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)


def setup_logging(verbose: int, quiet: bool):
    """Configure logging based on verbosity flags."""
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s"
    )


def _register_from_module(module: Any, origin: str) -> None:
    if not hasattr(module, "register_types"):
        typer.echo(
            f"Error: '{origin}' must define a register_types(registry) function", err=True
        )
        raise typer.Exit(EXIT_SCHEMA_ERROR)

    registry: Dict[str, Any] = {}
    try:
        module.register_types(registry)
        for name, type_class in registry.items():
            register_type(name, type_class)
    except Exception as e:
        typer.echo(f"Error: Failed to register types from '{origin}': {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)
    logger.info(f"Registered {len(registry)} type(s) from {origin}")


def load_types_from_module(module_path: str) -> None:
    """
    Register scalar types from a Python module (installed package).

    The module must define ``register_types(registry)`` which fills the
    given dict with name -> ValidatorType subclass.
    """
    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        typer.echo(f"Error: Cannot import module '{module_path}': {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)
    _register_from_module(module, module_path)


def load_types_from_file(file_path: str) -> None:
    """Register scalar types from a Python file (local file path)."""
    path = Path(file_path).resolve()

    if not path.exists():
        typer.echo(f"Error: Types file not found: {path}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)

    try:
        spec = importlib.util.spec_from_file_location("custom_types", path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load module spec from file: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        typer.echo(f"Error: Failed to load Python file '{path}': {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)
    _register_from_module(module, file_path)


def load_document(source: str) -> Any:
    """Read a schema document, exiting with a message on failure."""
    try:
        return read_schema_document(source)
    except FileNotFoundError:
        typer.echo(f"Error: Schema not found: {source}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)
    except yaml.YAMLError as e:
        typer.echo(f"Error: Invalid YAML syntax: {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)


@app.command()
def validate(
    schema: str = typer.Argument(..., help="Path or URL of the schema document (YAML/JSON)"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON data, @file.json, or - for stdin"),
    mode: Optional[ModeOption] = typer.Option(None, "--mode", "-m", help="Policy for undeclared keys"),
    fail_early: Optional[bool] = typer.Option(None, "--fail-early/--fail-late", help="Stop at the first error"),
    validate_charset: Optional[bool] = typer.Option(None, "--charset-check/--no-charset-check", help="Check scalar values against the charset"),
    charset: Optional[str] = typer.Option(None, "--charset", help="Charset for encoding checks"),
    max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Maximum nesting depth (0 = unbounded)"),
    types_module: Optional[List[str]] = typer.Option(None, "--types-module", help="Python module defining register_types()"),
    types_file: Optional[List[str]] = typer.Option(None, "--types-file", help="Python file defining register_types()"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write sanitized data to file"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-error output"),
):
    """Validate data against a schema document."""
    setup_logging(verbose, quiet)

    for module_path in types_module or []:
        load_types_from_module(module_path)
    for file_path in types_file or []:
        load_types_from_file(file_path)

    document = load_document(schema)
    value = parse_data(data if data is not None else "-")

    try:
        registry, settings = parse_schema_document(document)
        validator = SchemaValidator(
            registry,
            mode=mode.value if mode is not None else None,
            fail_early=fail_early,
            validate_charset=validate_charset,
            charset=charset,
            max_depth=max_depth,
            settings=settings,
        )
        session = validator.check(value)
    except SchemaDefinitionError as e:
        typer.echo(f"Schema error: {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)
    except (ValueError, LookupError) as e:
        typer.echo(f"Configuration error: {e}", err=True)
        raise typer.Exit(EXIT_SCHEMA_ERROR)

    if not session.is_valid:
        typer.echo("Validation failed:", err=True)
        for detail in session.details:
            where = f"{detail.path}: " if detail.path else ""
            typer.echo(f"  - {where}{detail.message}", err=True)
        raise typer.Exit(EXIT_INVALID)

    result = json.dumps(session.data, indent=2, ensure_ascii=False, default=str)
    if output:
        output.write_text(result + "\n", encoding="utf-8")
        if not quiet:
            typer.echo(f"Sanitized data written to {output}", err=True)
    elif not quiet:
        typer.echo(result)


@app.command()
def lint(
    schema: str = typer.Argument(..., help="Path or URL of the schema document (YAML/JSON)"),
    detailed: bool = typer.Option(False, "--detailed", help="Show the schemas in the document"),
):
    """Check a schema document for authoring mistakes without validating data."""
    document = load_document(schema)

    problems = lint_schema_document(document)
    if not problems:
        try:
            registry, settings = parse_schema_document(document)
        except SchemaDefinitionError as e:
            problems = [str(e)]

    if problems:
        typer.echo(f"Lint failed for {schema}:", err=True)
        for problem in problems:
            typer.echo(f"  - {problem}", err=True)
        raise typer.Exit(EXIT_INVALID)

    if detailed:
        typer.echo(f"Schemas: {len(registry)}")
        for name, node in registry.items():
            typer.echo(f"  - {name} ({type(node).__name__})")
        if settings:
            typer.echo(f"\nSettings: {json.dumps(settings, sort_keys=True)}")

    typer.echo(f"\n✓ {schema} is valid")


@app.command(name="types")
def list_types(
    types_module: Optional[List[str]] = typer.Option(None, "--types-module", help="Python module defining register_types()"),
    types_file: Optional[List[str]] = typer.Option(None, "--types-file", help="Python file defining register_types()"),
):
    """List the registered scalar validator types."""
    for module_path in types_module or []:
        load_types_from_module(module_path)
    for file_path in types_file or []:
        load_types_from_file(file_path)

    for name in available_types():
        typer.echo(name)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        typer.echo(f"shapecheck {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(None, "--version", callback=version_callback, is_eager=True,
                                 help="Show version and exit"),
):
    """shapecheck - Schema-driven validation of nested data."""


def main():
    """Entry point for the shapecheck CLI."""
    app()


if __name__ == "__main__":
    main()
