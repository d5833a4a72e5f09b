"""Main CLI entry point for Swaggering Docstore.

Compiles API documents into storage schemas from the command line.
"""

from pathlib import Path
import json
import sys

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from swaggering_docstore import __version__
from swaggering_docstore.adapters.memory import InMemoryAdapter
from swaggering_docstore.adapters.validation import ValidationResult
from swaggering_docstore.compiler.pipeline import SchemaCompiler
from swaggering_docstore.config import load_config
from swaggering_docstore.errors import CompilationError
from swaggering_docstore.logging_config import configure_logging
from swaggering_docstore.schemas.document import load_document_file

console = Console()
err_console = Console(stderr=True)


@click.group()
@click.version_option(version=__version__, prog_name="swaggering")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Swaggering Docstore - Generate storage schemas from API documents.

    Reads the definitions of a Swagger/OpenAPI document and compiles them
    into document-store schemas.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(verbose)


@cli.command("compile")
@click.argument("spec_file", type=click.Path(exists=True))
@click.option("--output", "-o", type=click.Path(), help="Output file (stdout if not specified)")
@click.option("--format", "-f", "output_format", type=click.Choice(["json", "yaml"]), default="json", help="Output format")
@click.option("--definition", "-d", multiple=True, help="Definition(s) to include (all if omitted)")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Compiler config YAML")
@click.pass_context
def compile_command(
    ctx: click.Context,
    spec_file: str,
    output: str | None,
    output_format: str,
    definition: tuple[str, ...],
    config_path: str | None,
) -> None:
    """Compile the definitions of an API document.

    SPEC_FILE is the path to a JSON or YAML Swagger/OpenAPI document.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        compiler = SchemaCompiler(load_config(config_path))
        definitions = compiler.extract_definitions(load_document_file(spec_file))

        missing = [name for name in definition if name not in definitions]
        if missing:
            raise click.UsageError(f"Unknown definition(s): {', '.join(missing)}")
        schemas = compiler.build_schemas(definitions, list(definition) or None)
        data = {name: schema.to_dict() for name, schema in schemas.items()}

        if output_format == "yaml":
            rendered = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
        else:
            rendered = json.dumps(data, indent=2)

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(rendered)
            console.print(f"[green]Compiled {len(schemas)} schema(s) to {output}[/green]")
        else:
            click.echo(rendered)

    except click.UsageError:
        raise
    except Exception as e:
        _print_error("Error compiling schemas", e, verbose)
        sys.exit(1)


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Compiler config YAML")
@click.pass_context
def list_definitions(ctx: click.Context, spec_file: str, config_path: str | None) -> None:
    """List the definitions of an API document."""
    verbose = ctx.obj.get("verbose", False)

    try:
        compiler = SchemaCompiler(load_config(config_path))
        definitions = compiler.extract_definitions(load_document_file(spec_file))
    except Exception as e:
        _print_error("Error loading document", e, verbose)
        sys.exit(1)

    if not definitions:
        console.print("[yellow]No definitions found[/yellow]")
        return

    table = Table(title="Definitions")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Properties", justify="right")
    table.add_column("Required")

    for name, node in definitions.items():
        properties = getattr(node, "properties", {})
        required = sorted(getattr(node, "required", frozenset()))
        table.add_row(
            name,
            node.kind.value,
            str(len(properties)),
            ", ".join(required) if required else "-",
        )

    console.print(table)


@cli.command()
@click.argument("spec_file", type=click.Path(exists=True))
@click.argument("document_file", type=click.Path(exists=True))
@click.option("--definition", "-d", required=True, help="Definition to validate against")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="Compiler config YAML")
@click.pass_context
def validate(
    ctx: click.Context,
    spec_file: str,
    document_file: str,
    definition: str,
    config_path: str | None,
) -> None:
    """Validate a JSON document against a compiled definition.

    SPEC_FILE is the API document; DOCUMENT_FILE is the JSON document to check.
    """
    verbose = ctx.obj.get("verbose", False)

    try:
        compiler = SchemaCompiler(load_config(config_path))
        result = compiler.compile(load_document_file(spec_file), InMemoryAdapter())
        model = result.models.get(definition)
        if model is None:
            console.print(f"[red]Definition '{definition}' not found[/red]")
            sys.exit(1)

        document = json.loads(Path(document_file).read_text())
        validation = model.validate(model.prepare(document))
    except Exception as e:
        _print_error("Error validating document", e, verbose)
        sys.exit(1)

    _print_validation_result(definition, validation)
    if not validation.valid:
        sys.exit(1)


def _print_error(title: str, error: Exception, verbose: bool) -> None:
    """Print an error, with its cause chain in verbose mode."""
    console.print(f"[red]{title}: {escape(str(error))}[/red]")
    if verbose and isinstance(error, CompilationError):
        console.print(Panel.fit(
            escape(json.dumps(error.to_dict(), indent=2, default=str)),
            title=error.kind.value,
        ))
    elif verbose:
        import traceback
        err_console.print(traceback.format_exc())


def _print_validation_result(name: str, result: ValidationResult) -> None:
    """Print validation results."""
    status = "[green]VALID[/green]" if result.valid else "[red]INVALID[/red]"
    console.print(f"\n{name}: {status}")

    for issue in result.issues:
        console.print(f"  [red]ERROR[/red]: {escape(issue.message)}")
        if issue.path:
            console.print(f"    Path: {issue.path}")


if __name__ == "__main__":
    cli()
