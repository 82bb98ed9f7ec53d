# src/portal_schema/cli.py
"""portal-schema Command Line Interface.

Entry point for the portal-schema CLI tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from portal_schema import __version__
from portal_schema.cli_formatters import format_error, print_json, print_view_console, view_to_json
from portal_schema.contracts import OutputFormat, SchemaLoadError, UnknownViewError
from portal_schema.core.config import PortalSchemaSettings, load_settings
from portal_schema.core.graph import SchemaGraph
from portal_schema.core.loader import load_schema
from portal_schema.core.logging import configure_logging, get_logger
from portal_schema.views import ATTRIBUTES_VIEW, MANIFEST_VIEW, SchemaBrowser, ViewState

__all__ = [
    "app",
]

logger = get_logger(__name__)

app = typer.Typer(
    name="portal-schema",
    help="Browse data-submission schemas: manifests, attribute closures and conditional dependencies.",
    no_args_is_help=True,
)


@dataclass(frozen=True)
class _GlobalOptions:
    """Logging flags given on the command line (they win over settings)."""

    verbose: bool = False
    json_logs: bool = False


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"portal-schema version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """portal-schema: data-submission schema browser."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")
    ctx.obj = _GlobalOptions(verbose=verbose, json_logs=json_logs)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


# Shared command options
_SETTINGS_OPTION = typer.Option(
    None,
    "--settings",
    "-s",
    help="Path to settings YAML file.",
)
_SCHEMA_OPTION = typer.Option(
    None,
    "--schema",
    help="Path to JSON-LD data model (overrides schema_path from settings).",
)
_FORMAT_OPTION = typer.Option(
    OutputFormat.CONSOLE,
    "--format",
    "-f",
    help="Output format.",
)


def _load_settings_or_exit(settings: str | None) -> PortalSchemaSettings:
    if settings is None:
        return PortalSchemaSettings()

    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        format_error(
            title="YAML Syntax Error",
            message=f"Failed to parse {settings_path.name}",
            details=[str(e.problem)] if hasattr(e, "problem") else None,
            hint="Check for unclosed brackets, incorrect indentation, or invalid characters.",
        )
        raise typer.Exit(1) from None
    except FileNotFoundError:
        format_error(
            title="File Not Found",
            message=f"Settings file does not exist: {settings}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except ValidationError as e:
        details = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            details.append(f"{loc}: {error['msg']}")
        format_error(
            title="Configuration Validation Failed",
            message=f"Invalid settings in {settings_path.name}",
            details=details,
            hint="Check field names, types, and required values.",
        )
        raise typer.Exit(1) from None


def _load_browser(ctx: typer.Context, settings: str | None, schema: str | None) -> SchemaBrowser:
    """Load settings and schema, reconfigure logging, build the browser.

    Raises:
        typer.Exit: On any settings or schema load failure.
    """
    config = _load_settings_or_exit(settings)

    options: _GlobalOptions = ctx.obj if isinstance(ctx.obj, _GlobalOptions) else _GlobalOptions()
    if not options.verbose and not options.json_logs:
        configure_logging(json_output=config.logging.json_output, level=config.logging.level)

    schema_path = Path(schema).expanduser() if schema is not None else config.schema_path
    if schema_path is None:
        format_error(
            title="No Schema",
            message="No data model given.",
            hint="Pass --schema PATH or set schema_path in the settings file.",
        )
        raise typer.Exit(1)

    try:
        schema_map = load_schema(schema_path)
    except FileNotFoundError:
        format_error(
            title="File Not Found",
            message=f"Schema file does not exist: {schema_path}",
            hint="Check the path and ensure the file exists.",
        )
        raise typer.Exit(1) from None
    except SchemaLoadError as e:
        format_error(
            title="Schema Load Failed",
            message=str(e),
            hint="The data model must be a JSON-LD document with an '@graph' list of nodes carrying '@id'.",
        )
        raise typer.Exit(1) from None

    return SchemaBrowser(
        SchemaGraph(schema_map),
        overrides=config.override_tables(),
        component_id=config.component_id,
        identity_key=config.identity_key,
        provenance=config.provenance,
    )


def _emit_view(browser: SchemaBrowser, state: ViewState, output_format: OutputFormat) -> None:
    view = browser.active_table(state)
    if output_format == OutputFormat.JSON:
        print_json(view_to_json(view))
    else:
        print_view_console(view)


@app.command()
def manifests(
    ctx: typer.Context,
    settings: str | None = _SETTINGS_OPTION,
    schema: str | None = _SCHEMA_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """List the manifests defined by the data model."""
    browser = _load_browser(ctx, settings, schema)
    _emit_view(browser, ViewState(active=MANIFEST_VIEW), output_format)


@app.command()
def attributes(
    ctx: typer.Context,
    settings: str | None = _SETTINGS_OPTION,
    schema: str | None = _SCHEMA_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Show every attribute reachable from any manifest, with the manifests that reach it."""
    browser = _load_browser(ctx, settings, schema)
    _emit_view(browser, ViewState(active=ATTRIBUTES_VIEW), output_format)


@app.command()
def resolve(
    ctx: typer.Context,
    manifest: list[str] = typer.Argument(..., help="Manifest ids or names to resolve."),
    settings: str | None = _SETTINGS_OPTION,
    schema: str | None = _SCHEMA_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Show the attribute closure of one or more manifests.

    Each manifest opens its own view, in the order given.
    """
    browser = _load_browser(ctx, settings, schema)
    schema_map = browser.graph.schema_map

    state = ViewState()
    for key in manifest:
        attr = schema_map.find(key)
        if attr is None:
            format_error(
                title="Unknown Manifest",
                message=f"No attribute with id, name or label '{key}'",
                hint="Run 'portal-schema manifests' to list available manifests.",
            )
            raise typer.Exit(1)
        state = state.open_view(attr.id)

    for view_id in state.open_views:
        try:
            _emit_view(browser, state.select_view(view_id), output_format)
        except UnknownViewError as e:
            format_error(title="Unknown View", message=str(e))
            raise typer.Exit(1) from None


@app.command("conditional-if")
def conditional_if(
    ctx: typer.Context,
    attribute: str = typer.Argument(..., help="Attribute id, name or label."),
    settings: str | None = _SETTINGS_OPTION,
    schema: str | None = _SCHEMA_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """List the attributes that make ATTRIBUTE mandatory once data is submitted for them."""
    browser = _load_browser(ctx, settings, schema)
    graph = browser.graph
    attr = graph.schema_map.find(attribute)
    if attr is None:
        format_error(
            title="Unknown Attribute",
            message=f"No attribute with id, name or label '{attribute}'",
        )
        raise typer.Exit(1)

    source_ids = graph.conditional_if(attr.id)
    sources = graph.schema_map.lookup(source_ids)
    if output_format == OutputFormat.JSON:
        print_json(
            {
                "attribute": attr.id,
                "conditional_if": [{"id": s.id, "attribute": browser.overrides.display_attribute(s.attribute)} for s in sources],
            }
        )
        return

    display = browser.overrides.display_attribute(attr.attribute)
    if not sources:
        typer.echo(f"{display}: no conditional-if attributes")
        return
    typer.echo(f"{display} becomes mandatory when data is submitted for:")
    for source in sources:
        typer.echo(f"  - {browser.overrides.display_attribute(source.attribute)} ({source.id})")


@app.command()
def validate(
    ctx: typer.Context,
    settings: str | None = _SETTINGS_OPTION,
    schema: str | None = _SCHEMA_OPTION,
    output_format: OutputFormat = _FORMAT_OPTION,
) -> None:
    """Load settings and data model, report counts and dangling references.

    Dangling references are reported but do not fail validation: traversal
    skips them.
    """
    browser = _load_browser(ctx, settings, schema)
    graph = browser.graph
    dangling = graph.dangling_references()
    manifest_count = len(browser.manifests())

    if output_format == OutputFormat.JSON:
        print_json(
            {
                "attributes": graph.node_count,
                "edges": graph.edge_count,
                "manifests": manifest_count,
                "dangling_references": {attr_id: list(ids) for attr_id, ids in dangling.items()},
            }
        )
        return

    typer.echo(f"Schema valid: {graph.node_count} attributes, {graph.edge_count} edges, {manifest_count} manifests")
    if dangling:
        typer.echo(f"Dangling references ({sum(len(ids) for ids in dangling.values())}, skipped during traversal):")
        for attr_id, ids in dangling.items():
            typer.echo(f"  {attr_id} -> {', '.join(ids)}")


if __name__ == "__main__":
    app()
