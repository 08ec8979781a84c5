"""
ucdf CLI
=========
Command-line interface for the ucdf library.

Commands:
    parse       Parse a UCDF string and display its components
    validate    Lint a UCDF string
    convert     Convert between UCDF and other connection notations
    generate    Print a sample UCDF string
    build       Assemble a UCDF string from options
    version     Show version information

Usage::

    ucdf parse "t=file.csv;c.path=/data/users.csv;s.fields=id:int,name:str;a=r"
    ucdf validate "t=api.rest;s.endpoints=/users:GET" --strict
    ucdf convert jdbc ucdf "jdbc:postgresql://localhost:5432/mydb?user=postgres"
    ucdf build --type db.postgresql --conn host=localhost --field id:int --access rw
    ucdf generate kafka
"""

from __future__ import annotations

import json
import logging
import sys

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..errors import ConversionError, ParseError
from ..models.document import Document
from ..models.structure import EndpointList, FieldList

console = Console()
err_console = Console(stderr=True)

CONVERSIONS = {
    ("jdbc", "ucdf"),
    ("url", "ucdf"),
    ("mongodb", "ucdf"),
    ("ucdf", "jdbc"),
    ("ucdf", "url"),
    ("ucdf", "dsn"),
}


def _parse_or_exit(text: str) -> Document:
    from ..parser.assembler import parse

    try:
        return parse(text)
    except ParseError as e:
        err_console.print(f"[red]Error parsing UCDF string:[/red] {e}")
        sys.exit(1)


def _split_assignment(value: str, option: str) -> tuple[str, str]:
    key, sep, val = value.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint=option)
    return key, val


@click.group()
@click.version_option(version=__version__, prog_name="ucdf")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="UCDF_LOG_LEVEL",
    show_default=True,
    help="Logging verbosity (env: UCDF_LOG_LEVEL)",
)
def cli(log_level: str) -> None:
    """
    ucdf – Unified Compact Data Format.

    Describe any data source (file, database, API, stream, IoT feed) in one line.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("text")
@click.option("--format", "output_format", type=click.Choice(["rich", "json"]), default="rich")
@click.option(
    "--show-secrets",
    is_flag=True,
    envvar="UCDF_SHOW_SECRETS",
    help="Print credential values instead of masking them (env: UCDF_SHOW_SECRETS)",
)
def parse(text: str, output_format: str, show_secrets: bool) -> None:
    """Parse a UCDF string and display its components."""
    from ..validator.conformance import is_secret_key

    doc = _parse_or_exit(text)

    def shown(key: str, value: str) -> str:
        if not show_secrets and is_secret_key(key):
            return "*" * len(value)
        return value

    if output_format == "json":
        data = doc.model_dump(mode="json", exclude_none=True)
        data["connection"] = {k: shown(k, v) for k, v in doc.connection.items()}
        click.echo(json.dumps(data, indent=2))
        return

    st = doc.source_type
    console.print()
    console.print(Panel(
        f"Category: [cyan]{st.category}[/cyan]"
        + (f"  |  Subtype: [cyan]{st.subtype}[/cyan]" if st.subtype else "")
        + (f"\nAccess: {doc.access_mode.label} ({doc.access_mode.value})" if doc.access_mode else ""),
        title="UCDF Source",
        border_style="cyan",
    ))

    if doc.connection:
        t = Table(title="Connection Parameters", box=box.SIMPLE)
        t.add_column("Key", style="bold")
        t.add_column("Value")
        for key, value in doc.connection.items():
            t.add_row(key, shown(key, value))
        console.print(t)

    if doc.structure:
        t = Table(title="Structure", box=box.SIMPLE)
        t.add_column("Key", style="bold")
        t.add_column("Kind")
        t.add_column("Content")
        for key, entry in doc.structure.items():
            if isinstance(entry, FieldList):
                content = "\n".join(f"{f.name}: {f.dtype}" for f in entry.fields)
            elif isinstance(entry, EndpointList):
                content = "\n".join(f"{e.method} {e.path}" for e in entry.endpoints)
            else:
                content = entry.render()
            t.add_row(key, entry.kind, content)
        console.print(t)

    if doc.metadata:
        t = Table(title="Metadata", box=box.SIMPLE)
        t.add_column("Key", style="bold")
        t.add_column("Value")
        for key, value in doc.metadata.items():
            t.add_row(key, value)
        console.print(t)

    console.print()


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("text")
@click.option("--strict", is_flag=True, help="Exit with code 1 if any warnings")
@click.option("--json-output", is_flag=True, help="Output results as JSON")
def validate(text: str, strict: bool, json_output: bool) -> None:
    """Validate a UCDF string."""
    from ..validator.conformance import DocumentValidator, Severity

    result = DocumentValidator().validate_string(text)

    if json_output:
        output = {
            "passed": result.passed,
            "source_type": result.source_type,
            "rule_count": result.rule_count,
            "errors": [{"rule": i.rule_id, "msg": i.message} for i in result.errors],
            "warnings": [{"rule": i.rule_id, "msg": i.message} for i in result.warnings],
        }
        click.echo(json.dumps(output, indent=2))
    else:
        status_str = "[bold green]PASS[/bold green]" if result.passed else "[bold red]FAIL[/bold red]"
        console.print(Panel(
            f"Source: [bold]{result.source_type}[/bold]\n"
            f"Status: {status_str}  |  Rules: {result.rule_count}",
            title="UCDF Validation",
            border_style="blue",
        ))
        for issue in result.issues:
            color = (
                "red" if issue.severity == Severity.ERROR
                else "yellow" if issue.severity == Severity.WARNING
                else "blue"
            )
            console.print(f"  [{color}]{issue.severity.value}[/{color}] [{issue.rule_id}] {issue.message}")

    exit_code = 0
    if not result.passed:
        exit_code = 1
    elif strict and result.warnings:
        exit_code = 1
    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# convert
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("source", type=click.Choice(["ucdf", "jdbc", "url", "mongodb"]))
@click.argument("target", type=click.Choice(["ucdf", "jdbc", "url", "dsn"]))
@click.argument("text")
def convert(source: str, target: str, text: str) -> None:
    """Convert TEXT from SOURCE notation to TARGET notation."""
    from ..convert import connection_strings as cs

    if (source, target) not in CONVERSIONS:
        err_console.print(f"[red]Unsupported conversion from '{source}' to '{target}'[/red]")
        sys.exit(1)

    try:
        if source == "jdbc":
            out = cs.jdbc_to_document(text).to_string()
        elif source == "url":
            out = cs.url_to_document(text).to_string()
        elif source == "mongodb":
            out = cs.mongodb_uri_to_document(text).to_string()
        else:
            doc = _parse_or_exit(text)
            if target == "jdbc":
                out = cs.document_to_jdbc(doc)
            elif target == "url":
                out = cs.document_to_url(doc)
            else:
                out = cs.document_to_dsn(doc)
    except ConversionError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    click.echo(out)


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("kind")
def generate(kind: str) -> None:
    """Print a sample UCDF string for KIND (csv, postgresql, rest, kafka...)."""
    from ..samples import get_sample, sample_names

    try:
        click.echo(get_sample(kind))
    except KeyError:
        err_console.print(f"[red]Unknown source type '{kind}'[/red]")
        err_console.print(f"Available types: {', '.join(sample_names())}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# build
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--type", "source_type", required=True, help="category[.subtype], e.g. db.postgresql")
@click.option("--conn", "connections", multiple=True, help="Connection parameter KEY=VALUE")
@click.option("--field", "fields", multiple=True, help="Field NAME:DTYPE")
@click.option("--endpoint", "endpoints", multiple=True, help="Endpoint PATH:METHOD")
@click.option("--format", "data_format", default=None, help="Payload format, e.g. json")
@click.option("--structure", "structures", multiple=True, help="Custom structure KEY=VALUE")
@click.option("--access", type=click.Choice(["r", "w", "rw", "wr"]), default=None)
@click.option("--meta", "metadata", multiple=True, help="Metadata KEY=VALUE")
def build(
    source_type: str,
    connections: tuple[str, ...],
    fields: tuple[str, ...],
    endpoints: tuple[str, ...],
    data_format: str | None,
    structures: tuple[str, ...],
    access: str | None,
    metadata: tuple[str, ...],
) -> None:
    """Assemble a UCDF string from options and print it."""
    from ..builder.document_builder import DocumentBuilder

    try:
        builder = DocumentBuilder(source_type)
        for item in connections:
            builder.with_connection(*_split_assignment(item, "--conn"))
        if fields:
            builder.with_fields(*fields)
        if endpoints:
            builder.with_endpoints(*endpoints)
        if data_format:
            builder.with_format(data_format)
        for item in structures:
            builder.with_structure(*_split_assignment(item, "--structure"))
        if access:
            builder.with_access(access)
        for item in metadata:
            builder.with_metadata(*_split_assignment(item, "--meta"))
    except ParseError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    click.echo(builder.build().to_string())


# ---------------------------------------------------------------------------
# version info
# ---------------------------------------------------------------------------


@cli.command("version")
def show_version() -> None:
    """Show detailed version information."""
    console.print(Panel(
        f"[bold cyan]ucdf[/bold cyan] v{__version__}\n\n"
        "Unified Compact Data Format – Python implementation\n"
        "Sections: t= type, c.* connection, s.* structure, a= access, m.* metadata",
        title="ucdf",
        border_style="cyan",
    ))


if __name__ == "__main__":
    cli()
