"""CLI commands for the SOLID guide.

Commands:
- render: Render the guide to stdout or a file
- lint: Check a guide document's structure
- list: Show the five principles
- show: Show one principle section
"""

import logging
import sys
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from solid_guide.config.app_config import load_app_config
from solid_guide.core.catalog import (
    AmbiguousPrincipleError,
    CatalogError,
    UnknownPrincipleError,
    load_catalog,
)
from solid_guide.core.doc_linter import lint_file
from solid_guide.core.renderer import (
    RenderOptions,
    render_entry,
    render_guide,
    write_guide,
)

app = typer.Typer(
    name="solid-guide",
    help="SOLID principles guide: render and lint the Markdown document.",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    """Send structlog output to stderr so rendered Markdown owns stdout."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        # stderr looked up per call
        logger_factory=lambda *args: structlog.PrintLogger(sys.stderr),
    )


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr"),
) -> None:
    """SOLID principles guide: render and lint the Markdown document."""
    _configure_logging(verbose)

    try:
        load_app_config()
    except ValueError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _load_catalog_or_exit(catalog_file: str | None):
    """Load the catalog, or exit with a readable error."""
    try:
        path = Path(catalog_file).expanduser() if catalog_file else None
        return load_catalog(path)
    except FileNotFoundError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    except CatalogError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


@app.command()
def render(
    output: str | None = typer.Option(
        None, "--output", "-o", help="Write to file instead of stdout"
    ),
    title: str | None = typer.Option(None, "--title", "-t", help="Document title"),
    no_toc: bool = typer.Option(False, "--no-toc", help="Omit the table of contents"),
    catalog_file: str | None = typer.Option(
        None, "--catalog", "-c", help="Catalog YAML (default: bundled)"
    ),
) -> None:
    """Render the guide as Markdown."""
    catalog = _load_catalog_or_exit(catalog_file)

    options = RenderOptions.from_config()
    if title:
        options.title = title
    if no_toc:
        options.include_toc = False

    if output:
        path = write_guide(Path(output).expanduser(), catalog, options)
        console.print("[green]✓ Guide written[/green]")
        console.print(f"  [dim]path:[/dim]     {path}")
        console.print(f"  [dim]sections:[/dim] {len(catalog)}")
    else:
        # Plain print: rich markup would mangle the Markdown
        typer.echo(render_guide(catalog, options), nl=False)


@app.command()
def lint(
    file: str = typer.Argument(..., help="Path to the Markdown guide"),
    strict: bool = typer.Option(
        False, "--strict", help="Fail on warnings as well as errors"
    ),
) -> None:
    """Check a guide's structure: sections, examples and summary table."""
    path = Path(file).expanduser()

    try:
        report = lint_file(path)
    except FileNotFoundError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    for issue in report.issues:
        color = "red" if issue.severity == "error" else "yellow"
        console.print(f"[{color}]{escape(str(issue))}[/{color}]", highlight=False)

    fail_on_warnings = strict or load_app_config().lint.fail_on_warnings
    failed = not report.ok or (fail_on_warnings and report.warnings)

    if failed:
        console.print(
            f"[red]✗ {path}: {len(report.errors)} errors, "
            f"{len(report.warnings)} warnings[/red]"
        )
        raise typer.Exit(code=1)

    console.print(f"[green]✓ {path}: structure OK[/green]")
    if report.warnings:
        console.print(f"  [dim]warnings:[/dim] {len(report.warnings)}")


@app.command(name="list")
def list_principles(
    catalog_file: str | None = typer.Option(
        None, "--catalog", "-c", help="Catalog YAML (default: bundled)"
    ),
) -> None:
    """List the five principles in teaching order."""
    catalog = _load_catalog_or_exit(catalog_file)

    table = Table(title="SOLID principles")
    table.add_column("#", style="dim")
    table.add_column("Code")
    table.add_column("Principle", style="bold")
    table.add_column("Benefit")

    for entry in catalog:
        table.add_row(str(entry.position), entry.code, entry.title, entry.benefit)

    console.print(table)


@app.command()
def show(
    principle: str = typer.Argument(..., help="Code or name prefix, e.g. ocp"),
    catalog_file: str | None = typer.Option(
        None, "--catalog", "-c", help="Catalog YAML (default: bundled)"
    ),
) -> None:
    """Show one principle section as Markdown."""
    catalog = _load_catalog_or_exit(catalog_file)

    try:
        entry = catalog[principle]
    except (UnknownPrincipleError, AmbiguousPrincipleError) as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    typer.echo(render_entry(entry, RenderOptions.from_config()))
