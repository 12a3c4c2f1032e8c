"""CLI for vizforge."""

import csv
import io
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from vizforge.models.execution import ExecutionResult
from vizforge.settings import ClientSettings
from vizforge.store import VisualizationStore

app = typer.Typer(
    name="vf",
    help="vizforge - compile visualizations into execution requests",
    no_args_is_help=True,
)
console = Console()

DirOption = Annotated[
    Path, typer.Option("--dir", "-d", help="Visualizations directory")
]


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


def get_store(
    visualizations_dir: Path, settings: ClientSettings | None = None
) -> VisualizationStore:
    return VisualizationStore(visualizations_dir, settings)


def _load_store(visualizations_dir: Path, settings: ClientSettings | None = None):
    try:
        return get_store(visualizations_dir, settings)
    except Exception as e:
        console.print(f"[red]Error loading visualizations: {escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command("list")
def list_visualizations(visualizations_dir: DirOption = Path("./visualizations")) -> None:
    """List loaded visualizations."""
    store = _load_store(visualizations_dir)
    visualizations = store.list_visualizations()

    if not visualizations:
        console.print("[yellow]No visualizations defined[/yellow]")
        return

    table = Table(title="Visualizations")
    table.add_column("Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Measures", justify="right")
    table.add_column("Categories", justify="right")
    table.add_column("Filters", justify="right")

    for vis in visualizations:
        table.add_row(
            escape(vis["name"]),
            vis["type"] or "-",
            str(vis["measures"]),
            str(vis["categories"]),
            str(vis["filters"]),
        )

    console.print(table)


@app.command("compile")
def compile_visualization(
    name: Annotated[str, typer.Argument(help="Visualization name")],
    visualizations_dir: DirOption = Path("./visualizations"),
    remove_date_items: Annotated[
        bool, typer.Option("--remove-date-items", help="Drop date categories and filters")
    ] = False,
) -> None:
    """Show the compiled execution configuration."""
    store = _load_store(visualizations_dir)

    try:
        configuration = store.compile(name, remove_date_items=remove_date_items)
    except Exception as e:
        console.print(f"[red]Compilation error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    payload = json.dumps(configuration.to_payload(), indent=2)
    console.print(Syntax(payload, "json", theme="monokai", word_wrap=True))


@app.command()
def validate(visualizations_dir: DirOption = Path("./visualizations")) -> None:
    """Compile all visualizations and report failures."""
    store = _load_store(visualizations_dir)
    errors = store.validate()

    if errors:
        console.print("[red]Validation failed:[/red]")
        for error in errors:
            console.print(f"  - {escape(error)}")
        raise typer.Exit(1)

    count = len(store.registry.visualizations)
    console.print(f"[green]Validated {count} visualizations successfully![/green]")


@app.command()
def execute(
    name: Annotated[str, typer.Argument(help="Visualization name")],
    project_id: Annotated[str, typer.Option("--project", "-p", help="Project identifier")],
    visualizations_dir: DirOption = Path("./visualizations"),
    base_url: Annotated[
        str | None, typer.Option("--base-url", help="Execution service url")
    ] = None,
    timeout: Annotated[
        float | None, typer.Option("--timeout", help="Request timeout in seconds")
    ] = None,
    extended: Annotated[
        bool, typer.Option("--extended", help="Include internal attribute element ids")
    ] = False,
    output: Annotated[
        str, typer.Option("--output", "-o", help="Output format: table, json, csv")
    ] = "table",
) -> None:
    """Execute a visualization and print its data."""
    overrides = {"base_url": base_url, "timeout": timeout}
    try:
        settings = ClientSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        console.print(f"[red]Invalid settings: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    if not settings.base_url:
        console.print("[red]No execution service url: use --base-url or VIZFORGE_BASE_URL[/red]")
        raise typer.Exit(1)

    store = _load_store(visualizations_dir, settings)

    try:
        result = store.execute(name, project_id, extended=extended)
    except Exception as e:
        console.print(f"[red]Execution error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _output_result(result, output)


def _header_label(header) -> str:
    label = header.title or header.id or header.uri or "?"
    if header.is_po_p:
        label = f"{label} (PoP)"
    return label


def _output_result(result: ExecutionResult, output_format: str) -> None:
    """Output execution result in the specified format."""
    if result.is_empty:
        console.print("[yellow]Result is empty[/yellow]")
        return

    labels = [_header_label(h) for h in result.headers]

    if output_format == "json":
        console.print_json(data=result.model_dump(by_alias=True), default=str)
    elif output_format == "csv":
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(labels)
        writer.writerows([_cell(v) for v in row] for row in result.raw_data)
        console.print(buffer.getvalue(), markup=False, end="")
    else:
        table = Table(title=f"Execution Results ({len(result.raw_data)} rows)")
        for label in labels:
            table.add_column(escape(label))
        for row in result.raw_data:
            table.add_row(*[escape(_cell(v)) for v in row])
        console.print(table)

    for warning in result.warnings:
        console.print(f"[yellow]Warning: {escape(str(warning))}[/yellow]")


def _cell(value) -> str:
    # attribute cells come back as {"id": ..., "name": ...}
    if isinstance(value, dict):
        return str(value.get("name", value.get("id", "")))
    return str(value)


if __name__ == "__main__":
    app()
