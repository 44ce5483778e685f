"""classmap CLI: class-relationship graphs and PlantUML class diagrams."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from classmap import __version__
from classmap.config.options import DiagramOptions, load_options
from classmap.core.errors import ClassmapError
from classmap.core.graph.model import EdgeKind, RelationshipModel

console = Console()

app = typer.Typer(
    name="classmap",
    help="classmap: class relationship graphs and PlantUML class diagrams.",
    no_args_is_help=True,
)

def _fail(message: str) -> NoReturn:
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(code=1)

def _load(options_file: Path) -> DiagramOptions:
    try:
        return load_options(options_file)
    except ClassmapError as exc:
        _fail(str(exc))

def _build_model(options: DiagramOptions) -> RelationshipModel:
    from classmap.core.relations.builder import model_from_options

    try:
        return model_from_options(options)
    except ClassmapError as exc:
        _fail(str(exc))

def _version_callback(value: bool) -> None:
    """Print the version and exit."""
    if value:
        console.print(f"classmap v{__version__}")
        raise typer.Exit()

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    """classmap: class relationship graphs and PlantUML class diagrams."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

@app.command()
def graph(
    options_file: Path = typer.Argument(..., help="JSON options file."),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save the graph; format from the extension (.graphml, .gml, ...)."
    ),
    dimensions: Optional[str] = typer.Option(
        None, "--dimensions", "-d", help="Graph constructor: 2d or 3d (overrides the options file)."
    ),
    no_captions: bool = typer.Option(False, "--no-captions", help="Hide the caption column in class labels."),
) -> None:
    """Build the styled relationship graph."""
    from classmap.core.graph.assembler import assemble_graph

    options = _load(options_file)
    model = _build_model(options)
    result = assemble_graph(
        model,
        show_explanatory_column=options.show_explanatory_column and not no_captions,
        dimensionality=dimensions if dimensions is not None else options.graph_dimensionality,
    )

    console.print(f"[bold]Graph[/bold] ({result['dim']}d)")
    console.print(f"  Classes:  {result.vcount()}")
    console.print(f"  Edges:    {result.ecount()}")
    for kind in EdgeKind:
        count = len(model.edges_of_kind(kind))
        if count > 0:
            console.print(f"    {kind.value}: {count}")

    if output is not None:
        try:
            result.save(str(output))
        except OSError as exc:
            _fail(f"Could not save graph to {output}: {exc}")
        console.print(f"[green]Wrote[/green] {output}")

@app.command()
def plantuml(
    options_file: Path = typer.Argument(..., help="JSON options file."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the text to a file."),
) -> None:
    """Print the PlantUML class diagram text."""
    from classmap.core.plantuml.serializer import plantuml_for_options

    options = _load(options_file)
    text = plantuml_for_options(options)

    if output is None:
        typer.echo(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")

@app.command()
def inspect(
    options_file: Path = typer.Argument(..., help="JSON options file."),
) -> None:
    """Show discovered classes and classified edges."""
    from classmap.core.relations.classifier import EDGE_STYLES

    model = _build_model(_load(options_file))

    classes = Table(title=f"Classes ({len(model.classes)})")
    classes.add_column("Class")
    classes.add_column("Abstract")
    classes.add_column("Abstract methods")
    classes.add_column("Methods")
    for symbol in model.classes:
        classes.add_row(
            escape(symbol.name),
            "yes" if symbol.is_abstract else "",
            escape(", ".join(symbol.abstract_methods)),
            escape(", ".join(symbol.regular_methods)),
        )
    console.print(classes)

    edges = Table(title=f"Edges ({len(model.edges)})")
    edges.add_column("Source")
    edges.add_column("Target")
    edges.add_column("Kind")
    edges.add_column("Arrowhead")
    for edge in model.edges:
        edges.add_row(
            escape(edge.source), escape(edge.target), edge.kind.value, EDGE_STYLES[edge.kind].arrowhead
        )
    console.print(edges)

@app.command()
def render(
    options_file: Path = typer.Argument(..., help="JSON options file."),
    output: Path = typer.Option(..., "--output", "-o", help="File to write the rendered bytes to."),
    fmt: str = typer.Option("svg", "--format", "-f", help="PlantUML output format (svg, png, txt, ...)."),
    server: Optional[str] = typer.Option(None, "--server", help="PlantUML server URL."),
    executable: Optional[str] = typer.Option(None, "--executable", help="Local plantuml executable."),
) -> None:
    """Render the class diagram through PlantUML."""
    from classmap.config.settings import RendererSettings
    from classmap.core.plantuml.renderer import render_plantuml
    from classmap.core.plantuml.serializer import plantuml_for_options

    if server is not None and executable is not None:
        _fail("Use either --server or --executable, not both.")

    try:
        settings = RendererSettings.from_env()
    except ClassmapError as exc:
        _fail(str(exc))
    if server is not None:
        settings = dataclasses.replace(settings, server_url=server, executable=None)
    elif executable is not None:
        settings = dataclasses.replace(settings, executable=executable)

    text = plantuml_for_options(_load(options_file))
    result = render_plantuml(text, fmt, settings)

    if not result.ok:
        console.print(f"[red]Error:[/red] {escape(str(result.error))}")
        console.print(f"  Transport:  {result.request.transport}")
        console.print(f"  Request:    {escape(result.request.target[:200])}")
        if result.status is not None:
            console.print(f"  Status:     {result.status}")
        if result.raw_response:
            preview = result.raw_response[:200].decode("utf-8", errors="replace")
            console.print(f"  Response:   {escape(preview)}")
        raise typer.Exit(code=1)

    output.write_bytes(result.data)
    console.print(f"[green]Wrote[/green] {output} ({len(result.data)} bytes)")
