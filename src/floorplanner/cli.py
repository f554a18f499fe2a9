"""Command Line Interface for Floor Planner.

This module provides a simple CLI for resolving floor plan documents into
absolute geometry, inspecting them and rendering them to PNG.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .config import POLICY_ADVISORY, POLICY_STRICT, ResolverConfig
from .engine.api import FloorPlanGeometry, build_geometry, errors_by_entity
from .engine.errors import ResolutionError
from .io.parser import load_floorplan, save_geometry
from .visualization.generator import generate_floorplan_image

app = typer.Typer(
    name="floor-planner",
    help="A CLI tool for resolving and rendering relatively anchored floor plans",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_geometry(plan: Path, config: ResolverConfig) -> FloorPlanGeometry:
    floorplan = load_floorplan(str(plan))
    console.print(f"[green]✓[/green] Loaded floor plan from {plan}")
    return build_geometry(floorplan, config)


def _print_errors(errors: Sequence[ResolutionError]) -> None:
    if not errors:
        console.print("[bold green]✓ No resolution errors[/bold green]")
        return

    table = Table(title="Resolution errors")
    table.add_column("Kind", style="cyan")
    table.add_column("Entity", style="yellow")
    table.add_column("Severity", justify="center")
    table.add_column("Message")
    for error in errors:
        severity = "[red]error[/red]" if error.is_error else "[yellow]warning[/yellow]"
        table.add_row(error.kind.value, error.entity_id, severity, error.message)
    console.print(table)


def _fmt(value: float) -> str:
    return f"{value:g}"


@app.command()
def resolve(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to floor plan JSON file"),
    output: Optional[Path] = typer.Option(None, "--out", "-o", help="Path to output geometry JSON file"),
    normalize: bool = typer.Option(False, "--normalize", help="Shift geometry so it starts at (0, 0)"),
    strict_origin: bool = typer.Option(
        False, "--strict-origin", help="Treat a plan with no room on the origin as an error"
    ),
    max_iterations: int = typer.Option(20, "--max-iterations", help="Ceiling on resolution passes"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Resolve a floor plan and report any unresolvable rooms."""
    _setup_logging(verbose)
    try:
        config = ResolverConfig(
            max_iterations=max_iterations,
            origin_policy=POLICY_STRICT if strict_origin else POLICY_ADVISORY,
            normalize=normalize,
        )
        geometry = _load_geometry(plan, config)

        resolution = geometry.resolution
        console.print(
            f"Resolved {len(resolution.rooms)} rooms, {len(resolution.parts)} parts, "
            f"{len(geometry.doors)} doors and {len(geometry.windows)} windows"
        )
        _print_errors(geometry.errors)

        if output is not None:
            save_geometry(geometry, str(output))
            console.print(f"[green]✓[/green] Geometry saved to {output}")

    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not geometry.ok:
        raise typer.Exit(1)


@app.command()
def info(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to floor plan JSON file"),
):
    """Show the resolved positions of every room, part, door and window."""
    _setup_logging(False)
    try:
        geometry = _load_geometry(plan, ResolverConfig())
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    resolution = geometry.resolution
    problems = errors_by_entity(geometry.errors)

    console.print(f"[bold]Floor Plan Information: {plan}[/bold]")
    console.print()

    console.print(f"[cyan]Rooms: {len(geometry.plan.rooms)}[/cyan]")
    table = Table()
    table.add_column("Room ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Attached to", style="magenta")
    table.add_column("Position", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Status", justify="center")

    for room in geometry.plan.rooms:
        resolved = resolution.rooms.get(room.id)
        position = f"({_fmt(resolved.x)}, {_fmt(resolved.y)})" if resolved else "-"
        status = "[green]✓[/green]" if resolved else f"[red]{problems[room.id][0].kind.value}[/red]"
        table.add_row(
            room.id,
            room.label,
            str(room.attach_to),
            position,
            f"{_fmt(room.width)} x {_fmt(room.depth)}",
            status,
        )
    console.print(table)

    if resolution.parts:
        console.print(f"\n[cyan]Parts: {len(resolution.parts)}[/cyan]")
        part_table = Table()
        part_table.add_column("Part", style="cyan")
        part_table.add_column("Attached to", style="magenta")
        part_table.add_column("Position", justify="right")
        part_table.add_column("Size", justify="right")
        for key, part in resolution.parts.items():
            part_table.add_row(
                key,
                str(part.part.attach_to),
                f"({_fmt(part.x)}, {_fmt(part.y)})",
                f"{_fmt(part.part.width)} x {_fmt(part.part.depth)}",
            )
        console.print(part_table)

    placed = list(geometry.doors) + list(geometry.windows)
    if placed:
        console.print(f"\n[cyan]Doors and windows: {len(placed)}[/cyan]")
        wall_table = Table()
        wall_table.add_column("Element", style="cyan")
        wall_table.add_column("Wall", style="green")
        wall_table.add_column("Position", justify="right")
        wall_table.add_column("Rotation", justify="right")
        wall_table.add_column("Width", justify="right")
        for item in placed:
            wall_table.add_row(
                item.label,
                f"{item.owner_key}:{item.wall.value}",
                f"({_fmt(item.placement.x)}, {_fmt(item.placement.y)})",
                _fmt(item.placement.rotation),
                _fmt(item.element.width),
            )
        console.print(wall_table)

    viewport = geometry.viewport
    console.print(
        f"\nViewport: ({_fmt(viewport.x)}, {_fmt(viewport.y)}) "
        f"{_fmt(viewport.width)} x {_fmt(viewport.height)}"
    )
    _print_errors(geometry.errors)


@app.command()
def render(
    plan: Path = typer.Option(..., "--plan", "-p", help="Path to floor plan JSON file"),
    output: Path = typer.Option(..., "--out", "-o", help="Path to output PNG file"),
    normalize: bool = typer.Option(False, "--normalize", help="Shift geometry so it starts at (0, 0)"),
    no_grid: bool = typer.Option(False, "--no-grid", help="Don't draw the background grid"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
):
    """Render a floor plan to a PNG image."""
    _setup_logging(verbose)
    try:
        geometry = _load_geometry(plan, ResolverConfig(normalize=normalize))
    except FileNotFoundError as e:
        console.print(f"[red]Error: File not found - {e}[/red]")
        raise typer.Exit(1)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if geometry.errors:
        _print_errors(geometry.errors)

    if not generate_floorplan_image(geometry, output, show_grid=not no_grid):
        console.print(f"[red]Error: Could not render {output}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Image saved to {output}")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
