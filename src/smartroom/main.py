"""CLI interface for smartroom.

This module provides a command-line interface for running the smart room
simulation from YAML configuration files without writing code.

Usage:
    smartroom run
    smartroom run my-room.yaml --duration 10
    smartroom list
    smartroom init "My Room" -o my-room.yaml
    smartroom validate my-room.yaml
    smartroom report out/report.csv
"""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from smartroom.core.config import RoomConfig, default_config, load_config, save_config
from smartroom.core.registry import UnknownComponentError, get_registry
from smartroom.simulation.factory import (
    create_room_from_config,
    ensure_components_registered,
)
from smartroom.simulation.report import SensorSummary, load_csv, summarize
from smartroom.simulation.room import SmartRoom

app = typer.Typer(
    name="smartroom",
    help="Smart room monitoring simulation with simulated sensors and devices.",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()


def _configure_logging(level: str) -> None:
    """Route log records through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.command()
def run(
    config_path: Annotated[
        Path | None,
        typer.Argument(help="Path to YAML configuration file (default: demo room)"),
    ] = None,
    interval_ms: Annotated[
        int | None,
        typer.Option("--interval-ms", "-i", help="Override polling interval in ms"),
    ] = None,
    duration: Annotated[
        float | None,
        typer.Option("--duration", "-d", help="Override run duration in seconds"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Override CSV report path"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Seed for reproducible sensor values"),
    ] = None,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Suppress console output"),
    ] = False,
    log_level: Annotated[
        str,
        typer.Option("--log-level", "-l", help="Logging level"),
    ] = "WARNING",
) -> None:
    """Run the smart room for a fixed duration and export a CSV report."""
    _configure_logging(log_level)

    if config_path is None:
        config = default_config()
    else:
        try:
            config = load_config(config_path)
        except FileNotFoundError:
            console.print(f"[red]Error:[/] Config file not found: {config_path}")
            raise typer.Exit(1) from None
        except Exception as e:
            console.print(f"[red]Error:[/] Invalid configuration: {e}")
            raise typer.Exit(1) from None

    # Apply overrides
    updates: dict[str, object] = {}
    if interval_ms is not None:
        if interval_ms <= 0:
            console.print("[red]Error:[/] --interval-ms must be positive")
            raise typer.Exit(1)
        updates["interval_ms"] = interval_ms
    if duration is not None:
        if duration <= 0:
            console.print("[red]Error:[/] --duration must be positive")
            raise typer.Exit(1)
        updates["duration"] = duration
    if seed is not None:
        updates["seed"] = seed
    if output is not None:
        updates["output"] = config.output.model_copy(
            update={"csv_path": str(output), "enabled": True}
        )
    if updates:
        config = config.model_copy(update=updates)

    try:
        room = create_room_from_config(config)
    except UnknownComponentError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Error:[/] Failed to build room: {e}")
        raise typer.Exit(1) from None

    if not quiet:
        console.print(f"\n[bold]Running:[/] {config.name}")
        console.print(f"  Interval: {config.interval_ms} ms")
        console.print(f"  Duration: {config.duration:.1f} seconds\n")

    with room:
        room.schedule_read_all(config.interval_ms)
        time.sleep(config.duration)
        room.stop()

    report_path: Path | None = None
    if config.output.enabled:
        try:
            report_path = room.export_csv(config.output.csv_path)
        except OSError as e:
            console.print(f"[red]Error:[/] Could not write report: {e}")
            raise typer.Exit(1) from None

    if not quiet:
        _print_results(room, report_path)


@app.command("list")
def list_components() -> None:
    """List registered sensor, device and strategy types."""
    ensure_components_registered()
    registry = get_registry()

    table = Table(title="Available Components")
    table.add_column("Category", style="cyan")
    table.add_column("Type")
    table.add_column("Class")

    for category in ("sensor", "device", "strategy"):
        for component_type in registry.list_types(category):
            cls = registry.get(category, component_type)
            table.add_row(category, component_type, cls.__name__)

    console.print(table)


@app.command()
def init(
    name: Annotated[str, typer.Argument(help="Name for the new room")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path"),
    ] = None,
) -> None:
    """Generate a starter YAML configuration file."""
    config = default_config().model_copy(update={"name": name})

    # Generate filename from name if not specified
    if output is None:
        # Convert name to filename: "My Room" -> "my-room.yaml"
        output = Path(name.lower().replace(" ", "-") + ".yaml")

    save_config(config, output)
    console.print(f"[green]Created:[/] {output}")
    console.print("\nEdit this file to customize your room, then run:")
    console.print(f"  smartroom run {output}")


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to YAML configuration")],
) -> None:
    """Validate a configuration file without running."""
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] File not found: {config_path}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]Invalid:[/] {e}")
        raise typer.Exit(1) from None

    _print_config_summary(config)


@app.command()
def report(
    csv_path: Annotated[Path, typer.Argument(help="CSV report to summarize")],
) -> None:
    """Summarize an exported CSV report per sensor."""
    try:
        readings = load_csv(csv_path)
    except FileNotFoundError:
        console.print(f"[red]Error:[/] File not found: {csv_path}")
        raise typer.Exit(1) from None
    except ValueError as e:
        console.print(f"[red]Error:[/] {e}")
        raise typer.Exit(1) from None

    console.print(f"[bold]{len(readings)}[/] readings in {csv_path}")
    if readings:
        console.print(_summary_table(summarize(readings)))


def _print_config_summary(config: RoomConfig) -> None:
    console.print(f"[green]Valid:[/] {config.name}")
    console.print(f"  Interval: {config.interval_ms} ms")
    console.print(f"  Duration: {config.duration:.1f} seconds")
    console.print(f"  Sensors: {len(config.sensors)}")
    console.print(f"  Devices: {len(config.devices)}")
    console.print(f"  Strategies: {len(config.strategies)}")
    if config.output.enabled:
        console.print(f"  Report: {config.output.csv_path}")


def _summary_table(summaries: list[SensorSummary]) -> Table:
    table = Table(title="Readings per Sensor")
    table.add_column("Sensor", style="cyan")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    table.add_column("Min", justify="right")
    table.add_column("Max", justify="right")
    table.add_column("Mean", justify="right")
    for s in summaries:
        table.add_row(
            s.sensor_id,
            s.measurement_type.value,
            str(s.count),
            f"{s.minimum:.2f}",
            f"{s.maximum:.2f}",
            f"{s.mean:.2f}",
        )
    return table


def _print_results(room: SmartRoom, report_path: Path | None) -> None:
    """Print device states and a per-sensor summary."""
    history = room.history()

    console.print("[bold]Run Complete[/]")
    console.print(f"  Readings recorded: {len(history)}")
    if room.scheduler is not None:
        console.print(f"  Polling ticks: {room.scheduler.tick_count}")
    for device in room.devices.values():
        state = "[green]ON[/]" if device.is_on else "[dim]OFF[/]"
        console.print(f"  {device.name} is {state} ({device.switch_count} switches)")

    if history:
        console.print()
        console.print(_summary_table(summarize(history)))

    if report_path is not None:
        console.print(f"\n[dim]Report exported to {report_path.resolve()}[/]")


def main() -> int:
    """Application entry point.

    Returns:
        Exit code (0 for success).
    """
    try:
        app()
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1


if __name__ == "__main__":
    sys.exit(main())
