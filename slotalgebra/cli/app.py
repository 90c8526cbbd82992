"""
Main CLI application using Typer.
"""

import logging
from pathlib import Path
from typing import List, Optional, Annotated

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from ..config import EngineConfig, get_default_config_path
from ..domain.exceptions import SlotAlgebraError
from ..domain.generator import generate_slots
from ..domain.models import Slot
from ..services.availability import AvailabilityService

app = typer.Typer(
    name="slotalgebra",
    help="Generate time slots and apply scheduling rules to them",
    add_completion=False
)

console = Console()


def _load_config(config_file: Optional[Path]) -> EngineConfig:
    """
    Load the given config file, or the default one when it exists.

    An explicitly requested file must exist; a missing default file falls
    back to built-in defaults.
    """
    if config_file is not None:
        return EngineConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return EngineConfig.load_from_yaml(default_path)
    return EngineConfig()


def _parse_instant(value: str, tz: str, label: str):
    try:
        return pendulum.parse(value, tz=tz)
    except Exception as e:
        raise ValueError(f"Could not parse {label} '{value}': {e}") from e


def _slots_table(slots: List[Slot], title: str) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Day", style="bold yellow")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right")

    for idx, slot in enumerate(slots, 1):
        table.add_row(
            str(idx),
            slot.start.format("ddd DD.MM.YYYY"),
            slot.start.format("HH:mm"),
            slot.end.format("HH:mm"),
            str(slot.duration_minutes()),
        )
    return table


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
):
    """Slot algebra command line tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def generate(
    start: Annotated[str, typer.Option("--start", help="Start instant, e.g. 2024-03-18T09:00")],
    end: Annotated[str, typer.Option("--end", help="End instant, e.g. 2024-03-22T18:00")],
    config_file: Annotated[Optional[Path], typer.Option("--config", "-c", help="Path to config file. Defaults to ./slotalgebra.yaml")] = None,
    duration: Annotated[Optional[int], typer.Option("--duration", "-d", help="Slot duration in minutes")] = None,
    stride: Annotated[Optional[int], typer.Option("--stride", "-s", help="Minutes between slot starts")] = None,
    timezone: Annotated[Optional[str], typer.Option("--tz", help="Time zone for --start and --end")] = None,
    no_rules: Annotated[bool, typer.Option("--no-rules", help="Skip the configured rules.")] = False,
):
    """
    Generate slots between two instants and apply the configured rules.

    Examples:

        slotalgebra generate --start 2024-03-18T08:00 --end 2024-03-18T18:00

        slotalgebra generate --start 2024-03-18 --end 2024-03-23 -d 30 -s 15 --tz Europe/Berlin
    """
    try:
        config = _load_config(config_file)
        tz = timezone or config.timezone

        start_instant = _parse_instant(start, tz, "start")
        end_instant = _parse_instant(end, tz, "end")

        slot_duration = pendulum.duration(minutes=duration) if duration is not None else config.generator.get_duration()
        slot_stride = pendulum.duration(minutes=stride) if stride is not None else config.generator.get_stride()

        slots = generate_slots(start_instant, end_instant, slot_duration, slot_stride)

        if not no_rules:
            service = AvailabilityService(config.to_options(), config.build_rules())
            slots = service.apply_rules(slots)

        console.print()
        if not slots:
            console.print("[yellow]⚠ No slots left.[/yellow]")
        else:
            console.print(_slots_table(slots, f"{len(slots)} slot(s) in {tz}"))
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except (ValueError, SlotAlgebraError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def show_config(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config", "-c",
        help="Path to config file"
    )
):
    """
    Show the resolved configuration.
    """
    try:
        config = _load_config(config_file)

        table = Table(
            title="Configuration",
            show_header=True,
            header_style="bold cyan"
        )
        table.add_column("Setting", style="bold yellow")
        table.add_column("Value", style="dim")

        table.add_row("timezone", config.timezone)
        table.add_row("edge_strategy", config.defaults.edge_strategy.value)
        table.add_row("min_duration_minutes", str(config.defaults.min_duration_minutes))
        table.add_row("metadata_strategy", config.defaults.metadata_strategy.value)
        table.add_row("slot duration", f"{config.generator.duration_minutes} min")
        table.add_row("slot stride", f"{config.generator.stride_minutes} min")
        table.add_row("rules", str(len(config.build_rules())))

        console.print()
        console.print(table)
        console.print()

    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
