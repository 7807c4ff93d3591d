"""Typer CLI for membrane planning."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from foilplan.application import PlanVesselCommand
from foilplan.application.config import (
    ConfigError,
    PlanConfiguration,
    config_to_geometry,
    config_to_membrane,
    config_to_settings,
    load_config,
)
from foilplan.cli.commands import display_load_error, validate_command
from foilplan.domain import (
    GeometryError,
    MembraneSubtype,
    OptimizationPriority,
    PlannerSettings,
    VesselGeometry,
    WallLayout,
)
from foilplan.infrastructure import ComparisonFormatter
from foilplan.infrastructure.exporters import ExporterRegistry, configuration_to_dict

app = typer.Typer(
    name="foilplan",
    help="Plan pool membrane strips and the rolls to order.",
)

app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log planning decisions to stderr"),
    ] = False,
) -> None:
    """Plan pool membrane strips and the rolls to order."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(config_file: Path) -> PlanConfiguration:
    try:
        return load_config(config_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)


def _domain_inputs(config: PlanConfiguration) -> tuple[VesselGeometry, PlannerSettings]:
    try:
        return config_to_geometry(config), config_to_settings(config)
    except GeometryError as e:
        typer.echo(f"Error: invalid vessel: {e}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"Error: invalid planner settings: {e}", err=True)
        raise typer.Exit(code=1)


def _membrane(
    config: PlanConfiguration,
    subtype: str | None,
    priority: str | None,
) -> tuple[MembraneSubtype, OptimizationPriority, WallLayout]:
    """Membrane policy from the file, with command line overrides."""
    file_subtype, file_priority, layout = config_to_membrane(config)
    try:
        chosen_subtype = MembraneSubtype(subtype) if subtype else file_subtype
        chosen_priority = OptimizationPriority(priority) if priority else file_priority
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    return chosen_subtype, chosen_priority, layout


@app.command()
def plan(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON input file"),
    ],
    priority: Annotated[
        str | None,
        typer.Option("--priority", "-p", help="minimize-waste or minimize-total-material"),
    ] = None,
    subtype: Annotated[
        str | None,
        typer.Option("--subtype", "-s", help="single-color, printed or textured"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the plan to a file instead of stdout"),
    ] = None,
) -> None:
    """Plan strips, rolls and pricing areas for a vessel."""
    if not ExporterRegistry.is_registered(output_format):
        available = ", ".join(ExporterRegistry.available_formats())
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {available}", err=True)
        raise typer.Exit(code=1)

    config = _load(config_file)
    geometry, settings = _domain_inputs(config)
    chosen_subtype, chosen_priority, layout = _membrane(config, subtype, priority)

    result = PlanVesselCommand(settings).execute(
        geometry, chosen_subtype, chosen_priority, layout
    )
    exporter = ExporterRegistry.get(output_format)()
    if output_file is not None:
        try:
            exporter.export(result, output_file)
        except OSError as e:
            typer.echo(f"Export error: {e}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Plan written to {output_file}")
        return

    typer.echo(exporter.export_string(result))


@app.command()
def compare(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON input file"),
    ],
    priority: Annotated[
        str | None,
        typer.Option("--priority", "-p", help="minimize-waste or minimize-total-material"),
    ] = None,
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text or json"),
    ] = "text",
) -> None:
    """Compare narrow-only, wide-only and mixed roll widths."""
    if not ExporterRegistry.is_registered(output_format):
        available = ", ".join(ExporterRegistry.available_formats())
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {available}", err=True)
        raise typer.Exit(code=1)

    config = _load(config_file)
    geometry, settings = _domain_inputs(config)
    chosen_subtype, chosen_priority, layout = _membrane(config, None, priority)

    result = PlanVesselCommand(settings).compare(
        geometry, chosen_subtype, chosen_priority, layout
    )
    if output_format == "json":
        data = {c.strategy: configuration_to_dict(c.configuration) for c in result.comparisons}
        typer.echo(json.dumps(data, indent=2))
        return

    typer.echo(ComparisonFormatter().format(result))


if __name__ == "__main__":
    app()
