import typer
from pathlib import Path
from typing import Optional

from transectgrid.core.grid_engine import generate_grid
from transectgrid.infrastructure.reports import generate_markdown_report
from transectgrid.io import read_sites, write_lines, write_waypoints_csv
from transectgrid.logging_config import configure_logging
from transectgrid.models import GridConfig

__version__ = "0.1.0"

app = typer.Typer(no_args_is_help=True)

_FORMATS = ("shp", "gpkg", "geojson")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@app.callback()
def main() -> None:
    """transectgrid: baseline and perpendicular survey transects from a site table."""
    pass


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(f"transectgrid {__version__}")


@app.command()
def generate(
    sites: Path = typer.Option(..., "--sites", exists=True, readable=True, help="Site table (.csv, .xlsx, .xls)"),
    output_dir: Path = typer.Option(Path("transects"), "--output-dir", help="Directory for waypoint and line outputs."),
    sheet: Optional[str] = typer.Option(None, "--sheet", help="Worksheet name for spreadsheet input."),
    convention: str = typer.Option("add", "--convention", help="Perpendicular bearing convention: [add|subtract]"),
    workers: int = typer.Option(1, "--workers", min=1, help="Sites processed concurrently."),
    fmt: str = typer.Option("shp", "--format", help="Line output format: [shp|gpkg|geojson]"),
    report: bool = typer.Option(True, "--report/--no-report", help="Write a Markdown summary."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """
    Builds baseline and perpendicular transects for every site and writes
    waypoint CSVs plus line geometries (EPSG:4326).
    """
    if log_level.upper() not in _LOG_LEVELS:
        typer.echo(f"Error: unknown log level {log_level!r}, expected one of {', '.join(_LOG_LEVELS)}.", err=True)
        raise typer.Exit(code=2)
    configure_logging(log_level)

    if fmt not in _FORMATS:
        typer.echo(f"Error: unknown format {fmt!r}, expected one of {', '.join(_FORMATS)}.", err=True)
        raise typer.Exit(code=2)

    try:
        records = read_sites(sites, sheet_name=sheet if sheet is not None else 0)
        config = GridConfig(bearing_convention=convention, workers=workers)
        result = generate_grid(records, config)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)

    output_dir.mkdir(parents=True, exist_ok=True)
    write_waypoints_csv(result.baseline_waypoints(), output_dir / "baseline_waypoints.csv")
    write_waypoints_csv(result.perpendicular_waypoints(), output_dir / "perpendicular_waypoints.csv")
    if result.baseline_lines:
        write_lines(result.baseline_lines, output_dir / f"baseline_lines.{fmt}")
    if result.perpendicular_lines:
        write_lines(result.perpendicular_lines, output_dir / f"perpendicular_lines.{fmt}")
    typer.echo(
        f"Wrote {len(result.baseline_lines)} baseline and "
        f"{len(result.perpendicular_lines)} perpendicular lines to {output_dir}"
    )

    if report:
        report_path = output_dir / "grid_report.md"
        generate_markdown_report(result, report_path)
        typer.echo(f"Report generated at: {report_path}")

    for err in result.errors:
        typer.echo(f"Error: {err.message}", err=True)
    if result.errors:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
