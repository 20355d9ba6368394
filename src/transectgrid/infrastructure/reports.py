from datetime import datetime
from pathlib import Path

from transectgrid.core.geodesy import haversine_km, initial_bearing
from transectgrid.models import GridResult


def _cell(value) -> str:
    """Table-safe text for a Markdown cell."""
    return str(value).replace("|", "\\|")


def generate_markdown_report(result: GridResult, output_path: Path) -> None:
    """Writes a Markdown summary of a generated grid."""
    cfg = result.config
    lines = [
        "# Transect Grid Report",
        "",
        f"Generated: {datetime.now().isoformat(timespec='seconds')}",
        "",
        "## Settings",
        "",
        f"- Earth radius: {cfg.earth_radius_km} km",
        f"- Bearing convention: {cfg.bearing_convention}",
        f"- Sites processed: {len(result.sites)}",
        f"- Baseline lines: {len(result.baseline_lines)}",
        f"- Perpendicular lines: {len(result.perpendicular_lines)}",
        "",
        "## Sites",
        "",
        "| Site | Region | Start (lat, lon) | End (lat, lon) | Length (m) | Heading (°) | Perpendiculars |",
        "|---|---|---|---|---|---|---|",
    ]
    for r in result.sites:
        b = r.baseline
        start = b.site.start
        length_m = haversine_km(start, b.end_point, cfg.earth_radius_km) * 1000.0
        heading = initial_bearing(start, b.end_point)
        lines.append(
            f"| {_cell(b.site.name)} | {_cell(b.site.region)} "
            f"| {start.lat:.7f}, {start.lon:.7f} "
            f"| {b.end_point.lat:.7f}, {b.end_point.lon:.7f} "
            f"| {length_m:.3f} | {heading:.2f} | {len(r.perpendiculars)} |"
        )

    lines += ["", "## Errors", ""]
    if result.errors:
        for err in result.errors:
            where = f"#{err.index}" if err.index >= 0 else "line"
            lines.append(f"- {where} ({err.name}): {err.message}")
    else:
        lines.append("None.")

    Path(output_path).write_text("\n".join(lines) + "\n", encoding="utf-8")
