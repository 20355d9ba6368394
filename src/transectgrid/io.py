from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List

import geopandas as gpd
import pandas as pd
from pyproj import CRS
from shapely.geometry import LineString

from transectgrid.models import Line, Waypoint

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "name",
    "lat_start",
    "lon_start",
    "base_bearing",
    "base_distance",
    "perp_bearing",
    "perp_start",
    "perp_spacing",
    "perp_distance",
]

WAYPOINT_COLUMNS = ["name", "region", "transect", "location", "position", "key", "lat", "lon"]

_DRIVERS = {
    ".shp": "ESRI Shapefile",
    ".gpkg": "GPKG",
    ".geojson": "GeoJSON",
}


def _normalize_column(name) -> str:
    return str(name).strip().lower().replace(" ", "_")


def read_sites(path: str | Path, sheet_name=0) -> List[dict]:
    """Reads the site table (.csv, .xlsx or .xls) and returns one dict per row, in file order."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Site table not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix in (".xlsx", ".xls"):
        df = pd.read_excel(path, sheet_name=sheet_name)
    else:
        raise ValueError(f"Unsupported site table format: {suffix}")

    df.columns = [_normalize_column(c) for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Site table is missing columns: {', '.join(missing)}")

    # Blank trailing spreadsheet rows
    df = df.dropna(how="all")
    logger.info("Read %d site(s) from %s", len(df), path)
    return df.to_dict("records")


def waypoints_to_dataframe(waypoints: Iterable[Waypoint]) -> pd.DataFrame:
    rows = [
        {
            "name": wp.name,
            "region": wp.region,
            "transect": wp.transect,
            "location": wp.location.label,
            "position": wp.position,
            "key": wp.key,
            "lat": wp.lat,
            "lon": wp.lon,
        }
        for wp in waypoints
    ]
    return pd.DataFrame(rows, columns=WAYPOINT_COLUMNS)


def write_waypoints_csv(waypoints: Iterable[Waypoint], path: str | Path) -> None:
    """Saves waypoints as a flat CSV, one row per waypoint."""
    waypoints_to_dataframe(waypoints).to_csv(path, index=False)


def lines_to_geodataframe(lines: Iterable[Line], crs: str = "EPSG:4326") -> gpd.GeoDataFrame:
    lines = list(lines)
    return gpd.GeoDataFrame(
        {
            "key": [ln.key for ln in lines],
            "name": [ln.name for ln in lines],
            "region": [ln.region for ln in lines],
            "n_points": [len(ln.points) for ln in lines],
        },
        geometry=[LineString([(p.lon, p.lat) for p in ln.points]) for ln in lines],
        crs=CRS(crs),
    )


def write_lines(lines: Iterable[Line], path: str | Path, crs: str = "EPSG:4326") -> None:
    """Writes line geometries; the driver follows the file suffix."""
    path = Path(path)
    driver = _DRIVERS.get(path.suffix.lower())
    if driver is None:
        raise ValueError(f"Unsupported line output format: {path.suffix}")
    lines_to_geodataframe(lines, crs).to_file(path, driver=driver)
