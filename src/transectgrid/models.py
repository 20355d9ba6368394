from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Tuple


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees (computed on a sphere)."""
    lat: float
    lon: float


class Location(IntEnum):
    START = 0
    END = 1

    @property
    def label(self) -> str:
        return "Start" if self is Location.START else "End"


@dataclass(frozen=True)
class Site:
    """
    One row of the site table.

    Distances are kilometres, bearings are compass degrees (0=north, clockwise).
    perp_bearing is an offset from the baseline heading, see BearingConvention.
    """
    name: str
    lat_start: float
    lon_start: float
    base_bearing: float
    base_distance: float
    perp_bearing: float
    perp_start: float
    perp_spacing: float
    perp_distance: float
    region: str = ""

    @property
    def start(self) -> GeoPoint:
        return GeoPoint(self.lat_start, self.lon_start)


@dataclass(frozen=True)
class Waypoint:
    point: GeoPoint
    name: str
    region: str
    location: Location
    key: str
    transect: str = "baseline"  # "baseline" | "perpendicular"
    position: Optional[str] = None

    @property
    def lat(self) -> float:
        return self.point.lat

    @property
    def lon(self) -> float:
        return self.point.lon


@dataclass(frozen=True)
class Line:
    key: str
    points: Tuple[GeoPoint, ...]
    name: str = ""
    region: str = ""


@dataclass(frozen=True)
class BaselineResult:
    """Baseline waypoints plus the computed end point, kept apart from the input site."""
    site: Site
    end_point: GeoPoint
    start: Waypoint
    end: Waypoint

    @property
    def waypoints(self) -> Tuple[Waypoint, Waypoint]:
        return (self.start, self.end)


@dataclass(frozen=True)
class SiteResult:
    baseline: BaselineResult
    perpendiculars: Tuple[Tuple[Waypoint, Waypoint], ...]

    @property
    def site(self) -> Site:
        return self.baseline.site


@dataclass(frozen=True)
class SiteError:
    index: int
    name: Optional[str]
    message: str


@dataclass(frozen=True)
class GridConfig:
    """
    Engine configuration.

    bearing_convention:
      - "add": perpendicular heading = base_bearing + perp_bearing (default)
      - "subtract": perpendicular heading = base_bearing - perp_bearing
    workers: >1 fans sites out to a thread pool, results stay in input order.
    """
    earth_radius_km: float = 6371.0
    bearing_convention: str = "add"
    workers: int = 1


@dataclass(frozen=True)
class GridResult:
    sites: Tuple[SiteResult, ...] = ()
    errors: Tuple[SiteError, ...] = ()
    baseline_lines: Tuple[Line, ...] = ()
    perpendicular_lines: Tuple[Line, ...] = ()
    config: GridConfig = field(default_factory=GridConfig)

    def baseline_waypoints(self) -> list:
        return [wp for r in self.sites for wp in r.baseline.waypoints]

    def perpendicular_waypoints(self) -> list:
        return [wp for r in self.sites for pair in r.perpendiculars for wp in pair]

    @property
    def ok(self) -> bool:
        return not self.errors
