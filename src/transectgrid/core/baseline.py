from __future__ import annotations

from transectgrid.core.geodesy import EARTH_RADIUS_KM, destination_point
from transectgrid.models import BaselineResult, Location, Site, Waypoint


def build_baseline(site: Site, radius_km: float = EARTH_RADIUS_KM) -> BaselineResult:
    """
    Start/End waypoints of a site's baseline transect.

    The computed end point is returned on the result; the Site itself is left untouched.
    """
    end_point = destination_point(
        site.lat_start, site.lon_start, site.base_bearing, site.base_distance, radius_km
    )
    start = Waypoint(
        point=site.start,
        name=site.name,
        region=site.region,
        location=Location.START,
        key=f"{site.name} {Location.START.label}",
        transect="baseline",
    )
    end = Waypoint(
        point=end_point,
        name=site.name,
        region=site.region,
        location=Location.END,
        key=f"{site.name} {Location.END.label}",
        transect="baseline",
    )
    return BaselineResult(site=site, end_point=end_point, start=start, end=end)
