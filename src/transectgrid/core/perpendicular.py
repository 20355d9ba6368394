from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from transectgrid.core.bearings import BearingConvention, BearingConventionFactory
from transectgrid.core.errors import InvalidSiteInput
from transectgrid.core.geodesy import EARTH_RADIUS_KM, destination
from transectgrid.core.intervals import sequence
from transectgrid.models import GeoPoint, Location, Site, Waypoint


def position_label(offset_km: float) -> str:
    """Along-baseline offset as whole metres, e.g. 0.003 km -> 'T3'."""
    return f"T{int(round(offset_km * 1000.0))}"


def build_perpendiculars(
    site: Site,
    convention: Optional[BearingConvention] = None,
    radius_km: float = EARTH_RADIUS_KM,
) -> Tuple[Tuple[Waypoint, Waypoint], ...]:
    """
    One (Start, End) waypoint pair per offset along the baseline, offset-ascending.

    Start sits on the baseline at the offset; End is projected perp_distance away
    on the heading composed from base_bearing and perp_bearing.
    """
    if convention is None:
        convention = BearingConventionFactory.create()

    offsets = sequence(site.perp_start, site.base_distance, site.perp_spacing)

    # Vectorized over all offsets of the site
    along_lat, along_lon = destination(
        np.full_like(offsets, site.lat_start),
        np.full_like(offsets, site.lon_start),
        site.base_bearing,
        offsets,
        radius_km,
    )
    heading = convention.compose(site.base_bearing, site.perp_bearing)
    end_lat, end_lon = destination(along_lat, along_lon, heading, site.perp_distance, radius_km)

    positions = [position_label(d) for d in offsets]
    if len(set(positions)) != len(positions):
        raise InvalidSiteInput(
            f"perp_spacing ({site.perp_spacing} km) yields offsets that share a whole-metre label",
            name=site.name,
        )

    pairs = []
    for i, position in enumerate(positions):
        key = f"{site.name} {position}"
        common = dict(name=site.name, region=site.region, key=key, transect="perpendicular", position=position)
        start = Waypoint(point=GeoPoint(float(along_lat[i]), float(along_lon[i])), location=Location.START, **common)
        end = Waypoint(point=GeoPoint(float(end_lat[i]), float(end_lon[i])), location=Location.END, **common)
        pairs.append((start, end))
    return tuple(pairs)
