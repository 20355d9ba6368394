import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

from transectgrid.core.assembler import build_line, group_waypoints
from transectgrid.core.baseline import build_baseline
from transectgrid.core.bearings import BearingConvention, BearingConventionFactory
from transectgrid.core.errors import InsufficientPointsError, InvalidSiteInput, TransectGridError
from transectgrid.core.perpendicular import build_perpendiculars
from transectgrid.domain.schemas import validate_site
from transectgrid.models import GridConfig, GridResult, Line, Site, SiteError, SiteResult, Waypoint

logger = logging.getLogger(__name__)

SiteInput = Union[Site, Mapping[str, Any]]


def _record_name(record: SiteInput) -> Optional[str]:
    if isinstance(record, Site):
        return record.name
    if isinstance(record, Mapping) and record.get("name") is not None:
        return str(record.get("name"))
    return None


def process_site(
    record: SiteInput, convention: BearingConvention, radius_km: float
) -> SiteResult:
    """Validate one record and build its baseline and perpendicular transects."""
    site = validate_site(record)
    baseline = build_baseline(site, radius_km)
    perpendiculars = build_perpendiculars(site, convention, radius_km)
    logger.debug("Site %s: %d perpendicular transects", site.name, len(perpendiculars))
    return SiteResult(baseline=baseline, perpendiculars=perpendiculars)


def _assemble_lines(
    waypoints: List[Waypoint], group_key: str, label: str, errors: List[SiteError]
) -> Tuple[Line, ...]:
    lines = []
    for key, members in group_waypoints(waypoints, group_key, "location").items():
        try:
            lines.append(build_line(key, members))
        except InsufficientPointsError as e:
            logger.warning("Skipping %s line: %s", label, e)
            errors.append(SiteError(index=-1, name=str(key), message=str(e)))
    return tuple(lines)


def generate_grid(records: Iterable[SiteInput], config: Optional[GridConfig] = None) -> GridResult:
    """
    Baselines, perpendiculars and their lines for every site, in input order.

    A site that fails validation is reported in GridResult.errors and does not stop the others.
    """
    config = config or GridConfig()
    convention = BearingConventionFactory.create(config.bearing_convention)
    records = list(records)

    def run(item):
        index, record = item
        try:
            return process_site(record, convention, config.earth_radius_km)
        except TransectGridError as e:
            logger.warning("Site #%d rejected: %s", index, e)
            return SiteError(index=index, name=_record_name(record), message=str(e))

    items = list(enumerate(records))
    if config.workers > 1 and len(items) > 1:
        # map() yields in submission order regardless of completion order
        with ThreadPoolExecutor(max_workers=config.workers) as pool:
            outcomes = list(pool.map(run, items))
    else:
        outcomes = [run(item) for item in items]

    site_results: List[SiteResult] = []
    errors: List[SiteError] = []
    seen = set()
    for index, outcome in enumerate(outcomes):
        if isinstance(outcome, SiteError):
            errors.append(outcome)
        elif outcome.site.name in seen:
            message = str(InvalidSiteInput("duplicate site name", name=outcome.site.name))
            logger.warning("Site #%d rejected: %s", index, message)
            errors.append(SiteError(index=index, name=outcome.site.name, message=message))
        else:
            seen.add(outcome.site.name)
            site_results.append(outcome)

    baseline_wps = [wp for r in site_results for wp in r.baseline.waypoints]
    perp_wps = [wp for r in site_results for pair in r.perpendiculars for wp in pair]

    baseline_lines = _assemble_lines(baseline_wps, "name", "baseline", errors)
    perpendicular_lines = _assemble_lines(perp_wps, "key", "perpendicular", errors)

    logger.info(
        "Generated %d baseline and %d perpendicular lines from %d site(s); %d error(s)",
        len(baseline_lines), len(perpendicular_lines), len(records), len(errors),
    )
    return GridResult(
        sites=tuple(site_results),
        errors=tuple(errors),
        baseline_lines=baseline_lines,
        perpendicular_lines=perpendicular_lines,
        config=config,
    )
