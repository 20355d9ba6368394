"""
tests/test_grid_engine.py
=========================
End-to-end behavior of generate_grid(): cardinalities, ordering, partial failure,
and per-site concurrency.
"""

import sys
import os
import math
from dataclasses import asdict

import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from transectgrid.core.errors import InvalidSiteInput
from transectgrid.core.geodesy import haversine_km, initial_bearing
from transectgrid.core.grid_engine import generate_grid
from transectgrid.domain.schemas import validate_site
from transectgrid.models import GridConfig, Site

SITE_A = {
    "name": "A",
    "region": "Channel",
    "lat_start": 33.0,
    "lon_start": -119.5,
    "base_bearing": 90.0,
    "base_distance": 0.1,
    "perp_bearing": 90.0,
    "perp_start": 0.003,
    "perp_spacing": 0.006,
    "perp_distance": 0.05,
}


def make_sites(n):
    return [
        {**SITE_A, "name": f"S{i}", "lat_start": 33.0 + 0.01 * i, "base_bearing": 15.0 * i}
        for i in range(n)
    ]


class TestScenario:

    @pytest.fixture(scope="class")
    def result(self):
        return generate_grid([SITE_A])

    def test_no_errors(self, result):
        assert result.ok
        assert result.errors == ()

    def test_single_baseline_line(self, result):
        assert len(result.baseline_lines) == 1
        line = result.baseline_lines[0]
        assert line.key == "A"
        assert len(line.points) == 2
        np.testing.assert_allclose(haversine_km(*line.points), 0.1, atol=1e-6)
        np.testing.assert_allclose(initial_bearing(*line.points), 90.0, atol=1e-6)

    def test_perpendicular_lines(self, result):
        lines = result.perpendicular_lines
        assert len(lines) == 17
        assert [ln.key for ln in lines] == [f"A T{3 + 6 * i}" for i in range(17)]
        for ln in lines:
            assert len(ln.points) == 2
            np.testing.assert_allclose(haversine_km(*ln.points), 0.05, atol=1e-6)
            np.testing.assert_allclose(initial_bearing(*ln.points), 180.0, atol=1e-6)

    def test_waypoint_views(self, result):
        assert len(result.baseline_waypoints()) == 2
        assert len(result.perpendicular_waypoints()) == 34

    def test_end_point_recorded_on_result(self, result):
        site_result = result.sites[0]
        assert site_result.baseline.end_point == result.baseline_lines[0].points[1]


class TestCardinality:

    @pytest.mark.parametrize("n", [1, 3, 7])
    def test_baseline_counts(self, n):
        result = generate_grid(make_sites(n))
        assert len(result.baseline_waypoints()) == 2 * n
        assert len(result.baseline_lines) == n
        assert len(result.perpendicular_lines) == 17 * n

    def test_site_order_preserved(self):
        result = generate_grid(make_sites(5))
        assert [ln.key for ln in result.baseline_lines] == [f"S{i}" for i in range(5)]

    def test_accepts_site_objects(self):
        site = validate_site(SITE_A)
        assert isinstance(site, Site)
        result = generate_grid([site])
        assert len(result.perpendicular_lines) == 17


class TestPartialFailure:

    def test_bad_site_reported_others_processed(self):
        bad = {**SITE_A, "name": "BAD", "perp_start": 0.5}
        records = [make_sites(1)[0], bad, {**SITE_A, "name": "C"}]
        result = generate_grid(records)

        assert [r.site.name for r in result.sites] == ["S0", "C"]
        assert len(result.errors) == 1
        err = result.errors[0]
        assert err.index == 1
        assert err.name == "BAD"
        assert "perp_start" in err.message

    def test_missing_field(self):
        record = {k: v for k, v in SITE_A.items() if k != "perp_spacing"}
        result = generate_grid([record])
        assert result.sites == ()
        assert "perp_spacing" in result.errors[0].message

    def test_negative_distance(self):
        result = generate_grid([{**SITE_A, "base_distance": -1.0}])
        assert "base_distance" in result.errors[0].message

    def test_duplicate_names_rejected(self):
        result = generate_grid([SITE_A, SITE_A])
        assert len(result.sites) == 1
        assert result.errors[0].index == 1
        assert "duplicate" in result.errors[0].message

    def test_unknown_convention_raises(self):
        with pytest.raises(ValueError, match="Unknown bearing convention"):
            generate_grid([SITE_A], GridConfig(bearing_convention="sideways"))


class TestConcurrency:

    def test_parallel_matches_sequential(self):
        sites = make_sites(12)
        serial = generate_grid(sites, GridConfig(workers=1))
        parallel = generate_grid(sites, GridConfig(workers=4))
        assert parallel.sites == serial.sites
        assert parallel.baseline_lines == serial.baseline_lines
        assert parallel.perpendicular_lines == serial.perpendicular_lines

    def test_parallel_errors_keep_input_index(self):
        sites = make_sites(6)
        sites[3] = {**sites[3], "perp_spacing": 0.0}
        result = generate_grid(sites, GridConfig(workers=3))
        assert [e.index for e in result.errors] == [3]
        assert len(result.sites) == 5


class TestValidateSite:

    def test_returns_site(self):
        site = validate_site(SITE_A)
        assert asdict(site) == SITE_A

    def test_nan_region_becomes_empty(self):
        site = validate_site({**SITE_A, "region": math.nan})
        assert site.region == ""

    def test_numeric_name_coerced(self):
        assert validate_site({**SITE_A, "name": 101.0}).name == "101"

    def test_region_optional(self):
        record = {k: v for k, v in SITE_A.items() if k != "region"}
        assert validate_site(record).region == ""

    def test_nan_distance_rejected(self):
        with pytest.raises(InvalidSiteInput, match="perp_distance"):
            validate_site({**SITE_A, "perp_distance": math.nan})

    def test_latitude_out_of_range(self):
        with pytest.raises(InvalidSiteInput, match="lat_start") as exc:
            validate_site({**SITE_A, "lat_start": 95.0})
        assert exc.value.name == "A"

    def test_unsupported_type(self):
        with pytest.raises(InvalidSiteInput, match="Unsupported record type"):
            validate_site(["A", 33.0])


class TestSubMetreSpacing:

    def test_colliding_offsets_reported_not_merged(self):
        tight = {**SITE_A, "name": "T", "base_distance": 0.002, "perp_start": 0.0, "perp_spacing": 0.0005}
        result = generate_grid([tight, {**SITE_A, "name": "B"}])

        assert [r.site.name for r in result.sites] == ["B"]
        assert len(result.errors) == 1
        assert result.errors[0].index == 0
        assert "whole-metre label" in result.errors[0].message
        assert all(len(ln.points) == 2 for ln in result.perpendicular_lines)
        assert len(result.perpendicular_lines) == 17
