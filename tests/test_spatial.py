"""Unit tests for H3 spatial binning."""

import math
import random

import pytest

from wanderer.domain.distance import haversine_km
from wanderer.domain.jitter import KM_PER_DEGREE_LAT
from wanderer.domain.spatial import (
    MAX_RING,
    cells_within_radius,
    local_edge_km,
    location_h3_cell,
    ring_size_for_radius,
)

MUMBAI = (19.0760, 72.8777)


def _destination(lat: float, lng: float, km: float, bearing_deg: float):
    """Point *km* away from (lat, lng) along *bearing_deg* on a 6371 km sphere."""
    delta = km / 6371.0
    theta = math.radians(bearing_deg)
    phi1, lam1 = math.radians(lat), math.radians(lng)
    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lam2 = lam1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    lng2 = (math.degrees(lam2) + 540.0) % 360.0 - 180.0
    return math.degrees(phi2), lng2


class TestH3Cell:
    def test_returns_string(self):
        cell = location_h3_cell(18.9220, 72.8347, 7)
        assert isinstance(cell, str)
        assert len(cell) > 0

    def test_nearby_points_same_cell(self):
        """Two points ~15 m apart share a res-7 cell."""
        c1 = location_h3_cell(19.0896, 72.8656, 7)
        c2 = location_h3_cell(19.0897, 72.8657, 7)
        assert c1 == c2

    def test_distant_points_different_cell(self):
        """Mumbai vs Nagpur."""
        assert location_h3_cell(19.0760, 72.8777, 7) != location_h3_cell(21.1458, 79.0882, 7)

    def test_local_edge_is_plausible(self):
        # res-7 edges average ~1.4 km
        assert 0.5 < local_edge_km(location_h3_cell(*MUMBAI)) < 2.0


class TestCellsWithinRadius:
    def test_contains_origin_cell(self):
        cells = cells_within_radius(*MUMBAI, 5.0)
        assert location_h3_cell(*MUMBAI) in cells

    def test_covers_point_inside_radius(self):
        # 4 km due north
        lat = MUMBAI[0] + 4.0 / KM_PER_DEGREE_LAT
        cells = cells_within_radius(*MUMBAI, 5.0)
        assert location_h3_cell(lat, MUMBAI[1]) in cells

    def test_excludes_far_city(self):
        cells = cells_within_radius(*MUMBAI, 5.0)
        assert location_h3_cell(18.5204, 73.8567) not in cells  # Pune

    def test_ring_grows_with_radius(self):
        origin = location_h3_cell(*MUMBAI)
        assert ring_size_for_radius(20.0, origin) > ring_size_for_radius(2.0, origin)

    def test_huge_radius_disables_prefilter(self):
        assert ring_size_for_radius(500.0, location_h3_cell(*MUMBAI)) > MAX_RING
        assert cells_within_radius(*MUMBAI, 500.0) is None

    def test_small_cells_far_north_are_covered_on_every_bearing(self):
        origin = (57.46, -143.66)
        cells = cells_within_radius(*origin, 25.0)
        assert cells is not None
        for bearing in range(0, 360, 10):
            point = _destination(*origin, 24.97, bearing)
            assert location_h3_cell(*point) in cells, bearing

    @pytest.mark.parametrize("radius_km", [25.0, 50.0])
    def test_point_near_the_edge_of_the_radius_is_covered_worldwide(self, radius_km):
        rng = random.Random(int(radius_km))
        filtered = 0
        for _ in range(150):
            lat = math.degrees(math.asin(rng.uniform(-0.97, 0.97)))
            lng = rng.uniform(-180.0, 180.0)
            point = _destination(lat, lng, 0.999 * radius_km, rng.uniform(0.0, 360.0))
            assert haversine_km(lat, lng, *point) <= radius_km

            cells = cells_within_radius(lat, lng, radius_km)
            if cells is None:
                continue
            filtered += 1
            assert location_h3_cell(*point) in cells, (lat, lng, point)
        # the pre-filter must actually be in use for most origins
        if radius_km == 25.0:
            assert filtered >= 145
