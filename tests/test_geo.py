"""Haversine distance and proximity classification."""

import random
from types import SimpleNamespace

import pytest

from OSAKEL.ProxyLocation.geo import (
    classify_by_distance,
    filter_within_range,
    haversine,
    shop_coordinates,
)

SEKIME = (34.7024, 135.5538)
TOKYO_STATION = (35.6812, 139.7671)


class TestHaversine:
    def test_zero_for_same_point(self):
        assert haversine(*SEKIME, *SEKIME) == 0

    def test_symmetric(self):
        rng = random.Random(7)
        for _ in range(200):
            a = (rng.uniform(-90, 90), rng.uniform(-180, 180))
            b = (rng.uniform(-90, 90), rng.uniform(-180, 180))
            assert haversine(*a, *b) == pytest.approx(haversine(*b, *a))

    def test_known_distance_tokyo_osaka(self):
        # Tokyo Station to Sekime is just under 400 km as the crow flies
        assert haversine(*TOKYO_STATION, *SEKIME) == pytest.approx(398, abs=3)

    def test_one_degree_of_latitude(self):
        assert haversine(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)

    def test_antipodes(self):
        assert haversine(0, 0, 0, 180) == pytest.approx(3.141592653589793 * 6371)


class TestShopCoordinates:
    def test_plain_fields(self):
        assert shop_coordinates({"lat": 34.7, "lng": 135.5}) == (34.7, 135.5)

    def test_geo_point_location(self):
        point = SimpleNamespace(latitude=34.7, longitude=135.5)
        assert shop_coordinates({"location": point}) == (34.7, 135.5)

    def test_missing(self):
        assert shop_coordinates({"name": "no coords"}) is None
        assert shop_coordinates({"lat": 34.7}) is None


class TestProximity:
    def _shops(self):
        return [
            {"id": "bar", "name": "Bar", "lat": 34.7024, "lng": 135.5538},
            {"id": "beer", "name": "Beer", "lat": 34.7045, "lng": 135.5559},
            {"id": "tokyo", "name": "Tokyo", "lat": 35.6812, "lng": 139.7671},
            {"id": "nowhere", "name": "No coordinates"},
        ]

    def test_filter_returns_exactly_matches_within_threshold(self):
        shops = self._shops()
        for threshold in (0.0, 0.1, 0.5, 5.0, 500.0):
            ids = {m.id for m in filter_within_range(SEKIME, shops, threshold)}
            expected = {
                s["id"] for s in shops
                if "lat" in s and haversine(*SEKIME, s["lat"], s["lng"]) <= threshold
            }
            assert ids == expected

    def test_boundary_distance_is_included(self):
        shop = {"id": "beer", "name": "Beer", "lat": 34.7045, "lng": 135.5559}
        exact = haversine(*SEKIME, shop["lat"], shop["lng"])
        assert [m.id for m in filter_within_range(SEKIME, [shop], exact)] == ["beer"]
        assert filter_within_range(SEKIME, [shop], exact * 0.999) == []

    def test_classify_marks_every_candidate_with_coordinates(self):
        matches = classify_by_distance(SEKIME, self._shops(), 5.0)
        assert [(m.id, m.within_range) for m in matches] == [
            ("bar", True),
            ("beer", True),
            ("tokyo", False),
        ]
        assert matches[0].distance_km == 0
