"""Tests for the shared geodesic distance utilities."""
import math

import pytest

from voyagerisk.utils.geo import (
    format_distance,
    format_nautical_miles,
    haversine_km,
    haversine_nm,
    km_to_nautical_miles,
    route_distance_km,
)


class TestHaversine:
    def test_zero_distance(self):
        assert haversine_km(10.0, 20.0, 10.0, 20.0) == 0.0

    def test_london_paris(self):
        assert haversine_km(51.5074, -0.1278, 48.8566, 2.3522) == pytest.approx(343.5, rel=0.01)

    def test_one_degree_latitude_is_sixty_nm(self):
        assert haversine_nm(0.0, 0.0, 1.0, 0.0) == pytest.approx(60.0, rel=0.001)

    def test_symmetric(self):
        assert haversine_km(7, 50, -60, -170) == pytest.approx(haversine_km(-60, -170, 7, 50))


class TestRouteDistance:
    def test_fewer_than_two_points(self):
        assert route_distance_km([]) == 0.0
        assert route_distance_km([(1.0, 2.0)]) == 0.0

    def test_sum_of_legs(self):
        pts = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        expected = haversine_km(0, 0, 1, 0) + haversine_km(1, 0, 1, 1)
        assert route_distance_km(pts) == pytest.approx(expected)

    def test_accepts_generator(self):
        assert route_distance_km((p for p in [(0.0, 0.0), (0.0, 1.0)])) > 0


class TestFormatting:
    def test_km_to_nm(self):
        assert km_to_nautical_miles(100) == pytest.approx(53.9957)

    @pytest.mark.parametrize("km,expected", [
        (0.5, "500 m"),
        (5.26, "5.3 km"),
        (12345.6, "12,346 km"),
    ])
    def test_format_distance(self, km, expected):
        assert format_distance(km) == expected

    @pytest.mark.parametrize("km,expected", [
        (10, "5.4 nm"),
        (1000, "540 nm"),
        (10000, "5,400 nm"),
    ])
    def test_format_nautical_miles(self, km, expected):
        assert format_nautical_miles(km) == expected


class TestAntipodes:
    @pytest.mark.parametrize("lat,lon", [(-85.7458, -40.8394), (0.0, 0.0), (33.3, -120.5), (89.9, 10.0)])
    def test_antipodal_pair_is_half_circumference(self, lat, lon):
        km = haversine_km(lat, lon, -lat, lon + 180.0)
        assert km == pytest.approx(math.pi * 6371.0, rel=1e-6)

    def test_route_through_antipode_does_not_raise(self):
        assert route_distance_km([(-85.7458, -40.8394), (85.7458, 139.1606)]) > 20000
