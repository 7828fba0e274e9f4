"""Tests for great-circle distance."""

import math

import pytest

from geo.distance import great_circle_m
from shared.constants import EARTH_RADIUS_M


class TestGreatCircle:
    def test_same_point_is_zero(self):
        assert great_circle_m(60.17, 24.94, 60.17, 24.94) == pytest.approx(0.0, abs=1e-6)

    def test_one_degree_of_latitude(self):
        """One degree along a meridian is R * pi / 180 on the sphere."""
        expected = EARTH_RADIUS_M * math.pi / 180.0
        assert great_circle_m(10.0, 20.0, 11.0, 20.0) == pytest.approx(expected, rel=1e-6)

    def test_symmetric(self):
        d1 = great_circle_m(60.17, 24.94, 59.33, 18.06)
        d2 = great_circle_m(59.33, 18.06, 60.17, 24.94)
        assert d1 == pytest.approx(d2)
        # Helsinki - Stockholm is roughly 400 km
        assert 350_000 < d1 < 450_000
