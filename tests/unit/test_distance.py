"""Distance and quick travel-time estimation tests."""

from __future__ import annotations

import math

import pytest

from safestep.domain.enums import TravelMode
from safestep.planner.distance import (
    deg2rad,
    estimate_travel_time,
    haversine,
    haversine_distance,
    rad2deg,
    round_half_up,
)
from safestep.shared.exceptions import ToolError


def test_same_point_is_zero():
    assert haversine(51.5, -0.12, 51.5, -0.12) == 0.0


def test_one_degree_latitude_is_about_111_km():
    assert haversine(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


def test_london_city_hop_in_metres():
    meters = haversine_distance(51.5074, -0.1278, 51.5155, -0.0922)
    assert 2500 < meters < 2700
    assert meters == pytest.approx(haversine(51.5074, -0.1278, 51.5155, -0.0922) * 1000)


def test_symmetric():
    a = haversine(40.7128, -74.0060, 34.0522, -118.2437)
    b = haversine(34.0522, -118.2437, 40.7128, -74.0060)
    assert a == pytest.approx(b)


def test_nan_propagates():
    assert math.isnan(haversine(float("nan"), 0.0, 1.0, 1.0))


def test_degree_radian_round_trip():
    assert deg2rad(180) == pytest.approx(math.pi)
    assert rad2deg(math.pi / 2) == pytest.approx(90)


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(503.99) == 504
    assert round_half_up(0.49) == 0


def test_display_estimate_uses_conservative_driving_speed():
    assert estimate_travel_time(4000, TravelMode.DRIVING) == 360
    assert estimate_travel_time(1500, "walking") == 1080


def test_display_estimate_rejects_unknown_mode():
    with pytest.raises(ToolError):
        estimate_travel_time(1000, "teleport")
