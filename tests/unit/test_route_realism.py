"""Speed model and time-of-day heuristics."""

from __future__ import annotations

from datetime import datetime

import pytest

from safestep.domain.enums import TimeOfDay, TravelMode
from safestep.planner.route_realism import (
    access_time_seconds,
    check_duration,
    context_factor,
    expected_duration_seconds,
    is_night,
    is_rush_hour,
    time_of_day,
)


def test_expected_duration_per_mode():
    assert expected_duration_seconds(5000, TravelMode.WALKING) == pytest.approx(3600)
    assert expected_duration_seconds(15000, TravelMode.CYCLING) == pytest.approx(3600)
    assert expected_duration_seconds(50000, TravelMode.DRIVING) == pytest.approx(3600)


@pytest.mark.parametrize(
    "duration, corrected",
    [
        (1440.0, False),
        (2800.0, False),
        (2900.0, True),
        (450.0, False),
        (420.0, True),
    ],
)
def test_plausibility_bounds(duration, corrected):
    check = check_duration(2000, duration, TravelMode.WALKING)
    assert check.corrected is corrected
    if corrected:
        assert check.duration_seconds == pytest.approx(1440.0)
        assert check.reason
    else:
        assert check.duration_seconds == duration


def test_rush_hour_and_night_windows():
    assert all(is_rush_hour(h) for h in (7, 8, 9, 17, 18, 19))
    assert not any(is_rush_hour(h) for h in (6, 10, 16, 20))
    assert all(is_night(h) for h in (0, 5, 22, 23))
    assert not any(is_night(h) for h in (6, 12, 21))


def test_time_of_day_buckets():
    day = datetime(2026, 3, 2)
    assert time_of_day(day.replace(hour=3)) == TimeOfDay.NIGHT
    assert time_of_day(day.replace(hour=6)) == TimeOfDay.EARLY_MORNING
    assert time_of_day(day.replace(hour=10)) == TimeOfDay.MORNING
    assert time_of_day(day.replace(hour=14)) == TimeOfDay.AFTERNOON
    assert time_of_day(day.replace(hour=18)) == TimeOfDay.EVENING
    assert time_of_day(day.replace(hour=22)) == TimeOfDay.NIGHT


def test_driving_factors():
    assert context_factor(TravelMode.DRIVING, 8, 1000).factor == 1.3
    assert context_factor(TravelMode.DRIVING, 23, 1000).factor == 0.85
    assert context_factor(TravelMode.DRIVING, 13, 1000).factor == 1.0


def test_cycling_factors():
    assert context_factor(TravelMode.CYCLING, 22, 1000).factor == 1.15
    assert context_factor(TravelMode.CYCLING, 18, 1000).factor == 1.1
    assert context_factor(TravelMode.CYCLING, 12, 1000).factor == 1.0


def test_walking_factor_is_capped():
    assert context_factor(TravelMode.WALKING, 12, 1000).factor == 1.0
    assert context_factor(TravelMode.WALKING, 23, 1000).factor == 1.2
    assert context_factor(TravelMode.WALKING, 12, 4000).factor == pytest.approx(1.1)
    assert context_factor(TravelMode.WALKING, 23, 4000).factor == pytest.approx(1.3)


def test_access_time():
    assert access_time_seconds(TravelMode.DRIVING) == 300
    assert access_time_seconds(TravelMode.CYCLING) == 120
    assert access_time_seconds(TravelMode.WALKING) == 0
