"""Tests for workout classification and distance display."""

import pytest

from gear_gauge.models.gear import Gear
from gear_gauge.schemas.gear import GearType
from gear_gauge.schemas.settings import DistanceUnit
from gear_gauge.schemas.workout import WorkoutType, classify_workout, parse_workout_types
from gear_gauge.services.units import convert_distance, format_distance

from conftest import day


@pytest.mark.parametrize("raw,indoor,expected", [
    ("Run", False, WorkoutType.OUTDOOR_RUN),
    ("Run", True, WorkoutType.INDOOR_RUN),
    ("running", False, WorkoutType.OUTDOOR_RUN),
    ("VirtualRun", False, WorkoutType.INDOOR_RUN),
    ("Treadmill", False, WorkoutType.INDOOR_RUN),
    ("TrailRun", False, WorkoutType.OUTDOOR_RUN),
    ("Walk", False, WorkoutType.OUTDOOR_WALK),
    ("Walk", True, WorkoutType.INDOOR_WALK),
    ("Hike", False, WorkoutType.OUTDOOR_WALK),
    ("Ride", False, WorkoutType.OUTDOOR_CYCLE),
    ("Ride", True, WorkoutType.INDOOR_CYCLE),
    ("VirtualRide", False, WorkoutType.INDOOR_CYCLE),
    ("GravelRide", False, WorkoutType.OUTDOOR_CYCLE),
    ("Swim", False, WorkoutType.OTHER),
    ("Swim", True, WorkoutType.OTHER),
    ("", False, WorkoutType.OTHER),
    (None, False, WorkoutType.OTHER),
])
def test_classify_workout(raw, indoor, expected):
    assert classify_workout(raw, indoor) == expected


def test_parse_workout_types_drops_unknown_values():
    assert parse_workout_types(["outdoorRun", "skiing", "indoorCycle"]) == [
        WorkoutType.OUTDOOR_RUN,
        WorkoutType.INDOOR_CYCLE,
    ]
    assert parse_workout_types(None) == []


def test_gear_type_falls_back_to_shoes():
    gear = Gear(name="Old", type=GearType.BICYCLE, max_distance=100.0, start_date=day(1))
    gear.type_raw = "kayak"
    assert gear.type == GearType.SHOES


def test_gear_wear_figures():
    gear = Gear(name="Kayano", type=GearType.SHOES, current_distance=600.0, max_distance=800.0, start_date=day(1))
    assert gear.distance_remaining == pytest.approx(200.0)
    assert gear.percent_used == 75.0
    assert gear.needs_replacement is False
    gear.current_distance = 820.0
    assert gear.distance_remaining == 0.0
    assert gear.needs_replacement is True


def test_distance_display():
    assert convert_distance(1.609344, DistanceUnit.MILES) == pytest.approx(1.0)
    assert format_distance(1000.0, DistanceUnit.KM) == "1000 km"
    assert format_distance(12.346, DistanceUnit.KM) == "12.35 km"
    assert format_distance(16.09344, DistanceUnit.MILES) == "10 mi"
    assert format_distance(0.0, DistanceUnit.KM) == "0 km"
