"""Tests for the in-memory matching pass (no database)."""

from datetime import timedelta

import pytest

from gear_gauge.models.gear import Gear
from gear_gauge.models.workout import Workout
from gear_gauge.schemas.gear import GearType
from gear_gauge.services.workout_sync import assign_workouts, select_new_workouts, workout_matches_gear

from conftest import day


def _gear(name="Bike", workout_types=("outdoorCycle",), start=None, end=None) -> Gear:
    return Gear(
        name=name,
        type=GearType.BICYCLE,
        max_distance=10000.0,
        start_date=start or day(1),
        end_date=end,
        workout_types=list(workout_types),
    )


def _workout(external_id="w1", activity_type="Ride", start=None, distance=20.0, is_indoor=False) -> Workout:
    start = start or day(5)
    return Workout(
        external_id=external_id,
        activity_type=activity_type,
        is_indoor=is_indoor,
        total_distance=distance,
        start_date=start,
        end_date=start + timedelta(hours=1),
    )


def test_assign_adds_distance_and_links_gear():
    gear = _gear()
    workout = _workout()

    touched = assign_workouts([workout], [gear])

    assert touched == [gear]
    assert gear.current_distance == pytest.approx(20.0)
    assert workout.gear == [gear]
    assert gear.version == 2


def test_workout_already_linked_is_not_counted_twice():
    gear = _gear()
    workout = _workout()
    assign_workouts([workout], [gear])

    touched = assign_workouts([workout], [gear])

    assert touched == []
    assert gear.current_distance == pytest.approx(20.0)
    assert workout.gear == [gear]


def test_multi_assignment_counts_distance_on_every_match():
    bike_a, bike_b = _gear("A"), _gear("B")
    workout = _workout(distance=42.0)

    touched = assign_workouts([workout], [bike_a, bike_b])

    assert touched == [bike_a, bike_b]
    assert bike_a.current_distance == pytest.approx(42.0)
    assert bike_b.current_distance == pytest.approx(42.0)
    assert workout.gear == [bike_a, bike_b]


def test_assignment_preserves_workout_order():
    gear = _gear()
    workouts = [_workout("w1", start=day(3)), _workout("w2", start=day(2)), _workout("w3", start=day(4))]

    assign_workouts(workouts, [gear])

    assert all(w.gear == [gear] for w in workouts)
    assert gear.current_distance == pytest.approx(60.0)


@pytest.mark.parametrize("start,end,workout_start,expected", [
    (day(1), None, day(5), True),
    (day(5), None, day(5), True),  # start boundary is inclusive
    (day(6), None, day(5), False),
    (day(1), day(5) + timedelta(hours=1), day(5), True),  # end boundary is inclusive
    (day(1), day(5) + timedelta(minutes=59), day(5), False),
])
def test_date_window(start, end, workout_start, expected):
    gear = _gear(start=start, end=end)
    assert workout_matches_gear(_workout(start=workout_start), gear) is expected


def test_naive_database_datetimes_compare_as_utc():
    gear = _gear(start=day(1).replace(tzinfo=None))
    assert workout_matches_gear(_workout(start=day(5)), gear) is True


def test_other_workouts_never_match():
    gear = _gear(workout_types=("outdoorRun", "outdoorCycle"))
    assert workout_matches_gear(_workout(activity_type="Swim"), gear) is False


def test_select_new_workouts_skips_known_and_repeats():
    fetched = [_workout("a"), _workout("b"), _workout("a"), _workout("c")]

    new = select_new_workouts(fetched, {"b"})

    assert [w.external_id for w in new] == ["a", "c"]
    assert new[0] is fetched[0]
