from __future__ import annotations

import math
from datetime import datetime, timezone

import pytest

from mapty.workout.model import (
    Cycling,
    Running,
    ValidationError,
    coerce_number,
    create_cycling,
    create_running,
    create_workout,
    describe,
)


def test_running_pace_is_duration_over_distance() -> None:
    run = create_running([51.5, -0.12], 5.2, 24, 178)

    assert isinstance(run, Running)
    assert run.kind == "running"
    assert run.coords == (51.5, -0.12)
    assert run.pace_min_per_km == pytest.approx(24 / 5.2)
    assert run.pace_min_per_km == pytest.approx(4.615, abs=1e-3)


def test_cycling_speed_is_km_per_hour() -> None:
    ride = create_cycling((51.5, -0.12), 27, 95, 250)

    assert isinstance(ride, Cycling)
    assert ride.speed_km_per_h == pytest.approx(27 / (95 / 60))
    assert ride.speed_km_per_h == pytest.approx(17.05, abs=1e-2)


def test_description_uses_fixed_month_names() -> None:
    stamp = datetime(2024, 4, 3, 8, 30, tzinfo=timezone.utc)

    assert describe("running", stamp) == "Running on April 3"
    assert describe("cycling", stamp) == "Cycling on April 3"

    run = create_running((0, 0), 1, 5, 160, created_at=stamp)
    assert run.description == "Running on April 3"
    assert run.created_at == stamp


def test_description_defaults_to_today() -> None:
    run = create_running((0, 0), 1, 5, 160)
    today = datetime.now().astimezone()

    assert run.description.startswith("Running on ")
    assert run.description.endswith(f" {today.day}")
    assert run.created_at.tzinfo is not None


@pytest.mark.parametrize(
    ("distance", "duration", "cadence", "field"),
    [
        (0, 24, 178, "distance_km"),
        (-1, 24, 178, "distance_km"),
        (5, 0, 178, "duration_min"),
        (5, float("inf"), 178, "duration_min"),
        (5, 24, 0, "cadence_spm"),
        (5, 24, float("nan"), "cadence_spm"),
        ("5", 24, 178, "distance_km"),
    ],
)
def test_running_rejects_non_positive_or_non_finite(distance, duration, cadence, field) -> None:
    with pytest.raises(ValidationError) as exc_info:
        create_running((0, 0), distance, duration, cadence)

    assert exc_info.value.field == field
    assert exc_info.value.message == "Inputs have to be positive numbers!"


def test_cycling_accepts_any_finite_elevation() -> None:
    assert create_cycling((0, 0), 10, 30, 0).elevation_gain_m == 0
    assert create_cycling((0, 0), 10, 30, -40).elevation_gain_m == -40

    with pytest.raises(ValidationError):
        create_cycling((0, 0), 10, 30, float("nan"))
    with pytest.raises(ValidationError):
        create_cycling((0, 0), 0, 30, 100)


def test_invalid_coordinates_are_rejected() -> None:
    with pytest.raises(ValidationError):
        create_running((51.5,), 5, 24, 178)
    with pytest.raises(ValidationError):
        create_running((float("nan"), 0), 5, 24, 178)


def test_create_workout_dispatches_on_kind() -> None:
    assert isinstance(create_workout("running", (0, 0), 5, 25, 170), Running)
    assert isinstance(create_workout("cycling", (0, 0), 5, 25, 10), Cycling)

    with pytest.raises(ValidationError):
        create_workout("swimming", (0, 0), 5, 25, 10)


def test_ids_are_unique_and_preserved_when_given() -> None:
    ids = {create_running((0, 0), 1, 5, 160).id for _ in range(50)}
    assert len(ids) == 50

    run = create_running((0, 0), 1, 5, 160, workout_id="abc123")
    assert run.id == "abc123"


def test_workouts_are_immutable() -> None:
    run = create_running((0, 0), 1, 5, 160)
    with pytest.raises(AttributeError):
        run.distance_km = 2  # type: ignore[misc]


def test_coerce_number() -> None:
    assert coerce_number("5.2") == 5.2
    assert coerce_number(" 24 ") == 24.0
    assert coerce_number(178) == 178.0
    assert coerce_number(None) == 0.0
    assert coerce_number("") == 0.0
    assert math.isnan(coerce_number("abc"))
