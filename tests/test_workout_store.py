from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from mapty.workout.model import Cycling, Running, ValidationError, create_cycling, create_running
from mapty.workout.store import (
    JsonFileStore,
    PersistenceError,
    workout_from_record,
    workout_to_record,
)


def test_record_carries_every_field() -> None:
    stamp = datetime(2024, 4, 3, 8, 30, tzinfo=timezone.utc)
    run = create_running((51.5, -0.12), 5.2, 24, 178, workout_id="r1", created_at=stamp)

    record = workout_to_record(run)

    assert record == {
        "id": "r1",
        "kind": "running",
        "created_at": "2024-04-03T08:30:00+00:00",
        "coords": [51.5, -0.12],
        "distance_km": 5.2,
        "duration_min": 24.0,
        "description": "Running on April 3",
        "cadence_spm": 178.0,
        "pace_min_per_km": pytest.approx(24 / 5.2),
    }
    assert json.loads(json.dumps(record))["id"] == "r1"


def test_record_rebuilds_typed_workout() -> None:
    ride = create_cycling((48.85, 2.35), 27, 95, 250)

    restored = workout_from_record(workout_to_record(ride))

    assert isinstance(restored, Cycling)
    assert restored == ride


def test_stored_derived_metrics_are_recomputed() -> None:
    run = create_running((0, 0), 10, 50, 170)
    record = workout_to_record(run)
    record["pace_min_per_km"] = 999.0

    restored = workout_from_record(record)

    assert isinstance(restored, Running)
    assert restored.pace_min_per_km == pytest.approx(5.0)


def test_invalid_stored_values_fail_validation() -> None:
    record = workout_to_record(create_running((0, 0), 10, 50, 170))
    record["distance_km"] = 0

    with pytest.raises(ValidationError):
        workout_from_record(record)


@pytest.mark.parametrize(
    "record",
    [
        "not-a-record",
        {"kind": "swimming"},
        {"kind": "running", "id": "x"},
        {
            "kind": "cycling",
            "id": "x",
            "created_at": "yesterday",
            "coords": [0, 0],
            "distance_km": 1,
            "duration_min": 1,
            "elevation_gain_m": 0,
        },
    ],
)
def test_malformed_records_raise_persistence_error(record) -> None:
    with pytest.raises(PersistenceError):
        workout_from_record(record)


def test_write_read_and_clear_snapshot(tmp_path: Path) -> None:
    store = JsonFileStore(tmp_path / "nested" / "workouts.json")
    records = [
        workout_to_record(create_running((0, 0), 5, 25, 170)),
        workout_to_record(create_cycling((1, 1), 20, 60, 100)),
    ]

    assert store.read_snapshot() is None

    store.write_snapshot(records)
    assert store.read_snapshot() == records

    store.clear_snapshot()
    assert store.read_snapshot() is None
    store.clear_snapshot()


def test_unreadable_snapshot_raises(tmp_path: Path) -> None:
    path = tmp_path / "workouts.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonFileStore(path).read_snapshot()

    path.write_text('{"workouts": []}', encoding="utf-8")
    with pytest.raises(PersistenceError):
        JsonFileStore(path).read_snapshot()


def test_write_failure_raises_persistence_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "workouts.json")

    with pytest.raises(PersistenceError):
        store.write_snapshot([])


@pytest.mark.parametrize("bad_id", ["", None, 42])
def test_record_without_usable_id_is_rejected(bad_id) -> None:
    record = workout_to_record(create_running((0, 0), 5, 25, 170))
    record["id"] = bad_id

    with pytest.raises(PersistenceError):
        workout_from_record(record)


def test_stored_id_survives_repeated_loads() -> None:
    record = workout_to_record(create_cycling((0, 0), 20, 60, 100, workout_id="ride-1"))

    assert workout_from_record(record).id == "ride-1"
    assert workout_from_record(record).id == "ride-1"


def test_failed_write_leaves_no_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "workouts.json"
    store = JsonFileStore(path)

    def _fail_replace(src, dst) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("mapty.workout.store.os.replace", _fail_replace)

    with pytest.raises(PersistenceError):
        store.write_snapshot([])

    assert list(tmp_path.iterdir()) == []
