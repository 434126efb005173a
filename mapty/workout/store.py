"""Local persistence for the workout collection."""

from __future__ import annotations

import contextlib
import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from mapty.workout.model import Cycling, Running, Workout, create_workout

WorkoutRecord = dict[str, Any]


class PersistenceError(RuntimeError):
    """Raised when the workout snapshot cannot be read or written."""


def _default_store_path() -> Path:
    return Path.home() / ".mapty" / "workouts.json"


def workout_to_record(workout: Workout) -> WorkoutRecord:
    record: WorkoutRecord = {
        "id": workout.id,
        "kind": workout.kind,
        "created_at": workout.created_at.isoformat(),
        "coords": [workout.coords[0], workout.coords[1]],
        "distance_km": workout.distance_km,
        "duration_min": workout.duration_min,
        "description": workout.description,
    }
    if isinstance(workout, Running):
        record["cadence_spm"] = workout.cadence_spm
        record["pace_min_per_km"] = workout.pace_min_per_km
    elif isinstance(workout, Cycling):
        record["elevation_gain_m"] = workout.elevation_gain_m
        record["speed_km_per_h"] = workout.speed_km_per_h
    return record


def workout_from_record(record: object) -> Workout:
    """Rebuild a typed workout from a stored record.

    The record goes back through the model factory, so type and derived
    metrics come from the raw inputs and stored ``pace_min_per_km`` /
    ``speed_km_per_h`` values are ignored. Raises ``ValidationError`` for
    out-of-range values and ``PersistenceError`` for malformed records.
    """
    if not isinstance(record, dict):
        raise PersistenceError("Workout record must be an object")

    kind = record.get("kind")
    extra_field = {"running": "cadence_spm", "cycling": "elevation_gain_m"}.get(str(kind))
    if extra_field is None:
        raise PersistenceError(f"Unknown workout kind {kind!r}")

    try:
        workout_id = record["id"]
        created_at = datetime.fromisoformat(str(record["created_at"]))
        coords = record["coords"]
        distance_km = record["distance_km"]
        duration_min = record["duration_min"]
        extra = record[extra_field]
    except KeyError as exc:
        raise PersistenceError(f"Workout record missing field {exc}") from exc
    except ValueError as exc:
        raise PersistenceError(f"Invalid created_at: {exc}") from exc

    if not isinstance(workout_id, str) or not workout_id:
        raise PersistenceError(f"Invalid workout id {workout_id!r}")

    return create_workout(
        str(kind),
        coords,
        distance_km,
        duration_min,
        extra,
        workout_id=workout_id,
        created_at=created_at,
    )


class JsonFileStore:
    """Whole-collection snapshot stored as one JSON array."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or _default_store_path()

    def read_snapshot(self) -> list[WorkoutRecord] | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Cannot read {self.path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Invalid JSON in {self.path}: {exc}") from exc
        if data is None:
            return None
        if not isinstance(data, list):
            raise PersistenceError(f"Snapshot in {self.path} must be an array")
        return data

    def write_snapshot(self, records: list[WorkoutRecord]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(records, ensure_ascii=True, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise PersistenceError(f"Cannot write {self.path}: {exc}") from exc

    def clear_snapshot(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot remove {self.path}: {exc}") from exc
