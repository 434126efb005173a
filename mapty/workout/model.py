"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import uuid4


WorkoutKind = Literal["running", "cycling"]
Coordinates = tuple[float, float]

WORKOUT_KINDS: tuple[WorkoutKind, ...] = ("running", "cycling")

# Fixed table so descriptions do not depend on the process locale.
MONTHS: tuple[str, ...] = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

INVALID_INPUT_MESSAGE = "Inputs have to be positive numbers!"
COORDS_MESSAGE = "Coordinates must be a [lat, lng] pair of numbers"


class ValidationError(ValueError):
    """Raised when workout inputs are not finite positive numbers."""

    def __init__(self, field: str, message: str = INVALID_INPUT_MESSAGE) -> None:
        super().__init__(f"{message} (invalid {field})")
        self.field = field
        self.message = message


@dataclass(frozen=True)
class Running:
    id: str
    created_at: datetime
    coords: Coordinates
    distance_km: float
    duration_min: float
    cadence_spm: float
    description: str
    kind: Literal["running"] = "running"

    @property
    def pace_min_per_km(self) -> float:
        return self.duration_min / self.distance_km


@dataclass(frozen=True)
class Cycling:
    id: str
    created_at: datetime
    coords: Coordinates
    distance_km: float
    duration_min: float
    elevation_gain_m: float
    description: str
    kind: Literal["cycling"] = "cycling"

    @property
    def speed_km_per_h(self) -> float:
        return self.distance_km / (self.duration_min / 60)


Workout = Running | Cycling


def coerce_number(raw: object) -> float:
    """Convert a raw form value to a float.

    Blank input becomes ``0.0`` and anything unparsable becomes ``nan`` so that
    validation rejects both.
    """
    if raw is None:
        return 0.0
    if isinstance(raw, bool):
        return float("nan")
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return float("nan")


def describe(kind: WorkoutKind, created_at: datetime) -> str:
    return f"{kind[0].upper()}{kind[1:]} on {MONTHS[created_at.month - 1]} {created_at.day}"


def create_running(
    coords: object,
    distance_km: float,
    duration_min: float,
    cadence_spm: float,
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Running:
    point = _parse_coords(coords)
    distance = _require_positive(distance_km, "distance_km")
    duration = _require_positive(duration_min, "duration_min")
    cadence = _require_positive(cadence_spm, "cadence_spm")
    stamp = created_at or _now_local()
    return Running(
        id=workout_id if workout_id is not None else _new_id(),
        created_at=stamp,
        coords=point,
        distance_km=distance,
        duration_min=duration,
        cadence_spm=cadence,
        description=describe("running", stamp),
    )


def create_cycling(
    coords: object,
    distance_km: float,
    duration_min: float,
    elevation_gain_m: float,
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Cycling:
    point = _parse_coords(coords)
    distance = _require_positive(distance_km, "distance_km")
    duration = _require_positive(duration_min, "duration_min")
    # Elevation may be zero or negative (downhill rides); it only has to be a number.
    elevation = _require_finite(elevation_gain_m, "elevation_gain_m")
    stamp = created_at or _now_local()
    return Cycling(
        id=workout_id if workout_id is not None else _new_id(),
        created_at=stamp,
        coords=point,
        distance_km=distance,
        duration_min=duration,
        elevation_gain_m=elevation,
        description=describe("cycling", stamp),
    )


def create_workout(
    kind: str,
    coords: object,
    distance_km: float,
    duration_min: float,
    extra: float,
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Workout:
    """Build a workout of ``kind``; ``extra`` is cadence or elevation gain."""
    if kind == "running":
        return create_running(
            coords,
            distance_km,
            duration_min,
            extra,
            workout_id=workout_id,
            created_at=created_at,
        )
    if kind == "cycling":
        return create_cycling(
            coords,
            distance_km,
            duration_min,
            extra,
            workout_id=workout_id,
            created_at=created_at,
        )
    raise ValidationError("kind", f"Unknown workout type '{kind}'")


def _now_local() -> datetime:
    return datetime.now().astimezone()


def _new_id() -> str:
    return uuid4().hex


def _require_finite(
    raw: object, field_name: str, message: str = INVALID_INPUT_MESSAGE
) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationError(field_name, message)
    value = float(raw)
    if not math.isfinite(value):
        raise ValidationError(field_name, message)
    return value


def _require_positive(raw: object, field_name: str) -> float:
    value = _require_finite(raw, field_name)
    if value <= 0:
        raise ValidationError(field_name)
    return value


def _parse_coords(raw: object) -> Coordinates:
    if not isinstance(raw, (tuple, list)) or len(raw) != 2:
        raise ValidationError("coords", COORDS_MESSAGE)
    lat = _require_finite(raw[0], "latitude", COORDS_MESSAGE)
    lng = _require_finite(raw[1], "longitude", COORDS_MESSAGE)
    return (lat, lng)
