"""Kind-specific display templates for workouts."""

from __future__ import annotations

from dataclasses import dataclass

from mapty.workout.model import Cycling, Running, Workout


RUNNING_ICON = "🏃‍♂️"
CYCLING_ICON = "🚴‍♀️"


@dataclass(frozen=True)
class DetailRow:
    icon: str
    value: str
    unit: str


def _fmt_number(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def _fmt_plain(value: float) -> str:
    # 5.0 -> "5", 5.2 -> "5.2"
    return f"{value:g}"


def kind_icon(workout: Workout) -> str:
    if isinstance(workout, Running):
        return RUNNING_ICON
    if isinstance(workout, Cycling):
        return CYCLING_ICON
    raise TypeError(f"Unsupported workout type: {type(workout).__name__}")


def popup_text(workout: Workout) -> str:
    return f"{kind_icon(workout)} {workout.description}"


def popup_class(workout: Workout) -> str:
    return f"{workout.kind}-popup"


def detail_rows(workout: Workout) -> list[DetailRow]:
    rows = [
        DetailRow(kind_icon(workout), _fmt_plain(workout.distance_km), "km"),
        DetailRow("⏱", _fmt_plain(workout.duration_min), "min"),
    ]
    if isinstance(workout, Running):
        rows.append(DetailRow("⚡️", _fmt_number(workout.pace_min_per_km), "min/km"))
        rows.append(DetailRow("🦶🏼", _fmt_plain(workout.cadence_spm), "spm"))
    elif isinstance(workout, Cycling):
        rows.append(DetailRow("⚡️", _fmt_number(workout.speed_km_per_h), "km/h"))
        rows.append(DetailRow("⛰", _fmt_plain(workout.elevation_gain_m), "m"))
    else:
        raise TypeError(f"Unsupported workout type: {type(workout).__name__}")
    return rows


def format_line(workout: Workout) -> str:
    details = "  ".join(f"{row.value} {row.unit}" for row in detail_rows(workout))
    return f"{workout.id[:8]}  {workout.description:<22} {details}"
