"""Runtime state for the workout controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from mapty.core.interfaces import MapHandle
from mapty.workout.model import Coordinates


FormState = Literal[
    "idle",
    "awaiting_map_click",
    "form_open",
    "validating",
    "committed",
    "rejected",
]


@dataclass
class ControllerState:
    form: FormState = "idle"
    map_handle: MapHandle | None = None
    map_ready: bool = False
    pending_coords: Coordinates | None = None
    geolocation_requested: bool = False
    geolocation_denied: bool = False
