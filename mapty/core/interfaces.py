"""Collaborators the workout controller drives."""

from __future__ import annotations

from typing import Any, Callable, Protocol

from mapty.workout.model import Coordinates, Workout
from mapty.workout.store import WorkoutRecord


MapHandle = Any
CoordsCallback = Callable[[Coordinates], None]
ReadyCallback = Callable[[MapHandle], None]
FailureCallback = Callable[[], None]


class MapProvider(Protocol):
    def initialize(self, center: Coordinates, zoom: int) -> MapHandle: ...

    def on_ready(self, handle: MapHandle, callback: ReadyCallback) -> None: ...

    def place_marker(
        self,
        handle: MapHandle,
        coords: Coordinates,
        popup_text: str,
        style_class: str,
    ) -> None: ...

    def pan_to(self, handle: MapHandle, coords: Coordinates, zoom: int) -> None: ...

    def on_user_click(self, handle: MapHandle, callback: CoordsCallback) -> None: ...


class GeolocationProvider(Protocol):
    def request_current_position(
        self,
        on_success: CoordsCallback,
        on_failure: FailureCallback,
    ) -> None: ...


class WorkoutView(Protocol):
    def render_list_item(self, workout: Workout) -> None: ...

    def show_form(self) -> None: ...

    def hide_form(self) -> None: ...

    def show_error(self, message: str) -> None: ...

    def reload(self) -> None: ...


class SnapshotStore(Protocol):
    def read_snapshot(self) -> list[WorkoutRecord] | None: ...

    def write_snapshot(self, records: list[WorkoutRecord]) -> None: ...

    def clear_snapshot(self) -> None: ...
