"""Workout controller: owns the collection and drives map, view and storage."""

from __future__ import annotations

from loguru import logger

from mapty.core.interfaces import (
    GeolocationProvider,
    MapHandle,
    MapProvider,
    SnapshotStore,
    WorkoutView,
)
from mapty.core.state import ControllerState
from mapty.ui.render import popup_class, popup_text
from mapty.workout.model import (
    Coordinates,
    ValidationError,
    Workout,
    coerce_number,
    create_workout,
)
from mapty.workout.store import PersistenceError, workout_from_record, workout_to_record


DEFAULT_ZOOM_LEVEL = 13


class GeolocationDenied(RuntimeError):
    """Raised when the user's position could not be acquired."""


class WorkoutNotFoundError(KeyError):
    """Raised when no workout has the requested id."""


class WorkoutStateError(RuntimeError):
    """Raised when an interaction arrives in a state that cannot accept it."""


class WorkoutController:
    def __init__(
        self,
        store: SnapshotStore,
        view: WorkoutView,
        map_provider: MapProvider | None = None,
        geolocation: GeolocationProvider | None = None,
        zoom_level: int = DEFAULT_ZOOM_LEVEL,
    ) -> None:
        self._store = store
        self._view = view
        self._map = map_provider
        self._geolocation = geolocation
        self.zoom_level = zoom_level
        self.state = ControllerState()
        self.geolocation_error: GeolocationDenied | None = None
        self._workouts: list[Workout] = []
        self._by_id: dict[str, Workout] = {}
        self._marked_ids: set[str] = set()

    @property
    def workouts(self) -> tuple[Workout, ...]:
        return tuple(self._workouts)

    # Collection

    def add_entry(
        self,
        kind: str,
        coords: Coordinates,
        distance_km: float,
        duration_min: float,
        extra: float,
    ) -> Workout:
        """Validate, append, render and persist a new workout.

        ``ValidationError`` leaves the collection, the view and the store
        untouched. A failed save is reported but the workout stays in memory.
        The collection is saved even when a render collaborator raises.
        """
        workout = create_workout(kind, coords, distance_km, duration_min, extra)
        self._append(workout)
        logger.debug(f"Added {workout.kind} workout {workout.id} at {workout.coords}")

        try:
            self._render_marker(workout)
            self._view.render_list_item(workout)
        finally:
            self._persist_after_add(workout)
        return workout

    def find_by_id(self, workout_id: str) -> Workout:
        try:
            return self._by_id[workout_id]
        except KeyError:
            raise WorkoutNotFoundError(workout_id) from None

    def persist_all(self) -> None:
        self._store.write_snapshot([workout_to_record(w) for w in self._workouts])

    def _persist_after_add(self, workout: Workout) -> None:
        try:
            self.persist_all()
        except PersistenceError as exc:
            logger.warning(f"Workout {workout.id} kept in memory only: {exc}")
            self._view.show_error(f"Could not save workouts: {exc}")

    def load_from_persistence(self) -> list[Workout]:
        """Replace the collection with the stored snapshot.

        A missing or unreadable snapshot leaves the collection empty. Records
        are rebuilt through the model factory; invalid ones are skipped.
        """
        self._workouts = []
        self._by_id = {}
        try:
            records = self._store.read_snapshot()
        except PersistenceError as exc:
            logger.warning(f"Ignoring stored workouts: {exc}")
            return []
        if not records:
            return []

        restored: list[Workout] = []
        for index, record in enumerate(records):
            try:
                workout = workout_from_record(record)
            except (PersistenceError, ValidationError) as exc:
                logger.warning(f"Skipping stored workout #{index + 1}: {exc}")
                continue
            if workout.id in self._by_id:
                logger.warning(f"Skipping duplicate stored workout {workout.id}")
                continue
            self._append(workout)
            restored.append(workout)

        for workout in restored:
            self._view.render_list_item(workout)
            # Markers for restored workouts wait for the map-ready signal;
            # workouts already on the map keep their marker.
            if self.state.map_ready:
                self._render_marker(workout)
        logger.info(f"Restored {len(restored)} workouts")
        return restored

    def reset_all(self) -> None:
        try:
            self._store.clear_snapshot()
        except PersistenceError as exc:
            logger.warning(f"Could not clear stored workouts: {exc}")
            self._view.show_error(f"Could not clear workouts: {exc}")
        self._workouts = []
        self._by_id = {}
        self.state.pending_coords = None
        self.state.form = "awaiting_map_click" if self.state.map_ready else "idle"
        logger.info("All workouts reset")
        self._view.reload()

    # Map lifecycle

    def start(self) -> None:
        self.load_from_persistence()
        if self._geolocation is not None:
            self.locate()

    def locate(self) -> None:
        if self.state.geolocation_denied:
            raise self.geolocation_error or GeolocationDenied("Could not get your position")
        if self._geolocation is None:
            raise WorkoutStateError("No geolocation provider configured")
        if self.state.geolocation_requested:
            return
        self.state.geolocation_requested = True
        self._geolocation.request_current_position(self._on_position, self._on_position_error)

    def _on_position(self, coords: Coordinates) -> None:
        if self._map is None:
            logger.info(f"Position {coords} acquired but no map is configured")
            return
        center = (float(coords[0]), float(coords[1]))
        handle = self._map.initialize(center, self.zoom_level)
        self.state.map_handle = handle
        self._map.on_user_click(handle, self.handle_map_click)
        self._map.on_ready(handle, self._on_map_ready)

    def _on_position_error(self) -> None:
        self.state.geolocation_denied = True
        self.geolocation_error = GeolocationDenied("Could not get your position")
        logger.warning("Geolocation unavailable or denied; map disabled for this session")
        self._view.show_error(str(self.geolocation_error))

    def _on_map_ready(self, handle: MapHandle) -> None:
        self.state.map_handle = handle
        self.state.map_ready = True
        for workout in self._workouts:
            self._render_marker(workout)
        if self.state.form == "idle":
            self.state.form = "awaiting_map_click"
        logger.info(f"Map ready, {len(self._workouts)} markers placed")

    # Form interaction

    def handle_map_click(self, coords: Coordinates) -> None:
        if not self.state.map_ready:
            logger.debug("Map click ignored before map is ready")
            return
        self.state.pending_coords = (float(coords[0]), float(coords[1]))
        self.state.form = "form_open"
        self._view.show_form()

    def submit_form(
        self,
        kind: str,
        distance: object,
        duration: object,
        extra: object,
    ) -> Workout | None:
        if self.state.form != "form_open" or self.state.pending_coords is None:
            raise WorkoutStateError("No workout form is open")

        self.state.form = "validating"
        try:
            workout = self.add_entry(
                kind,
                self.state.pending_coords,
                coerce_number(distance),
                coerce_number(duration),
                coerce_number(extra),
            )
        except ValidationError as exc:
            self.state.form = "rejected"
            logger.info(f"Rejected workout input: {exc}")
            self._view.show_error(exc.message)
            self.state.form = "form_open"
            return None
        except Exception:
            # Collaborator failure: the form stays open with its coordinates.
            self.state.form = "form_open"
            raise

        self.state.form = "committed"
        self.state.pending_coords = None
        self._view.hide_form()
        self.state.form = "awaiting_map_click"
        return workout

    def focus_workout(self, workout_id: str) -> Workout:
        workout = self.find_by_id(workout_id)
        if not self.state.map_ready or self._map is None:
            logger.debug(f"Cannot focus workout {workout_id} before map is ready")
            return workout
        self._map.pan_to(self.state.map_handle, workout.coords, self.zoom_level)
        return workout

    def _append(self, workout: Workout) -> None:
        self._workouts.append(workout)
        self._by_id[workout.id] = workout

    def _render_marker(self, workout: Workout) -> None:
        if not self.state.map_ready or self._map is None:
            return
        if workout.id in self._marked_ids:
            return
        self._map.place_marker(
            self.state.map_handle,
            workout.coords,
            popup_text(workout),
            popup_class(workout),
        )
        self._marked_ids.add(workout.id)
