"""NiceGUI web UI for Mapty."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger
from nicegui import Client, background_tasks, ui

from mapty.core.controller import (
    DEFAULT_ZOOM_LEVEL,
    WorkoutController,
    WorkoutNotFoundError,
    WorkoutStateError,
)
from mapty.core.interfaces import CoordsCallback, FailureCallback, ReadyCallback
from mapty.ui.render import detail_rows
from mapty.workout.model import Coordinates, Workout
from mapty.workout.store import JsonFileStore

GEOLOCATION_TIMEOUT_SEC = 60.0

# Resolves to [lat, lng] or null; the browser permission prompt decides which.
_GEOLOCATION_JS = """
new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve(null);
    return;
  }
  navigator.geolocation.getCurrentPosition(
    (pos) => resolve([pos.coords.latitude, pos.coords.longitude]),
    () => resolve(null)
  );
})
"""

_STYLE = """
<style>
  :root {
    --mapty-brand-1: #ffb545;
    --mapty-brand-2: #00c46a;
    --mapty-dark-1: #2d3439;
    --mapty-dark-2: #42484d;
    --mapty-light-1: #aaaaaa;
    --mapty-light-2: #ececec;
  }
  body {
    background: var(--mapty-light-2);
    font-family: "Manrope", Arial, sans-serif;
  }
  .mapty-sidebar {
    background: var(--mapty-dark-1);
    color: var(--mapty-light-2);
    width: 32rem;
    height: 100vh;
    overflow-y: auto;
    padding: 2rem 3rem;
  }
  .mapty-map {
    flex: 1;
    height: 100vh;
  }
  .workout {
    background: var(--mapty-dark-2);
    color: var(--mapty-light-2);
    border-radius: 5px;
  }
  .workout--running { border-left: 5px solid var(--mapty-brand-2); }
  .workout--cycling { border-left: 5px solid var(--mapty-brand-1); }
  .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mapty-brand-2); }
  .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid var(--mapty-brand-1); }
</style>
"""


class LeafletMap:
    """Map provider backed by ``ui.leaflet``."""

    def __init__(self, container: ui.element) -> None:
        self._container = container

    def initialize(self, center: Coordinates, zoom: int) -> ui.leaflet:
        with self._container:
            return ui.leaflet(center=center, zoom=zoom).classes("w-full h-full")

    def on_ready(self, handle: ui.leaflet, callback: ReadyCallback) -> None:
        async def _wait() -> None:
            await handle.initialized()
            callback(handle)

        background_tasks.create(_wait(), name="mapty-map-ready")

    def place_marker(
        self,
        handle: ui.leaflet,
        coords: Coordinates,
        popup_text: str,
        style_class: str,
    ) -> None:
        marker = handle.marker(latlng=coords)
        marker.run_method(
            "bindPopup",
            popup_text,
            {
                "maxWidth": 250,
                "minWidth": 100,
                "autoClose": False,
                "closeOnClick": False,
                "className": style_class,
            },
        )
        marker.run_method("openPopup")

    def pan_to(self, handle: ui.leaflet, coords: Coordinates, zoom: int) -> None:
        handle.run_map_method(
            "setView",
            [coords[0], coords[1]],
            zoom,
            {"animate": True, "pan": {"duration": 1}},
        )

    def on_user_click(self, handle: ui.leaflet, callback: CoordsCallback) -> None:
        def _on_click(event: Any) -> None:
            latlng = event.args["latlng"]
            callback((float(latlng["lat"]), float(latlng["lng"])))

        handle.on("map-click", _on_click)


class BrowserGeolocation:
    """One-shot ``navigator.geolocation`` request through the page client."""

    def __init__(self, client: Client, timeout: float = GEOLOCATION_TIMEOUT_SEC) -> None:
        self._client = client
        self._timeout = timeout

    def request_current_position(
        self,
        on_success: CoordsCallback,
        on_failure: FailureCallback,
    ) -> None:
        background_tasks.create(
            self._request(on_success, on_failure),
            name="mapty-geolocation",
        )

    async def _request(self, on_success: CoordsCallback, on_failure: FailureCallback) -> None:
        try:
            result = await self._client.run_javascript(_GEOLOCATION_JS, timeout=self._timeout)
        except TimeoutError:
            logger.warning(f"No geolocation answer after {self._timeout:.0f}s")
            result = None
        if not result:
            on_failure()
            return
        on_success((float(result[0]), float(result[1])))


class WebView:
    """Sidebar with the workout form and the workout list."""

    def __init__(self, root: ui.element) -> None:
        self._root = root
        self._controller: WorkoutController | None = None
        with root:
            ui.label("Mapty").classes("text-3xl font-bold")
            self._hint = ui.label("Click on the map to add a workout").classes("text-sm")
            with ui.card().classes("workout w-full") as self._form:
                with ui.row().classes("w-full items-center"):
                    self._type = ui.select(
                        {"running": "Running", "cycling": "Cycling"},
                        value="running",
                        label="Type",
                    ).classes("w-32")
                    self._distance = ui.number(label="Distance (km)").classes("w-32")
                    self._duration = ui.number(label="Duration (min)").classes("w-32")
                with ui.row().classes("w-full items-center"):
                    self._cadence = ui.number(label="Cadence (step/min)").classes("w-40")
                    self._elevation = ui.number(label="Elev Gain (m)").classes("w-40")
                    self._submit = ui.button("OK")
            self._list = ui.column().classes("w-full gap-3")
            self._reset = ui.button("Reset all", color="negative").props("flat")

        self._elevation.set_visibility(False)
        self._form.set_visibility(False)
        self._type.on_value_change(lambda _: self._toggle_extra_field())
        self._submit.on_click(self._on_submit)
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.on("keydown.enter", self._on_submit)
        self._reset.on_click(self._on_reset)

    def attach(self, controller: WorkoutController) -> None:
        self._controller = controller

    def render_list_item(self, workout: Workout) -> None:
        with self._list:
            with ui.card().classes(
                f"workout workout--{workout.kind} w-full cursor-pointer"
            ) as card:
                ui.label(workout.description).classes("text-lg font-bold")
                with ui.row().classes("gap-4"):
                    for row in detail_rows(workout):
                        ui.label(f"{row.icon} {row.value} {row.unit}")
        # Newest first, right under the form.
        card.move(target_index=0)
        card.on("click", lambda _, workout_id=workout.id: self._on_select(workout_id))

    def show_form(self) -> None:
        self._form.set_visibility(True)
        self._hint.set_visibility(False)
        self._distance.run_method("focus")

    def hide_form(self) -> None:
        for field in (self._distance, self._duration, self._cadence, self._elevation):
            field.value = None
        self._form.set_visibility(False)
        self._hint.set_visibility(True)

    def show_error(self, message: str) -> None:
        with self._root:
            ui.notify(message, color="negative")

    def reload(self) -> None:
        with self._root:
            ui.navigate.reload()

    def _toggle_extra_field(self) -> None:
        running = self._type.value == "running"
        self._cadence.set_visibility(running)
        self._elevation.set_visibility(not running)

    def _on_submit(self) -> None:
        if self._controller is None:
            return
        kind = str(self._type.value)
        extra = self._cadence.value if kind == "running" else self._elevation.value
        try:
            self._controller.submit_form(kind, self._distance.value, self._duration.value, extra)
        except WorkoutStateError as exc:
            self.show_error(str(exc))

    def _on_select(self, workout_id: str) -> None:
        if self._controller is None:
            return
        try:
            self._controller.focus_workout(workout_id)
        except WorkoutNotFoundError:
            logger.warning(f"List item {workout_id} has no matching workout")

    def _on_reset(self) -> None:
        if self._controller is not None:
            self._controller.reset_all()


def run_web_ui(
    *,
    data_file: Path | None = None,
    host: str = "127.0.0.1",
    port: int = 8090,
    zoom_level: int = DEFAULT_ZOOM_LEVEL,
) -> int:
    store = JsonFileStore(data_file)
    logger.info(f"Storing workouts in {store.path}")

    @ui.page("/")
    async def index(client: Client) -> None:
        ui.add_head_html(_STYLE)
        with ui.row().classes("w-full no-wrap gap-0"):
            sidebar = ui.column().classes("mapty-sidebar")
            map_area = ui.column().classes("mapty-map")

        view = WebView(sidebar)
        controller = WorkoutController(
            store,
            view,
            map_provider=LeafletMap(map_area),
            geolocation=BrowserGeolocation(client),
            zoom_level=zoom_level,
        )
        view.attach(controller)

        await client.connected()
        controller.start()

    ui.run(host=host, port=port, reload=False, title="Mapty")
    return 0
