from __future__ import annotations

from pathlib import Path

import pytest

from mapty.core.controller import WorkoutController
from mapty.workout.store import JsonFileStore
from tests.fakes import FakeGeolocation, FakeMap, FakeView


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "workouts.json"


@pytest.fixture
def view() -> FakeView:
    return FakeView()


@pytest.fixture
def fake_map() -> FakeMap:
    return FakeMap()


@pytest.fixture
def geolocation() -> FakeGeolocation:
    return FakeGeolocation()


@pytest.fixture
def controller(
    store_path: Path,
    view: FakeView,
    fake_map: FakeMap,
    geolocation: FakeGeolocation,
) -> WorkoutController:
    return WorkoutController(
        JsonFileStore(store_path),
        view,
        map_provider=fake_map,
        geolocation=geolocation,
    )
