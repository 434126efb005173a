"""Terminal CLI entrypoint for Mapty."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from mapty.core.controller import DEFAULT_ZOOM_LEVEL, WorkoutController
from mapty.ui.render import format_line
from mapty.workout.model import WORKOUT_KINDS, Coordinates, ValidationError, Workout
from mapty.workout.store import JsonFileStore


class ConsoleView:
    """Headless view printing workouts and errors to the terminal."""

    def __init__(self, quiet: bool = False) -> None:
        self._quiet = quiet

    def render_list_item(self, workout: Workout) -> None:
        if not self._quiet:
            print(format_line(workout))

    def show_form(self) -> None:
        pass

    def hide_form(self) -> None:
        pass

    def show_error(self, message: str) -> None:
        print(f"Error: {message}", file=sys.stderr)

    def reload(self) -> None:
        pass


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty workout tracker")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) with the workout map",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8090, help="Port for --ui-web")
    parser.add_argument(
        "--zoom",
        type=int,
        default=DEFAULT_ZOOM_LEVEL,
        help="Map zoom level used for the initial view and list focus",
    )
    parser.add_argument(
        "--data-file",
        type=Path,
        default=None,
        help="Workout snapshot file (default: ~/.mapty/workouts.json)",
    )
    parser.add_argument("--list", action="store_true", help="Print stored workouts")
    parser.add_argument(
        "--add",
        choices=WORKOUT_KINDS,
        default=None,
        help="Record a workout without the map",
    )
    parser.add_argument("--at", default=None, help="Workout location as LAT,LNG")
    parser.add_argument("--distance", type=float, default=None, help="Distance in km")
    parser.add_argument("--duration", type=float, default=None, help="Duration in minutes")
    parser.add_argument("--cadence", type=float, default=None, help="Running cadence (spm)")
    parser.add_argument(
        "--elevation",
        type=float,
        default=None,
        help="Cycling elevation gain in meters",
    )
    parser.add_argument("--reset", action="store_true", help="Delete all stored workouts")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def parse_coords(raw: str) -> Coordinates:
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("--at must be LAT,LNG")
    try:
        return (float(parts[0]), float(parts[1]))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--at must be LAT,LNG") from exc


def run_list(controller: WorkoutController) -> int:
    if not controller.load_from_persistence():
        print("No workouts recorded")
    return 0


def run_add(controller: WorkoutController, args: argparse.Namespace) -> int:
    coords = parse_coords(args.at)
    extra = args.cadence if args.add == "running" else args.elevation
    controller.load_from_persistence()
    try:
        workout = controller.add_entry(
            args.add,
            coords,
            args.distance if args.distance is not None else 0.0,
            args.duration if args.duration is not None else 0.0,
            extra if extra is not None else 0.0,
        )
    except ValidationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    print(format_line(workout))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.ui_web:
        from mapty.ui.web_app import run_web_ui

        return run_web_ui(
            data_file=args.data_file,
            host=args.web_host,
            port=args.web_port,
            zoom_level=args.zoom,
        )

    store = JsonFileStore(args.data_file)

    if args.reset:
        controller = WorkoutController(store, ConsoleView(quiet=True), zoom_level=args.zoom)
        controller.reset_all()
        print("All workouts deleted")
        return 0

    if args.add is not None:
        if args.at is None:
            parser.error("--add requires --at LAT,LNG")
        try:
            parse_coords(args.at)
        except argparse.ArgumentTypeError as exc:
            parser.error(str(exc))
        controller = WorkoutController(store, ConsoleView(quiet=True), zoom_level=args.zoom)
        return run_add(controller, args)

    if args.list:
        return run_list(WorkoutController(store, ConsoleView(), zoom_level=args.zoom))

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
