"""Terminal CLI entrypoint for Mapty."""

from __future__ import annotations

import argparse
from pathlib import Path

from mapty.ui.formatting import summary_line
from mapty.workout.ledger import Ledger
from mapty.workout.model import WORKOUT_TYPES, ValidationError, parse_entry
from mapty.workout.store import JsonFileStore


def _parse_coords(raw: str) -> tuple[float, float]:
    parts = raw.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError("expected LAT,LNG")
    try:
        return (float(parts[0]), float(parts[1]))
    except ValueError as exc:
        raise argparse.ArgumentTypeError("expected LAT,LNG") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Mapty workout log")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Workouts JSON file (default: ~/.mapty/workouts.json)",
    )
    parser.add_argument("--list", action="store_true", help="List saved workouts")
    parser.add_argument(
        "--add",
        choices=WORKOUT_TYPES,
        default=None,
        help="Log a workout of this type",
    )
    parser.add_argument("--coords", type=_parse_coords, help="Workout location as LAT,LNG")
    parser.add_argument("--distance", help="Distance in km")
    parser.add_argument("--duration", help="Duration in minutes")
    parser.add_argument("--cadence", help="Running cadence in steps/min")
    parser.add_argument("--elevation", help="Cycling elevation gain in meters")
    parser.add_argument("--delete", metavar="ID", help="Delete the workout with this id")
    parser.add_argument("--delete-all", action="store_true", help="Delete every workout")
    parser.add_argument(
        "--ui-web",
        action="store_true",
        help="Launch web UI (NiceGUI) with the map and workout list",
    )
    parser.add_argument("--web-host", default="127.0.0.1", help="Host bind for --ui-web")
    parser.add_argument("--web-port", type=int, default=8088, help="Port for --ui-web")
    parser.add_argument(
        "--center",
        type=_parse_coords,
        default=(51.505, -0.09),
        help="Initial map center for --ui-web as LAT,LNG",
    )
    parser.add_argument("--zoom", type=int, default=13, help="Map zoom level for --ui-web")
    return parser


def run_list(ledger: Ledger) -> int:
    if not len(ledger):
        print("No workouts yet")
        return 0
    for workout in ledger:
        print(summary_line(workout))
    return 0


def run_add(ledger: Ledger, args: argparse.Namespace) -> int:
    if args.coords is None:
        print("--add requires --coords LAT,LNG")
        return 1
    try:
        entry = parse_entry(
            {
                "type": args.add,
                "distance": args.distance,
                "duration": args.duration,
                "cadence": args.cadence,
                "elevation_gain": args.elevation,
            }
        )
        workout = ledger.create(entry, args.coords)
    except ValidationError as exc:
        print(f"Inputs have to be positive numbers: {exc}")
        return 2
    print(summary_line(workout))
    return _report_write(ledger)


def _report_write(ledger: Ledger) -> int:
    if ledger.pending_write:
        print("[STORE] changes were not saved")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    store = JsonFileStore(args.store)

    if args.ui_web:
        from mapty.ui.web_app import run_web_ui

        return run_web_ui(
            store=store,
            host=args.web_host,
            port=args.web_port,
            center=args.center,
            zoom=args.zoom,
        )

    ledger = Ledger.open(store)
    if args.add:
        return run_add(ledger, args)
    if args.delete:
        if not ledger.delete(args.delete):
            print(f"No workout with id {args.delete}")
            return 1
        print(f"Deleted {args.delete}")
        return _report_write(ledger)
    if args.delete_all:
        ledger.delete_all()
        print("Deleted all workouts")
        return _report_write(ledger)
    if args.list:
        return run_list(ledger)

    parser.print_help()
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
