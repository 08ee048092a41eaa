"""Display helpers shared by the web UI and the CLI."""

from __future__ import annotations

from dataclasses import dataclass

from mapty.workout.model import Cycling, Running, Workout


@dataclass(frozen=True)
class DetailRow:
    icon: str
    value: str
    unit: str


def _fmt_number(value: float, digits: int = 1) -> str:
    return f"{value:.{digits}f}"


def _fmt_plain(value: float) -> str:
    # 5.0 -> "5", 5.25 -> "5.25"
    return f"{value:g}"


def workout_icon(workout: Workout) -> str:
    if isinstance(workout, Running):
        return "🏃‍♂️"
    if isinstance(workout, Cycling):
        return "🚴‍♀️"
    raise TypeError(f"Unsupported workout: {workout!r}")


def marker_label(workout: Workout) -> str:
    return f"{workout_icon(workout)} {workout.description}"


def detail_rows(workout: Workout) -> list[DetailRow]:
    rows = [
        DetailRow(workout_icon(workout), _fmt_plain(workout.distance), "km"),
        DetailRow("⏱", _fmt_plain(workout.duration), "min"),
    ]
    if isinstance(workout, Running):
        rows.append(DetailRow("⚡️", _fmt_number(workout.pace), "min/km"))
        rows.append(DetailRow("🦶🏼", _fmt_plain(workout.cadence), "spm"))
    elif isinstance(workout, Cycling):
        rows.append(DetailRow("⚡️", _fmt_number(workout.speed), "km/h"))
        rows.append(DetailRow("⛰", _fmt_plain(workout.elevation_gain), "m"))
    else:
        raise TypeError(f"Unsupported workout: {workout!r}")
    return rows


def summary_line(workout: Workout) -> str:
    details = "  ".join(f"{row.value} {row.unit}" for row in detail_rows(workout))
    return f"{workout.id}  {workout.description:<22} {details}"
