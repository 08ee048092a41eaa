"""Workout domain models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Literal, Mapping, Union
from uuid import uuid4

WorkoutType = Literal["running", "cycling"]
WORKOUT_TYPES: tuple[WorkoutType, ...] = ("running", "cycling")

MONTHS = (
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


class ValidationError(ValueError):
    """Raised when workout input is not a set of positive numbers."""


class RecordFormatError(ValueError):
    """Raised when a persisted workout record cannot be read back."""


@dataclass(frozen=True)
class Running:
    type: ClassVar[WorkoutType] = "running"

    id: str
    created_at: datetime
    coords: tuple[float, float]
    distance: float
    duration: float
    description: str
    cadence: float
    pace: float


@dataclass(frozen=True)
class Cycling:
    type: ClassVar[WorkoutType] = "cycling"

    id: str
    created_at: datetime
    coords: tuple[float, float]
    distance: float
    duration: float
    description: str
    elevation_gain: float
    speed: float


Workout = Union[Running, Cycling]


@dataclass(frozen=True)
class WorkoutEntry:
    """User input for one workout, before validation."""

    type: WorkoutType
    distance: float
    duration: float
    cadence: float | None = None
    elevation_gain: float | None = None


def new_workout_id() -> str:
    return uuid4().hex


def now_local() -> datetime:
    return datetime.now().astimezone()


def describe(workout_type: WorkoutType, created_at: datetime) -> str:
    return f"{workout_type.capitalize()} on {MONTHS[created_at.month - 1]} {created_at.day}"


def create_running(
    coords: tuple[float, float],
    distance: float,
    duration: float,
    cadence: float,
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Running:
    lat_lng = _check_coords(coords)
    distance = _check_positive(distance, "distance")
    duration = _check_positive(duration, "duration")
    cadence = _check_positive(cadence, "cadence")
    stamp = created_at or now_local()
    return Running(
        id=workout_id if workout_id is not None else new_workout_id(),
        created_at=stamp,
        coords=lat_lng,
        distance=distance,
        duration=duration,
        description=describe("running", stamp),
        cadence=cadence,
        pace=duration / distance,
    )


def create_cycling(
    coords: tuple[float, float],
    distance: float,
    duration: float,
    elevation_gain: float,
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Cycling:
    lat_lng = _check_coords(coords)
    distance = _check_positive(distance, "distance")
    duration = _check_positive(duration, "duration")
    # Elevation may be zero or negative (downhill rides).
    elevation_gain = _check_finite(elevation_gain, "elevation_gain")
    stamp = created_at or now_local()
    return Cycling(
        id=workout_id if workout_id is not None else new_workout_id(),
        created_at=stamp,
        coords=lat_lng,
        distance=distance,
        duration=duration,
        description=describe("cycling", stamp),
        elevation_gain=elevation_gain,
        speed=distance / (duration / 60),
    )


def build_workout(
    entry: WorkoutEntry,
    coords: tuple[float, float],
    *,
    workout_id: str | None = None,
    created_at: datetime | None = None,
) -> Workout:
    """Build the variant named by ``entry.type``.

    A missing variant field is reported the same way as a non-numeric one,
    so callers only ever need to handle ``ValidationError``.
    """
    if entry.type == "running":
        return create_running(
            coords,
            entry.distance,
            entry.duration,
            _require(entry.cadence, "cadence"),
            workout_id=workout_id,
            created_at=created_at,
        )
    if entry.type == "cycling":
        return create_cycling(
            coords,
            entry.distance,
            entry.duration,
            _require(entry.elevation_gain, "elevation_gain"),
            workout_id=workout_id,
            created_at=created_at,
        )
    raise ValidationError(f"Unknown workout type '{entry.type}'")


def parse_entry(values: Mapping[str, object]) -> WorkoutEntry:
    """Read raw form values (numbers, numeric strings or blanks) into an entry."""
    raw_type = str(values.get("type") or "running").strip().lower()
    if raw_type not in WORKOUT_TYPES:
        raise ValidationError(f"Unknown workout type '{raw_type}'")
    workout_type: WorkoutType = "running" if raw_type == "running" else "cycling"

    distance = _parse_number(values.get("distance"), "distance")
    duration = _parse_number(values.get("duration"), "duration")
    if workout_type == "running":
        return WorkoutEntry(
            type=workout_type,
            distance=distance,
            duration=duration,
            cadence=_parse_number(values.get("cadence"), "cadence"),
        )
    elevation_raw = values.get("elevation_gain")
    if _is_blank(elevation_raw):
        elevation_raw = 0
    return WorkoutEntry(
        type=workout_type,
        distance=distance,
        duration=duration,
        elevation_gain=_parse_number(elevation_raw, "elevation_gain"),
    )


def entry_from_workout(workout: Workout) -> WorkoutEntry:
    if isinstance(workout, Running):
        return WorkoutEntry(
            type="running",
            distance=workout.distance,
            duration=workout.duration,
            cadence=workout.cadence,
        )
    if isinstance(workout, Cycling):
        return WorkoutEntry(
            type="cycling",
            distance=workout.distance,
            duration=workout.duration,
            elevation_gain=workout.elevation_gain,
        )
    raise TypeError(f"Unsupported workout: {workout!r}")


def workout_to_record(workout: Workout) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id": workout.id,
        "createdAt": workout.created_at.isoformat(),
        "coords": [workout.coords[0], workout.coords[1]],
        "distance": workout.distance,
        "duration": workout.duration,
        "type": workout.type,
        "description": workout.description,
    }
    if isinstance(workout, Running):
        record["cadence"] = workout.cadence
        record["pace"] = workout.pace
    elif isinstance(workout, Cycling):
        record["elevationGain"] = workout.elevation_gain
        record["speed"] = workout.speed
    else:
        raise TypeError(f"Unsupported workout: {workout!r}")
    return record


def workout_from_record(record: object) -> Workout:
    """Rebuild a workout from its stored form without re-deriving anything."""
    if not isinstance(record, dict):
        raise RecordFormatError("Workout record must be an object")
    try:
        coords = record["coords"]
        if not isinstance(coords, (list, tuple)) or len(coords) != 2:
            raise RecordFormatError("Workout field 'coords' must be a [lat, lng] pair")
        common = {
            "id": _record_id(record["id"]),
            "created_at": datetime.fromisoformat(str(record["createdAt"])),
            "coords": (float(coords[0]), float(coords[1])),
            "distance": float(record["distance"]),
            "duration": float(record["duration"]),
            "description": str(record["description"]),
        }
        kind = record["type"]
        if kind == "running":
            return Running(
                **common,
                cadence=float(record["cadence"]),
                pace=float(record["pace"]),
            )
        if kind == "cycling":
            return Cycling(
                **common,
                elevation_gain=float(record["elevationGain"]),
                speed=float(record["speed"]),
            )
    except RecordFormatError:
        raise
    except KeyError as exc:
        raise RecordFormatError(f"Workout record is missing {exc}") from exc
    except (TypeError, ValueError, OverflowError) as exc:
        raise RecordFormatError(f"Invalid workout record: {exc}") from exc
    raise RecordFormatError(f"Unknown workout type '{kind}'")


def _record_id(raw: object) -> str:
    if not isinstance(raw, str) or not raw:
        raise RecordFormatError("Workout field 'id' must be a non-empty string")
    return raw


def _check_coords(coords: object) -> tuple[float, float]:
    if not isinstance(coords, (list, tuple)) or len(coords) != 2:
        raise ValidationError("coords must be a (lat, lng) pair")
    return (_check_finite(coords[0], "lat"), _check_finite(coords[1], "lng"))


def _check_finite(value: object, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except OverflowError as exc:
        raise ValidationError(f"{field_name} must be a finite number") from exc
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def _check_positive(value: object, field_name: str) -> float:
    number = _check_finite(value, field_name)
    if number <= 0:
        raise ValidationError(f"{field_name} must be > 0")
    return number


def _require(value: float | None, field_name: str) -> float:
    if value is None:
        raise ValidationError(f"{field_name} is required")
    return value


def _is_blank(raw: object) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def _parse_number(raw: object, field_name: str) -> float:
    if _is_blank(raw):
        raise ValidationError(f"{field_name} is required")
    if isinstance(raw, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(raw, (int, float)):
        return _check_finite(raw, field_name)
    try:
        number = float(str(raw).strip())
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be a number") from exc
    return _check_finite(number, field_name)
