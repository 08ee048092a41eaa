"""Form flow used by the web UI: pick a spot, fill the form, submit."""

from __future__ import annotations

from typing import Mapping

from mapty.workout.ledger import Ledger
from mapty.workout.model import ValidationError, Workout, entry_from_workout, parse_entry

EMPTY_FORM: dict[str, object] = {
    "type": "running",
    "distance": None,
    "duration": None,
    "cadence": None,
    "elevation_gain": None,
}


class FormController:
    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger
        self._pending_coords: tuple[float, float] | None = None

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @property
    def form_open(self) -> bool:
        return self._pending_coords is not None or self._ledger.editing is not None

    @property
    def editing(self) -> Workout | None:
        return self._ledger.editing

    def pick_location(self, lat: float, lng: float) -> None:
        """A map click opens a blank form for a new workout at that spot."""
        self._ledger.cancel()
        self._pending_coords = (lat, lng)

    def start_edit(self, workout_id: str) -> dict[str, object] | None:
        """Begin editing and return the form values to show, or None if gone."""
        workout = self._ledger.begin_edit(workout_id)
        if workout is None:
            return None
        self._pending_coords = None
        return form_values(workout)

    def submit(self, values: Mapping[str, object]) -> Workout:
        entry = parse_entry(values)
        if self._ledger.editing is not None:
            return self._ledger.commit(entry)
        if self._pending_coords is None:
            raise ValidationError("Pick a location on the map first")
        workout = self._ledger.create(entry, self._pending_coords)
        self._pending_coords = None
        return workout

    def close(self) -> None:
        self._ledger.cancel()
        self._pending_coords = None

    def delete_all(self) -> None:
        self._ledger.delete_all()
        self._pending_coords = None


def form_values(workout: Workout) -> dict[str, object]:
    entry = entry_from_workout(workout)
    return {
        "type": entry.type,
        "distance": entry.distance,
        "duration": entry.duration,
        "cadence": entry.cadence,
        "elevation_gain": entry.elevation_gain,
    }
