"""Ordered workout collection with an edit session and write-through persistence."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Union

from mapty.workout.model import (
    RecordFormatError,
    Workout,
    WorkoutEntry,
    build_workout,
    new_workout_id,
    workout_from_record,
    workout_to_record,
)
from mapty.workout.store import WorkoutStore


class EditSessionError(RuntimeError):
    """Raised when an edit is committed without one being started."""


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Editing:
    target_id: str


EditSession = Union[Idle, Editing]


class Ledger:
    """Workouts in insertion order, plus the record currently being edited.

    Callers never touch the list directly. Each mutating call validates its
    input first, so a ``ValidationError`` always leaves the ledger as it was,
    and writes the whole list to the store before returning.
    """

    def __init__(
        self,
        store: WorkoutStore | None = None,
        id_factory: Callable[[], str] = new_workout_id,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._workouts: list[Workout] = []
        self._session: EditSession = Idle()
        self._pending_write = False

    @classmethod
    def open(cls, store: WorkoutStore, **kwargs: Any) -> Ledger:
        ledger = cls(store, **kwargs)
        ledger.load(store.read_all())
        return ledger

    @property
    def workouts(self) -> tuple[Workout, ...]:
        return tuple(self._workouts)

    @property
    def session(self) -> EditSession:
        return self._session

    @property
    def editing(self) -> Workout | None:
        if isinstance(self._session, Editing):
            return self.find(self._session.target_id)
        return None

    @property
    def pending_write(self) -> bool:
        """True when the last write to the store failed."""
        return self._pending_write

    def __len__(self) -> int:
        return len(self._workouts)

    def __iter__(self) -> Iterator[Workout]:
        return iter(tuple(self._workouts))

    def find(self, workout_id: str) -> Workout | None:
        index = self._index_of(workout_id)
        return None if index is None else self._workouts[index]

    def create(self, entry: WorkoutEntry, coords: tuple[float, float]) -> Workout:
        workout = build_workout(entry, coords, workout_id=self._unique_id())
        self._workouts.append(workout)
        self._save()
        return workout

    def begin_edit(self, workout_id: str) -> Workout | None:
        workout = self.find(workout_id)
        if workout is not None:
            self._session = Editing(workout_id)
        return workout

    def commit(self, entry: WorkoutEntry) -> Workout:
        if not isinstance(self._session, Editing):
            raise EditSessionError("No workout is being edited")
        index = self._index_of(self._session.target_id)
        if index is None:
            self._session = Idle()
            raise EditSessionError("The edited workout no longer exists")

        original = self._workouts[index]
        workout = build_workout(
            entry,
            original.coords,
            workout_id=original.id,
            created_at=original.created_at,
        )
        self._workouts[index] = workout
        self._session = Idle()
        self._save()
        return workout

    def cancel(self) -> None:
        self._session = Idle()

    def delete(self, workout_id: str) -> bool:
        index = self._index_of(workout_id)
        if index is None:
            return False
        del self._workouts[index]
        if self._session == Editing(workout_id):
            self._session = Idle()
        self._save()
        return True

    def delete_all(self) -> None:
        self._workouts.clear()
        self._session = Idle()
        self._save()

    def persist(self) -> list[dict[str, Any]]:
        return [workout_to_record(workout) for workout in self._workouts]

    def load(self, payload: object) -> None:
        """Replace the contents with stored records; bad data means an empty ledger."""
        self._workouts = []
        self._session = Idle()
        if not isinstance(payload, list):
            return
        loaded: list[Workout] = []
        seen: set[str] = set()
        for raw in payload:
            try:
                workout = workout_from_record(raw)
            except RecordFormatError:
                return
            if workout.id in seen:
                return
            seen.add(workout.id)
            loaded.append(workout)
        self._workouts = loaded

    def _index_of(self, workout_id: str) -> int | None:
        for i, workout in enumerate(self._workouts):
            if workout.id == workout_id:
                return i
        return None

    def _unique_id(self) -> str:
        workout_id = self._id_factory()
        while self._index_of(workout_id) is not None:
            workout_id = self._id_factory()
        return workout_id

    def _save(self) -> None:
        if self._store is None:
            return
        self._pending_write = not self._store.write_all(self.persist())
