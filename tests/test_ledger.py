from __future__ import annotations

import pytest

from mapty.workout.ledger import Editing, EditSessionError, Idle, Ledger
from mapty.workout.model import Cycling, Running, ValidationError, WorkoutEntry
from mapty.workout.store import MemoryStore

RUN = WorkoutEntry(type="running", distance=5, duration=25, cadence=178)
RIDE = WorkoutEntry(type="cycling", distance=10, duration=30, elevation_gain=150)


def _ledger() -> tuple[Ledger, MemoryStore]:
    store = MemoryStore()
    return Ledger(store), store


def test_create_appends_and_persists() -> None:
    ledger, store = _ledger()

    run = ledger.create(RUN, (10, 10))
    ride = ledger.create(RIDE, (11, 11))

    assert ledger.workouts == (run, ride)
    assert isinstance(run, Running) and run.pace == 5.0
    assert isinstance(ride, Cycling) and ride.speed == 20.0
    assert store.writes == 2
    assert [r["id"] for r in store.records or []] == [run.id, ride.id]


def test_invalid_create_leaves_ledger_untouched() -> None:
    ledger, store = _ledger()
    ledger.create(RUN, (10, 10))

    with pytest.raises(ValidationError):
        ledger.create(WorkoutEntry(type="running", distance=-1, duration=25, cadence=178), (10, 10))

    assert len(ledger) == 1
    assert store.writes == 1
    assert all(w.distance > 0 and w.duration > 0 for w in ledger)


def test_colliding_generated_ids_are_regenerated() -> None:
    ids = iter(["same", "same", "other"])
    ledger = Ledger(id_factory=lambda: next(ids))

    first = ledger.create(RUN, (10, 10))
    second = ledger.create(RUN, (10, 10))

    assert first.id == "same"
    assert second.id == "other"


def test_edit_replaces_in_place_and_keeps_identity() -> None:
    ledger, store = _ledger()
    original = ledger.create(RUN, (10, 10))

    assert ledger.begin_edit(original.id) == original
    assert ledger.session == Editing(original.id)

    edited = ledger.commit(WorkoutEntry(type="running", distance=6, duration=30, cadence=180))

    assert len(ledger) == 1
    assert ledger.workouts[0] is edited
    assert isinstance(edited, Running)
    assert edited.distance == 6
    assert edited.pace == 5.0
    assert edited.id == original.id
    assert edited.created_at == original.created_at
    assert edited.coords == original.coords
    assert ledger.session == Idle()
    assert store.writes == 2


def test_edit_can_switch_variant() -> None:
    ledger, _ = _ledger()
    run = ledger.create(RUN, (10, 10))
    ledger.create(RUN, (20, 20))

    ledger.begin_edit(run.id)
    ride = ledger.commit(RIDE)

    assert ledger.workouts[0] is ride
    assert isinstance(ride, Cycling)
    assert ride.description.startswith("Cycling on ")
    assert ride.id == run.id


def test_invalid_commit_keeps_session_and_record() -> None:
    ledger, store = _ledger()
    run = ledger.create(RUN, (10, 10))
    ledger.begin_edit(run.id)

    with pytest.raises(ValidationError):
        ledger.commit(WorkoutEntry(type="running", distance=6, duration=0, cadence=180))

    assert ledger.session == Editing(run.id)
    assert ledger.workouts == (run,)
    assert store.writes == 1


def test_create_while_editing_keeps_session() -> None:
    ledger, _ = _ledger()
    run = ledger.create(RUN, (10, 10))
    ledger.begin_edit(run.id)

    ride = ledger.create(RIDE, (11, 11))

    assert ledger.session == Editing(run.id)
    assert ledger.workouts == (run, ride)


def test_begin_edit_retargets() -> None:
    ledger, _ = _ledger()
    run = ledger.create(RUN, (10, 10))
    ride = ledger.create(RIDE, (11, 11))
    ledger.begin_edit(run.id)

    assert ledger.begin_edit(ride.id) == ride
    assert ledger.session == Editing(ride.id)

    edited = ledger.commit(WorkoutEntry(type="cycling", distance=20, duration=60, elevation_gain=0))

    assert edited.id == ride.id
    assert ledger.workouts[0] == run


def test_begin_edit_unknown_id_is_noop() -> None:
    ledger, _ = _ledger()
    ledger.create(RUN, (10, 10))

    assert ledger.begin_edit("missing") is None
    assert ledger.session == Idle()


def test_commit_without_session_raises() -> None:
    ledger, _ = _ledger()
    ledger.create(RUN, (10, 10))

    with pytest.raises(EditSessionError):
        ledger.commit(RUN)


def test_cancel_discards_session_without_writing() -> None:
    ledger, store = _ledger()
    run = ledger.create(RUN, (10, 10))
    ledger.begin_edit(run.id)

    ledger.cancel()

    assert ledger.session == Idle()
    assert ledger.editing is None
    assert ledger.workouts == (run,)
    assert store.writes == 1


def test_delete_removes_record_and_ends_its_edit() -> None:
    ledger, store = _ledger()
    run = ledger.create(RUN, (10, 10))
    ride = ledger.create(RIDE, (11, 11))
    ledger.begin_edit(run.id)

    assert ledger.delete(ride.id) is True
    assert ledger.session == Editing(run.id)

    assert ledger.delete(run.id) is True
    assert ledger.session == Idle()
    assert len(ledger) == 0
    assert store.records == []


def test_delete_unknown_id_is_noop() -> None:
    ledger, store = _ledger()
    ledger.create(RUN, (10, 10))

    assert ledger.delete("missing") is False
    assert len(ledger) == 1
    assert store.writes == 1


def test_delete_all_is_idempotent() -> None:
    ledger, store = _ledger()
    run = ledger.create(RUN, (10, 10))
    ledger.create(RIDE, (11, 11))
    ledger.begin_edit(run.id)

    ledger.delete_all()
    assert len(ledger) == 0
    assert ledger.session == Idle()
    ledger.delete_all()
    assert len(ledger) == 0
    assert store.records == []


def test_persist_load_round_trip() -> None:
    ledger, _ = _ledger()
    ledger.create(RUN, (10, 10))
    ledger.create(RIDE, (11.5, -3.25))
    ledger.create(WorkoutEntry(type="running", distance=3.3, duration=17, cadence=170), (1, 2))

    first = ledger.persist()
    assert ledger.persist() == first

    restored = Ledger()
    restored.load(first)

    assert restored.workouts == ledger.workouts
    assert restored.persist() == first


def test_open_reads_from_store() -> None:
    ledger, store = _ledger()
    ledger.create(RUN, (10, 10))

    reopened = Ledger.open(store)

    assert reopened.workouts == ledger.workouts


_HUGE_DISTANCE = {
    "id": "r1",
    "createdAt": "2024-04-04T09:30:00+00:00",
    "coords": [10, 10],
    "distance": 10**400,
    "duration": 25,
    "type": "running",
    "description": "Running on April 4",
    "cadence": 178,
    "pace": 5,
}


@pytest.mark.parametrize(
    "payload", [None, {}, "workouts", [{"id": "broken"}], [_HUGE_DISTANCE]]
)
def test_load_bad_payload_starts_empty(payload: object) -> None:
    ledger, _ = _ledger()
    ledger.create(RUN, (10, 10))

    ledger.load(payload)

    assert len(ledger) == 0
    assert ledger.session == Idle()


def test_load_rejects_duplicate_ids() -> None:
    ledger, _ = _ledger()
    ledger.create(RUN, (10, 10))
    record = ledger.persist()[0]

    ledger.load([record, dict(record)])

    assert len(ledger) == 0


def test_failed_write_is_reported_not_raised() -> None:
    ledger, store = _ledger()
    store.fail_writes = True

    ledger.create(RUN, (10, 10))
    assert ledger.pending_write is True
    assert len(ledger) == 1

    store.fail_writes = False
    ledger.create(RIDE, (11, 11))
    assert ledger.pending_write is False
    assert len(store.records or []) == 2
