"""NiceGUI web UI for Mapty."""

from __future__ import annotations

from typing import Any

from nicegui import ui

from mapty.ui.controller import EMPTY_FORM, FormController
from mapty.ui.formatting import detail_rows, marker_label
from mapty.workout.ledger import Ledger
from mapty.workout.model import ValidationError, Workout
from mapty.workout.store import JsonFileStore

MAP_ZOOM_LEVEL = 13
TILE_URL = "https://{s}.tile.openstreetmap.fr/hot/{z}/{x}/{y}.png"
WORKOUT_TYPE_OPTIONS = {"running": "Running", "cycling": "Cycling"}


def run_web_ui(
    *,
    store: JsonFileStore | None = None,
    host: str = "127.0.0.1",
    port: int = 8088,
    center: tuple[float, float] = (51.505, -0.09),
    zoom: int = MAP_ZOOM_LEVEL,
) -> int:
    store = store or JsonFileStore()
    ledger = Ledger.open(store)
    controller = FormController(ledger)
    print(f"[WEB] {len(ledger)} workouts loaded from {store.path}")

    ui.add_head_html(
        """
        <style>
          .mp-running { border-left: 5px solid #00c46a; }
          .mp-cycling { border-left: 5px solid #ffb545; }
          .mp-muted { color: #aaa; }
        </style>
        """
    )

    markers: dict[str, Any] = {}

    with ui.row().classes("w-full no-wrap gap-4"):
        with ui.column().classes("w-[420px] gap-2"):
            ui.label("MAPTY").classes("text-xl font-semibold tracking-wide")
            hint_label = ui.label("Click on the map to log a workout").classes("mp-muted")

            with ui.card().classes("w-full") as form_card:
                form_title = ui.label("New workout").classes("text-base font-medium")
                with ui.row().classes("w-full items-end gap-2"):
                    type_select = ui.select(WORKOUT_TYPE_OPTIONS, value="running", label="Type")
                    distance_input = ui.number("Distance", suffix="km", min=0)
                    duration_input = ui.number("Duration", suffix="min", min=0)
                    cadence_input = ui.number("Cadence", suffix="step/min", min=0)
                    elevation_input = ui.number("Elev Gain", suffix="m")
                with ui.row().classes("w-full justify-end gap-2"):
                    cancel_btn = ui.button("Cancel").props("outline")
                    submit_btn = ui.button("OK").props("color=primary")

            with ui.row().classes("w-full justify-end"):
                delete_all_btn = ui.button("Delete all").props("flat color=negative")

            list_column = ui.column().classes("w-full gap-2")

        leaflet = ui.leaflet(center=center, zoom=zoom).classes("grow h-[90vh]")
        leaflet.clear_layers()
        leaflet.tile_layer(url_template=TILE_URL)

    def read_form() -> dict[str, object]:
        return {
            "type": type_select.value,
            "distance": distance_input.value,
            "duration": duration_input.value,
            "cadence": cadence_input.value,
            "elevation_gain": elevation_input.value,
        }

    def fill_form(values: dict[str, object]) -> None:
        type_select.value = values["type"]
        distance_input.value = values["distance"]
        duration_input.value = values["duration"]
        cadence_input.value = values["cadence"]
        elevation_input.value = values["elevation_gain"]
        toggle_type_fields()

    def toggle_type_fields() -> None:
        running = type_select.value == "running"
        cadence_input.set_visibility(running)
        elevation_input.set_visibility(not running)

    def refresh_form() -> None:
        form_card.set_visibility(controller.form_open)
        hint_label.set_visibility(not controller.form_open)
        editing = controller.editing
        form_title.text = f"Edit: {editing.description}" if editing else "New workout"

    def warn_if_unsaved() -> None:
        if ledger.pending_write:
            ui.notify(f"Could not save workouts to {store.path}", color="warning")

    def add_marker(workout: Workout) -> None:
        marker = leaflet.marker(latlng=workout.coords)
        marker.run_method("bindPopup", marker_label(workout))
        marker.run_method("openPopup")
        markers[workout.id] = marker

    def refresh_markers() -> None:
        for marker in markers.values():
            leaflet.remove_layer(marker)
        markers.clear()
        for workout in ledger.workouts:
            add_marker(workout)

    def refresh_list() -> None:
        list_column.clear()
        with list_column:
            # Newest first.
            for workout in reversed(ledger.workouts):
                with ui.card().classes(f"w-full mp-{workout.type}"):
                    with ui.row().classes("w-full items-center justify-between"):
                        title = ui.label(workout.description).classes(
                            "text-base font-semibold cursor-pointer"
                        )
                        with ui.row().classes("gap-1"):
                            ui.button(
                                icon="edit",
                                on_click=lambda _, wid=workout.id: on_edit(wid),
                            ).props("flat dense")
                            ui.button(
                                icon="delete",
                                on_click=lambda _, wid=workout.id: on_delete(wid),
                            ).props("flat dense color=negative")
                    title.on("click", lambda _, wid=workout.id: on_move_map(wid))
                    with ui.row().classes("gap-4"):
                        for row in detail_rows(workout):
                            ui.label(f"{row.icon} {row.value} {row.unit}")

    def refresh_all() -> None:
        refresh_form()
        refresh_list()
        refresh_markers()

    def on_map_click(event: Any) -> None:
        latlng = event.args["latlng"]
        controller.pick_location(float(latlng["lat"]), float(latlng["lng"]))
        fill_form(dict(EMPTY_FORM))
        refresh_form()

    def on_submit() -> None:
        try:
            workout = controller.submit(read_form())
        except ValidationError as exc:
            ui.notify(f"Inputs have to be positive numbers: {exc}", color="negative")
            return
        print(f"[WEB] saved {workout.type} {workout.id}")
        warn_if_unsaved()
        fill_form(dict(EMPTY_FORM))
        refresh_all()

    def on_cancel() -> None:
        controller.close()
        fill_form(dict(EMPTY_FORM))
        refresh_form()

    def on_edit(workout_id: str) -> None:
        values = controller.start_edit(workout_id)
        if values is None:
            return
        fill_form(values)
        refresh_form()

    def on_delete(workout_id: str) -> None:
        if ledger.delete(workout_id):
            print(f"[WEB] deleted {workout_id}")
            warn_if_unsaved()
            refresh_all()

    def on_delete_all() -> None:
        controller.delete_all()
        print("[WEB] deleted all workouts")
        warn_if_unsaved()
        fill_form(dict(EMPTY_FORM))
        refresh_all()

    def on_move_map(workout_id: str) -> None:
        workout = ledger.find(workout_id)
        if workout is None:
            return
        leaflet.set_center(workout.coords)
        leaflet.set_zoom(zoom)

    leaflet.on("map-click", on_map_click)
    type_select.on_value_change(lambda _: toggle_type_fields())
    submit_btn.on_click(on_submit)
    cancel_btn.on_click(on_cancel)
    delete_all_btn.on_click(on_delete_all)

    toggle_type_fields()
    refresh_all()
    ui.run(host=host, port=port, reload=False, title="Mapty")
    return 0
