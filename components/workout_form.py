"""
components/workout_form.py
──────────────────────────
New-workout form.

Emits (via injected callbacks):
  • on_submit(field_values) : dict with type, distance, duration, cadence, elevation
  • on_type_changed(kind)
  • on_cancel()

Exposes show_form(), hide_form(), clear_fields(), set_kind(kind),
show_error(message) for the controller.
"""
from __future__ import annotations

from nicegui import ui

from models import ActivityKind


class WorkoutForm:
    """Hidden until a map click stages a location."""

    def __init__(self, callbacks=None):
        self.callbacks = callbacks or {}

        self.card = None
        self.type_select = None
        self.distance_input = None
        self.duration_input = None
        self.cadence_input = None
        self.elevation_input = None

    def _invoke_callback(self, name, *args):
        cb = self.callbacks.get(name)
        if not callable(cb):
            return None
        return cb(*args)

    def build(self):
        with ui.card().classes(
            'w-full p-4 bg-zinc-800 border border-zinc-700 rounded-lg gap-2'
        ) as self.card:
            with ui.grid(columns=2).classes('w-full gap-x-4 gap-y-2'):
                self.type_select = ui.select(
                    options={kind.value: kind.label for kind in ActivityKind},
                    value=ActivityKind.RUNNING.value,
                    label='Type',
                    on_change=lambda e: self._invoke_callback('on_type_changed', e.value),
                ).props('outlined dense dark')
                self.distance_input = ui.number(label='Distance (km)', min=0).props('outlined dense dark')
                self.duration_input = ui.number(label='Duration (min)', min=0).props('outlined dense dark')
                self.cadence_input = ui.number(label='Cadence (step/min)', min=0).props('outlined dense dark')
                self.elevation_input = ui.number(label='Elev Gain (m)', min=0).props('outlined dense dark')
            with ui.row().classes('w-full justify-end gap-2'):
                ui.button('Cancel', on_click=lambda: self._invoke_callback('on_cancel')).props('flat dense')
                ui.button('OK', on_click=self._submit).props('dense color=positive')

        self.card.on('keydown.enter', self._submit)
        self.card.on('keydown.escape', lambda: self._invoke_callback('on_cancel'))
        self.set_kind(ActivityKind.RUNNING)
        self.hide_form()
        return self

    def _submit(self):
        self._invoke_callback('on_submit', self.field_values())

    def field_values(self):
        return {
            'type': self.type_select.value,
            'distance': self.distance_input.value,
            'duration': self.duration_input.value,
            'cadence': self.cadence_input.value,
            'elevation': self.elevation_input.value,
        }

    def show_form(self):
        self.card.set_visibility(True)
        self.distance_input.run_method('focus')

    def hide_form(self):
        self.card.set_visibility(False)

    def clear_fields(self):
        for field in (self.distance_input, self.duration_input, self.cadence_input, self.elevation_input):
            field.value = None

    def set_kind(self, kind):
        kind = ActivityKind(kind)
        if self.type_select.value != kind.value:
            self.type_select.value = kind.value
        self.cadence_input.set_visibility(kind is ActivityKind.RUNNING)
        self.elevation_input.set_visibility(kind is ActivityKind.CYCLING)

    def show_error(self, message):
        ui.notify(message, type='negative', position='top')
