"""
components/workout_list.py
──────────────────────────
Sidebar workout list. One card per ListRow, keyed by row id.

Required callbacks in `callbacks`:
  - on_row_click(row_id, target)   target is 'row' or 'delete'
"""
from __future__ import annotations

from nicegui import ui

from constants import ROW_TARGET_DELETE, ROW_TARGET_ROW


KIND_BORDER_COLORS = {
    'running': '#00c46a',
    'cycling': '#ffb545',
}


class WorkoutList:
    """Renders rows and forwards row clicks; holds no activity state of its own."""

    def __init__(self, callbacks=None):
        self.callbacks = callbacks or {}
        self.container = None
        self._rows = {}

    def build(self):
        self.container = ui.column().classes('w-full gap-3')
        return self

    def _on_click(self, row_id, target):
        cb = self.callbacks.get('on_row_click')
        if callable(cb):
            cb(row_id, target)

    def insert_row(self, row):
        border = KIND_BORDER_COLORS.get(row.kind, '#71717a')
        with self.container:
            card = ui.card().classes(
                'w-full p-3 bg-zinc-800 rounded-lg cursor-pointer gap-1'
            ).style(f'border-left: 5px solid {border};')
            card.props(f'data-id="{row.row_id}"')
            card.on('click', lambda _, rid=row.row_id: self._on_click(rid, ROW_TARGET_ROW))
            with card:
                with ui.row().classes('w-full items-center justify-between no-wrap'):
                    ui.label(row.title).classes('text-white font-semibold')
                    ui.button(icon='close').props('flat round dense size=sm color=grey').on(
                        'click.stop', lambda _, rid=row.row_id: self._on_click(rid, ROW_TARGET_DELETE)
                    )
                with ui.row().classes('w-full gap-4'):
                    for icon, value, unit in row.details:
                        with ui.row().classes('items-baseline gap-1 no-wrap'):
                            ui.label(icon).classes('text-sm')
                            ui.label(value).classes('text-white text-base')
                            ui.label(unit).classes('text-zinc-400 text-xs uppercase')
        self._rows[row.row_id] = card

    def remove_row(self, row_id):
        card = self._rows.pop(row_id, None)
        if card is not None:
            card.delete()

    def clear_rows(self):
        self._rows = {}
        self.container.clear()
