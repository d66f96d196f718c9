"""Keeps the rendered activity list in step with the store.

List view contract (see components/workout_list.py):
  • insert_row(row: ListRow)
  • remove_row(row_id)
  • clear_rows()
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from constants import ROW_TARGET_DELETE
from models import ACTIVITY_ICONS, Activity, detail_rows


@dataclass(frozen=True)
class ListRow:
    row_id: str
    kind: str
    icon: str
    title: str
    details: List[Tuple[str, str, str]] = field(default_factory=list)


def build_row(activity: Activity) -> ListRow:
    return ListRow(
        row_id=activity.id,
        kind=activity.kind.value,
        icon=ACTIVITY_ICONS[activity.kind],
        title=activity.description,
        details=detail_rows(activity),
    )


class ListSyncController:
    """Append-only row rendering keyed by activity id."""

    def __init__(self, list_view, callbacks=None):
        self.list_view = list_view
        self.callbacks = callbacks or {}
        self._rendered = []

    def _invoke_callback(self, name, *args):
        cb = self.callbacks.get(name)
        if not callable(cb):
            return None
        return cb(*args)

    def render(self, activity: Activity) -> None:
        if activity.id in self._rendered:
            return
        self.list_view.insert_row(build_row(activity))
        self._rendered.append(activity.id)

    def remove(self, activity_id: str) -> bool:
        if activity_id not in self._rendered:
            return False
        self._rendered.remove(activity_id)
        self.list_view.remove_row(activity_id)
        return True

    def clear(self) -> None:
        self._rendered = []
        self.list_view.clear_rows()

    def rendered_ids(self) -> List[str]:
        return list(self._rendered)

    def handle_row_click(self, row_id, target):
        """Delete-button clicks delete; any other click on a row locates it."""
        if target == ROW_TARGET_DELETE:
            return self._invoke_callback('on_delete', row_id)
        return self._invoke_callback('on_locate', row_id)
