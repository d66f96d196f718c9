"""Ordered in-memory collection of activities; the session's source of truth."""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from errors import DuplicateIdError
from models import Activity


class ActivityView:
    """Lazy, restartable view over the store's activities in insertion order.

    Each ``iter()`` starts from the beginning. The store must not be mutated
    while a view is being iterated.
    """

    def __init__(self, store: "ActivityStore"):
        self._store = store

    def __iter__(self) -> Iterator[Activity]:
        return iter(self._store._items)

    def __len__(self):
        return len(self._store)

    def __repr__(self):
        return f"ActivityView({len(self)} activities)"


class ActivityStore:
    """Owns activity identity. Insertion order is display order."""

    def __init__(self):
        self._items: List[Activity] = []

    def __len__(self):
        return len(self._items)

    def __contains__(self, activity_id):
        return self.get(activity_id) is not None

    def add(self, activity: Activity) -> None:
        if activity.id in self:
            raise DuplicateIdError(activity.id)
        self._items.append(activity)

    def remove_by_id(self, activity_id: str) -> Optional[Activity]:
        """Remove and return the matching activity; ``None`` if absent."""
        for index, activity in enumerate(self._items):
            if activity.id == activity_id:
                return self._items.pop(index)
        return None

    def clear(self) -> None:
        self._items = []

    def replace_all(self, records: Iterable[Activity]) -> None:
        """Install ``records`` in place of the current contents, all or nothing."""
        incoming = list(records)
        seen = set()
        for activity in incoming:
            if activity.id in seen:
                raise DuplicateIdError(activity.id)
            seen.add(activity.id)
        self._items = incoming

    def list(self) -> ActivityView:
        return ActivityView(self)

    def get(self, activity_id: str) -> Optional[Activity]:
        for activity in self._items:
            if activity.id == activity_id:
                return activity
        return None

    def first(self) -> Optional[Activity]:
        return self._items[0] if self._items else None

    def ids(self) -> List[str]:
        return [activity.id for activity in self._items]
