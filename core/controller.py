"""
core/controller.py
──────────────────
Session controller for the workout map.

Owns the ActivityStore and keeps the three views of it (store, list rows,
map markers) plus the persisted blob consistent across create, delete,
clear and reload.

Injected collaborators:
  • map_service : see core/map_sync.py
  • blob_store  : get(key) / set(key, value), failures raise StorageError
  • form        : show_form(), hide_form(), clear_fields(),
                   set_kind(kind), show_error(message)
  • list_view   : see core/list_sync.py
  • notify      : (message, level) -> None, user-facing messages
  • clock       : () -> datetime, creation timestamps

Startup is two-phase: load_session() hydrates the store and renders rows
right away; on_position() creates the map later and places the markers.
"""
from __future__ import annotations

import logging
from datetime import datetime

from constants import MAP_ZOOM_LEVEL, STORAGE_KEY
from core.activity_store import ActivityStore
from core.list_sync import ListSyncController
from core.map_sync import MapSyncController
from core.persistence import PersistenceAdapter
from errors import DuplicateIdError, StorageError, ValidationError
from models import ActivityKind, build_activity, parse_kind, validate_location


logger = logging.getLogger(__name__)


def _log_notify(message, level='info'):
    log = logger.warning if level in ('negative', 'warning') else logger.info
    log("%s", message)


class WorkoutController:
    """Single entry point for every event the UI emits."""

    def __init__(self, map_service, blob_store, form, list_view, *,
                 notify=None, clock=None, zoom_level=MAP_ZOOM_LEVEL, storage_key=STORAGE_KEY):
        self.form = form
        self.notify = notify or _log_notify
        self.clock = clock or datetime.now

        self.store = ActivityStore()
        self.persistence = PersistenceAdapter(blob_store, key=storage_key)
        self.map_sync = MapSyncController(map_service, form, zoom_level=zoom_level)
        self.list_sync = ListSyncController(
            list_view,
            callbacks={
                'on_delete': self.delete_activity,
                'on_locate': self.locate_activity,
            },
        )

    # --- Startup --------------------------------------------------------------

    def load_session(self) -> int:
        """Restore persisted activities and render their rows. Returns the count."""
        activities = self.persistence.load()
        try:
            self.store.replace_all(activities)
        except DuplicateIdError as ex:
            logger.warning("Starting fresh session: %s", ex)
            self.store.clear()
        for activity in self.store.list():
            self.list_sync.render(activity)
            self.map_sync.place_marker(activity)
        return len(self.store)

    def on_position(self, location) -> bool:
        """Geolocation delivered a coordinate; create the map exactly once."""
        if self.map_sync.is_ready:
            logger.debug("Ignoring stale geolocation result %s", location)
            return False
        first = self.store.first()
        center = first.location if first is not None else tuple(location)
        self.map_sync.initialize(center, self.on_map_click)
        for activity in self.store.list():
            self.map_sync.place_marker(activity)
        return True

    def on_position_error(self, error) -> None:
        logger.warning("Geolocation failed: %s", error)
        if not self.map_sync.is_ready:
            self.notify("Could not get your position; the map is unavailable.", 'negative')

    # --- Form flow ------------------------------------------------------------

    def on_map_click(self, location) -> None:
        try:
            location = validate_location(location)
        except ValidationError as ex:
            logger.warning("Ignoring map click: %s", ex)
            return
        self.map_sync.begin(location)

    def on_type_changed(self, kind) -> None:
        try:
            self.form.set_kind(parse_kind(kind))
        except ValidationError as ex:
            self.form.show_error(str(ex))

    def on_cancel(self) -> None:
        self.map_sync.cancel()

    def on_submit(self, field_values):
        """Build, commit, render and persist a new activity.

        Returns the new activity, or ``None`` when the submission was
        rejected (form stays open) or no location was staged.
        """
        if self.map_sync.staged_location is None:
            logger.debug("Submit without a staged map location ignored")
            return None

        kind = field_values.get('type')
        try:
            extra_field = 'cadence' if parse_kind(kind) is ActivityKind.RUNNING else 'elevation'
            activity = build_activity(
                kind,
                self.map_sync.staged_location,
                field_values.get('distance'),
                field_values.get('duration'),
                field_values.get(extra_field),
                created_at=self.clock(),
            )
        except ValidationError as ex:
            self.form.show_error(str(ex))
            return None

        try:
            self.store.add(activity)
        except DuplicateIdError as ex:
            logger.warning("Activity not added: %s", ex)
            self.map_sync.cancel()
            return None

        self.map_sync.place_marker(activity)
        self.list_sync.render(activity)
        self.map_sync.complete()
        self._persist()
        return activity

    # --- List interactions ----------------------------------------------------

    def on_row_clicked(self, row_id, target):
        return self.list_sync.handle_row_click(row_id, target)

    def locate_activity(self, activity_id) -> bool:
        activity = self.store.get(activity_id)
        if activity is None:
            return False
        return self.map_sync.center_on(activity.location, animated=True)

    def delete_activity(self, activity_id) -> bool:
        """Remove marker, row and store entry, then persist. Idempotent."""
        self.map_sync.remove_marker_for(activity_id)
        self.list_sync.remove(activity_id)
        removed = self.store.remove_by_id(activity_id)
        self._persist()
        return removed is not None

    def clear_all(self) -> None:
        self.map_sync.clear_markers()
        self.list_sync.clear()
        self.store.clear()
        self._persist()

    # --- Persistence ----------------------------------------------------------

    def _persist(self) -> bool:
        try:
            self.persistence.save(self.store.list())
        except StorageError as ex:
            logger.warning("Saving workouts failed: %s", ex)
            self.notify("Your workouts could not be saved.", 'negative')
            return False
        return True
