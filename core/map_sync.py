"""Keeps map markers in step with the activity store and owns the click-to-log flow.

Map service contract (duck-typed, see components/leaflet_map.py):
  • initialize(center, zoom) -> handle
  • on_click(handle, callback(location))
  • add_marker(handle, location, content) -> marker handle
  • remove_marker(handle, marker)
  • set_view(handle, location, zoom, animated=False)
  • for_each_marker(handle, visitor)

Form contract: show_form(), hide_form(), clear_fields().
"""
from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from constants import MAP_ZOOM_LEVEL
from models import ACTIVITY_ICONS, Activity, Location, metric_pair


logger = logging.getLogger(__name__)


class MapState(str, Enum):
    IDLE = "idle"
    AWAITING_SUBMISSION = "awaiting_submission"


@dataclass(frozen=True)
class MarkerContent:
    icon: str
    popup_html: str
    class_name: str


def marker_content(activity: Activity) -> MarkerContent:
    icon = ACTIVITY_ICONS[activity.kind]
    lines = [f"{icon} {html.escape(activity.description)}"]
    for name, value, unit in metric_pair(activity):
        lines.append(f"{name.capitalize()}: {value} {unit}")
    return MarkerContent(
        icon=icon,
        popup_html='<br>'.join(lines),
        class_name=f"{activity.kind.value}-popup",
    )


class MapSyncController:
    """Translates store mutations into marker changes and map clicks into new-activity signals."""

    def __init__(self, map_service, form, zoom_level=MAP_ZOOM_LEVEL):
        self.map_service = map_service
        self.form = form
        self.zoom_level = zoom_level

        self.handle = None
        self.state = MapState.IDLE
        self.staged_location: Optional[Location] = None
        self._markers: Dict[str, object] = {}

    @property
    def is_ready(self) -> bool:
        return self.handle is not None

    def initialize(self, center: Location, on_click) -> bool:
        """Create the map once. Later calls are stale and return ``False``."""
        if self.handle is not None:
            logger.debug("Ignoring repeated map initialization at %s", center)
            return False
        self.handle = self.map_service.initialize(center, self.zoom_level)
        self.map_service.on_click(self.handle, on_click)
        return True

    # --- Idle / AwaitingSubmission ------------------------------------------

    def begin(self, location: Location) -> None:
        """Stage a clicked location and open the form."""
        self.staged_location = location
        self.state = MapState.AWAITING_SUBMISSION
        self.form.show_form()

    def complete(self) -> Location:
        """Hand back the staged location and return to idle."""
        if self.state is not MapState.AWAITING_SUBMISSION:
            raise RuntimeError("No map location is staged")
        location = self.staged_location
        self._reset_form()
        return location

    def cancel(self) -> None:
        if self.state is MapState.AWAITING_SUBMISSION:
            logger.debug("Discarding staged location %s", self.staged_location)
        self._reset_form()

    def _reset_form(self):
        self.staged_location = None
        self.state = MapState.IDLE
        self.form.clear_fields()
        self.form.hide_form()

    # --- Markers --------------------------------------------------------------

    def place_marker(self, activity: Activity):
        """Place the activity's marker; returns ``None`` while there is no map."""
        if not self.is_ready:
            return None
        if activity.id in self._markers:
            return self._markers[activity.id]
        marker = self.map_service.add_marker(self.handle, activity.location, marker_content(activity))
        self._markers[activity.id] = marker
        return marker

    def has_marker(self, activity_id: str) -> bool:
        return activity_id in self._markers

    def marker_ids(self):
        return list(self._markers)

    def remove_marker_for(self, activity_id: str) -> bool:
        """Remove the activity's marker. A missing marker is not an error."""
        marker = self._markers.pop(activity_id, None)
        if marker is None or not self.is_ready:
            return False
        self.map_service.remove_marker(self.handle, marker)
        return True

    def clear_markers(self) -> None:
        """Remove every marker, including any the id map lost track of."""
        for activity_id in list(self._markers):
            self.remove_marker_for(activity_id)
        if not self.is_ready:
            return
        strays = []
        self.map_service.for_each_marker(self.handle, strays.append)
        for marker in strays:
            logger.warning("Removing untracked map marker %s", marker)
            self.map_service.remove_marker(self.handle, marker)

    def center_on(self, location: Location, zoom=None, animated=True) -> bool:
        if not self.is_ready:
            logger.debug("No map yet; cannot center on %s", location)
            return False
        self.map_service.set_view(
            self.handle,
            location,
            self.zoom_level if zoom is None else zoom,
            animated=animated,
        )
        return True
