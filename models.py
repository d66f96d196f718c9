"""
Workout activity model.

Two kinds of activity share one set of base fields. The kind is a tag on
each class, and everything that varies by kind (metric formula, icon,
detail rows) goes through a lookup keyed on that tag.
"""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, List, Optional, Tuple, Union

from constants import DETAIL_ICONS, MONTHS
from errors import ValidationError


Location = Tuple[float, float]


class ActivityKind(str, Enum):
    RUNNING = "running"
    CYCLING = "cycling"

    @property
    def label(self) -> str:
        return self.value.capitalize()


ACTIVITY_ICONS = {
    ActivityKind.RUNNING: '🏃‍♂️',
    ActivityKind.CYCLING: '🚴‍♀️',
}


@dataclass(frozen=True)
class _ActivityBase:
    id: str
    created_at: datetime
    location: Location
    distance_km: float
    duration_min: float
    description: str


@dataclass(frozen=True)
class Running(_ActivityBase):
    cadence_spm: int
    pace_min_per_km: float

    kind: ClassVar[ActivityKind] = ActivityKind.RUNNING


@dataclass(frozen=True)
class Cycling(_ActivityBase):
    elevation_gain_m: float
    speed_km_per_h: float

    kind: ClassVar[ActivityKind] = ActivityKind.CYCLING


Activity = Union[Running, Cycling]

ACTIVITY_CLASSES = {
    ActivityKind.RUNNING: Running,
    ActivityKind.CYCLING: Cycling,
}


def describe(kind, created_at: datetime) -> str:
    """Return e.g. ``"Running on October 13"``."""
    kind = ActivityKind(kind)
    return f"{kind.label} on {MONTHS[created_at.month - 1]} {created_at.day}"


def new_activity_id() -> str:
    return uuid.uuid4().hex


# --- Validation -------------------------------------------------------------

def parse_number(value, label: str) -> float:
    """Coerce a raw form value into a finite float or raise ValidationError."""
    if value is None or isinstance(value, bool):
        raise ValidationError(f"{label} is required")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError(f"{label} is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a number") from None
    if not math.isfinite(number):
        raise ValidationError(f"{label} must be a finite number")
    return number


def _positive(value, label):
    number = parse_number(value, label)
    if number <= 0:
        raise ValidationError(f"{label} must be a positive number")
    return number


def _non_negative(value, label):
    number = parse_number(value, label)
    if number < 0:
        raise ValidationError(f"{label} cannot be negative")
    return number


def validate_location(location) -> Location:
    if not isinstance(location, (list, tuple)) or len(location) != 2:
        raise ValidationError("Location must be a (latitude, longitude) pair")
    lat = parse_number(location[0], "Latitude")
    lng = parse_number(location[1], "Longitude")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValidationError("Location is outside the valid coordinate range")
    return (lat, lng)


# --- Construction -------------------------------------------------------------

def create_running(location, distance_km, duration_min, cadence_spm, *,
                   created_at: Optional[datetime] = None,
                   activity_id: Optional[str] = None) -> Running:
    location = validate_location(location)
    distance_km = _positive(distance_km, "Distance")
    duration_min = _positive(duration_min, "Duration")
    cadence = _positive(cadence_spm, "Cadence")
    if not cadence.is_integer():
        raise ValidationError("Cadence must be a whole number of steps per minute")
    created_at = created_at or datetime.now()
    return Running(
        id=activity_id or new_activity_id(),
        created_at=created_at,
        location=location,
        distance_km=distance_km,
        duration_min=duration_min,
        description=describe(ActivityKind.RUNNING, created_at),
        cadence_spm=int(cadence),
        pace_min_per_km=duration_min / distance_km,
    )


def create_cycling(location, distance_km, duration_min, elevation_gain_m, *,
                   created_at: Optional[datetime] = None,
                   activity_id: Optional[str] = None) -> Cycling:
    location = validate_location(location)
    distance_km = _positive(distance_km, "Distance")
    duration_min = _positive(duration_min, "Duration")
    elevation = _non_negative(elevation_gain_m, "Elevation gain")
    created_at = created_at or datetime.now()
    return Cycling(
        id=activity_id or new_activity_id(),
        created_at=created_at,
        location=location,
        distance_km=distance_km,
        duration_min=duration_min,
        description=describe(ActivityKind.CYCLING, created_at),
        elevation_gain_m=elevation,
        speed_km_per_h=distance_km / (duration_min / 60),
    )


_CONSTRUCTORS = {
    ActivityKind.RUNNING: create_running,
    ActivityKind.CYCLING: create_cycling,
}


def parse_kind(value) -> ActivityKind:
    try:
        return ActivityKind(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown activity type: {value!r}") from None


def build_activity(kind, location, distance, duration, extra, *,
                   created_at: Optional[datetime] = None) -> Activity:
    """Build either kind from raw form values; ``extra`` is cadence or elevation."""
    return _CONSTRUCTORS[parse_kind(kind)](
        location, distance, duration, extra, created_at=created_at,
    )


# --- Kind dispatch ------------------------------------------------------------

def _running_metrics(activity):
    return [
        ('pace', f"{activity.pace_min_per_km:.1f}", 'min/km'),
        ('cadence', f"{activity.cadence_spm}", 'spm'),
    ]


def _cycling_metrics(activity):
    return [
        ('speed', f"{activity.speed_km_per_h:.1f}", 'km/h'),
        ('elevation', f"{activity.elevation_gain_m:g}", 'm'),
    ]


_METRIC_BUILDERS = {
    ActivityKind.RUNNING: _running_metrics,
    ActivityKind.CYCLING: _cycling_metrics,
}


def metric_pair(activity: Activity) -> List[Tuple[str, str, str]]:
    """Kind-specific (name, formatted value, unit) rows."""
    return _METRIC_BUILDERS[activity.kind](activity)


def detail_rows(activity: Activity) -> List[Tuple[str, str, str]]:
    """All (icon, formatted value, unit) rows shown for an activity."""
    rows = [
        (ACTIVITY_ICONS[activity.kind], f"{activity.distance_km:g}", 'km'),
        (DETAIL_ICONS['duration'], f"{activity.duration_min:g}", 'min'),
    ]
    for name, value, unit in metric_pair(activity):
        rows.append((DETAIL_ICONS[name], value, unit))
    return rows
