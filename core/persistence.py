"""Serialize the activity store to the blob store and revive typed activities."""

from __future__ import annotations

import json
import logging
import math
from datetime import datetime
from typing import Iterable, List

from constants import BLOB_FORMAT_VERSION, STORAGE_KEY
from errors import CorruptRecordError
from models import ACTIVITY_CLASSES, Activity, ActivityKind


logger = logging.getLogger(__name__)


_BASE_FIELDS = ('id', 'kind', 'created_at', 'location', 'distance_km', 'duration_min', 'description')

_KIND_FIELDS = {
    ActivityKind.RUNNING: ('cadence_spm', 'pace_min_per_km'),
    ActivityKind.CYCLING: ('elevation_gain_m', 'speed_km_per_h'),
}

# Field names of the legacy browser localStorage blob.
_LEGACY_FIELD_MAP = {
    'type': 'kind',
    'date': 'created_at',
    'clickedPosition': 'location',
    'distance': 'distance_km',
    'duration': 'duration_min',
    'cadence': 'cadence_spm',
    'pace': 'pace_min_per_km',
    'elevation': 'elevation_gain_m',
    'speed': 'speed_km_per_h',
}


def serialize_activity(activity: Activity) -> dict:
    """Plain record with every field, derived metrics included."""
    record = {
        'id': activity.id,
        'kind': activity.kind.value,
        'created_at': activity.created_at.isoformat(),
        'location': [activity.location[0], activity.location[1]],
        'distance_km': activity.distance_km,
        'duration_min': activity.duration_min,
        'description': activity.description,
    }
    for name in _KIND_FIELDS[activity.kind]:
        record[name] = getattr(activity, name)
    return record


def _upgrade_legacy_record(raw: dict) -> dict:
    if 'kind' in raw or 'type' not in raw:
        return raw
    upgraded = {}
    for key, value in raw.items():
        upgraded[_LEGACY_FIELD_MAP.get(key, key)] = value
    return upgraded


def _parse_timestamp(value) -> datetime:
    if isinstance(value, datetime):
        return value
    text = str(value)
    # JavaScript Date JSON ends in "Z"
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    return datetime.fromisoformat(text)


def _whole_number(value, name) -> int:
    number = float(value)
    if not math.isfinite(number) or not number.is_integer():
        raise ValueError(f"{name} must be a whole number, got {value!r}")
    return int(number)


def reconstitute(raw) -> Activity:
    """Rebuild a typed activity from a deserialized record.

    Derived fields are taken verbatim from the record, never recomputed.
    """
    if not isinstance(raw, dict):
        raise CorruptRecordError(f"Record is not an object: {raw!r}")
    raw = _upgrade_legacy_record(raw)

    kind_value = raw.get('kind')
    if kind_value is None:
        raise CorruptRecordError("Record has no kind")
    try:
        kind = ActivityKind(kind_value)
    except ValueError:
        raise CorruptRecordError(f"Unknown activity kind: {kind_value!r}") from None

    missing = [name for name in _BASE_FIELDS + _KIND_FIELDS[kind] if raw.get(name) is None]
    if missing:
        raise CorruptRecordError(f"Record {raw.get('id')!r} is missing {', '.join(missing)}")

    try:
        location = raw['location']
        if not isinstance(location, (list, tuple)) or len(location) != 2:
            raise ValueError("location must be a [lat, lng] pair")
        fields = {
            'id': str(raw['id']),
            'created_at': _parse_timestamp(raw['created_at']),
            'location': (float(location[0]), float(location[1])),
            'distance_km': float(raw['distance_km']),
            'duration_min': float(raw['duration_min']),
            'description': str(raw['description']),
        }
        if kind is ActivityKind.RUNNING:
            fields['cadence_spm'] = _whole_number(raw['cadence_spm'], 'cadence_spm')
            fields['pace_min_per_km'] = float(raw['pace_min_per_km'])
        else:
            fields['elevation_gain_m'] = float(raw['elevation_gain_m'])
            fields['speed_km_per_h'] = float(raw['speed_km_per_h'])
    except (TypeError, ValueError, KeyError, IndexError, OverflowError) as ex:
        raise CorruptRecordError(f"Record {raw.get('id')!r} has an unreadable field: {ex}") from ex

    return ACTIVITY_CLASSES[kind](**fields)


class PersistenceAdapter:
    """Snapshot/restore the store under one fixed key of a get/set blob store."""

    def __init__(self, blob_store, key=STORAGE_KEY):
        self.blob_store = blob_store
        self.key = key

    def save(self, activities: Iterable[Activity]) -> None:
        payload = {
            'v': BLOB_FORMAT_VERSION,
            'workouts': [serialize_activity(activity) for activity in activities],
        }
        self.blob_store.set(self.key, json.dumps(payload))

    def clear(self) -> None:
        self.save([])

    def load_raw(self) -> list:
        """Raw records from the blob; empty when nothing usable is stored."""
        blob = self.blob_store.get(self.key)
        if not blob:
            return []
        try:
            data = json.loads(blob)
        except (TypeError, ValueError) as ex:
            logger.warning("Ignoring unparseable workout blob under '%s': %s", self.key, ex)
            return []

        if isinstance(data, dict):
            records = data.get('workouts')
        else:
            records = data
        if not isinstance(records, list):
            logger.warning("Ignoring workout blob under '%s': no record list", self.key)
            return []
        return records

    def load(self) -> List[Activity]:
        """Typed activities from the blob; any corrupt record means a fresh session."""
        try:
            activities = [reconstitute(raw) for raw in self.load_raw()]
        except CorruptRecordError as ex:
            logger.warning("Discarding stored workouts: %s", ex)
            return []

        seen = set()
        for activity in activities:
            if activity.id in seen:
                logger.warning("Discarding stored workouts: duplicate id %s", activity.id)
                return []
            seen.add(activity.id)
        return activities
