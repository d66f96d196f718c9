"""Tabular views and CSV export of the session's workouts."""

from __future__ import annotations

import os
from datetime import datetime

import pandas as pd

from core.persistence import serialize_activity
from models import ActivityKind


EXPORT_COLUMNS = [
    'created_at',
    'kind',
    'description',
    'latitude',
    'longitude',
    'distance_km',
    'duration_min',
    'pace_min_per_km',
    'cadence_spm',
    'speed_km_per_h',
    'elevation_gain_m',
    'id',
]


class DataManager:
    """Builds a DataFrame from the activity store for summaries and export."""

    def __init__(self, store):
        self.store = store

    def to_dataframe(self) -> pd.DataFrame:
        rows = []
        for activity in self.store.list():
            record = serialize_activity(activity)
            lat, lng = record.pop('location')
            record['latitude'] = lat
            record['longitude'] = lng
            rows.append(record)

        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    def summarize(self) -> dict:
        """Per-kind totals: {kind: {'count', 'distance_km', 'duration_min'}}."""
        summary = {
            kind.value: {'count': 0, 'distance_km': 0.0, 'duration_min': 0.0}
            for kind in ActivityKind
        }
        df = self.to_dataframe()
        if df.empty:
            return summary

        grouped = df.groupby('kind').agg(
            count=('id', 'size'),
            distance_km=('distance_km', 'sum'),
            duration_min=('duration_min', 'sum'),
        )
        for kind, row in grouped.iterrows():
            summary[kind] = {
                'count': int(row['count']),
                'distance_km': float(row['distance_km']),
                'duration_min': float(row['duration_min']),
            }
        return summary

    def export_csv(self, destination_dir=None) -> str:
        """Write the CSV export to disk and return the saved file path."""
        df = self.to_dataframe()
        if df.empty:
            raise ValueError("No workouts to export")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filename = f"workouts_{timestamp}.csv"
        output_dir = destination_dir or os.path.expanduser("~/Downloads")
        os.makedirs(output_dir, exist_ok=True)
        file_path = os.path.join(output_dir, filename)

        df.to_csv(file_path, index=False, encoding='utf-8')
        return file_path
