import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path

from constants import STORAGE_KEY
from core.persistence import PersistenceAdapter, reconstitute, serialize_activity
from db import BlobDatabase
from errors import CorruptRecordError, StorageError
from models import Cycling, Running, create_cycling, create_running


class ReconstituteTests(unittest.TestCase):
    def test_round_trip_both_kinds(self):
        run = create_running((51.5, -0.1), 5, 25, 180, created_at=datetime(2026, 10, 13, 7, 5, 3, 120))
        ride = create_cycling((48.8566, 2.3522), 20.5, 61.25, 312.5)

        for activity in (run, ride):
            with self.subTest(kind=activity.kind):
                record = json.loads(json.dumps(serialize_activity(activity)))
                self.assertEqual(reconstitute(record), activity)

    def test_serialized_record_carries_derived_fields(self):
        record = serialize_activity(create_running((1, 2), 4, 22, 172))
        self.assertEqual(record['kind'], 'running')
        self.assertEqual(record['pace_min_per_km'], 5.5)
        self.assertEqual(record['location'], [1.0, 2.0])
        self.assertIn('description', record)

    def test_derived_fields_are_loaded_verbatim(self):
        record = serialize_activity(create_cycling((1, 2), 20, 60, 100))
        record['speed_km_per_h'] = 99.0
        record['description'] = 'Cycling on some day'

        ride = reconstitute(record)
        self.assertIsInstance(ride, Cycling)
        self.assertEqual(ride.speed_km_per_h, 99.0)
        self.assertEqual(ride.description, 'Cycling on some day')

    def test_missing_or_unknown_kind(self):
        record = serialize_activity(create_running((1, 2), 4, 22, 172))
        del record['kind']
        with self.assertRaises(CorruptRecordError):
            reconstitute(record)
        record['kind'] = 'rowing'
        with self.assertRaises(CorruptRecordError):
            reconstitute(record)

    def test_missing_required_field(self):
        record = serialize_activity(create_running((1, 2), 4, 22, 172))
        del record['pace_min_per_km']
        with self.assertRaises(CorruptRecordError):
            reconstitute(record)

    def test_unreadable_field(self):
        record = serialize_activity(create_cycling((1, 2), 20, 60, 100))
        record['distance_km'] = 'far'
        with self.assertRaises(CorruptRecordError):
            reconstitute(record)
        with self.assertRaises(CorruptRecordError):
            reconstitute(['not', 'a', 'record'])

    def test_wrongly_shaped_fields(self):
        base = serialize_activity(create_running((1, 2), 4, 22, 172))
        broken = {
            'object location': {'location': {'lat': 1.0, 'lng': 2.0}},
            'string location': {'location': 'ab'},
            'nested location': {'location': [[1.0], [2.0]]},
            'infinite cadence': {'cadence_spm': float('inf')},
            'nan cadence': {'cadence_spm': float('nan')},
            'fractional cadence': {'cadence_spm': 180.7},
            'list distance': {'distance_km': [4]},
        }
        for label, override in broken.items():
            with self.subTest(label):
                with self.assertRaises(CorruptRecordError):
                    reconstitute({**base, **override})

    def test_legacy_fractional_cadence_is_rejected(self):
        legacy = {
            'date': '2026-10-13T09:15:00.000Z',
            'id': '1760346900',
            'clickedPosition': [51.5, -0.1],
            'distance': 5,
            'duration': 25,
            'type': 'running',
            'cadence': 180.7,
            'pace': 5,
            'description': 'Running on October 13',
        }
        with self.assertRaises(CorruptRecordError):
            reconstitute(legacy)
        legacy['cadence'] = 180.0
        self.assertEqual(reconstitute(legacy).cadence_spm, 180)

    def test_legacy_browser_record(self):
        legacy = {
            'date': '2026-10-13T09:15:00.000Z',
            'id': '1760346900',
            'clickedPosition': [51.5, -0.1],
            'distance': 5,
            'duration': 25,
            'type': 'running',
            'cadence': 180,
            'pace': 5,
            'description': 'Running on October 13',
        }
        run = reconstitute(legacy)
        self.assertIsInstance(run, Running)
        self.assertEqual(run.id, '1760346900')
        self.assertEqual(run.pace_min_per_km, 5.0)
        self.assertEqual(run.created_at, datetime(2026, 10, 13, 9, 15, tzinfo=timezone.utc))


class PersistenceAdapterTests(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db = BlobDatabase(str(Path(self.temp_dir.name) / "test.db"))
        self.adapter = PersistenceAdapter(self.db)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_load_with_nothing_stored(self):
        self.assertEqual(self.adapter.load(), [])
        self.assertEqual(self.adapter.load_raw(), [])

    def test_save_then_load_in_fresh_adapter(self):
        run = create_running((51.5, -0.1), 5, 25, 180)
        ride = create_cycling((51.6, -0.2), 20, 60, 300)
        self.adapter.save([run, ride])

        reloaded = PersistenceAdapter(BlobDatabase(self.db.db_path)).load()
        self.assertEqual(reloaded, [run, ride])
        self.assertEqual(reloaded[0].pace_min_per_km, run.pace_min_per_km)
        self.assertEqual(reloaded[1].speed_km_per_h, ride.speed_km_per_h)

    def test_save_overwrites_previous_blob(self):
        self.adapter.save([create_running((0, 0), 1, 6, 160)])
        self.adapter.clear()
        self.assertEqual(json.loads(self.db.get(STORAGE_KEY))['workouts'], [])
        self.assertEqual(self.db.keys(), [STORAGE_KEY])

    def test_unparseable_blob_starts_fresh(self):
        self.db.set(STORAGE_KEY, '{not json')
        with self.assertLogs('core.persistence', level='WARNING'):
            self.assertEqual(self.adapter.load(), [])

    def test_corrupt_record_starts_fresh(self):
        good = serialize_activity(create_running((0, 0), 1, 6, 160))
        self.db.set(STORAGE_KEY, json.dumps({'v': 1, 'workouts': [good, {'kind': 'running'}]}))
        with self.assertLogs('core.persistence', level='WARNING'):
            self.assertEqual(self.adapter.load(), [])

    def test_wrongly_shaped_record_starts_fresh(self):
        good = serialize_activity(create_running((0, 0), 1, 6, 160))
        for override in ({'location': {'lat': 1.0, 'lng': 2.0}}, {'cadence_spm': float('inf')}):
            with self.subTest(override=override):
                self.db.set(STORAGE_KEY, json.dumps({'v': 1, 'workouts': [{**good, **override}]}))
                with self.assertLogs('core.persistence', level='WARNING'):
                    self.assertEqual(self.adapter.load(), [])

    def test_unopenable_database_raises_storage_error(self):
        missing_dir = Path(self.temp_dir.name) / "missing" / "nested" / "test.db"
        with self.assertRaises(StorageError):
            BlobDatabase(str(missing_dir))

    def test_duplicate_ids_start_fresh(self):
        good = serialize_activity(create_running((0, 0), 1, 6, 160))
        self.db.set(STORAGE_KEY, json.dumps([good, good]))
        with self.assertLogs('core.persistence', level='WARNING'):
            self.assertEqual(self.adapter.load(), [])

    def test_blob_database_delete(self):
        self.db.set('other', 'x')
        self.assertEqual(self.db.get('other'), 'x')
        self.db.delete('other')
        self.assertIsNone(self.db.get('other'))


if __name__ == "__main__":
    unittest.main()
