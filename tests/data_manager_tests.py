import tempfile
import unittest

import pandas as pd

from core.activity_store import ActivityStore
from core.data_manager import EXPORT_COLUMNS, DataManager
from models import create_cycling, create_running


class DataManagerTests(unittest.TestCase):
    def setUp(self):
        self.store = ActivityStore()
        self.manager = DataManager(self.store)

    def test_summary_of_empty_store(self):
        summary = self.manager.summarize()
        self.assertEqual(summary['running'], {'count': 0, 'distance_km': 0.0, 'duration_min': 0.0})
        self.assertEqual(summary['cycling']['count'], 0)
        self.assertTrue(self.manager.to_dataframe().empty)

    def test_summary_totals_per_kind(self):
        self.store.add(create_running((0, 0), 5, 25, 180))
        self.store.add(create_running((0, 0), 10, 55, 176))
        self.store.add(create_cycling((0, 0), 30, 75, 420))

        summary = self.manager.summarize()
        self.assertEqual(summary['running']['count'], 2)
        self.assertAlmostEqual(summary['running']['distance_km'], 15.0)
        self.assertAlmostEqual(summary['running']['duration_min'], 80.0)
        self.assertEqual(summary['cycling']['count'], 1)
        self.assertAlmostEqual(summary['cycling']['distance_km'], 30.0)

    def test_export_requires_data(self):
        with self.assertRaises(ValueError):
            self.manager.export_csv(destination_dir=tempfile.gettempdir())

    def test_export_csv(self):
        run = create_running((51.5, -0.1), 5, 25, 180)
        self.store.add(run)
        self.store.add(create_cycling((51.6, -0.2), 20, 60, 300))

        with tempfile.TemporaryDirectory() as out_dir:
            path = self.manager.export_csv(destination_dir=out_dir)
            exported = pd.read_csv(path, dtype={'id': str})

        self.assertEqual(list(exported.columns), EXPORT_COLUMNS)
        self.assertEqual(len(exported), 2)
        self.assertEqual(exported.loc[0, 'id'], run.id)
        self.assertAlmostEqual(exported.loc[0, 'pace_min_per_km'], 5.0)
        self.assertAlmostEqual(exported.loc[1, 'speed_km_per_h'], 20.0)
        self.assertAlmostEqual(exported.loc[0, 'latitude'], 51.5)


if __name__ == "__main__":
    unittest.main()
