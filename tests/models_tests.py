import dataclasses
import math
import unittest
from datetime import datetime

from errors import ValidationError
from models import (
    ActivityKind,
    Cycling,
    Running,
    build_activity,
    create_cycling,
    create_running,
    describe,
    detail_rows,
    metric_pair,
)


OCT_13 = datetime(2026, 10, 13, 7, 30)


class ActivityModelTests(unittest.TestCase):
    def test_running_pace_and_description(self):
        run = create_running((51.5, -0.1), 5, 25, 180, created_at=OCT_13)

        self.assertIsInstance(run, Running)
        self.assertIs(run.kind, ActivityKind.RUNNING)
        self.assertEqual(run.pace_min_per_km, 5.0)
        self.assertEqual(run.cadence_spm, 180)
        self.assertEqual(run.location, (51.5, -0.1))
        self.assertEqual(run.description, "Running on October 13")

    def test_cycling_speed(self):
        ride = create_cycling((48.85, 2.35), 20, 60, 300, created_at=OCT_13)

        self.assertIsInstance(ride, Cycling)
        self.assertEqual(ride.speed_km_per_h, 20.0)
        self.assertEqual(ride.elevation_gain_m, 300.0)
        self.assertEqual(ride.description, "Cycling on October 13")

    def test_derived_metric_formulas(self):
        for distance, duration in [(3.2, 17.5), (42.195, 210), (0.4, 1.25)]:
            run = create_running((0, 0), distance, duration, 170)
            ride = create_cycling((0, 0), distance, duration, 0)
            self.assertEqual(run.pace_min_per_km, duration / distance)
            self.assertEqual(ride.speed_km_per_h, distance / (duration / 60))

    def test_activities_are_immutable(self):
        run = create_running((51.5, -0.1), 5, 25, 180)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            run.pace_min_per_km = 1.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            run.distance_km = 10

    def test_ids_are_unique(self):
        ids = {create_running((0, 0), 1, 5, 160).id for _ in range(200)}
        self.assertEqual(len(ids), 200)

    def test_rejects_non_positive_distance_and_duration(self):
        with self.assertRaises(ValidationError):
            create_running((0, 0), 0, 25, 180)
        with self.assertRaises(ValidationError):
            create_running((0, 0), 5, -1, 180)
        with self.assertRaises(ValidationError):
            create_cycling((0, 0), 5, 0, 10)

    def test_rejects_non_finite_and_garbage(self):
        for bad in (math.nan, math.inf, 'abc', '', None, True):
            with self.subTest(bad=bad):
                with self.assertRaises(ValidationError):
                    create_running((0, 0), bad, 25, 180)

    def test_cadence_must_be_positive_whole_number(self):
        with self.assertRaises(ValidationError):
            create_running((0, 0), 5, 25, 0)
        with self.assertRaises(ValidationError):
            create_running((0, 0), 5, 25, 172.5)
        self.assertEqual(create_running((0, 0), 5, 25, '176').cadence_spm, 176)

    def test_elevation_may_be_zero_but_not_negative(self):
        self.assertEqual(create_cycling((0, 0), 10, 30, 0).elevation_gain_m, 0.0)
        with self.assertRaises(ValidationError):
            create_cycling((0, 0), 10, 30, -5)

    def test_rejects_out_of_range_location(self):
        with self.assertRaises(ValidationError):
            create_running((91, 0), 5, 25, 180)
        with self.assertRaises(ValidationError):
            create_running((0,), 5, 25, 180)

    def test_validation_error_is_a_value_error(self):
        with self.assertRaises(ValueError):
            create_cycling((0, 0), -1, 30, 0)

    def test_describe_uses_month_table(self):
        self.assertEqual(describe('cycling', datetime(2026, 1, 2)), "Cycling on January 2")
        self.assertEqual(describe(ActivityKind.RUNNING, datetime(2026, 12, 31)), "Running on December 31")

    def test_build_activity_dispatches_on_kind(self):
        run = build_activity('running', (1, 2), '5', '25', '180')
        ride = build_activity('Cycling', (1, 2), 20, 60, 300)
        self.assertIsInstance(run, Running)
        self.assertIsInstance(ride, Cycling)
        with self.assertRaises(ValidationError):
            build_activity('swimming', (1, 2), 1, 30, 0)

    def test_metric_rows_follow_kind(self):
        run = create_running((0, 0), 5, 26, 180)
        ride = create_cycling((0, 0), 20, 50, 300)

        self.assertEqual(metric_pair(run), [('pace', '5.2', 'min/km'), ('cadence', '180', 'spm')])
        self.assertEqual(metric_pair(ride), [('speed', '24.0', 'km/h'), ('elevation', '300', 'm')])
        self.assertEqual([unit for _, _, unit in detail_rows(run)], ['km', 'min', 'min/km', 'spm'])


if __name__ == "__main__":
    unittest.main()
