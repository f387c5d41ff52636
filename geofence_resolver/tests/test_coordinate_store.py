"""
Tests for CoordinateStore: clamping, idempotence, partial edits and rejection
of non-finite input.
"""

from __future__ import annotations

import math
import unittest

from geofence_resolver.const import MSG_LATITUDE_CLAMPED, MSG_LONGITUDE_CLAMPED
from geofence_resolver.coordinate_store import CoordinateStore
from geofence_resolver.errors import InvalidInputError
from geofence_resolver.models import Coordinate


class TestSetCoordinate(unittest.TestCase):

    def test_starts_empty(self):
        self.assertIsNone(CoordinateStore().current())

    def test_accepts_valid_coordinate(self):
        store = CoordinateStore()
        result = store.set_coordinate(37.7749, -122.4194)
        self.assertEqual(result.value, Coordinate(37.7749, -122.4194))
        self.assertFalse(result.clamped)
        self.assertIsNone(result.note)
        self.assertEqual(store.current(), result.value)

    def test_clamps_latitude_above_range(self):
        result = CoordinateStore().set_coordinate(200, 10)
        self.assertEqual(result.value, Coordinate(90.0, 10.0))
        self.assertTrue(result.clamped)
        self.assertEqual(result.note, MSG_LATITUDE_CLAMPED)

    def test_clamps_both_axes_and_joins_notes(self):
        result = CoordinateStore().set_coordinate(-95, 181)
        self.assertEqual(result.value, Coordinate(-90.0, 180.0))
        self.assertIn(MSG_LATITUDE_CLAMPED, result.note)
        self.assertIn(MSG_LONGITUDE_CLAMPED, result.note)

    def test_bounds_are_valid_values(self):
        result = CoordinateStore().set_coordinate(90, -180)
        self.assertFalse(result.clamped)

    def test_non_finite_input_leaves_store_unchanged(self):
        store = CoordinateStore()
        store.set_coordinate(1.0, 2.0)
        for bad in (math.nan, math.inf, -math.inf, None, "abc", "", True):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidInputError):
                    store.set_coordinate(bad, 5.0)
                self.assertEqual(store.current(), Coordinate(1.0, 2.0))

    def test_invalid_longitude_does_not_update_latitude(self):
        store = CoordinateStore()
        store.set_coordinate(1.0, 2.0)
        with self.assertRaises(InvalidInputError):
            store.set_coordinate(50.0, math.nan)
        self.assertEqual(store.current(), Coordinate(1.0, 2.0))

    def test_numeric_strings_are_accepted(self):
        result = CoordinateStore().set_coordinate("12.5", "-3")
        self.assertEqual(result.value, Coordinate(12.5, -3.0))

    def test_initial_coordinate_is_clamped(self):
        store = CoordinateStore(initial=Coordinate(120.0, 0.0))
        self.assertEqual(store.current(), Coordinate(90.0, 0.0))


class TestPartialSetters(unittest.TestCase):

    def test_latitude_outside_range_clamps_to_nearest_bound(self):
        store = CoordinateStore()
        for raw, expected in ((200, 90.0), (90.0001, 90.0), (-1000, -90.0), (-90.5, -90.0)):
            with self.subTest(raw=raw):
                result = store.set_latitude(raw)
                self.assertEqual(result.value.latitude, expected)
                self.assertTrue(result.clamped)

    def test_clamped_latitude_set_again_is_a_no_op(self):
        store = CoordinateStore()
        store.set_coordinate(10.0, 20.0)
        first = store.set_latitude(200)
        second = store.set_latitude(first.value.latitude)
        self.assertEqual(first.value, second.value)
        self.assertFalse(second.clamped)

    def test_latitude_edit_keeps_longitude(self):
        store = CoordinateStore()
        store.set_coordinate(34.02, -118.80)
        result = store.set_latitude(200)
        self.assertEqual(result.value, Coordinate(90.0, -118.80))

    def test_longitude_edit_keeps_latitude(self):
        store = CoordinateStore()
        store.set_coordinate(34.02, -118.80)
        result = store.set_longitude(-181)
        self.assertEqual(result.value, Coordinate(34.02, -180.0))
        self.assertEqual(result.note, MSG_LONGITUDE_CLAMPED)

    def test_partial_edit_without_coordinate_uses_default_center(self):
        store = CoordinateStore(default_center=Coordinate(1.0, 2.0))
        self.assertEqual(store.set_latitude(5).value, Coordinate(5.0, 2.0))

        store = CoordinateStore(default_center=Coordinate(1.0, 2.0))
        self.assertEqual(store.set_longitude(5).value, Coordinate(1.0, 5.0))

    def test_builtin_default_center_is_san_francisco(self):
        result = CoordinateStore().set_longitude(0)
        self.assertEqual(result.value, Coordinate(37.7749, 0.0))

    def test_invalid_partial_edit_is_rejected(self):
        store = CoordinateStore()
        store.set_coordinate(1.0, 2.0)
        with self.assertRaises(InvalidInputError) as ctx:
            store.set_latitude(math.nan)
        self.assertEqual(str(ctx.exception), "Invalid latitude")
        self.assertEqual(store.current(), Coordinate(1.0, 2.0))
