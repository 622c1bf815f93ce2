#!/usr/bin/env python3
# Copyright 2020 Virginia Polytechnic Institute and State University.

# standard library imports
import unittest

# third party imports
import numpy as np

# local imports
from pointmap.time_series import Instant, TimeSeries, time_names, find_bracket


class RecordingList(list):
    """ List that records which indices are read. """

    def __init__(self, *args):
        super().__init__(*args)
        self.accessed = []

    def __getitem__(self, index):
        self.accessed.append(index)
        return super().__getitem__(index)


class TestTimeSeries(unittest.TestCase):

    def test_names(self):
        self.assertEqual(Instant(0.5).name, '0.5')
        self.assertEqual(Instant(1).name, '1')
        self.assertEqual(Instant(2.0, 'two').name, 'two')
        series = TimeSeries.from_values([0, 0.25, 10])
        self.assertEqual(time_names(series), ['0', '0.25', '10'])
        self.assertEqual(series.names, ['0', '0.25', '10'])

    def test_from_values(self):
        series = TimeSeries.from_values([0.0, 1.0], names=['a', 'b'])
        self.assertEqual(len(series), 2)
        self.assertEqual(series[1], Instant(1.0, 'b'))
        self.assertTrue(np.array_equal(series.values, [0.0, 1.0]))
        with self.assertRaises(ValueError):
            TimeSeries.from_values([0.0, 1.0], names=['a'])

    def test_decreasing(self):
        with self.assertRaises(ValueError):
            TimeSeries.from_values([0.0, 2.0, 1.0])

    def test_repeated_values(self):
        series = TimeSeries.from_values([0.0, 1.0, 1.0, 2.0])
        self.assertEqual(len(series), 4)

    def test_hashable(self):
        instants = {Instant(1.0), Instant(1.0), Instant(1.0, 'one')}
        self.assertEqual(len(instants), 2)
        self.assertIn(Instant(1), instants)
        names = {Instant(2.0): 'x'}
        self.assertEqual(names[Instant(2.0, '2')], 'x')


class TestFindBracket(unittest.TestCase):

    def setUp(self):
        self.series = TimeSeries.from_values([0, 1, 2, 5])

    def test_between(self):
        self.assertEqual(find_bracket(self.series, 0, 3), (True, 2, 3))

    def test_after_last(self):
        self.assertEqual(find_bracket(self.series, 0, 6), (True, 3, None))

    def test_before_first(self):
        found, lo, hi = find_bracket(self.series, 0, -1)
        self.assertFalse(found)
        self.assertIsNone(hi)

    def test_exact(self):
        self.assertEqual(find_bracket(self.series, 0, 2), (True, 2, 3))
        self.assertEqual(find_bracket(self.series, 0, 5), (True, 3, None))

    def test_plain_values(self):
        self.assertEqual(find_bracket([0.0, 1.0, 2.0, 5.0], 0, 3.0),
                         (True, 2, 3))
        self.assertEqual(find_bracket(np.array([0.0, 1.0]), 0, 0.5),
                         (True, 0, 1))

    def test_repeated_values(self):
        series = TimeSeries.from_values([0.0, 1.0, 1.0, 2.0])
        self.assertEqual(find_bracket(series, 0, 1.0), (True, 2, 3))

    def test_hint(self):
        # values before the hint are not considered
        found, _, _ = find_bracket(self.series, 2, 1.5)
        self.assertFalse(found)
        self.assertEqual(find_bracket(self.series, 2, 4), (True, 2, 3))

    def test_hint_out_of_range(self):
        self.assertEqual(find_bracket(self.series, 4, 10), (False, None, None))
        with self.assertRaises(ValueError):
            find_bracket(self.series, -1, 1)

    def test_hint_reuse(self):
        times = RecordingList([0.0, 1.0, 2.0, 3.0, 4.0, 5.0])
        hint = 0
        for value in [0.5, 1.5, 1.7, 3.2, 4.0, 6.0]:
            times.accessed = []
            found, lo, hi = find_bracket(times, hint, value)
            self.assertTrue(found)
            self.assertTrue(all(i >= hint for i in times.accessed))
            self.assertEqual(lo, min(int(np.floor(value)), 5))
            hint = lo


if __name__ == '__main__':
    unittest.main()
