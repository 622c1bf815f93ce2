#!/usr/bin/env python3
# Copyright 2020 Virginia Polytechnic Institute and State University.

# standard library imports
import unittest

# third party imports
import numpy as np

# local imports
import pointmap
from pointmap.frame import calc_coordinate_frame, CoordinateFrame


def _tilted_points(npoints=20, seed=0):
    """ Random points on the plane through (1, 2, 3) with normal
    (1, 1, 1). """
    rng = np.random.default_rng(seed)
    e1 = np.array([1.0, -1.0, 0.0]) / np.sqrt(2.0)
    e2 = np.array([1.0, 1.0, -2.0]) / np.sqrt(6.0)
    coeffs = rng.uniform(-5.0, 5.0, size=(npoints, 2))
    return np.array([1.0, 2.0, 3.0]) + np.outer(coeffs[:, 0], e1) + \
        np.outer(coeffs[:, 1], e2)


class TestCoordinateFrame(unittest.TestCase):

    def test_axes(self):
        frame = CoordinateFrame([0, 0, 0], [0, 0, 2], [3, 0, 0])
        self.assertTrue(np.allclose(frame.normal, [0, 0, 1]))
        self.assertTrue(np.allclose(frame.axis, [1, 0, 0]))
        self.assertTrue(np.allclose(frame.e2, [0, 1, 0]))

    def test_local_position(self):
        frame = CoordinateFrame([1, 1, 1], [0, 0, 1], [0, 1, 0])
        local = frame.local_position([[1, 2, 4], [0, 1, 1]])
        self.assertTrue(np.allclose(local, [[1, 0, 3], [0, 1, 0]]))

    def test_global_position(self):
        points = _tilted_points()
        frame = calc_coordinate_frame(points)
        local = frame.local_position(points)
        self.assertTrue(np.allclose(frame.global_position(local), points))

    def test_not_orthogonal(self):
        with self.assertRaises(ValueError):
            CoordinateFrame([0, 0, 0], [0, 0, 1], [0, 1, 1])

    def test_zero_length(self):
        with self.assertRaises(ValueError):
            CoordinateFrame([0, 0, 0], [0, 0, 0], [1, 0, 0])

    def test_read_only(self):
        frame = CoordinateFrame([0, 0, 0], [0, 0, 1], [1, 0, 0])
        with self.assertRaises(ValueError):
            frame.normal[0] = 1.0


class TestCalcCoordinateFrame(unittest.TestCase):

    def test_unit_square(self):
        points = [[0, 0, 0], [1, 0, 0], [0, 1, 0], [1, 1, 0]]
        frame = calc_coordinate_frame(points)
        self.assertTrue(np.allclose(frame.origin, [0, 0, 0]))
        # furthest point from origin is the opposite corner
        self.assertTrue(np.allclose(frame.axis, [1/np.sqrt(2), 1/np.sqrt(2), 0]))
        self.assertAlmostEqual(abs(frame.normal[2]), 1.0)

    def test_tilted_plane(self):
        points = _tilted_points()
        frame = calc_coordinate_frame(points)
        self.assertAlmostEqual(np.linalg.norm(frame.normal), 1.0)
        self.assertAlmostEqual(np.linalg.norm(frame.axis), 1.0)
        self.assertAlmostEqual(np.dot(frame.normal, frame.axis), 0.0)
        normal = np.ones(3) / np.sqrt(3.0)
        self.assertAlmostEqual(abs(np.dot(frame.normal, normal)), 1.0)
        # all points are in the plane
        local = frame.local_position(points)
        self.assertTrue(np.allclose(local[:, 2], 0.0))

    def test_insufficient_points(self):
        with self.assertRaises(pointmap.InsufficientPointsError):
            calc_coordinate_frame([[0, 0, 0], [1, 0, 0]])
        with self.assertRaises(pointmap.InsufficientPointsError):
            calc_coordinate_frame([])

    def test_colinear(self):
        points = [[0, 0, 0], [1, 1, 1], [2, 2, 2], [3, 3, 3]]
        with self.assertRaises(pointmap.DegenerateGeometryError):
            calc_coordinate_frame(points)

    def test_coincident(self):
        points = [[1, 1, 1]] * 4
        with self.assertRaises(pointmap.DegenerateGeometryError):
            calc_coordinate_frame(points)

    def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            calc_coordinate_frame([[0, 0, 0], [1, 0, 0], [2, 0, 0]])

    def test_bad_shape(self):
        with self.assertRaises(ValueError):
            calc_coordinate_frame([[0, 0], [1, 0], [0, 1]])


if __name__ == '__main__':
    unittest.main()
