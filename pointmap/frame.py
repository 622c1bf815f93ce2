# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Local planar coordinate systems for 3D point clouds.

A :class:`CoordinateFrame` maps global 3D points onto local
coordinates ``(x, y, z)`` where ``x`` and ``y`` lie in the plane and
``z`` is the offset along the normal. The frame can be given
explicitly or derived from a point cloud with
:func:`calc_coordinate_frame`.
"""

# standard library imports
import logging

# third party imports
import numpy as np

# local imports
from pointmap.errors import InsufficientPointsError, DegenerateGeometryError

logger = logging.getLogger(__name__)

# tolerances
ORTHOGONALITY_TOL = 1e-6
COLINEARITY_TOL = 1e-10


class CoordinateFrame(object):
    """ Cartesian frame defined by an origin, a normal and an in-plane
    axis.

    Accessible through **pointmap.CoordinateFrame**.
    The second in-plane axis is ``e2 = normal x axis`` so that
    ``(e1, e2, e3)`` is right-handed with ``e3 = normal``.

    Attributes
    ----------
        * **origin** - Frame origin.
            *ndarray*, *dtype=float*, *shape=(3)*
        * **normal** - Unit normal of the plane (e3).
            *ndarray*, *dtype=float*, *shape=(3)*
        * **axis** - Unit in-plane axis (e1).
            *ndarray*, *dtype=float*, *shape=(3)*
        * **e2** - Second unit in-plane axis.
            *ndarray*, *dtype=float*, *shape=(3)*
    """

    def __init__(self, origin, normal, axis):
        """ Create a frame, normalizing the normal and axis.

        Parameters
        ----------
        origin : array_like
            Frame origin. *shape=(3)*
        normal : array_like
            Normal vector, need not be unit length. *shape=(3)*
        axis : array_like
            In-plane axis, need not be unit length but must be
            orthogonal to the normal. *shape=(3)*
        """
        self.origin = _as_vector(origin, 'origin')
        self.normal = _normalize(_as_vector(normal, 'normal'), 'normal')
        self.axis = _normalize(_as_vector(axis, 'axis'), 'axis')
        if abs(np.dot(self.normal, self.axis)) > ORTHOGONALITY_TOL:
            raise ValueError('Frame normal and axis are not orthogonal.')
        self.e2 = np.cross(self.normal, self.axis)
        for vec in (self.origin, self.normal, self.axis, self.e2):
            vec.setflags(write=False)

    def __str__(self):
        str_info = 'Planar coordinate frame' + \
            f'\n    origin: {self.origin}' + \
            f'\n    normal: {self.normal}' + \
            f'\n    axis:   {self.axis}'
        return str_info

    def __repr__(self):
        return f'CoordinateFrame(origin={self.origin.tolist()}, ' + \
            f'normal={self.normal.tolist()}, axis={self.axis.tolist()})'

    @property
    def rotation(self):
        """ Rotation matrix with rows (e1, e2, e3). *shape=(3, 3)* """
        return np.array([self.axis, self.e2, self.normal])

    def local_position(self, points):
        """ Convert global points to local coordinates.

        Parameters
        ----------
        points : array_like
            Global coordinates. *dtype=float*, *shape=(npoints, 3)*

        Returns
        -------
        local : ndarray
            Local coordinates (x, y, z), where z is the offset along
            the normal. *dtype=float*, *ndim=2*, *shape=(npoints, 3)*
        """
        points = as_points(points)
        return np.dot(points - self.origin, self.rotation.T)

    def global_position(self, local):
        """ Convert local coordinates back to global points.

        Inverse of :meth:`local_position`.
        """
        local = as_points(local)
        return np.dot(local, self.rotation) + self.origin


def calc_coordinate_frame(points):
    """ Derive a planar coordinate frame from a point cloud.

    Accessible through ``pointmap.calc_coordinate_frame()``.
    Uses the first point as origin, the direction to the point furthest
    from it as the in-plane axis, and the point furthest from that line
    to define the normal. This maximizes the spread of the three
    defining points.

    Parameters
    ----------
    points : array_like
        Point cloud. *dtype=float*, *ndim=2*, *shape=(npoints, 3)*

    Returns
    -------
    frame : CoordinateFrame
        Frame with origin at ``points[0]``.

    Raises
    ------
    InsufficientPointsError
        If fewer than three points are provided.
    DegenerateGeometryError
        If all points are colinear (or coincident).
    """
    points = as_points(points)
    npoints = len(points)
    if npoints < 3:
        raise InsufficientPointsError(
            f'Only {npoints} points provided. Need at least three ' +
            'non-colinear points to be able to interpolate.')

    p0 = points[0]
    offsets = points[1:] - p0

    # furthest point from p0
    dist = np.linalg.norm(offsets, axis=1)
    i1 = int(np.argmax(dist))
    max_dist = dist[i1]
    if max_dist <= 0.0:
        raise DegenerateGeometryError(
            'All points coincide. Cannot find points that make a valid ' +
            'normal.')
    e1 = offsets[i1] / max_dist

    # furthest point from the line p0-p1
    perp = offsets - np.outer(np.dot(offsets, e1), e1)
    perp_dist = np.linalg.norm(perp, axis=1)
    perp_dist[i1] = -1.0
    i2 = int(np.argmax(perp_dist))
    if perp_dist[i2] <= COLINEARITY_TOL * max_dist:
        raise DegenerateGeometryError(
            'Cannot find points that make a valid normal. Have points ' +
            f'{p0} and {points[i1+1]}. Need at least three points which ' +
            'are not in a line.')

    normal = np.cross(e1, offsets[i2])
    frame = CoordinateFrame(p0, normal, e1)
    logger.debug(
        f'Used points {p0} {points[i1+1]} {points[i2+1]} to define ' +
        f'coordinate system with normal {frame.normal}')
    return frame


def as_points(points):
    """ Return points as a float array of shape (npoints, 3). """
    points = np.asarray(points, dtype=float)
    if points.size == 0:
        return points.reshape(0, 3)
    points = np.atleast_2d(points)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(
            f'Points must have shape (npoints, 3), got {points.shape}.')
    return points


def _as_vector(vec, name):
    vec = np.array(vec, dtype=float).squeeze()
    if vec.shape != (3,):
        raise ValueError(f'"{name}" must be a 3D vector.')
    return vec


def _normalize(vec, name):
    mag = np.linalg.norm(vec)
    if mag == 0.0:
        raise ValueError(f'"{name}" has zero length.')
    return vec / mag
