# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Two dimensional triangulations and point location.

The triangulation algorithm is pluggable: a *triangulator* is any
callable taking an array of 2D points, *shape=(npoints, 2)*, and
returning the triangle vertex indices, *shape=(ntriangles, 3)*. Any
algorithm that covers the convex hull with non-overlapping triangles
satisfies this. The default, :func:`delaunay`, uses Qhull through
``scipy.spatial``.
"""

# standard library imports
import logging

# third party imports
import numpy as np
from scipy import spatial
from matplotlib import tri as mtri

# local imports
from pointmap.errors import TriangulationError

logger = logging.getLogger(__name__)


def delaunay(points):
    """ Delaunay triangulation of a 2D point set.

    Parameters
    ----------
    points : ndarray
        Vertex coordinates. *dtype=float*, *ndim=2*, *shape=(npoints, 2)*

    Returns
    -------
    triangles : ndarray
        Vertex indices of each triangle.
        *dtype=int*, *ndim=2*, *shape=(ntriangles, 3)*
    """
    try:
        triangulation = spatial.Delaunay(points)
    except (spatial.QhullError, ValueError) as err:
        raise TriangulationError(
            f'Delaunay triangulation failed: {err}') from err
    return triangulation.simplices


class Triangulation(object):
    """ Triangles over a set of 2D vertices.

    Accessible through **pointmap.Triangulation**.

    Attributes
    ----------
        * **vertices** - Vertex coordinates.
            *ndarray*, *dtype=float*, *shape=(npoints, 2)*
        * **triangles** - Vertex indices of each triangle.
            *ndarray*, *dtype=int*, *shape=(ntriangles, 3)*
    """

    def __init__(self, vertices, triangles):
        self.vertices = np.array(vertices, dtype=float)
        self.triangles = np.array(triangles, dtype=int)
        self._check_indices()
        self._orient()
        if np.any(self.areas() <= 0.0):
            raise TriangulationError('Triangulation has degenerate ' +
                                     'triangles.')
        self.vertices.setflags(write=False)
        self.triangles.setflags(write=False)
        try:
            self._mpl = mtri.Triangulation(
                self.vertices[:, 0].copy(), self.vertices[:, 1].copy(),
                self.triangles.copy())
            self._trifinder = self._mpl.get_trifinder()
        except (RuntimeError, ValueError) as err:
            raise TriangulationError(
                f'Invalid triangulation: {err}') from err

    def __len__(self):
        return len(self.triangles)

    def _check_indices(self):
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 2:
            raise ValueError('Vertices must have shape (npoints, 2).')
        if self.triangles.ndim != 2 or self.triangles.shape[1] != 3 or \
                len(self.triangles) == 0:
            raise TriangulationError('No triangles could be formed.')
        if self.triangles.min() < 0 or \
                self.triangles.max() >= len(self.vertices):
            raise TriangulationError('Triangle vertex index out of range.')

    def _orient(self):
        """ Reorder clockwise triangles to counterclockwise. """
        clockwise = self.areas() < 0.0
        self.triangles[clockwise, 1:] = self.triangles[clockwise, 2:0:-1]

    def boundary_edges(self):
        """ Edges belonging to a single triangle.

        Returns
        -------
        edges : ndarray
            Vertex indices of each boundary edge, sorted.
            *dtype=int*, *ndim=2*, *shape=(nedges, 2)*
        """
        edges = np.concatenate([self.triangles[:, [0, 1]],
                                self.triangles[:, [1, 2]],
                                self.triangles[:, [2, 0]]])
        edges = np.sort(edges, axis=1)
        edges, counts = np.unique(edges, axis=0, return_counts=True)
        return edges[counts == 1]

    def areas(self):
        """ Signed area of each triangle (positive if counterclockwise).
        """
        a, b, c = self._corners()
        return 0.5 * _cross2d(b - a, c - a)

    def find_triangles(self, points):
        """ Index of the triangle containing each point.

        Parameters
        ----------
        points : ndarray
            2D query points. *dtype=float*, *shape=(npoints, 2)*

        Returns
        -------
        itri : ndarray
            Containing triangle index, or ``-1`` for points outside the
            triangulation. *dtype=int*, *shape=(npoints)*
        """
        points = np.atleast_2d(np.asarray(points, dtype=float))
        if len(points) == 0:
            return np.empty(0, dtype=int)
        return np.asarray(
            self._trifinder(points[:, 0], points[:, 1]), dtype=int)

    def barycentric_weights(self, itri, points):
        """ Linear interpolation weights of points within triangles.

        Parameters
        ----------
        itri : ndarray
            Triangle index for each point. *dtype=int*, *shape=(npoints)*
        points : ndarray
            2D query points. *dtype=float*, *shape=(npoints, 2)*

        Returns
        -------
        weights : ndarray
            Weight of each of the three triangle vertices. Sums to one.
            Negative for points outside their triangle.
            *dtype=float*, *ndim=2*, *shape=(npoints, 3)*
        """
        points = np.atleast_2d(np.asarray(points, dtype=float))
        a, b, c = self._corners(itri)
        area2 = _cross2d(b - a, c - a)
        weights = np.empty([len(points), 3])
        weights[:, 1] = _cross2d(points - a, c - a) / area2
        weights[:, 2] = _cross2d(b - a, points - a) / area2
        weights[:, 0] = 1.0 - weights[:, 1] - weights[:, 2]
        return weights

    def _corners(self, itri=None):
        triangles = self.triangles if itri is None else self.triangles[itri]
        return (self.vertices[triangles[:, 0]],
                self.vertices[triangles[:, 1]],
                self.vertices[triangles[:, 2]])


def triangulate(points, triangulator=None):
    """ Triangulate a 2D point set.

    Parameters
    ----------
    points : ndarray
        Vertex coordinates. *dtype=float*, *ndim=2*, *shape=(npoints, 2)*
    triangulator : callable
        Function returning triangle vertex indices for the points.
        Default :func:`delaunay`.

    Returns
    -------
    triangulation : Triangulation
    """
    if triangulator is None:
        triangulator = delaunay
    triangulation = Triangulation(points, triangulator(points))
    logger.debug(f'Triangulated {len(points)} points into ' +
                 f'{len(triangulation)} triangles.')
    return triangulation


def _cross2d(u, v):
    """ z-component of the cross product of 2D vectors. """
    return u[..., 0]*v[..., 1] - u[..., 1]*v[..., 0]
