# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Interpolation between non-matching point sets on a plane.

Field values known at a set of source points are mapped onto a
different set of destination points. Both point sets are projected
onto a local planar coordinate system, the source points are slightly
perturbed and triangulated, and linear (barycentric) weights are
computed for each destination point. The weights are computed once and
reused for every field:

.. code-block:: python

   >>> mapping = pointmap.build(source_points, dest_points, 1e-5)
   >>> dest_values = mapping.interpolate(source_values)
"""

# standard library imports
import logging
import warnings

# third party imports
import numpy as np
from scipy import spatial

# local imports
from pointmap.frame import calc_coordinate_frame, as_points
from pointmap.triangulation import triangulate
from pointmap.errors import InsufficientPointsError

logger = logging.getLogger(__name__)

# seed of the random perturbation, same value as the legacy constant
DEFAULT_SEED = 123456

# relative tolerance for distances
SMALL = 1e-10


class PlanarInterpolation(object):
    """ Linear interpolation weights from source to destination points.

    Accessible through **pointmap.PlanarInterpolation**.
    Destination points inside the triangulation get the barycentric
    weights of the three vertices of their containing triangle.
    Destination points outside it but within the perturbation distance
    (e.g. on the boundary of the unperturbed source points) are
    projected onto the nearest boundary edge and get linear weights of
    its two vertices. Destination points further away get the nearest
    source point (in unperturbed local coordinates, lowest index on
    ties) with weight one.

    Attributes
    ----------
        * **frame** - Reference coordinate system. *CoordinateFrame*
        * **perturb** - Perturbation fraction used. *float*
        * **rand_seed** - Seed of the perturbation. *int*
        * **nsource** - Number of source points. *int*
        * **ndest** - Number of destination points. *int*
        * **triangulation** - Triangulation of the perturbed source
            points in local coordinates. *Triangulation*
        * **local_source** - Unperturbed local source coordinates.
            *ndarray*, *dtype=float*, *shape=(nsource, 3)*
        * **local_dest** - Local destination coordinates.
            *ndarray*, *dtype=float*, *shape=(ndest, 3)*
        * **nearest_vertex** - Source point indices used by each
            destination point. *ndarray*, *dtype=int*,
            *shape=(ndest, 3)*
        * **nearest_vertex_weight** - Weights of those source points.
            *ndarray*, *dtype=float*, *shape=(ndest, 3)*
        * **inside** - Whether each destination point lies inside the
            perturbed triangulation. *ndarray*, *dtype=bool*, *shape=(ndest)*
    """

    def __init__(self, source_points, dest_points, perturb,
                 rand_seed=DEFAULT_SEED, frame=None, triangulator=None):
        """ Compute the interpolation weights.

        Parameters
        ----------
        source_points : array_like
            Points where field values are known.
            *dtype=float*, *ndim=2*, *shape=(nsource, 3)*
        dest_points : array_like
            Points where field values are wanted.
            *dtype=float*, *ndim=2*, *shape=(ndest, 3)*
        perturb : float
            Fraction of the bounding box size by which the source
            points are randomly perturbed before triangulating, to break
            ties on regular grids. Value in [0, 1).
        rand_seed : int
            Seed of the perturbation. Identical inputs and seed always
            give identical weights. Default *DEFAULT_SEED*.
        frame : CoordinateFrame
            Reference coordinate system. If *None* it is derived from
            the source points. Default *None*.
        triangulator : callable
            Triangulation algorithm, see
            :mod:`pointmap.triangulation`. Default Delaunay.

        Raises
        ------
        InsufficientPointsError, DegenerateGeometryError
            If the frame is derived and the source points do not define
            a plane.
        TriangulationError
            If the perturbed source points cannot be triangulated.
        """
        if not 0.0 <= perturb < 1.0:
            raise ValueError('"perturb" must be in the range [0, 1).')
        source_points = as_points(source_points)
        dest_points = as_points(dest_points)
        if frame is None:
            frame = calc_coordinate_frame(source_points)
        elif len(source_points) < 3:
            raise InsufficientPointsError(
                f"Only {len(source_points)} source points provided. " +
                "Need at least three to triangulate.")
        self.frame = frame
        self.perturb = perturb
        self.rand_seed = rand_seed
        self.triangulator = triangulator
        self.nsource = len(source_points)
        self.ndest = len(dest_points)
        self.local_source = self.frame.local_position(source_points)
        self.local_dest = self.frame.local_position(dest_points)
        self._calc_weights()
        for array in (self.local_source, self.local_dest,
                      self.nearest_vertex, self.nearest_vertex_weight,
                      self.inside):
            array.setflags(write=False)

    def __str__(self):
        str_info = 'Planar interpolation' + \
            f'\n    source points:      {self.nsource}' + \
            f'\n    destination points: {self.ndest}' + \
            f'\n    outside hull:       {self.ndest - self.inside.sum()}'
        return str_info

    def _calc_weights(self):
        """ Perturb, triangulate and compute weights. """
        vertices = self.local_source[:, :2]
        bb_min = vertices.min(axis=0)
        bb_max = vertices.max(axis=0)
        bb_mid = 0.5 * (bb_min + bb_max)
        logger.debug(
            f'Perturbing points with {self.perturb} fraction of a random ' +
            f'position inside ({bb_min}, {bb_max}) to break any ties on ' +
            'regular meshes.')
        if self.perturb == 0.0:
            warnings.warn('No perturbation. Triangulation of regular ' +
                          'grids may be ill-defined.', RuntimeWarning)

        # the same seed gives the same perturbation on every call
        rng = np.random.default_rng(self.rand_seed)
        positions = rng.uniform(
            bb_min, bb_max, size=(self.nsource, 2))
        perturbed = vertices + self.perturb * (positions - bb_mid)
        self.triangulation = triangulate(perturbed, self.triangulator)

        # weights inside the triangulation
        points = self.local_dest[:, :2]
        itri = self.triangulation.find_triangles(points)
        self.inside = itri >= 0
        self.nearest_vertex = np.zeros([self.ndest, 3], dtype=int)
        self.nearest_vertex_weight = np.zeros([self.ndest, 3])
        if np.any(self.inside):
            weights = self.triangulation.barycentric_weights(
                itri[self.inside], points[self.inside])
            # round-off on edges
            weights = np.clip(weights, 0.0, None)
            weights /= weights.sum(axis=1, keepdims=True)
            self.nearest_vertex[self.inside] = \
                self.triangulation.triangles[itri[self.inside]]
            self.nearest_vertex_weight[self.inside] = weights

        # outside the perturbed triangulation
        outside = np.flatnonzero(~self.inside)
        if len(outside):
            # closer than the largest perturbation: nearest boundary edge
            diag = np.linalg.norm(bb_max - bb_min)
            tol = (self.perturb + SMALL) * diag
            iedge, t, dist = _nearest_edge(
                perturbed, self.triangulation.boundary_edges(),
                points[outside])
            near = dist <= tol
            inear = outside[near]
            self.nearest_vertex[inear, :2] = iedge[near]
            self.nearest_vertex[inear, 2] = iedge[near, 0]
            self.nearest_vertex_weight[inear, 0] = 1.0 - t[near]
            self.nearest_vertex_weight[inear, 1] = t[near]

            # further away: nearest source point, lowest index on ties
            ifar = outside[~near]
            if len(ifar):
                tree = spatial.cKDTree(vertices)
                dist, _ = tree.query(points[ifar])
                radius = dist * (1.0 + SMALL) + SMALL * diag
                neighbours = tree.query_ball_point(points[ifar], radius)
                inearest = np.array([min(ids) for ids in neighbours])
                self.nearest_vertex[ifar] = inearest[:, None]
                self.nearest_vertex_weight[ifar, 0] = 1.0
            logger.debug(
                f'{len(inear)} points snapped to the triangulation ' +
                f'boundary, {len(ifar)} mapped to the nearest source point.')
        logger.debug(
            f'Calculated weights for {self.ndest} points, ' +
            f'{len(outside)} outside the triangulation.')

    def entry(self, index):
        """ Source indices and weights for one destination point.

        Returns
        -------
        entry : list
            List of ``(source index, weight)`` tuples.
        """
        vertex = self.nearest_vertex[index]
        weight = self.nearest_vertex_weight[index]
        return [(int(vertex[i]), float(weight[i])) for i in range(3)
                if self.inside[index] or weight[i] > 0.0]

    def interpolate(self, field):
        """ Interpolate a source field onto the destination points.

        Parameters
        ----------
        field : array_like
            Values at the source points. Scalar fields have
            *shape=(nsource)*, multi-component fields (e.g. vectors)
            have *shape=(nsource, ncomponents)*.

        Returns
        -------
        dest_field : ndarray
            Values at the destination points.
            *dtype=float*, *shape=(ndest)* or *(ndest, ncomponents)*
        """
        field = np.asarray(field, dtype=float)
        if field.ndim == 0 or len(field) != self.nsource:
            raise ValueError(
                f'Number of field values ({np.size(field)}) differs ' +
                f'from number of source points ({self.nsource}).')
        shape = self.nearest_vertex_weight.shape + (1,)*(field.ndim - 1)
        weights = self.nearest_vertex_weight.reshape(shape)
        # unused slots have zero weight and must not pick up inf or nan
        with np.errstate(invalid='ignore'):
            terms = np.where(weights != 0.0,
                             weights * field[self.nearest_vertex], 0.0)
        return terms.sum(axis=1)


def _nearest_edge(vertices, edges, points):
    """ Nearest edge to each point and the position along it.

    Returns
    -------
    edge : ndarray
        Vertex indices of the nearest edge. *shape=(npoints, 2)*
    t : ndarray
        Position of the closest point along the edge, 0 at the first
        vertex and 1 at the second. *shape=(npoints)*
    dist : ndarray
        Distance to the edge. *shape=(npoints)*
    """
    a = vertices[edges[:, 0]]
    d = vertices[edges[:, 1]] - a
    rel = points[:, None, :] - a[None, :, :]
    t = np.einsum('pek,ek->pe', rel, d) / np.einsum('ek,ek->e', d, d)
    t = np.clip(t, 0.0, 1.0)
    dist = np.linalg.norm(rel - t[..., None]*d[None, :, :], axis=2)
    inearest = np.argmin(dist, axis=1)
    irow = np.arange(len(points))
    return edges[inearest], t[irow, inearest], dist[irow, inearest]


def build(source_points, dest_points, perturb, rand_seed=DEFAULT_SEED,
          frame=None, triangulator=None):
    """ Create a :class:`PlanarInterpolation`.

    Accessible through ``pointmap.build()``.
    The coordinate frame is derived from the source points unless one is
    given. See :class:`PlanarInterpolation` for the parameters.
    """
    return PlanarInterpolation(source_points, dest_points, perturb,
                               rand_seed=rand_seed, frame=frame,
                               triangulator=triangulator)


def interpolate(mapping, field):
    """ Interpolate a source field using precomputed weights.

    Accessible through ``pointmap.interpolate()``.
    See :meth:`PlanarInterpolation.interpolate`.
    """
    return mapping.interpolate(field)
