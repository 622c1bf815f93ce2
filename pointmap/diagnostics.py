# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Write and plot the geometry of a mapping for visual debugging.

All geometry is written in the local coordinates of the mapping's
reference frame.
"""

# standard library imports
import os
import logging

# third party imports
import numpy as np
import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


def write_stl(triangulation, file='triangulation.stl', name='triangulation'):
    """ Write a triangulation as an ASCII STL surface (z = 0).

    Parameters
    ----------
    triangulation : Triangulation
        Triangulation to write.
    file : str
        Name (path) of the output file.
    name : str
        Solid name written in the file.

    Returns
    -------
    file : str
        Absolute path of the written file.
    """
    vertices = np.column_stack(
        [triangulation.vertices, np.zeros(len(triangulation.vertices))])
    file_str = f'solid {name}\n'
    for tri in triangulation.triangles:
        file_str += '  facet normal 0 0 1\n    outer loop\n'
        for ivert in tri:
            x, y, z = vertices[ivert]
            file_str += f'      vertex {x:.9e} {y:.9e} {z:.9e}\n'
        file_str += '    endloop\n  endfacet\n'
    file_str += f'endsolid {name}\n'
    with open(file, 'w') as f:
        f.write(file_str)
    logger.debug(f'Dumping triangulated surface to {file}')
    return os.path.abspath(file)


def write_obj(points, file):
    """ Write points as Wavefront OBJ vertices.

    Parameters
    ----------
    points : ndarray
        Points. *dtype=float*, *ndim=2*, *shape=(npoints, 3)*
    file : str
        Name (path) of the output file.

    Returns
    -------
    file : str
        Absolute path of the written file.
    """
    with open(file, 'w') as f:
        for x, y, z in np.asarray(points, dtype=float):
            f.write(f'v {x} {y} {z}\n')
    logger.debug(f'Dumping points to {file}')
    return os.path.abspath(file)


def write_mapping(mapping, save_dir='.'):
    """ Write the triangulation and the local source and destination
    points of a mapping.

    Writes ``triangulation.stl``, ``localSourcePoints.obj`` and
    ``localDestPoints.obj`` in ``save_dir``.

    Returns
    -------
    files : list
        Absolute paths of the written files.
    """
    if not os.path.exists(save_dir):
        os.makedirs(save_dir)
    files = [
        write_stl(mapping.triangulation,
                  os.path.join(save_dir, 'triangulation.stl')),
        write_obj(mapping.local_source,
                  os.path.join(save_dir, 'localSourcePoints.obj')),
        write_obj(mapping.local_dest,
                  os.path.join(save_dir, 'localDestPoints.obj')),
    ]
    return files


def plot_mapping(mapping, ax=None):
    """ Plot the triangulation with the destination points.

    Destination points outside the triangulation are marked in red.

    Returns
    -------
    ax : matplotlib.axes.Axes
    """
    if ax is None:
        _, ax = plt.subplots()
    tri = mapping.triangulation
    ax.triplot(tri.vertices[:, 0], tri.vertices[:, 1], tri.triangles,
               'k-', lw=0.5)
    dest = mapping.local_dest
    inside = mapping.inside
    ax.plot(dest[inside, 0], dest[inside, 1], 'b.', label='inside')
    ax.plot(dest[~inside, 0], dest[~inside, 1], 'r.', label='outside')
    ax.set_aspect('equal')
    ax.set_xlabel('local x')
    ax.set_ylabel('local y')
    ax.legend()
    return ax
