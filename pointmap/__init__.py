# Copyright 2020 Virginia Polytechnic Institute and State University.
""" pointmap: interpolation between non-matching planar point sets. """

from pointmap.errors import *
from pointmap.frame import CoordinateFrame, calc_coordinate_frame
from pointmap.triangulation import Triangulation, triangulate, delaunay
from pointmap.interpolation import (
    PlanarInterpolation, build, interpolate, DEFAULT_SEED)
from pointmap.time_series import (
    Instant, TimeSeries, time_names, find_bracket)
from pointmap import diagnostics
from pointmap.main import run
