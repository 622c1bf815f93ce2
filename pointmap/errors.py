# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Errors raised while constructing a point-to-point mapping.

All of these are fatal for the given input: the mapping is not built
and no partial weights are returned.
"""


class MappingError(ValueError):
    """ Base class for mapping construction errors. """
    pass


class InsufficientPointsError(MappingError):
    """ Fewer than three points were provided to define a plane. """
    pass


class DegenerateGeometryError(MappingError):
    """ All points lie on a line (or coincide) so no plane exists. """
    pass


class TriangulationError(MappingError):
    """ The (perturbed) source points could not be triangulated. """
    pass
