# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Map point data from files onto new points.

Accessible through ``pointmap.run()`` or the ``pointmap`` executable.
"""

# standard library imports
import logging
import warnings
import os

# third party imports
import numpy as np

# local imports
from pointmap.interpolation import PlanarInterpolation, DEFAULT_SEED
from pointmap.time_series import TimeSeries, find_bracket
from pointmap import diagnostics


def run(source_points, dest_points, source_fields, perturb=1e-5,
        rand_seed=DEFAULT_SEED, times=None, query_times=None,
        save_dir='results_pointmap', save_level='fields', verbosity=0):
    """ Interpolate fields given at source points onto destination
    points.

    Parameters
    ----------
    source_points : str
        File with the source point coordinates, one point per line
        (``numpy.loadtxt`` format). *shape=(nsource, 3)*
    dest_points : str
        File with the destination point coordinates.
        *shape=(ndest, 3)*
    source_fields : list
        Files with field values at the source points. Each file is
        one scalar *shape=(nsource)* or multi-component
        *shape=(nsource, ncomponents)* field. *str*
    perturb : float
        Perturbation fraction of the source points. Default *'1e-5'*.
    rand_seed : int
        Seed of the perturbation. Default *'123456'*.
    times : list
        Time value of each source field. If given together with
        *query_times* the fields are a time series and are blended in
        time. Default *'None'*.
    query_times : list
        Non-decreasing times at which to blend the fields.
        Default *'None'*.
    save_dir : str
        Folder where to save results. Default *'./results_pointmap'*.
    save_level : str
        Level of results to save: *'None'* to not save results,
        *'fields'* to save the interpolated fields, *'debug'* to also
        save the weights and geometry. Default *'fields'*.
    verbosity : int
        Logging verbosity level, between -1 and 9. For debug-level
        logging use *'debug'*. Default *'0'*.

    Returns
    -------
    results : dict
        Interpolated fields keyed by the source field file name, or by
        the query time name when blending in time. Each entry is an
        ndarray with *shape=(ndest)* or *shape=(ndest, ncomponents)*.
    """
    # configure logger
    if verbosity == 'debug':
        logging.basicConfig(format='%(message)s', level=logging.DEBUG)
    else:
        logging.basicConfig(format='%(message)s', level=_log_level(verbosity))
    logger = logging.getLogger(__name__)

    if isinstance(source_fields, str):
        source_fields = [source_fields]

    # create save directory
    if save_level is not None:
        _create_dir(save_dir)

    # weights
    mapping = PlanarInterpolation(
        np.loadtxt(source_points, ndmin=2), np.loadtxt(dest_points, ndmin=2),
        perturb, rand_seed=rand_seed)
    logger.log(_log_level(0), str(mapping))
    if save_level == 'debug':
        np.savetxt(os.path.join(save_dir, 'nearest_vertex'),
                   mapping.nearest_vertex, fmt='%i')
        np.savetxt(os.path.join(save_dir, 'nearest_vertex_weight'),
                   mapping.nearest_vertex_weight)
        diagnostics.write_mapping(mapping, save_dir)

    # interpolate
    fields = []
    for file in source_fields:
        logger.log(_log_level(1), f'Interpolating {file}')
        fields.append(mapping.interpolate(np.loadtxt(file)))

    if times is None or query_times is None:
        results = {os.path.basename(file): field
                   for file, field in zip(source_fields, fields)}
    else:
        results = _blend(TimeSeries.from_values(times), fields, query_times)

    # save
    if save_level is not None:
        for key, val in results.items():
            np.savetxt(os.path.join(save_dir, key), val)

    logger.log(_log_level(0), 'Done.')
    return results


def _blend(series, fields, query_times):
    """ Blend fields linearly in time at each query time.

    Holds the last field after the final time. Query times before the
    first time cannot be bracketed and are skipped.
    """
    logger = logging.getLogger(__name__ + '._blend')
    if len(series) != len(fields):
        raise ValueError('Number of times and source fields differ.')
    results = {}
    hint = 0
    for time in query_times:
        found, lo, hi = find_bracket(series, hint, time)
        if not found:
            message = f'Cannot find sampling values for time {time}. ' + \
                f'Have sampling values for times {series.names}'
            warnings.warn(message, RuntimeWarning)
            continue
        hint = lo
        t_lo = series[lo].value
        if hi is None or series[hi].value == t_lo:
            field = fields[lo]
        else:
            factor = (time - t_lo) / (series[hi].value - t_lo)
            field = (1.0 - factor)*fields[lo] + factor*fields[hi]
        name = f'{time:g}'
        logger.log(_log_level(1),
                   f'Time {name}: samples {series[lo].name} and ' +
                   f'{series[hi].name if hi is not None else "-"}')
        results[name] = field
    return results


def _log_level(verbosity):
    """Return log level for specified verbosity level. """
    message = 'Verbosity should be between -1 and 9'
    if verbosity > 9:
        warnings.warn(message, RuntimeWarning)
        verbosity = 9
    elif verbosity < -1:
        warnings.warn(message, RuntimeWarning)
        verbosity = -1
    level = 29 - verbosity
    return level


def _create_dir(dir):
    """ Create directory if it does not exist. """
    if not os.path.exists(dir):
        os.makedirs(dir)
