# Copyright 2020 Virginia Polytechnic Institute and State University.
""" Time series of sampled instants and bracket search.

Used to pick the two samples to blend at a given time. The search hint
is owned by the caller: reuse the returned lower index as the next
hint when marching forward in time.

.. code-block:: python

   >>> hint = 0
   >>> for time in query_times:
   ...     found, lo, hi = pointmap.find_bracket(series, hint, time)
   ...     if found:
   ...         hint = lo
"""

# standard library imports
import logging

# third party imports
import numpy as np

logger = logging.getLogger(__name__)


class Instant(object):
    """ A time value and its display name.

    The default name is the value formatted as ``'%g'``, which is how
    time directories are named.
    """

    def __init__(self, value, name=None):
        self.value = float(value)
        self.name = f'{self.value:g}' if name is None else str(name)

    def __repr__(self):
        return f'Instant({self.value}, {self.name!r})'

    def __eq__(self, other):
        if not isinstance(other, Instant):
            return NotImplemented
        return self.value == other.value and self.name == other.name

    def __hash__(self):
        return hash((self.value, self.name))


class TimeSeries(object):
    """ Ordered, non-decreasing sequence of :class:`Instant`.

    Accessible through **pointmap.TimeSeries**.
    """

    def __init__(self, instants):
        instants = [inst if isinstance(inst, Instant) else Instant(inst)
                    for inst in instants]
        values = np.array([inst.value for inst in instants], dtype=float)
        if np.any(np.diff(values) < 0):
            raise ValueError('Time values must be non-decreasing.')
        self._instants = tuple(instants)
        self.values = values
        self.values.setflags(write=False)

    @classmethod
    def from_values(cls, values, names=None):
        """ Create a time series from time values and optional names. """
        if names is None:
            names = [None] * len(values)
        if len(names) != len(values):
            raise ValueError('Number of names and values differ.')
        return cls([Instant(v, n) for v, n in zip(values, names)])

    def __len__(self):
        return len(self._instants)

    def __getitem__(self, index):
        return self._instants[index]

    def __iter__(self):
        return iter(self._instants)

    def __repr__(self):
        return f'TimeSeries({list(self._instants)})'

    @property
    def names(self):
        return time_names(self)


def time_names(times):
    """ Names of all instants in a time series.

    Parameters
    ----------
    times : TimeSeries or list
        Sequence of :class:`Instant`.

    Returns
    -------
    names : list
        Name of each instant. *str*
    """
    return [inst.name for inst in times]


def find_bracket(times, hint, value):
    """ Find the two samples bracketing a time value.

    Accessible through ``pointmap.find_bracket()``.
    Scans forward from ``hint``: indices below the hint are never
    examined, so queries must be non-decreasing when the returned lower
    index is reused as hint.

    Parameters
    ----------
    times : TimeSeries or array_like
        Non-decreasing time series, or a sequence of time values.
    hint : int
        Index at which to start the search.
    value : float
        Query time.

    Returns
    -------
    found : bool
        Whether any sample at or after ``hint`` has time <= ``value``.
    lo : int
        Largest index >= ``hint`` with time <= ``value``. *None* if not
        found.
    hi : int
        ``lo + 1``, or *None* if ``lo`` is the last sample (hold or
        extrapolate the last sample) or if not found.
    """
    if hint < 0:
        raise ValueError('"hint" must be a non-negative index.')
    ntimes = len(times)

    lo = None
    for i in range(hint, ntimes):
        if _time_value(times[i]) > value:
            break
        lo = i

    if lo is None:
        logger.debug(f'Cannot find sampling time for {value} from index ' +
                     f'{hint} in {ntimes} times.')
        return False, None, None

    hi = lo + 1 if lo < ntimes - 1 else None
    if hi is None:
        logger.debug(f'Found time {value} after index: {lo} ' +
                     f'time: {_time_value(times[lo])}')
    else:
        logger.debug(f'Found time {value} in between index: {lo} ' +
                     f'time: {_time_value(times[lo])} and index: {hi} ' +
                     f'time: {_time_value(times[hi])}')
    return True, lo, hi


def _time_value(inst):
    return inst.value if isinstance(inst, Instant) else float(inst)
