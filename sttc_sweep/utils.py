"""
.. autosummary::
    :toctree: _toctree/utils

    is_time_quantity
    magnitude_in_seconds
    window_in_seconds
    get_common_start_stop_times
    is_sorted
"""

import numpy as np
import quantities as pq


__all__ = [
    "is_time_quantity",
    "magnitude_in_seconds",
    "window_in_seconds",
    "get_common_start_stop_times",
    "is_sorted"
]


def is_time_quantity(*quantities, allow_none=False):
    """
    Parameters
    ----------
    *quantities : pq.Quantity
         A scalar or array-like to check for being a Quantity with time units.
    allow_none : bool, optional
        Allow the input to be None or not.
        Default: False

    Returns
    -------
    bool
        Whether the input is a time Quantity (True) or not (False).
        If the input is None and `allow_none` is set to True, returns True.

    """
    for quantity in quantities:
        if allow_none and quantity is None:
            continue
        if not isinstance(quantity, pq.Quantity):
            return False
        if quantity.dimensionality.simplified != pq.s.dimensionality:
            return False
    return True


def magnitude_in_seconds(value):
    """
    Converts spike times, a window or a delta-t into a plain float array
    expressed in seconds.

    Time quantities (including :class:`neo.core.SpikeTrain`, which subclasses
    :class:`quantities.Quantity`) are rescaled to seconds; anything else is
    taken to be in seconds already.

    Parameters
    ----------
    value : neo.SpikeTrain or pq.Quantity or np.ndarray or list or float
        The input times.

    Returns
    -------
    np.ndarray
        A float64 array (0-d for scalar input). Never shares memory with a
        quantity input.

    Raises
    ------
    TypeError
        If `value` is a Quantity without time units, or cannot be
        converted to a float array.

    Examples
    --------
    >>> import quantities as pq
    >>> from sttc_sweep.utils import magnitude_in_seconds
    >>> magnitude_in_seconds([2, 500] * pq.ms)
    array([0.002, 0.5  ])

    """
    if isinstance(value, pq.Quantity):
        if not is_time_quantity(value):
            raise TypeError(f"Expected time units, got "
                            f"{value.dimensionality}")
        return np.asarray(value.rescale(pq.s).magnitude, dtype=np.float64)
    try:
        return np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise TypeError(f"Cannot interpret {type(value).__name__} as "
                        f"times in seconds")


def is_sorted(times):
    """
    Parameters
    ----------
    times : np.ndarray or list or pq.Quantity
        One-dimensional spike times.

    Returns
    -------
    bool
        Whether `times` is non-decreasing.
    """
    arr = np.asarray(times)
    return bool(np.all(arr[:-1] <= arr[1:]))


def window_in_seconds(window):
    """
    Converts an analysis window into a ``(start, stop)`` pair of floats in
    seconds.

    Parameters
    ----------
    window : tuple or list or pq.Quantity or np.ndarray
        Two bounds. Either a time Quantity of two elements, a pair whose
        entries are scalar time quantities, or a pair of plain numbers in
        seconds.

    Returns
    -------
    start, stop : float

    Raises
    ------
    TypeError
        If `window` does not hold exactly two time values.
    """
    if isinstance(window, (list, tuple)):
        bounds = [magnitude_in_seconds(bound) for bound in window]
    else:
        bounds = magnitude_in_seconds(window).ravel()
    if len(bounds) != 2 or any(np.ndim(bound) != 0 for bound in bounds):
        raise TypeError("window must hold exactly two scalar times")
    start, stop = bounds
    return float(start), float(stop)


def get_common_start_stop_times(neo_objects):
    """
    Extracts the common `t_start` and the `t_stop` from the input neo objects.

    If a single neo object is given, its `t_start` and `t_stop` is returned.
    Otherwise, the aligned times are returned: the maximal `t_start` and
    minimal `t_stop` across `neo_objects`.

    Parameters
    ----------
    neo_objects : neo.SpikeTrain or list
        A neo object or a list of neo objects that have `t_start` and `t_stop`
        attributes.

    Returns
    -------
    t_start, t_stop : pq.Quantity
        Shared start and stop times.

    Raises
    ------
    TypeError
        If the input objects do not have `t_start` and `t_stop` attributes.
    ValueError
        If there is no shared interval ``[t_start, t_stop]`` across the input
        neo objects.
    """
    if hasattr(neo_objects, 't_start') and hasattr(neo_objects, 't_stop'):
        return neo_objects.t_start, neo_objects.t_stop
    try:
        t_start = max(elem.t_start for elem in neo_objects)
        t_stop = min(elem.t_stop for elem in neo_objects)
    except AttributeError:
        raise TypeError("Without an explicit window, the spike trains must "
                        "have 't_start' and 't_stop' attributes")
    if t_stop < t_start:
        raise ValueError(f"t_stop ({t_stop}) is smaller than t_start "
                         f"({t_start})")
    return t_start, t_stop
