# -*- coding: utf-8 -*-
"""
This module computes the Spike Time Tiling Coefficient (STTC) between two
spike trains over a sweep of synchronicity windows `dt`, from 0 up to a
maximum value in millisecond steps.

The computation follows the C implementation of
:cite:`correlation-Cutts2014_14288` step by step, so that its output can be
used to cross-validate faster implementations of the same statistic. In
particular, the proportion of time tiled by a train only subtracts the
overlap of adjacent spikes, and a coefficient whose denominator vanishes is
returned as the raw floating point result (``inf`` or ``nan``).

.. autosummary::
    :toctree: _toctree/spike_time_tiling

    spike_time_tiling_coefficient_sweep
    spike_time_tiling_coefficient
    delta_t_sweep
    clip_to_window
    run_p
    run_t

:copyright: Copyright 2014-2024 by the Elephant team, see `doc/authors.rst`.
:license: Modified BSD, see LICENSE.txt for details.
"""

import logging
import warnings

import neo
import numpy as np
import quantities as pq

from sttc_sweep.schemas.function_validator import validate_with
from sttc_sweep.schemas.schema_spike_time_tiling import (
    PydanticSpikeTimeTilingCoefficient,
    PydanticSpikeTimeTilingCoefficientSweep)
from sttc_sweep.utils import (get_common_start_stop_times,
                              magnitude_in_seconds, window_in_seconds)


__all__ = [
    "spike_time_tiling_coefficient_sweep",
    "spike_time_tiling_coefficient",
    "delta_t_sweep",
    "clip_to_window",
    "run_p",
    "run_t",
    "DT_STEP"
]

logger = logging.getLogger(__name__)

# Resolution of the delta-t sweep, in seconds.
DT_STEP = 0.001


def clip_to_window(times, start, stop):
    """
    Returns the spikes of a sorted train that fall inside ``[start, stop]``.

    Parameters
    ----------
    times : np.ndarray
        Spike times in seconds, in non-decreasing order.
    start, stop : float
        Bounds of the analysis window in seconds. Both are inclusive.

    Returns
    -------
    np.ndarray
        The maximal contiguous slice of `times` inside the window. It is a
        view of `times`; the input is never modified.

    Examples
    --------
    >>> import numpy as np
    >>> from sttc_sweep.spike_time_tiling import clip_to_window
    >>> clip_to_window(np.array([-5.0, 0.0, 0.5, 1.0, 5.0]), 0.0, 1.0)
    array([0. , 0.5, 1. ])

    """
    times = np.asarray(times)
    first = np.searchsorted(times, start, side='left')
    last = first + np.searchsorted(times[first:], stop, side='right')
    return times[first:last]


def run_p(times_1, times_2, dt):
    """
    Returns the number of spikes in `times_1` that lie within +- `dt` of any
    spike in `times_2`.

    Each spike of `times_1` is counted at most once. Both trains must be
    sorted: a single cursor walks forward through `times_2` and is shared by
    all spikes of `times_1`, so the cost is linear in the number of spikes.
    With ``dt = 0`` only exact coincidences are counted.
    """
    n_2 = len(times_2)
    count = 0
    j = 0
    for t_1 in times_1:
        while j < n_2:
            if abs(t_1 - times_2[j]) <= dt:
                count += 1
                break
            elif times_2[j] > t_1:
                break
            j += 1
    return count


def run_t(times, dt, start, stop):
    """
    Returns the duration of ``[start, stop]`` that lies within +- `dt` of the
    spikes in `times` (not normalised by the window length).

    Every spike first contributes ``2 * dt``. The overlap of each pair of
    adjacent spikes closer than ``2 * dt`` is then subtracted, followed by
    the parts of the first and last intervals that stick out of the window.
    A single spike is clipped at the start or, failing that, at the stop.

    Notes
    -----
    Overlaps are only computed between adjacent spikes, in the order of the
    C implementation of Cutts and Eglen, so that the result agrees with it
    to the last bit.
    """
    n_spikes = len(times)
    covered = 2 * n_spikes * dt

    if n_spikes == 1:
        if times[0] - start < dt:
            covered = covered - start + times[0] - dt
        elif times[0] + dt > stop:
            covered = covered - times[0] - dt + stop
        return covered

    for i in range(n_spikes - 1):
        diff = times[i + 1] - times[i]
        if diff < 2 * dt:
            covered = covered - 2 * dt + diff

    if times[0] - start < dt:
        covered = covered - start + times[0] - dt
    if stop - times[-1] < dt:
        covered = covered - times[-1] - dt + stop
    return covered


def _tiling_index(times_i, times_j, dt, start, stop):
    # STTC of two already clipped, non-empty trains at a single dt
    duration = stop - start
    ta = np.float64(run_t(times_i, dt, start, stop)) / duration
    tb = np.float64(run_t(times_j, dt, start, stop)) / duration
    pa = np.float64(run_p(times_i, times_j, dt)) / len(times_i)
    pb = np.float64(run_p(times_j, times_i, dt)) / len(times_j)
    with np.errstate(divide='ignore', invalid='ignore'):
        index = 0.5 * (pa - tb) / (1 - tb * pa) + \
                0.5 * (pb - ta) / (1 - ta * pb)
    return float(index)


def _times_in_seconds(spiketrain, name):
    times = magnitude_in_seconds(spiketrain)
    if times.ndim != 1:
        raise TypeError(f"{name} must be a one-dimensional sequence of "
                        f"spike times")
    if not np.all(np.isfinite(times)):
        raise ValueError(f"{name} must only contain finite spike times")
    return times


def _resolve_window(spiketrain_i, spiketrain_j, window):
    if window is None:
        if not (isinstance(spiketrain_i, neo.SpikeTrain)
                and isinstance(spiketrain_j, neo.SpikeTrain)):
            raise TypeError("window is required unless both spike trains are "
                            "neo.SpikeTrain objects")
        t_start, t_stop = get_common_start_stop_times([spiketrain_i,
                                                       spiketrain_j])
        start = magnitude_in_seconds(t_start).item()
        stop = magnitude_in_seconds(t_stop).item()
    else:
        start, stop = window_in_seconds(window)
    if not (np.isfinite(start) and np.isfinite(stop)):
        raise ValueError(f"window bounds must be finite, found: "
                         f"({start}, {stop})")
    if stop <= start:
        raise ValueError(f"window[1] must be greater than window[0], found: "
                         f"({start}, {stop})")
    return start, stop


def _scalar_in_seconds(value, name):
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"{name} must be a real number or a time Quantity, "
                        f"not {type(value).__name__}")
    try:
        magnitude = magnitude_in_seconds(value)
    except TypeError:
        raise TypeError(f"{name} must be a real number or a time Quantity")
    if magnitude.size != 1:
        raise TypeError(f"{name} must be a scalar, found shape "
                        f"{magnitude.shape}")
    magnitude = magnitude.item()
    if not np.isfinite(magnitude) or magnitude < 0:
        raise ValueError(f"{name} must be a finite value >= 0, found: "
                         f"{value}")
    return magnitude


def delta_t_sweep(max_dt: pq.Quantity) -> np.ndarray:
    """
    Enumerates the synchronicity windows of a sweep.

    Parameters
    ----------
    max_dt : float or pq.Quantity
        The largest delta-t, in seconds if given as a plain number. It is
        rounded up to the next multiple of one millisecond.

    Returns
    -------
    np.ndarray
        ``ceil(max_dt / 0.001) + 1`` values ``k / 1000`` seconds, starting at
        0.

    Raises
    ------
    ValueError
        If `max_dt` is negative or not finite.

    Examples
    --------
    >>> from sttc_sweep.spike_time_tiling import delta_t_sweep
    >>> delta_t_sweep(0.0025)
    array([0.   , 0.001, 0.002, 0.003])

    """
    max_dt = _scalar_in_seconds(max_dt, 'max_dt')
    n_steps = int(np.ceil(max_dt / DT_STEP)) + 1
    return np.arange(n_steps) / 1000.0


@validate_with(PydanticSpikeTimeTilingCoefficientSweep)
def spike_time_tiling_coefficient_sweep(
        spiketrain_i: neo.core.SpikeTrain,
        spiketrain_j: neo.core.SpikeTrain,
        max_dt: pq.Quantity,
        window: pq.Quantity = None,
        return_dt: bool = False) -> np.ndarray:
    """
    Calculates the Spike Time Tiling Coefficient (STTC) of
    :cite:`correlation-Cutts2014_14288` at every delta-t from 0 to `max_dt`,
    in steps of one millisecond.

    .. math::
        STTC = 1/2((PA - TB)/(1 - PA*TB) + (PB - TA)/(1 - PB*TA))

    `PA` is the proportion of spikes of `spiketrain_i` within `[-dt, +dt]` of
    any spike of `spiketrain_j`, `PB` the same proportion for
    `spiketrain_j`. `TA` and `TB` are the proportions of the analysis window
    within `[-dt, +dt]` of any spike of `spiketrain_i` and `spiketrain_j`,
    respectively.

    Both trains are clipped to the analysis window once, and the clipped
    trains are shared by all delta-t values.

    Parameters
    ----------
    spiketrain_i, spiketrain_j : neo.SpikeTrain or pq.Quantity or np.ndarray or list
        Spike times in ascending order. Plain numbers are in seconds.
    max_dt : float or pq.Quantity
        Largest synchronicity window of the sweep, rounded up to the next
        millisecond. Plain numbers are in seconds.
    window : tuple or pq.Quantity or None, optional
        The analysis window ``(start, stop)``, both bounds inclusive. If None,
        the shared `t_start` and `t_stop` of the two :class:`neo.SpikeTrain`
        objects are used.
        Default: None
    return_dt : bool, optional
        If True, the delta-t values are returned as well.
        Default: False

    Returns
    -------
    coefficients : np.ndarray
        One STTC value per delta-t. All entries are :obj:`numpy.nan` if a
        train has no spikes inside the window. A vanishing denominator gives
        ``inf`` or ``nan`` for that entry.
    dt_values : np.ndarray
        The delta-t values in seconds, ``k / 1000`` for the k-th entry. Only
        returned if `return_dt` is True.

    Raises
    ------
    TypeError
        If the spike trains, `window` or `max_dt` are of an unsupported type
        or carry non-time units.
    ValueError
        If `max_dt` is negative, ``window[1] <= window[0]`` or a spike time
        is not finite.

    Notes
    -----
    Alias: `sttc_sweep`

    Examples
    --------
    >>> from sttc_sweep.spike_time_tiling import sttc_sweep
    >>> coefficients, dt_values = sttc_sweep([1.0, 5.0], [1.001, 5.002],
    ...     max_dt=0.002, window=(0, 10), return_dt=True)
    >>> dt_values
    array([0.   , 0.001, 0.002])

    """
    start, stop = _resolve_window(spiketrain_i, spiketrain_j, window)
    dt_values = delta_t_sweep(max_dt)

    times_i = clip_to_window(
        _times_in_seconds(spiketrain_i, 'spiketrain_i'), start, stop)
    times_j = clip_to_window(
        _times_in_seconds(spiketrain_j, 'spiketrain_j'), start, stop)
    logger.debug("Window [%s, %s]: %d and %d spikes, %d delta-t steps",
                 start, stop, len(times_i), len(times_j), len(dt_values))

    if len(times_i) == 0 or len(times_j) == 0:
        warnings.warn("A spike train has no spikes inside the window! "
                      "np.nan will be returned for every delta-t.")
        coefficients = np.full(len(dt_values), np.nan)
    else:
        times_i = times_i.tolist()
        times_j = times_j.tolist()
        coefficients = np.array([
            _tiling_index(times_i, times_j, dt, start, stop)
            for dt in dt_values.tolist()], dtype=np.float64)

    if return_dt:
        return coefficients, dt_values
    return coefficients


sttc_sweep = spike_time_tiling_coefficient_sweep


@validate_with(PydanticSpikeTimeTilingCoefficient)
def spike_time_tiling_coefficient(spiketrain_i: neo.core.SpikeTrain,
                                  spiketrain_j: neo.core.SpikeTrain,
                                  window: pq.Quantity = None,
                                  dt: pq.Quantity = 0.005 * pq.s) -> float:
    """
    Calculates the Spike Time Tiling Coefficient (STTC) at a single
    synchronicity window `dt`.

    The spike trains are clipped and combined exactly as in
    :func:`spike_time_tiling_coefficient_sweep`, but `dt` is used as given
    rather than rounded to a millisecond.

    Parameters
    ----------
    spiketrain_i, spiketrain_j : neo.SpikeTrain or pq.Quantity or np.ndarray or list
        Spike times in ascending order. Plain numbers are in seconds.
    window : tuple or pq.Quantity or None, optional
        The analysis window ``(start, stop)``. If None, the shared `t_start`
        and `t_stop` of the two :class:`neo.SpikeTrain` objects are used.
        Default: None
    dt : float or pq.Quantity, optional
        The synchronicity window. Plain numbers are in seconds.
        Default: 0.005 * pq.s

    Returns
    -------
    index : float
        The STTC, or :obj:`numpy.nan` if a train has no spikes in the window.

    Notes
    -----
    Alias: `sttc`

    Examples
    --------
    >>> import neo
    >>> from sttc_sweep.spike_time_tiling import spike_time_tiling_coefficient
    >>> spiketrain1 = neo.SpikeTrain([1.3, 7.56, 15.87, 28.23, 30.9, 34.2,
    ...     38.2, 43.2], units='ms', t_stop=50)
    >>> spiketrain2 = neo.SpikeTrain([1.02, 2.71, 18.82, 28.46, 28.79, 43.6],
    ...     units='ms', t_stop=50)
    >>> round(spike_time_tiling_coefficient(spiketrain1, spiketrain2), 6)
    0.49586

    """
    start, stop = _resolve_window(spiketrain_i, spiketrain_j, window)
    dt = _scalar_in_seconds(dt, 'dt')
    times_i = clip_to_window(
        _times_in_seconds(spiketrain_i, 'spiketrain_i'), start, stop)
    times_j = clip_to_window(
        _times_in_seconds(spiketrain_j, 'spiketrain_j'), start, stop)

    if len(times_i) == 0 or len(times_j) == 0:
        warnings.warn("A spike train has no spikes inside the window! "
                      "np.nan will be returned.")
        return np.nan
    return _tiling_index(times_i.tolist(), times_j.tolist(), dt, start,
                         stop)


sttc = spike_time_tiling_coefficient
