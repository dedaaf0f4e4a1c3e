import numbers
import warnings

import neo
import numpy as np
import quantities as pq

from sttc_sweep.utils import is_sorted, is_time_quantity


def get_length(obj) -> int:
    """
    Return the number of elements of the supported spike time containers:
    - list or tuple
    - numpy.ndarray
    - pq.Quantity
    - neo.SpikeTrain

    Raises
    ------
    TypeError
        If the object type is not supported.
    """
    if obj is None:
        raise ValueError("Cannot get length of None")

    if isinstance(obj, neo.SpikeTrain):
        return len(obj)
    elif isinstance(obj, (pq.Quantity, np.ndarray)):
        return obj.size
    elif isinstance(obj, (list, tuple)):
        return len(obj)
    else:
        raise TypeError(
            f"Unsupported type for length computation: {type(obj).__name__}"
        )


def is_real_number(value) -> bool:
    return (isinstance(value, (numbers.Real, np.floating, np.integer))
            and not isinstance(value, (bool, np.bool_)))


def validate_type(
    value,
    info,
    allowed_types: tuple,
    allow_none: bool,
):
    """Generic type validation helper."""
    if value is None:
        if allow_none:
            return value
        raise ValueError(f"{info.field_name} cannot be None")

    if not isinstance(value, allowed_types):
        raise TypeError(f"{info.field_name} must be one of {allowed_types}, not {type(value).__name__}")
    return value


def validate_length(value, info, length: int):
    if get_length(value) != length:
        raise ValueError(f"{info.field_name} must contain exactly {length} elements")
    return value


def validate_time_units(value, info):
    if isinstance(value, pq.Quantity) and not is_time_quantity(value):
        raise TypeError(f"{info.field_name} must have units of time, not {value.dimensionality}")
    return value


# ---- Specialized validation helpers ----

def validate_spiketrain(value, info, allowed_types=(list, tuple, neo.SpikeTrain, pq.Quantity, np.ndarray), allow_none=False, check_sorted=True):
    validate_type(value, info, allowed_types, allow_none)
    if value is None:
        return value
    validate_time_units(value, info)
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            if not is_real_number(item):
                raise TypeError(f"Element {i} in {info.field_name} must be a real number, not {type(item).__name__}")
    elif not np.issubdtype(np.asarray(value).dtype, np.number) or np.iscomplexobj(value):
        raise TypeError(f"{info.field_name} must hold real numbers, not {np.asarray(value).dtype}")
    if np.ndim(value) != 1:
        raise TypeError(f"{info.field_name} must be one-dimensional")
    if not np.all(np.isfinite(np.asarray(value, dtype=np.float64))):
        raise ValueError(f"{info.field_name} must only contain finite spike times")
    if check_sorted and not is_sorted(np.asarray(value, dtype=np.float64)):
        warnings.warn(f"{info.field_name} is not sorted", UserWarning)
    if isinstance(value, neo.SpikeTrain):
        if value.t_start is not None and value.t_stop is not None:
            if value.t_start > value.t_stop:
                raise ValueError(f"{info.field_name} has t_start > t_stop")
    return value


def validate_window(value, info, allow_none=True):
    validate_type(value, info, (list, tuple, pq.Quantity, np.ndarray), allow_none)
    if value is None:
        return value
    validate_length(value, info, 2)
    validate_time_units(value, info)
    if isinstance(value, (list, tuple)):
        for i, bound in enumerate(value):
            if isinstance(bound, pq.Quantity):
                if bound.size != 1:
                    raise TypeError(f"Element {i} in {info.field_name} must be a scalar")
                validate_time_units(bound, info)
            elif not is_real_number(bound):
                raise TypeError(f"Element {i} in {info.field_name} must be a real number, not {type(bound).__name__}")
    elif not np.issubdtype(np.asarray(value).dtype, np.number):
        raise TypeError(f"{info.field_name} must hold real numbers")
    return value


def validate_time_value(value, info, allow_none=False):
    """A non-negative scalar duration, a float in seconds or a time Quantity."""
    if isinstance(value, np.ndarray) and value.size == 1 and not isinstance(value, pq.Quantity):
        value = value.item()
    if isinstance(value, pq.Quantity):
        if value.size != 1:
            raise TypeError(f"{info.field_name} must be a scalar")
        validate_time_units(value, info)
        magnitude = value.item()
    elif value is None:
        return validate_type(value, info, (), allow_none)
    elif is_real_number(value):
        magnitude = value
    else:
        raise TypeError(f"{info.field_name} must be a real number or a time Quantity, not {type(value).__name__}")
    if not np.isfinite(magnitude):
        raise ValueError(f"{info.field_name} must be finite")
    if magnitude < 0:
        raise ValueError(f"{info.field_name} must be >= 0, found: {value}")
    return value


# ---- Model validation helpers ----

def model_validate_window_order(start, stop, name: str = "window"):
    if not (np.isfinite(start) and np.isfinite(stop)):
        raise ValueError(f"{name} bounds must be finite")
    if stop <= start:
        raise ValueError(f"{name}[1] must be greater than {name}[0]")


def model_validate_window_source(window, spiketrain_i, spiketrain_j):
    if window is None and not (isinstance(spiketrain_i, neo.SpikeTrain)
                               and isinstance(spiketrain_j, neo.SpikeTrain)):
        raise TypeError("window is required unless both spike trains are "
                        "neo.SpikeTrain objects")
