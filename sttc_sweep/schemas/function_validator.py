"""
Binds the pydantic models of :mod:`sttc_sweep.schemas` to the public
functions of the package.

Validation runs before every decorated call unless it was switched off with
:func:`deactivate_validation` or inside a :func:`validation_disabled` block.
"""
from contextlib import contextmanager
from functools import wraps
from inspect import signature

from pydantic import BaseModel

skip_validation = False


def validate_with(model_class: type[BaseModel]):
    """
    A decorator that checks the arguments of a function against a Pydantic
    model before calling it. Positional and keyword arguments are bound to
    the function signature, defaults included, so the model sees every
    parameter by name.

    The model is exposed as ``func.validation_model`` on the wrapper.
    """
    def decorator(func):
        sig = signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            if not skip_validation:
                bound = sig.bind(*args, **kwargs)
                bound.apply_defaults()
                model_class(**bound.arguments)
            return func(*args, **kwargs)

        wrapper.validation_model = model_class
        return wrapper
    return decorator


def is_validation_active() -> bool:
    return not skip_validation


def activate_validation():
    global skip_validation
    skip_validation = False


def deactivate_validation():
    global skip_validation
    skip_validation = True


@contextmanager
def validation_disabled():
    """
    Temporarily skips the model checks, restoring the previous state on exit.

    Examples
    --------
    >>> from sttc_sweep.schemas.function_validator import (
    ...     validation_disabled, is_validation_active)
    >>> with validation_disabled():
    ...     is_validation_active()
    False
    """
    global skip_validation
    previous = skip_validation
    skip_validation = True
    try:
        yield
    finally:
        skip_validation = previous
