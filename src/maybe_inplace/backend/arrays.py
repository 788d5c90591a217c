"""Array runtime helpers invoked by rewritten statements."""

import copy
from collections.abc import Callable
from numbers import Number

import numpy as np

from ..array_types import ArrayLike
from .memory_alias import array_numel, shares_memory
from .namespace import bind_array_namespace, is_array


def vec(value: object) -> object:
    """Flatten one array to 1-D; scalars and non-arrays pass through."""
    if not is_array(value) or isinstance(value, np.generic):
        return value
    xp = bind_array_namespace(value)
    return xp.reshape(value, (-1,))


def restructure(reference: object, flat: object) -> object:
    """Reshape flat data back into the shape of one reference value."""
    if not is_array(reference) or isinstance(reference, np.generic):
        return flat
    xp = bind_array_namespace(reference)
    return xp.reshape(xp.asarray(flat), tuple(reference.shape))


def unflatten_into(target: ArrayLike, flat: object) -> ArrayLike:
    """Write one flattened temporary back into target and return target."""
    if shares_memory(target, flat) and array_numel(target) == array_numel(flat):
        return target
    target[...] = restructure(target, flat)
    return target


def copy_of(value: object) -> object:
    """Return one freshly allocated copy of value."""
    if is_array(value) and not isinstance(value, np.generic):
        xp = bind_array_namespace(value)
        return xp.asarray(value, copy=True)
    return copy.copy(value)


def _element_zero(value: object) -> object | None:
    """Return the zero of an object array's element type, if it is numeric."""
    if not isinstance(value, np.ndarray):
        return None
    if value.dtype != np.dtype(object) or value.size == 0:
        return None
    element = value.flat[0]
    if not isinstance(element, Number):
        return None
    return type(element)(0)


def zero_of(value: object) -> object:
    """Return one freshly allocated zero value shaped like value."""
    if isinstance(value, Number):
        return type(value)(0)
    xp = bind_array_namespace(value)
    zeros = xp.zeros_like(value)
    if isinstance(zeros, np.ndarray):
        element_zero = _element_zero(value)
        if element_zero is not None:
            zeros.fill(element_zero)
    return zeros


def zero_value(value: object) -> object:
    """Return one zero value that keeps value's read-only representation."""
    zeros = zero_of(value)
    if isinstance(value, np.ndarray) and not value.flags.writeable:
        zeros.flags.writeable = False
    return zeros


def similar_of(value: object) -> object:
    """Allocate one uninitialized buffer shaped like value.

    Object buffers whose elements are numbers (``decimal.Decimal``,
    ``fractions.Fraction``, mpmath floats) are filled with the element type's
    zero, since an empty object buffer holds ``None`` in every cell.
    """
    if isinstance(value, Number):
        return value
    xp = bind_array_namespace(value)
    buffer = xp.empty_like(value)
    if isinstance(buffer, np.ndarray):
        element_zero = _element_zero(value)
        if element_zero is not None:
            buffer.fill(element_zero)
    return buffer


def broadcast_call(
    function: Callable[..., object], /, *args: object, **kwargs: object
) -> object:
    """Apply function elementwise across array arguments."""
    if not any(is_array(arg) for arg in (*args, *kwargs.values())):
        return function(*args, **kwargs)
    if isinstance(function, np.ufunc):
        return function(*args, **kwargs)
    return np.vectorize(function)(*args, **kwargs)


__all__ = [
    "broadcast_call",
    "copy_of",
    "restructure",
    "similar_of",
    "unflatten_into",
    "vec",
    "zero_of",
    "zero_value",
]
