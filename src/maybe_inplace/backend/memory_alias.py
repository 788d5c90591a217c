from math import prod

import numpy as np


def shares_memory(lhs: object, rhs: object) -> bool:
    """Return whether two arrays are backed by overlapping memory."""
    if lhs is rhs:
        return True
    if not isinstance(lhs, np.ndarray) or not isinstance(rhs, np.ndarray):
        return False
    try:
        return bool(np.shares_memory(lhs, rhs))
    except np.exceptions.TooHardError:
        return bool(np.may_share_memory(lhs, rhs))


def array_numel(array: object) -> int:
    """Return element count for one array shape, 1 for scalars."""
    shape = getattr(array, "shape", ())
    return prod(shape, start=1)


__all__ = ["array_numel", "shares_memory"]
