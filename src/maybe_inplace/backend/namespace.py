from typing import Protocol

from array_api_compat import array_namespace, is_array_api_obj


class ArrayNamespaceLike(Protocol):
    """Minimal Array API namespace protocol."""

    __name__: str


def is_array(value: object) -> bool:
    """Return whether one value is an Array API compatible array."""
    return bool(is_array_api_obj(value))


def bind_array_namespace(*arrays: object) -> ArrayNamespaceLike:
    """Resolve the Array API namespace shared by array arguments."""
    candidates = tuple(array for array in arrays if is_array(array))
    if not candidates:
        raise TypeError("no Array API compatible array among arguments")
    return array_namespace(*candidates)


__all__ = [
    "ArrayNamespaceLike",
    "bind_array_namespace",
    "is_array",
]
