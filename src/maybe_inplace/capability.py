"""Runtime capability trait deciding between in-place and allocating paths."""

from collections.abc import Callable
from enum import Enum
from functools import singledispatch
from numbers import Number

import numpy as np
from array_api_compat import is_writeable_array

from .backend.namespace import is_array
from .ext import ensure_extension_for


class Capability(Enum):
    """Whether one value accepts indexed in-place writes."""

    CAN_MUTATE = "can_mutate"
    CANNOT_MUTATE = "cannot_mutate"


CAN_MUTATE = Capability.CAN_MUTATE
CANNOT_MUTATE = Capability.CANNOT_MUTATE


def supports_indexed_assignment(value: object) -> bool:
    """Return whether `value[...] = ...` is expected to succeed."""
    if not is_array(value):
        return False
    return bool(is_writeable_array(value))


@singledispatch
def setindex_trait(value: object) -> Capability:
    """Classify one runtime value as mutable in place or not."""
    if ensure_extension_for(value):
        implementation = setindex_trait.dispatch(type(value))
        if implementation is not _generic_setindex_trait:
            return implementation(value)
    if supports_indexed_assignment(value):
        return CAN_MUTATE
    return CANNOT_MUTATE


_generic_setindex_trait = setindex_trait.dispatch(object)


@setindex_trait.register(Number)
@setindex_trait.register(np.generic)
def _(value: object) -> Capability:
    return CANNOT_MUTATE


@setindex_trait.register(np.ndarray)
def _(value: np.ndarray) -> Capability:
    return CAN_MUTATE if value.flags.writeable else CANNOT_MUTATE


def register_view_type(
    view_type: type[object],
    *,
    parent: Callable[[object], object],
    readonly: Callable[[object], bool] | None = None,
) -> None:
    """Make one wrapper type classify through the value it views."""

    def _classify_view(value: object) -> Capability:
        if readonly is not None and readonly(value):
            return CANNOT_MUTATE
        return setindex_trait(parent(value))

    setindex_trait.register(view_type, _classify_view)


register_view_type(
    memoryview,
    parent=lambda view: view.obj,
    readonly=lambda view: view.readonly,
)


__all__ = [
    "CAN_MUTATE",
    "CANNOT_MUTATE",
    "Capability",
    "register_view_type",
    "setindex_trait",
    "supports_indexed_assignment",
]
