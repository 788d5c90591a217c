"""Helpers referenced by rewritten code through the `__maybe_inplace__` global."""

from .backend.arrays import (
    broadcast_call,
    copy_of,
    restructure,
    similar_of,
    unflatten_into,
    vec,
    zero_of,
    zero_value,
)
from .capability import CAN_MUTATE, CANNOT_MUTATE, setindex_trait
from .operations.linalg import axpy_into, matmul_into
from .operations.table import OPERATION_TABLE

__all__ = [
    "CAN_MUTATE",
    "CANNOT_MUTATE",
    "OPERATION_TABLE",
    "axpy_into",
    "broadcast_call",
    "copy_of",
    "matmul_into",
    "restructure",
    "setindex_trait",
    "similar_of",
    "unflatten_into",
    "vec",
    "zero_of",
    "zero_value",
]
