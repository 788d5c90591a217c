from .arrays import (
    broadcast_call,
    copy_of,
    restructure,
    similar_of,
    unflatten_into,
    vec,
    zero_of,
    zero_value,
)
from .memory_alias import array_numel, shares_memory
from .namespace import (
    ArrayNamespaceLike,
    bind_array_namespace,
    is_array,
)

__all__ = [
    "ArrayNamespaceLike",
    "array_numel",
    "bind_array_namespace",
    "broadcast_call",
    "copy_of",
    "is_array",
    "restructure",
    "shares_memory",
    "similar_of",
    "unflatten_into",
    "vec",
    "zero_of",
    "zero_value",
]
