"""SciPy sparse overrides for the multiply kernel and the capability trait.

``numpy.matmul`` cannot write into a sparse target, so the product is
materialized and assigned through the sparse container's indexed writes.
"""

import numpy as np
from scipy import sparse

from ..capability import CAN_MUTATE, CANNOT_MUTATE, Capability, setindex_trait
from ..operations.linalg import matmul_into

# formats whose containers implement __setitem__
_WRITABLE_FORMATS = frozenset(("csr", "csc", "lil", "dok"))

_SPARSE_TYPES: tuple[type[object], ...] = tuple(
    sparse_type
    for sparse_type in (getattr(sparse, "sparray", None), sparse.spmatrix)
    if isinstance(sparse_type, type)
)


def sparse_setindex_trait(value: object) -> Capability:
    """Classify sparse containers by whether their format accepts writes."""
    if getattr(value, "format", None) in _WRITABLE_FORMATS:
        return CAN_MUTATE
    return CANNOT_MUTATE


def sparse_matmul_into(
    c: object, a: object, b: object, alpha: object = 1, beta: object = 0
) -> object:
    """Assign `alpha * (a @ b) + beta * c` into one sparse target."""
    product = a @ b
    if alpha != 1:
        product = alpha * product
    if beta != 0:
        product = beta * c + product
    if sparse.issparse(product):
        product = product.toarray()
    c[:, :] = np.asarray(product).reshape(c.shape)
    return c


for _sparse_type in _SPARSE_TYPES:
    setindex_trait.register(_sparse_type, sparse_setindex_trait)
    matmul_into.register(_sparse_type, sparse_matmul_into)


__all__ = ["sparse_matmul_into", "sparse_setindex_trait"]
