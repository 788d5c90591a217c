"""Overridable linear-algebra kernels used by the multiply and axpy rewrites.

Both kernels are ``functools.singledispatch`` generics keyed on the target
array type. Other array representations plug in by registering an
implementation; see ``maybe_inplace.ext.sparse`` for the SciPy one.
"""

from functools import singledispatch

import numpy as np

from ..ext import ensure_extension_for


def _assign_scaled_product(
    c: object, a: object, b: object, alpha: object, beta: object
) -> object:
    """Assign `alpha * (a @ b) + beta * c` into c through indexed writes."""
    product = a @ b
    if alpha != 1:
        product = alpha * product
    if beta != 0:
        product = product + beta * c
    c[...] = product
    return c


@singledispatch
def matmul_into(c: object, a: object, b: object, alpha: object = 1, beta: object = 0) -> object:
    """Compute `c = alpha * (a @ b) + beta * c` in place and return c."""
    if ensure_extension_for(c):
        implementation = matmul_into.dispatch(type(c))
        if implementation is not _generic_matmul_into:
            return implementation(c, a, b, alpha, beta)
    return _assign_scaled_product(c, a, b, alpha, beta)


_generic_matmul_into = matmul_into.dispatch(object)


def _matmul_result_shape(a: np.ndarray, b: np.ndarray) -> tuple[int, ...] | None:
    """Return the product shape for vector/matrix operands, None for batches."""
    if a.ndim not in (1, 2) or b.ndim not in (1, 2):
        return None
    left = a.shape[:-1] if a.ndim == 2 else ()
    right = b.shape[1:] if b.ndim == 2 else ()
    return left + right


@matmul_into.register(np.ndarray)
def _(c: np.ndarray, a: object, b: object, alpha: object = 1, beta: object = 0) -> np.ndarray:
    if not isinstance(a, np.ndarray) or not isinstance(b, np.ndarray):
        return _assign_scaled_product(c, a, b, alpha, beta)
    if (
        alpha == 1
        and beta == 0
        and _matmul_result_shape(a, b) == c.shape
        and np.can_cast(np.result_type(a, b), c.dtype, casting="same_kind")
    ):
        np.matmul(a, b, out=c)
        return c
    return _assign_scaled_product(c, a, b, alpha, beta)


@singledispatch
def scaled_add_into(y: object, alpha: object, x: object, beta: object = 1) -> object:
    """Compute `y = alpha * x + beta * y` in place and return y."""
    y[...] = alpha * x + beta * y
    return y


@scaled_add_into.register(np.ndarray)
def _(y: np.ndarray, alpha: object, x: object, beta: object = 1) -> np.ndarray:
    scaled = np.multiply(alpha, x)
    if not np.can_cast(np.result_type(scaled, y, beta), y.dtype, casting="same_kind"):
        y[...] = scaled + beta * y
        return y
    if beta != 1:
        np.multiply(y, beta, out=y, casting="same_kind")
    np.add(y, scaled, out=y, casting="same_kind")
    return y


def axpy_into(alpha: object, x: object, y: object, beta: object = 1) -> object:
    """Guarded in-place scaled add dispatched on the type of y."""
    return scaled_add_into(y, alpha, x, beta)


__all__ = ["axpy_into", "matmul_into", "scaled_add_into"]
