import ast
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class Shape(str, Enum):
    """Closed syntactic categories a statement is classified into."""

    COPY_INTO = "copy_into"
    COPY_OF = "copy_of"
    ZERO_OF = "zero_of"
    SIMILAR_OF = "similar_of"
    GENERIC_OP_ASSIGN = "generic_op_assign"
    BROADCAST_ASSIGN = "broadcast_assign"
    ELEMENTWISE_APPLY_ASSIGN = "elementwise_apply_assign"
    MATMUL_ASSIGN = "matmul_assign"
    AXPY_ASSIGN = "axpy_assign"
    UNSUPPORTED = "unsupported"


class MatMulVariant(str, Enum):
    """Which multiply operands arrive wrapped in `vec(...)`."""

    NEITHER = "neither"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


@dataclass(frozen=True, slots=True)
class AllocationMatch:
    """`a = copy(b)`, `a = zero(b)` or `a = similar(b)`."""

    shape: Shape
    target: ast.expr
    source: ast.expr


@dataclass(frozen=True, slots=True)
class OperationMatch:
    """Operation Table call, as a statement or as the right side of `a = ...`."""

    shape: Shape
    op_name: str
    target: ast.expr
    operands: tuple[ast.expr, ...]


@dataclass(frozen=True, slots=True)
class AxpyMatch:
    """`axpy(alpha, x, y)` or `axpby(alpha, x, beta, y)`."""

    alpha: ast.expr
    x: ast.expr
    beta: ast.expr | None
    y: ast.expr
    shape: Shape = Shape.AXPY_ASSIGN


@dataclass(frozen=True, slots=True)
class BroadcastMatch:
    """`a[...] = v` (operator None) or `a[...] op= v`."""

    operator: ast.operator | None
    target: ast.expr
    value: ast.expr
    shape: Shape = Shape.BROADCAST_ASSIGN


@dataclass(frozen=True, slots=True)
class ElementwiseMatch:
    """`a = elementwise(expr)`."""

    target: ast.expr
    value: ast.expr
    shape: Shape = Shape.ELEMENTWISE_APPLY_ASSIGN


@dataclass(frozen=True, slots=True)
class MatMulMatch:
    """`a = b @ c` or `a += b @ c`, operands unwrapped from `vec(...)`."""

    target: ast.expr
    left: ast.expr
    right: ast.expr
    variant: MatMulVariant
    accumulate: bool
    shape: Shape = Shape.MATMUL_ASSIGN


@dataclass(frozen=True, slots=True)
class UnsupportedMatch:
    """Statement outside the grammar."""

    statement: ast.stmt
    shape: Shape = Shape.UNSUPPORTED


ShapeMatch: TypeAlias = (
    AllocationMatch
    | OperationMatch
    | AxpyMatch
    | BroadcastMatch
    | ElementwiseMatch
    | MatMulMatch
    | UnsupportedMatch
)


__all__ = [
    "AllocationMatch",
    "AxpyMatch",
    "BroadcastMatch",
    "ElementwiseMatch",
    "MatMulMatch",
    "MatMulVariant",
    "OperationMatch",
    "Shape",
    "ShapeMatch",
    "UnsupportedMatch",
]
