"""Structural classification of statements into rewrite shapes.

Shapes overlap syntactically, so candidates are tried from the most specific
spelling to the most general one and the first hit wins. Matching only
inspects syntax; user expressions are never evaluated.
"""

import ast
import logging

from ..diagnostics import MacroExpansionError, MalformedSpecialFormError
from ..operations.table import lookup
from .policy import REWRITE_POLICY, RewritePolicy
from .shapes import (
    AllocationMatch,
    AxpyMatch,
    BroadcastMatch,
    ElementwiseMatch,
    MatMulMatch,
    MatMulVariant,
    OperationMatch,
    Shape,
    ShapeMatch,
    UnsupportedMatch,
)

logger = logging.getLogger(__name__)

_ALLOCATION_SHAPES: dict[str, Shape] = {
    "copy": Shape.COPY_OF,
    "zero": Shape.ZERO_OF,
    "similar": Shape.SIMILAR_OF,
}
_AXPY_ARITY: dict[str, int] = {"axpy": 3, "axpby": 4}
_BROADCAST_OPERATORS = (ast.Add, ast.Sub, ast.Mult, ast.Div)

MATMUL_HEAD = "matmul"
VEC_HEAD = "vec"
ELEMENTWISE_HEAD = "elementwise"


def is_reference(node: ast.expr) -> bool:
    """Return whether node is a name or a dotted attribute path of names."""
    while isinstance(node, ast.Attribute):
        node = node.value
    return isinstance(node, ast.Name)


def _call_head(node: ast.expr) -> str | None:
    """Return the bare function name of one call node."""
    if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
        return node.func.id
    return None


def _positional_args(call: ast.Call) -> tuple[ast.expr, ...] | None:
    """Return call arguments when all are plain positionals."""
    if call.keywords or any(isinstance(arg, ast.Starred) for arg in call.args):
        return None
    return tuple(call.args)


def _single_target(statement: ast.Assign) -> ast.expr | None:
    """Return the only assignment target, if there is exactly one."""
    if len(statement.targets) != 1:
        return None
    return statement.targets[0]


def _is_ellipsis_subscript(node: ast.expr) -> bool:
    """Return whether node reads `ref[...]`."""
    return (
        isinstance(node, ast.Subscript)
        and is_reference(node.value)
        and isinstance(node.slice, ast.Constant)
        and node.slice.value is Ellipsis
    )


def _match_allocation(statement: ast.stmt) -> AllocationMatch | None:
    if not isinstance(statement, ast.Assign):
        return None
    target = _single_target(statement)
    if not isinstance(target, ast.Name):
        return None
    shape = _ALLOCATION_SHAPES.get(_call_head(statement.value) or "")
    if shape is None:
        return None
    args = _positional_args(statement.value)
    if args is None or len(args) != 1 or not isinstance(args[0], ast.Name):
        return None
    return AllocationMatch(shape=shape, target=target, source=args[0])


def _match_axpy(statement: ast.stmt) -> AxpyMatch | None:
    if not isinstance(statement, ast.Expr):
        return None
    arity = _AXPY_ARITY.get(_call_head(statement.value) or "")
    if arity is None:
        return None
    args = _positional_args(statement.value)
    if args is None or len(args) != arity or not is_reference(args[-1]):
        return None
    if arity == 3:
        alpha, x, y = args
        return AxpyMatch(alpha=alpha, x=x, beta=None, y=y)
    alpha, x, beta, y = args
    return AxpyMatch(alpha=alpha, x=x, beta=beta, y=y)


def _operation_shape(op_name: str) -> Shape:
    return Shape.COPY_INTO if op_name == "copyto" else Shape.GENERIC_OP_ASSIGN


def _match_operation_call(statement: ast.stmt) -> OperationMatch | None:
    if not isinstance(statement, ast.Expr):
        return None
    op_name = _call_head(statement.value)
    pair = lookup(op_name) if op_name is not None else None
    if pair is None:
        return None
    args = _positional_args(statement.value)
    if not args or not is_reference(args[0]) or not pair.accepts(len(args) - 1):
        return None
    return OperationMatch(
        shape=_operation_shape(pair.name),
        op_name=pair.name,
        target=args[0],
        operands=args[1:],
    )


def _matmul_operands(
    value: ast.expr, *, statement: ast.stmt
) -> tuple[ast.expr, ast.expr] | None:
    """Return multiply operands of `b @ c` or `matmul(b, c)`."""
    if isinstance(value, ast.BinOp) and isinstance(value.op, ast.MatMult):
        return value.left, value.right
    if _call_head(value) != MATMUL_HEAD:
        return None
    args = _positional_args(value)
    if args is None or len(args) != 2:
        raise MalformedSpecialFormError(
            form=MATMUL_HEAD,
            statement=ast.unparse(statement),
            reason="expected exactly two positional operands",
        )
    return args[0], args[1]


def _unwrap_vec(operand: ast.expr, *, statement: ast.stmt) -> ast.expr | None:
    """Return the argument of a `vec(x)` marker, None when not flattened."""
    if _call_head(operand) != VEC_HEAD:
        return None
    args = _positional_args(operand)
    if args is None or len(args) != 1:
        raise MalformedSpecialFormError(
            form=MATMUL_HEAD,
            statement=ast.unparse(statement),
            reason="vec(...) takes exactly one positional argument",
        )
    return args[0]


def _build_matmul_match(
    target: ast.expr,
    operands: tuple[ast.expr, ast.expr],
    *,
    statement: ast.stmt,
    accumulate: bool,
) -> MatMulMatch:
    if not is_reference(target):
        raise MalformedSpecialFormError(
            form=MATMUL_HEAD,
            statement=ast.unparse(statement),
            reason="the product must be assigned to a name or attribute",
        )
    left, right = operands
    flat_left = _unwrap_vec(left, statement=statement)
    flat_right = _unwrap_vec(right, statement=statement)
    match (flat_left is not None, flat_right is not None):
        case (True, True):
            # redundant markers are dropped
            variant = MatMulVariant.BOTH
            left, right = flat_left, flat_right
        case (True, False):
            variant = MatMulVariant.LEFT
            left = flat_left
        case (False, True):
            variant = MatMulVariant.RIGHT
            right = flat_right
        case _:
            variant = MatMulVariant.NEITHER
    return MatMulMatch(
        target=target,
        left=left,
        right=right,
        variant=variant,
        accumulate=accumulate,
    )


def _match_assignment(statement: ast.stmt) -> OperationMatch | MatMulMatch | None:
    if not isinstance(statement, ast.Assign):
        return None
    target = _single_target(statement)
    if target is None:
        return None
    operands = _matmul_operands(statement.value, statement=statement)
    if operands is not None:
        if _is_ellipsis_subscript(target):
            return None
        return _build_matmul_match(
            target, operands, statement=statement, accumulate=False
        )
    op_name = _call_head(statement.value)
    pair = lookup(op_name) if op_name is not None else None
    if pair is None or not is_reference(target):
        return None
    args = _positional_args(statement.value)
    if args is None or not pair.accepts(len(args)):
        return None
    return OperationMatch(
        shape=_operation_shape(pair.name),
        op_name=pair.name,
        target=target,
        operands=args,
    )


def _match_elementwise(statement: ast.stmt) -> ElementwiseMatch | None:
    if not isinstance(statement, ast.Assign):
        return None
    target = _single_target(statement)
    if target is None or _call_head(statement.value) != ELEMENTWISE_HEAD:
        return None
    args = _positional_args(statement.value)
    if args is None or len(args) != 1 or not is_reference(target):
        raise MalformedSpecialFormError(
            form=ELEMENTWISE_HEAD,
            statement=ast.unparse(statement),
            reason="expected `name = elementwise(expression)`",
        )
    return ElementwiseMatch(target=target, value=args[0])


def _match_matmul_accumulate(
    statement: ast.stmt, *, policy: RewritePolicy
) -> MatMulMatch | None:
    if not policy.allow_matmul_accumulate:
        return None
    if not isinstance(statement, ast.AugAssign) or not isinstance(
        statement.op, ast.Add
    ):
        return None
    if _is_ellipsis_subscript(statement.target):
        return None
    operands = _matmul_operands(statement.value, statement=statement)
    if operands is None:
        return None
    return _build_matmul_match(
        statement.target, operands, statement=statement, accumulate=True
    )


def _expand_macro(
    statement: ast.stmt, *, policy: RewritePolicy, depth: int
) -> ast.stmt | None:
    """Expand one registered macro statement by one level."""
    if not isinstance(statement, ast.Expr):
        return None
    name = _call_head(statement.value)
    expander = policy.macros.get(name) if name is not None else None
    if expander is None:
        return None
    if depth >= policy.max_expansion_depth:
        raise MacroExpansionError(
            statement=ast.unparse(statement),
            depth=depth,
            reason=f"exceeded max_expansion_depth={policy.max_expansion_depth}",
        )
    expansion = expander(statement.value)
    if isinstance(expansion, ast.expr):
        expansion = ast.Expr(value=expansion)
    if not isinstance(expansion, ast.stmt):
        raise TypeError(f"macro {name!r} must expand to an ast statement or expression")
    if ast.dump(expansion) == ast.dump(statement):
        raise MacroExpansionError(
            statement=ast.unparse(statement),
            depth=depth,
            reason="expansion reproduced its input",
        )
    logger.debug("expanded macro %s at depth %d", name, depth)
    return ast.copy_location(expansion, statement)


def _match_broadcast(statement: ast.stmt) -> BroadcastMatch | None:
    if isinstance(statement, ast.Assign):
        target = _single_target(statement)
        if target is not None and _is_ellipsis_subscript(target):
            return BroadcastMatch(operator=None, target=target.value, value=statement.value)
        return None
    if (
        isinstance(statement, ast.AugAssign)
        and isinstance(statement.op, _BROADCAST_OPERATORS)
        and _is_ellipsis_subscript(statement.target)
    ):
        return BroadcastMatch(
            operator=statement.op,
            target=statement.target.value,
            value=statement.value,
        )
    return None


def match_statement(
    statement: ast.stmt,
    *,
    policy: RewritePolicy = REWRITE_POLICY,
    depth: int = 1,
) -> ShapeMatch:
    """Classify one statement and capture the operands its rewrite needs."""
    candidate = (
        _match_allocation(statement)
        or _match_axpy(statement)
        or _match_operation_call(statement)
        or _match_assignment(statement)
        or _match_elementwise(statement)
        or _match_matmul_accumulate(statement, policy=policy)
    )
    if candidate is not None:
        return candidate
    expansion = _expand_macro(statement, policy=policy, depth=depth)
    if expansion is not None:
        return match_statement(expansion, policy=policy, depth=depth + 1)
    broadcast = _match_broadcast(statement)
    if broadcast is not None:
        return broadcast
    return UnsupportedMatch(statement=statement)


def classify(statement: ast.stmt, *, policy: RewritePolicy = REWRITE_POLICY) -> Shape:
    """Return the shape one statement is classified into."""
    return match_statement(statement, policy=policy).shape


__all__ = [
    "ELEMENTWISE_HEAD",
    "MATMUL_HEAD",
    "VEC_HEAD",
    "classify",
    "is_reference",
    "match_statement",
]
