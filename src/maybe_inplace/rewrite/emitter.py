import ast
from collections.abc import Callable
from typing import Any

from ..diagnostics import UnsupportedShapeError
from .builders import (
    EmitContext,
    assign,
    call,
    capability_branch,
    load,
    runtime,
)
from .shapes import (
    AllocationMatch,
    AxpyMatch,
    OperationMatch,
    Shape,
    ShapeMatch,
    UnsupportedMatch,
)
from .special_forms import emit_broadcast, emit_elementwise, emit_matmul

Emitter = Callable[[Any, EmitContext], ast.stmt]

# shape -> (helper on CAN_MUTATE, helper otherwise; None aliases the source)
_ALLOCATION_HELPERS: dict[Shape, tuple[str, str | None]] = {
    Shape.COPY_OF: ("copy_of", None),
    # zeros rather than an alias, so both branches agree in value
    Shape.ZERO_OF: ("zero_of", "zero_value"),
    Shape.SIMILAR_OF: ("similar_of", None),
}


def _emit_allocation(match: AllocationMatch, context: EmitContext) -> ast.stmt:
    in_place_helper, fallback_helper = _ALLOCATION_HELPERS[match.shape]
    fallback_value = (
        load(match.source)
        if fallback_helper is None
        else call(runtime(fallback_helper), load(match.source))
    )
    return capability_branch(
        match.source,
        [assign(match.target, call(runtime(in_place_helper), load(match.source)))],
        [assign(match.target, fallback_value)],
    )


def _emit_operation(match: OperationMatch, context: EmitContext) -> ast.stmt:
    pair = ast.Subscript(
        value=runtime("OPERATION_TABLE"),
        slice=ast.Constant(value=match.op_name),
        ctx=ast.Load(),
    )
    capability = call(runtime("setindex_trait"), load(match.target))
    dispatch = ast.Attribute(value=pair, attr="dispatch", ctx=ast.Load())
    return assign(
        match.target,
        call(
            dispatch,
            capability,
            load(match.target),
            *(load(operand) for operand in match.operands),
        ),
    )


def _emit_axpy(match: AxpyMatch, context: EmitContext) -> ast.stmt:
    args = [load(match.alpha), load(match.x), load(match.y)]
    scaled_y: ast.expr = load(match.y)
    if match.beta is not None:
        args.append(load(match.beta))
        scaled_y = ast.BinOp(left=load(match.beta), op=ast.Mult(), right=load(match.y))
    fallback = ast.BinOp(
        left=ast.BinOp(left=load(match.alpha), op=ast.Mult(), right=load(match.x)),
        op=ast.Add(),
        right=scaled_y,
    )
    return capability_branch(
        match.y,
        [ast.Expr(value=call(runtime("axpy_into"), *args))],
        [assign(match.y, fallback)],
    )


_EMITTERS: dict[Shape, Emitter] = {
    Shape.COPY_INTO: _emit_operation,
    Shape.COPY_OF: _emit_allocation,
    Shape.ZERO_OF: _emit_allocation,
    Shape.SIMILAR_OF: _emit_allocation,
    Shape.GENERIC_OP_ASSIGN: _emit_operation,
    Shape.BROADCAST_ASSIGN: emit_broadcast,
    Shape.ELEMENTWISE_APPLY_ASSIGN: emit_elementwise,
    Shape.MATMUL_ASSIGN: emit_matmul,
    Shape.AXPY_ASSIGN: _emit_axpy,
}

_missing_emitters = set(Shape) - set(_EMITTERS) - {Shape.UNSUPPORTED}
if _missing_emitters:
    raise RuntimeError(
        "rewrite shapes without emitters: "
        + ", ".join(sorted(shape.value for shape in _missing_emitters))
    )


def emit(match: ShapeMatch, context: EmitContext | None = None) -> ast.stmt:
    """Build the capability-dispatch replacement for one classified statement."""
    if isinstance(match, UnsupportedMatch):
        raise UnsupportedShapeError(statement=ast.unparse(match.statement))
    emitter = _EMITTERS[match.shape]
    return emitter(match, EmitContext() if context is None else context)


__all__ = ["emit"]
