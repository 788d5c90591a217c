"""Bespoke rewrites for matrix multiply, broadcast assignment and elementwise apply."""

import ast
import copy

from .builders import (
    EmitContext,
    assign,
    call,
    capability_branch,
    ellipsis_of,
    load,
    name,
    runtime,
    store,
)
from .shapes import BroadcastMatch, ElementwiseMatch, MatMulMatch, MatMulVariant


def _product(left: ast.expr, right: ast.expr) -> ast.BinOp:
    return ast.BinOp(left=load(left), op=ast.MatMult(), right=load(right))


def _flat(node: ast.expr) -> ast.Call:
    return call(runtime("vec"), load(node))


def _matmul_in_place(
    target: ast.expr, left: ast.expr, right: ast.expr, *, accumulate: bool
) -> ast.Expr:
    args: list[ast.expr] = [load(target), left, right]
    if accumulate:
        args += [ast.Constant(value=1), ast.Constant(value=1)]
    return ast.Expr(value=call(runtime("matmul_into"), *args))


def _matmul_fallback(
    target: ast.expr, product: ast.expr, *, accumulate: bool
) -> ast.Assign:
    reshaped = call(runtime("restructure"), load(target), product)
    if accumulate:
        return assign(target, ast.BinOp(left=load(target), op=ast.Add(), right=reshaped))
    return assign(target, reshaped)


def emit_matmul(match: MatMulMatch, context: EmitContext) -> ast.stmt:
    """Emit the four-way multiply rewrite, optionally accumulating."""
    target = match.target
    accumulate = match.accumulate
    if match.variant in (MatMulVariant.NEITHER, MatMulVariant.BOTH):
        left, right = load(match.left), load(match.right)
        return capability_branch(
            target,
            [_matmul_in_place(target, left, right, accumulate=accumulate)],
            [_matmul_fallback(target, _product(left, right), accumulate=accumulate)],
        )

    if match.variant is MatMulVariant.LEFT:
        left, right = _flat(match.left), load(match.right)
    else:
        left, right = load(match.left), _flat(match.right)
    flat_target = context.temporary()
    in_place = [
        assign(name(flat_target), _flat(target)),
        _matmul_in_place(name(flat_target), left, right, accumulate=accumulate),
        ast.Expr(value=call(runtime("unflatten_into"), load(target), name(flat_target))),
    ]
    fallback = _matmul_fallback(target, _product(left, right), accumulate=accumulate)
    return capability_branch(target, in_place, [fallback])


def emit_broadcast(match: BroadcastMatch, context: EmitContext) -> ast.stmt:
    """Emit `a[...] (op)= v` against plain rebinding."""
    target = match.target
    if match.operator is None:
        in_place: ast.stmt = ast.Assign(
            targets=[store(ellipsis_of(target))], value=load(match.value)
        )
        fallback = assign(target, load(match.value))
    else:
        in_place = ast.AugAssign(
            target=store(ellipsis_of(target)),
            op=copy.deepcopy(match.operator),
            value=load(match.value),
        )
        fallback = assign(
            target,
            ast.BinOp(
                left=load(target),
                op=copy.deepcopy(match.operator),
                right=load(match.value),
            ),
        )
    return capability_branch(target, [in_place], [fallback])


class _ElementwiseCalls(ast.NodeTransformer):
    """Route every call inside one expression through `broadcast_call`."""

    def visit_Call(self, node: ast.Call) -> ast.Call:
        self.generic_visit(node)
        return ast.Call(
            func=runtime("broadcast_call"),
            args=[node.func, *node.args],
            keywords=node.keywords,
        )

    def visit_Lambda(self, node: ast.Lambda) -> ast.Lambda:
        return node


def emit_elementwise(match: ElementwiseMatch, context: EmitContext) -> ast.stmt:
    """Emit `a = elementwise(f)` as indexed assignment against rebinding."""
    target = match.target

    def applied() -> ast.expr:
        return _ElementwiseCalls().visit(load(match.value))

    return capability_branch(
        target,
        [ast.Assign(targets=[store(ellipsis_of(target))], value=applied())],
        [assign(target, applied())],
    )


__all__ = ["emit_broadcast", "emit_elementwise", "emit_matmul"]
