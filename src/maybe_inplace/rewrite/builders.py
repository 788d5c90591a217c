import ast
import copy
from dataclasses import dataclass, field

RUNTIME_NAME = "__maybe_inplace__"
TEMP_PREFIX = "__bb_a"


@dataclass(slots=True)
class EmitContext:
    """Per-rewrite state: fresh temporary names for one rewrite call."""

    _counter: int = field(default=0)

    def temporary(self) -> str:
        """Return one temporary name unused within this rewrite."""
        self._counter += 1
        return f"{TEMP_PREFIX}{self._counter}"


def runtime(attr: str) -> ast.expr:
    """Reference one helper of the runtime module bound in emitted code."""
    return ast.Attribute(
        value=ast.Name(id=RUNTIME_NAME, ctx=ast.Load()), attr=attr, ctx=ast.Load()
    )


def load(node: ast.expr) -> ast.expr:
    """Copy one expression for reading."""
    copied = copy.deepcopy(node)
    if isinstance(copied, ast.Name | ast.Attribute | ast.Subscript):
        copied.ctx = ast.Load()
    return copied


def store(node: ast.expr) -> ast.expr:
    """Copy one reference for assignment."""
    copied = copy.deepcopy(node)
    copied.ctx = ast.Store()
    return copied


def name(identifier: str) -> ast.Name:
    return ast.Name(id=identifier, ctx=ast.Load())


def call(func: ast.expr, *args: ast.expr) -> ast.Call:
    return ast.Call(func=func, args=list(args), keywords=[])


def assign(target: ast.expr, value: ast.expr) -> ast.Assign:
    return ast.Assign(targets=[store(target)], value=value)


def ellipsis_of(target: ast.expr) -> ast.Subscript:
    """Build `target[...]`."""
    return ast.Subscript(
        value=load(target), slice=ast.Constant(value=Ellipsis), ctx=ast.Load()
    )


def capability_branch(
    target: ast.expr, body: list[ast.stmt], orelse: list[ast.stmt]
) -> ast.If:
    """Build `if setindex_trait(target) is CAN_MUTATE: body else: orelse`."""
    test = ast.Compare(
        left=call(runtime("setindex_trait"), load(target)),
        ops=[ast.Is()],
        comparators=[runtime("CAN_MUTATE")],
    )
    return ast.If(test=test, body=body, orelse=orelse)


__all__ = [
    "RUNTIME_NAME",
    "EmitContext",
    "assign",
    "call",
    "capability_branch",
    "ellipsis_of",
    "load",
    "name",
    "runtime",
    "store",
]
