"""`@bb` / `@bangbang`: recompile a function with its `with bb:` blocks rewritten.

The marker is both the decorator and the block name::

    @bb
    def update(y, x):
        with bb:
            copyto(y, x)
            y[...] += x
        return y

Every statement inside a `with bb:` block is rewritten when the function is
decorated, so unsupported statements fail at definition time. The capability
test itself runs each time the function executes.
"""

import ast
import functools
import inspect
import logging
import textwrap
from collections.abc import Callable
from types import FunctionType
from typing import Any, TypeVar, overload

from . import runtime as runtime_module
from .diagnostics import ErrorCode, ExecutionError, RewriteError
from .rewrite.builders import RUNTIME_NAME, EmitContext
from .rewrite.entrypoint import is_rewrite_block, rewrite_block
from .rewrite.policy import REWRITE_POLICY, RewritePolicy

logger = logging.getLogger(__name__)

FunctionT = TypeVar("FunctionT", bound=Callable[..., Any])

REWRITTEN_SOURCE_ATTR = "__maybe_inplace_source__"


class _BlockRewriter(ast.NodeTransformer):
    """Replace each outermost rewrite block by its rewritten statements."""

    def __init__(self, policy: RewritePolicy) -> None:
        self.policy = policy
        self.context = EmitContext()
        self.block_count = 0

    def visit_With(self, node: ast.With) -> ast.AST | list[ast.stmt]:
        if not is_rewrite_block(node, policy=self.policy):
            return self.generic_visit(node)
        self.block_count += 1
        return rewrite_block(node.body, policy=self.policy, context=self.context)


def _parse_function(func: FunctionType) -> tuple[ast.Module, ast.FunctionDef | ast.AsyncFunctionDef]:
    """Parse the source of one function into a module holding only its def."""
    try:
        source = inspect.getsource(func)
    except (OSError, TypeError) as error:
        raise RewriteError(
            code=ErrorCode.SOURCE_UNAVAILABLE,
            message=f"source of {func.__qualname__!r} is unavailable for rewriting",
            help="define the function in a file-backed module",
            related=("decorator",),
            data={"function": func.__qualname__},
        ) from error

    module = ast.parse(textwrap.dedent(source))
    function_node = module.body[0] if module.body else None
    if not isinstance(function_node, ast.FunctionDef | ast.AsyncFunctionDef):
        raise RewriteError(
            code=ErrorCode.SOURCE_UNAVAILABLE,
            message=f"{func.__qualname__!r} is not defined by a def statement",
            help="apply the decorator to a def, not to a lambda or an alias",
            related=("decorator",),
            data={"function": func.__qualname__},
        )
    module.body = [function_node]
    ast.increment_lineno(module, func.__code__.co_firstlineno - 1)
    return module, function_node


def rewrite_function(func: FunctionT, *, policy: RewritePolicy | None = None) -> FunctionT:
    """Return one copy of func recompiled with its rewrite blocks expanded."""
    if not isinstance(func, FunctionType):
        raise TypeError(f"expected a plain function, got {type(func).__name__}")
    if func.__code__.co_freevars:
        raise RewriteError(
            code=ErrorCode.CLOSURE_UNSUPPORTED,
            message=(
                f"{func.__qualname__!r} closes over "
                f"{', '.join(func.__code__.co_freevars)} and cannot be recompiled"
            ),
            help="define the function at module level or pass captured values as arguments",
            related=("decorator",),
            data={"function": func.__qualname__},
        )

    policy = REWRITE_POLICY if policy is None else policy
    module, function_node = _parse_function(func)
    # decorators above this one are re-applied by Python after we return
    function_node.decorator_list = []
    rewriter = _BlockRewriter(policy)
    rewriter.visit(function_node)
    ast.fix_missing_locations(module)

    filename = inspect.getsourcefile(func) or func.__code__.co_filename
    code = compile(module, filename, "exec")
    func.__globals__.setdefault(RUNTIME_NAME, runtime_module)
    namespace: dict[str, Any] = {}
    exec(code, func.__globals__, namespace)

    rewritten = namespace[function_node.name]
    functools.update_wrapper(rewritten, func)
    rewritten.__defaults__ = func.__defaults__
    rewritten.__kwdefaults__ = func.__kwdefaults__
    setattr(rewritten, REWRITTEN_SOURCE_ATTR, ast.unparse(function_node))
    logger.debug(
        "rewrote %d block(s) in %s", rewriter.block_count, func.__qualname__
    )
    return rewritten


def rewritten_source(func: Callable[..., Any]) -> str:
    """Return the rewritten source of one decorated function."""
    source = getattr(func, REWRITTEN_SOURCE_ATTR, None)
    if source is None:
        raise ValueError(f"{getattr(func, '__qualname__', func)!r} was not rewritten")
    return source


class BangBang:
    """Decorator that rewrites `with bb:` blocks, and the block marker itself."""

    __slots__ = ("policy",)

    def __init__(self, policy: RewritePolicy | None = None) -> None:
        self.policy = REWRITE_POLICY if policy is None else policy

    @overload
    def __call__(self, func: FunctionT, /) -> FunctionT: ...

    @overload
    def __call__(self, *, policy: RewritePolicy) -> "BangBang": ...

    def __call__(
        self,
        func: FunctionT | None = None,
        /,
        *,
        policy: RewritePolicy | None = None,
    ) -> "FunctionT | BangBang":
        if func is None:
            return BangBang(self.policy if policy is None else policy)
        return rewrite_function(func, policy=self.policy if policy is None else policy)

    def __enter__(self) -> None:
        raise ExecutionError(
            code=ErrorCode.MISSING_DECORATOR,
            message="`with bb:` block executed in a function that was not rewritten",
            help="decorate the enclosing function with @bb",
            related=("decorator",),
        )

    def __exit__(self, *exc_info: object) -> None:
        return None

    def __repr__(self) -> str:
        return "bb"


bangbang = BangBang()
bb = bangbang


__all__ = [
    "BangBang",
    "bangbang",
    "bb",
    "rewrite_function",
    "rewritten_source",
]
