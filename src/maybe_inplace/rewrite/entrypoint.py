import ast
import logging
import textwrap
from collections.abc import Iterable

from ..diagnostics import MacroExpansionError
from .builders import EmitContext
from .emitter import emit
from .matcher import match_statement
from .policy import REWRITE_POLICY, RewritePolicy

logger = logging.getLogger(__name__)


def _rewrite_statement(
    statement: ast.stmt,
    *,
    policy: RewritePolicy,
    context: EmitContext,
    depth: int,
) -> ast.stmt:
    match = match_statement(statement, policy=policy, depth=depth)
    replacement = emit(match, context)
    logger.debug("rewrote `%s` as %s", ast.unparse(statement), match.shape.value)
    return ast.fix_missing_locations(ast.copy_location(replacement, statement))


def is_rewrite_block(statement: ast.stmt, *, policy: RewritePolicy) -> bool:
    """Return whether one statement is a `with bb:` rewrite block."""
    return (
        isinstance(statement, ast.With)
        and len(statement.items) == 1
        and statement.items[0].optional_vars is None
        and policy.is_block_marker(statement.items[0].context_expr)
    )


def rewrite_block(
    statements: Iterable[ast.stmt],
    *,
    policy: RewritePolicy | None = None,
    context: EmitContext | None = None,
    depth: int = 1,
) -> list[ast.stmt]:
    """Rewrite every statement of one block, flattening nested rewrite blocks."""
    policy = REWRITE_POLICY if policy is None else policy
    context = EmitContext() if context is None else context
    rewritten: list[ast.stmt] = []
    for statement in statements:
        if not is_rewrite_block(statement, policy=policy):
            rewritten.append(
                _rewrite_statement(
                    statement, policy=policy, context=context, depth=depth
                )
            )
            continue
        if depth >= policy.max_expansion_depth:
            raise MacroExpansionError(
                statement=ast.unparse(statement).splitlines()[0],
                depth=depth,
                reason=f"exceeded max_expansion_depth={policy.max_expansion_depth}",
            )
        rewritten.extend(
            rewrite_block(
                statement.body, policy=policy, context=context, depth=depth + 1
            )
        )
    return rewritten


def rewrite(statement: ast.stmt, policy: RewritePolicy | None = None) -> ast.stmt:
    """Rewrite one statement into its capability-dispatch replacement."""
    policy = REWRITE_POLICY if policy is None else policy
    return _rewrite_statement(statement, policy=policy, context=EmitContext(), depth=1)


def rewrite_source(source: str, *, policy: RewritePolicy | None = None) -> str:
    """Rewrite every top-level statement of one source snippet."""
    module = ast.parse(textwrap.dedent(source))
    module.body = rewrite_block(module.body, policy=policy)
    return ast.unparse(ast.fix_missing_locations(module))


__all__ = ["is_rewrite_block", "rewrite", "rewrite_block", "rewrite_source"]
