from .builders import RUNTIME_NAME, EmitContext
from .emitter import emit
from .entrypoint import is_rewrite_block, rewrite, rewrite_block, rewrite_source
from .matcher import classify, match_statement
from .policy import REWRITE_POLICY, MacroExpander, RewritePolicy
from .shapes import MatMulVariant, Shape, ShapeMatch

__all__ = [
    "REWRITE_POLICY",
    "RUNTIME_NAME",
    "EmitContext",
    "MacroExpander",
    "MatMulVariant",
    "RewritePolicy",
    "Shape",
    "ShapeMatch",
    "classify",
    "emit",
    "is_rewrite_block",
    "match_statement",
    "rewrite",
    "rewrite_block",
    "rewrite_source",
]
