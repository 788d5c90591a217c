from .capability import (
    CAN_MUTATE,
    CANNOT_MUTATE,
    Capability,
    register_view_type,
    setindex_trait,
    supports_indexed_assignment,
)
from .decorator import BangBang, bangbang, bb, rewrite_function, rewritten_source
from .diagnostics import (
    ErrorCode,
    ExecutionError,
    MacroExpansionError,
    MalformedSpecialFormError,
    RewriteError,
    UnsupportedShapeError,
)
from .operations import OPERATION_TABLE, OperationPair, axpy_into, lookup, matmul_into
from .rewrite import (
    REWRITE_POLICY,
    RewritePolicy,
    Shape,
    classify,
    rewrite,
    rewrite_block,
    rewrite_source,
)

__all__ = [
    "BangBang",
    "CAN_MUTATE",
    "CANNOT_MUTATE",
    "Capability",
    "ErrorCode",
    "ExecutionError",
    "MacroExpansionError",
    "MalformedSpecialFormError",
    "OPERATION_TABLE",
    "OperationPair",
    "REWRITE_POLICY",
    "RewriteError",
    "RewritePolicy",
    "Shape",
    "UnsupportedShapeError",
    "axpy_into",
    "bangbang",
    "bb",
    "classify",
    "lookup",
    "matmul_into",
    "register_view_type",
    "rewrite",
    "rewrite_block",
    "rewrite_function",
    "rewrite_source",
    "rewritten_source",
    "setindex_trait",
    "supports_indexed_assignment",
]
