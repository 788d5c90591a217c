import ast
import importlib

import pytest

import maybe_inplace
from maybe_inplace import REWRITE_POLICY, OPERATION_TABLE, RewritePolicy, Shape


def test_public_exports_resolve() -> None:
    for exported in maybe_inplace.__all__:
        assert hasattr(maybe_inplace, exported), exported


@pytest.mark.parametrize(
    "module_name",
    [
        "maybe_inplace.backend",
        "maybe_inplace.capability",
        "maybe_inplace.decorator",
        "maybe_inplace.diagnostics",
        "maybe_inplace.ext",
        "maybe_inplace.operations",
        "maybe_inplace.rewrite",
        "maybe_inplace.runtime",
    ],
)
def test_submodules_declare_all(module_name: str) -> None:
    module = importlib.import_module(module_name)
    for exported in module.__all__:
        assert hasattr(module, exported), f"{module_name}.{exported}"


def test_runtime_exposes_every_helper_emitted_code_uses() -> None:
    runtime = importlib.import_module("maybe_inplace.runtime")
    emitted = {
        "CAN_MUTATE",
        "OPERATION_TABLE",
        "axpy_into",
        "broadcast_call",
        "copy_of",
        "matmul_into",
        "restructure",
        "setindex_trait",
        "similar_of",
        "unflatten_into",
        "vec",
        "zero_of",
        "zero_value",
    }
    assert emitted <= set(runtime.__all__)


def test_shape_enumeration_is_closed() -> None:
    assert {shape.value for shape in Shape} == {
        "copy_into",
        "copy_of",
        "zero_of",
        "similar_of",
        "generic_op_assign",
        "broadcast_assign",
        "elementwise_apply_assign",
        "matmul_assign",
        "axpy_assign",
        "unsupported",
    }


def test_operation_table_is_fixed() -> None:
    assert set(OPERATION_TABLE) == {"copyto", "copy", "iadd", "isub", "imul", "itruediv"}


def test_default_policy() -> None:
    assert REWRITE_POLICY.block_names == ("bb", "bangbang")
    assert REWRITE_POLICY.allow_matmul_accumulate
    assert REWRITE_POLICY.max_expansion_depth == 32
    assert dict(REWRITE_POLICY.macros) == {}


def test_policy_rejects_invalid_fields() -> None:
    with pytest.raises(TypeError):
        RewritePolicy(block_names=["bb"])  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        RewritePolicy(block_names=("not a name",))
    with pytest.raises(ValueError):
        RewritePolicy(max_expansion_depth=0)
    with pytest.raises(TypeError):
        RewritePolicy(max_expansion_depth=True)
    with pytest.raises(TypeError):
        RewritePolicy().with_macros(fill="copyto")  # type: ignore[arg-type]


def test_policy_macros_are_frozen() -> None:
    policy = RewritePolicy().with_macros(fill=lambda node: ast.Expr(value=node))
    assert "fill" in policy.macros
    assert "fill" not in REWRITE_POLICY.macros
    with pytest.raises(TypeError):
        policy.macros["other"] = lambda node: ast.Expr(value=node)  # type: ignore[index]


def test_policy_recognizes_block_markers() -> None:
    policy = RewritePolicy(block_names=("mi",))
    assert policy.is_block_marker(ast.parse("mi", mode="eval").body)
    assert policy.is_block_marker(ast.parse("pkg.mi", mode="eval").body)
    assert not policy.is_block_marker(ast.parse("bb", mode="eval").body)
    assert not policy.is_block_marker(ast.parse("mi()", mode="eval").body)
