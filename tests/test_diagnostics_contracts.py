import ast

import pytest

from maybe_inplace import (
    ErrorCode,
    ExecutionError,
    MacroExpansionError,
    MalformedSpecialFormError,
    RewriteError,
    UnsupportedShapeError,
    rewrite,
    rewrite_source,
)


def test_rewrite_error_exposes_structured_fields() -> None:
    error = RewriteError(
        code=ErrorCode.UNSUPPORTED_SHAPE,
        message="unsupported shape: x = y + 1",
        help="use a supported spelling",
        related=("rewrite grammar",),
        data={"statement": "x = y + 1"},
    )

    assert error.code == "unsupported_shape"
    assert error.external_code == "UNSUPPORTED_SHAPE"
    assert error.severity == "error"
    assert error.channel == "rewrite_error"
    assert error.help == "use a supported spelling"
    assert error.related == ("rewrite grammar",)
    assert error.data == {"statement": "x = y + 1"}
    assert str(error) == "unsupported shape: x = y + 1"


def test_rewrite_error_normalizes_upper_snake_codes() -> None:
    error = RewriteError(code="CUSTOM_FAILURE", message="custom failure")
    assert error.code == "custom_failure"
    assert error.external_code == "CUSTOM_FAILURE"


def test_rewrite_error_rejects_invalid_payloads() -> None:
    with pytest.raises(ValueError):
        RewriteError(code="Mixed_Case", message="bad code")
    with pytest.raises(ValueError):
        RewriteError(code="has space", message="bad code")
    with pytest.raises(ValueError):
        RewriteError(code="ok_code", message="   ")
    with pytest.raises(ValueError):
        RewriteError(code="ok_code", message="blank note", related=(" ",))
    with pytest.raises(TypeError):
        RewriteError(code="ok_code", message="bad data", data={"k": 1.5})  # type: ignore[dict-item]


def test_execution_error_exposes_channel() -> None:
    error = ExecutionError(code=ErrorCode.MISSING_DECORATOR, message="no decorator")
    assert error.channel == "execution_error"
    assert isinstance(error, RewriteError)


def test_unsupported_shape_embeds_offending_statement() -> None:
    with pytest.raises(UnsupportedShapeError) as error:
        rewrite_source("x = y + 1")

    assert error.value.code == "unsupported_shape"
    assert "x = y + 1" in str(error.value)
    assert error.value.data == {"statement": "x = y + 1"}
    assert "rewrite grammar" in error.value.related


def test_unsupported_shape_never_passes_statement_through() -> None:
    statement = ast.parse("print(y)").body[0]
    with pytest.raises(UnsupportedShapeError):
        rewrite(statement)


def test_malformed_matmul_reports_form_and_statement() -> None:
    with pytest.raises(MalformedSpecialFormError) as error:
        rewrite_source("y = matmul(a)")

    assert error.value.code == "malformed_special_form"
    assert error.value.external_code == "MALFORMED_SPECIAL_FORM"
    assert error.value.data == {"form": "matmul", "statement": "y = matmul(a)"}


def test_malformed_forms_carry_form_specific_help() -> None:
    with pytest.raises(MalformedSpecialFormError) as matmul_error:
        rewrite_source("y = matmul(a)")
    with pytest.raises(MalformedSpecialFormError) as elementwise_error:
        rewrite_source("y = elementwise(a, b)")

    assert "a = b @ c" in matmul_error.value.help
    assert "elementwise(expression)" in elementwise_error.value.help
    assert "@" not in elementwise_error.value.help
    custom = MalformedSpecialFormError(
        form="matmul", statement="y = matmul(a)", reason="arity", help="pass two operands"
    )
    assert custom.help == "pass two operands"


def test_macro_expansion_error_carries_depth() -> None:
    error = MacroExpansionError(statement="grow(y)", depth=3, reason="looping")
    assert error.code == "macro_expansion_non_termination"
    assert error.data == {"statement": "grow(y)", "depth": 3}
    assert "depth 3" in error.message
