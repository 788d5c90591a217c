from enum import Enum
from typing import Literal, TypeAlias

DiagnosticSeverity: TypeAlias = Literal["error"]
DiagnosticValue: TypeAlias = str | int | bool


class ErrorCode(str, Enum):
    """Canonical internal diagnostic codes."""

    UNSUPPORTED_SHAPE = "unsupported_shape"
    MALFORMED_SPECIAL_FORM = "malformed_special_form"
    MACRO_EXPANSION_NON_TERMINATION = "macro_expansion_non_termination"
    SOURCE_UNAVAILABLE = "source_unavailable"
    CLOSURE_UNSUPPORTED = "closure_unsupported"
    MISSING_DECORATOR = "missing_decorator"


class RewriteError(ValueError):
    """Structured base error for rewrite-time and runtime diagnostics."""

    channel = "rewrite_error"
    severity: DiagnosticSeverity
    code: str
    external_code: str
    help: str | None
    related: tuple[str, ...]
    data: dict[str, DiagnosticValue]
    message: str

    @staticmethod
    def _normalize_code(code: str | ErrorCode) -> str:
        """Normalize code to canonical `snake_case` form."""
        if isinstance(code, ErrorCode):
            return code.value
        if not isinstance(code, str):
            raise TypeError("diagnostic code must be a string or ErrorCode")
        if not code or not code[0].isalpha():
            raise ValueError("diagnostic code must start with a letter")
        if not all(char.isalnum() or char == "_" for char in code):
            raise ValueError("diagnostic code must be snake_case or UPPER_SNAKE")
        if code.isupper() or code.islower():
            return code.lower()
        raise ValueError("diagnostic code cannot mix letter cases")

    def __init__(
        self,
        *,
        code: str | ErrorCode,
        message: str,
        help: str | None = None,
        related: tuple[str, ...] = (),
        data: dict[str, DiagnosticValue] | None = None,
    ) -> None:
        """Build one structured rewrite error."""
        normalized_code = self._normalize_code(code)
        if not isinstance(message, str) or not message.strip():
            raise ValueError("diagnostic message must be a non-empty string")
        if any(not isinstance(note, str) or not note.strip() for note in related):
            raise ValueError("related diagnostic notes must be non-empty strings")

        payload_data = {} if data is None else dict(data)
        for key, value in payload_data.items():
            if not isinstance(key, str) or not isinstance(value, str | int | bool):
                raise TypeError("diagnostic data must map str keys to str, int or bool")

        self.code = normalized_code
        self.external_code = normalized_code.upper()
        self.severity = "error"
        self.help = help
        self.related = tuple(related)
        self.data = payload_data
        self.message = message
        super().__init__(message)


class UnsupportedShapeError(RewriteError):
    """Statement falls outside the closed rewrite grammar."""

    def __init__(self, *, statement: str, help: str | None = None) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED_SHAPE,
            message=(
                f"`{statement}` cannot be handled: "
                "statement shape is not in the supported grammar"
            ),
            help=help
            or (
                "use copyto/copy/zero/similar, iadd/isub/imul/itruediv, axpy/axpby, "
                "`a = b @ c`, `a = elementwise(...)` or `a[...] (op)= value`"
            ),
            related=("rewrite grammar",),
            data={"statement": statement},
        )


_SPECIAL_FORM_HELP: dict[str, str] = {
    "matmul": "write the product as `a = b @ c`, optionally wrapping b or c in vec(...)",
    "elementwise": "write the apply as `a = elementwise(expression)` with a name target",
}


class MalformedSpecialFormError(RewriteError):
    """Special-form head matched but its arguments fit no sub-variant."""

    def __init__(
        self, *, form: str, statement: str, reason: str, help: str | None = None
    ) -> None:
        super().__init__(
            code=ErrorCode.MALFORMED_SPECIAL_FORM,
            message=f"malformed {form} special form `{statement}`: {reason}",
            help=help or _SPECIAL_FORM_HELP.get(form),
            related=(f"{form} special form",),
            data={"form": form, "statement": statement},
        )


class MacroExpansionError(RewriteError):
    """Nested macro expansion never reduced to a recognized shape."""

    def __init__(self, *, statement: str, depth: int, reason: str) -> None:
        super().__init__(
            code=ErrorCode.MACRO_EXPANSION_NON_TERMINATION,
            message=(
                f"macro expansion did not terminate for `{statement}` "
                f"at depth {depth}: {reason}"
            ),
            help="make the macro expand to a supported statement shape",
            related=("macro expansion",),
            data={"statement": statement, "depth": depth},
        )


class ExecutionError(RewriteError):
    """Structured execution-phase error."""

    channel = "execution_error"


__all__ = [
    "ErrorCode",
    "ExecutionError",
    "MacroExpansionError",
    "MalformedSpecialFormError",
    "RewriteError",
    "UnsupportedShapeError",
]
