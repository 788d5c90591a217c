import ast
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

MacroExpander = Callable[[ast.Call], ast.stmt]

_DEFAULT_BLOCK_NAMES = ("bb", "bangbang")
_DEFAULT_MAX_EXPANSION_DEPTH = 32


@dataclass(frozen=True, slots=True)
class RewritePolicy:
    """Grammar options shared by the matcher, the emitter and the entry points."""

    block_names: tuple[str, ...] = _DEFAULT_BLOCK_NAMES
    allow_matmul_accumulate: bool = True
    max_expansion_depth: int = _DEFAULT_MAX_EXPANSION_DEPTH
    macros: Mapping[str, MacroExpander] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        """Validate and freeze policy fields."""
        if not isinstance(self.block_names, tuple) or not self.block_names:
            raise TypeError("block_names must be a non-empty tuple of names")
        for name in self.block_names:
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"block name must be an identifier, got {name!r}")
        if isinstance(self.max_expansion_depth, bool) or not isinstance(
            self.max_expansion_depth, int
        ):
            raise TypeError("max_expansion_depth must be an int")
        if self.max_expansion_depth < 1:
            raise ValueError("max_expansion_depth must be at least 1")
        for name, expander in self.macros.items():
            if not isinstance(name, str) or not name.isidentifier():
                raise ValueError(f"macro name must be an identifier, got {name!r}")
            if not callable(expander):
                raise TypeError(f"macro {name!r} expander must be callable")
        object.__setattr__(self, "macros", MappingProxyType(dict(self.macros)))

    def with_macros(self, **macros: MacroExpander) -> "RewritePolicy":
        """Return one policy with additional rewrite macros registered."""
        return replace(self, macros={**self.macros, **macros})

    def is_block_marker(self, node: ast.expr) -> bool:
        """Return whether one `with` item names a rewrite block."""
        if isinstance(node, ast.Name):
            return node.id in self.block_names
        if isinstance(node, ast.Attribute):
            return node.attr in self.block_names
        return False


REWRITE_POLICY = RewritePolicy()


__all__ = ["MacroExpander", "REWRITE_POLICY", "RewritePolicy"]
