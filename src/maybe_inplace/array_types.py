from types import EllipsisType
from typing import Protocol, TypeAlias, runtime_checkable

try:
    from typing import Self
except ImportError:  # pragma: no cover
    from typing_extensions import Self


IndexAtom: TypeAlias = int | slice | EllipsisType | None
IndexKey: TypeAlias = IndexAtom | tuple[IndexAtom, ...]


@runtime_checkable
class ArrayLike(Protocol):
    """Array protocol shared by the capability trait and runtime helpers."""

    @property
    def shape(self) -> tuple[int, ...]:
        """Array shape."""
        ...

    def __getitem__(self, key: IndexKey, /) -> Self: ...

    def __setitem__(self, key: IndexKey, value: object, /) -> None: ...


__all__ = ["ArrayLike", "IndexKey"]
