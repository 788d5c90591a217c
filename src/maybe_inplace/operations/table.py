import operator
from collections.abc import Callable
from dataclasses import dataclass
from functools import reduce

from ..array_types import ArrayLike
from ..backend.arrays import copy_of
from ..capability import CAN_MUTATE, Capability

InPlaceImpl = Callable[..., object]
OutOfPlaceImpl = Callable[..., object]


@dataclass(frozen=True, slots=True)
class OperationPair:
    """In-place and allocating implementations of one recognized operation."""

    name: str
    in_place: InPlaceImpl
    out_of_place: OutOfPlaceImpl
    min_operands: int
    max_operands: int | None

    def accepts(self, operand_count: int) -> bool:
        """Return whether one call with operand_count operands fits this entry."""
        if operand_count < self.min_operands:
            return False
        return self.max_operands is None or operand_count <= self.max_operands

    def dispatch(self, capability: Capability, target: object, *operands: object) -> object:
        """Run the implementation selected by the target's capability."""
        if capability is CAN_MUTATE:
            return self.in_place(target, *operands)
        return self.out_of_place(target, *operands)


def _copyto_in_place(target: ArrayLike, source: object) -> ArrayLike:
    target[...] = source
    return target


def _copyto_out_of_place(target: object, source: object) -> object:
    return source


def _copy_in_place(target: object, *source: object) -> object:
    return copy_of(source[0] if source else target)


def _copy_out_of_place(target: object, *source: object) -> object:
    return source[0] if source else target


def _updating(
    name: str,
    *,
    combine: Callable[[object, object], object],
    combine_in_place: Callable[[object, object], object],
) -> OperationPair:
    """Build one broadcast compound-assign pair from its binary combinators."""

    def in_place(target: object, *operands: object) -> object:
        for operand in operands:
            updated = combine_in_place(target, operand)
            if updated is not target:
                target[...] = updated
        return target

    def out_of_place(target: object, *operands: object) -> object:
        return reduce(combine, operands, target)

    return OperationPair(
        name=name,
        in_place=in_place,
        out_of_place=out_of_place,
        min_operands=1,
        max_operands=None,
    )


OPERATION_TABLE: dict[str, OperationPair] = {
    "copyto": OperationPair(
        name="copyto",
        in_place=_copyto_in_place,
        out_of_place=_copyto_out_of_place,
        min_operands=1,
        max_operands=1,
    ),
    "copy": OperationPair(
        name="copy",
        in_place=_copy_in_place,
        out_of_place=_copy_out_of_place,
        min_operands=0,
        max_operands=1,
    ),
    "iadd": _updating("iadd", combine=operator.add, combine_in_place=operator.iadd),
    "isub": _updating("isub", combine=operator.sub, combine_in_place=operator.isub),
    "imul": _updating("imul", combine=operator.mul, combine_in_place=operator.imul),
    "itruediv": _updating(
        "itruediv", combine=operator.truediv, combine_in_place=operator.itruediv
    ),
}


def lookup(name: str) -> OperationPair | None:
    """Return the implementation pair registered under name, if any."""
    return OPERATION_TABLE.get(name)


__all__ = ["OPERATION_TABLE", "OperationPair", "lookup"]
