"""
Unit hierarchy and conversion.

The packaging ladder is fixed: Piece -> Pack -> Case -> Pallet. A level's
definition counts how many of the level below make one of it, so with
Pack=12, Case=10, Pallet=5 one Pallet is 5 x 10 x 12 = 600 Pieces.

Conversion walks down the ladder one rung at a time. If a rung on the way
has no definition the walk gives up and uses a multiplier of 1; callers
surface that as a warning rather than an error.
"""
import logging
from decimal import Decimal
from typing import Any, Iterable, Iterator, Mapping, Optional, Union

from .models import UnitId, UnitLevel, UNIT_ORDER, DEFAULT_UNIT_LABELS
from .money import parse_count, parse_quantity

logger = logging.getLogger(__name__)


class UnitHierarchy:
    """The four packaging levels of one product, in canonical order."""

    def __init__(self, levels: Iterable[UnitLevel] = ()):
        given = {UnitId(level.id): level for level in levels}
        self._levels = {
            unit: given.get(unit, UnitLevel(id=unit, label=DEFAULT_UNIT_LABELS[unit]))
            for unit in UNIT_ORDER
        }

    @classmethod
    def from_form(cls, rows: Iterable[Mapping[str, Any]]) -> 'UnitHierarchy':
        """
        Build from raw form rows.

        Each row carries ``unit`` plus optional ``unit_name``, ``definition``
        and ``upc``. Blank or non-numeric packaging quantities become None.
        """
        levels = []
        for row in rows:
            unit = UnitId(int(row["unit"]))
            label = row.get("unit_name")
            levels.append(UnitLevel(
                id=unit,
                label=DEFAULT_UNIT_LABELS[unit] if label is None else str(label),
                definition=None if unit == UnitId.PIECE else parse_count(row.get("definition")),
                upc=str(row.get("upc") or ""),
            ))
        return cls(levels)

    def __iter__(self) -> Iterator[UnitLevel]:
        return iter(self._levels[unit] for unit in UNIT_ORDER)

    def __getitem__(self, unit) -> UnitLevel:
        return self._levels[UnitId(unit)]

    def __len__(self) -> int:
        return len(self._levels)

    def child_of(self, unit) -> Optional[UnitId]:
        """The next lower rung, or None for Piece."""
        index = UNIT_ORDER.index(UnitId(unit))
        return UNIT_ORDER[index - 1] if index > 0 else None

    def in_use(self) -> list[UnitLevel]:
        return [level for level in self if level.in_use]


LevelsLike = Union[UnitHierarchy, Iterable[UnitLevel]]


def as_hierarchy(levels: LevelsLike) -> UnitHierarchy:
    if isinstance(levels, UnitHierarchy):
        return levels
    return UnitHierarchy(levels)


class UnitConverter:
    """Converts quantities and prices between a hierarchy's levels and Piece."""

    def __init__(self, levels: LevelsLike):
        self.hierarchy = as_hierarchy(levels)

    def _walk(self, unit) -> Optional[int]:
        """Product of definitions from ``unit`` down to Piece, None if a rung is missing."""
        multiplier = 1
        current = UnitId(unit)
        while current != UnitId.PIECE:
            definition = self.hierarchy[current].definition
            if definition is None:
                return None
            multiplier *= definition
            current = self.hierarchy.child_of(current)
        return multiplier

    def has_complete_chain(self, unit) -> bool:
        return self._walk(unit) is not None

    def multiplier_to_base(self, unit) -> int:
        """How many Pieces make one ``unit``; 1 when the chain is broken."""
        multiplier = self._walk(unit)
        if multiplier is None:
            logger.warning(
                "Missing packaging definition between %s and Piece; falling back to 1",
                self.hierarchy[unit].label or UnitId(unit).name.title(),
            )
            return 1
        return multiplier

    def multiplier_from_base(self, unit) -> Decimal:
        """Fraction of one ``unit`` that a single Piece represents."""
        return Decimal(1) / Decimal(self.multiplier_to_base(unit))

    def to_base_qty(self, qty: Any, unit) -> int:
        """Quantity in ``unit`` as whole Pieces (input truncated before multiplying)."""
        return parse_quantity(qty) * self.multiplier_to_base(unit)

    def from_base_qty(self, base_qty: Any, unit) -> int:
        """Whole ``unit``s contained in a Piece quantity; remainders are dropped."""
        return parse_quantity(base_qty) // self.multiplier_to_base(unit)

    def multipliers(self) -> dict[UnitId, int]:
        return {level.id: self.multiplier_to_base(level.id) for level in self.hierarchy}


def multiplier_to_base(target, levels: LevelsLike) -> int:
    """Multiplier that converts a quantity in ``target`` down to Pieces."""
    return UnitConverter(levels).multiplier_to_base(target)


def multiplier_from_base(target, levels: LevelsLike) -> Decimal:
    """Inverse of ``multiplier_to_base``."""
    return UnitConverter(levels).multiplier_from_base(target)
