from decimal import Decimal

import pytest

from catalog_pricing.engine import (
    UnitConverter,
    UnitHierarchy,
    UnitId,
    UnitLevel,
    multiplier_from_base,
    multiplier_to_base,
)


def test_piece_is_always_one(full_levels):
    """Piece converts to itself regardless of the other definitions."""
    assert multiplier_to_base(UnitId.PIECE, full_levels) == 1
    assert multiplier_to_base(UnitId.PIECE, UnitHierarchy()) == 1


def test_chain_multiplication(full_levels):
    """Pallet 5 x Case 10 x Pack 12."""
    assert multiplier_to_base(UnitId.PACK, full_levels) == 12
    assert multiplier_to_base(UnitId.CASE, full_levels) == 120
    assert multiplier_to_base(UnitId.PALLET, full_levels) == 600


def test_missing_link_falls_back_to_one():
    """A broken chain gives 1, not the partial product."""
    levels = UnitHierarchy([
        UnitLevel(UnitId.PACK, "Pack", definition=12),
        UnitLevel(UnitId.PALLET, "Pallet", definition=5),
    ])
    converter = UnitConverter(levels)

    assert converter.multiplier_to_base(UnitId.PALLET) == 1
    assert converter.has_complete_chain(UnitId.PALLET) is False
    assert converter.multiplier_to_base(UnitId.PACK) == 12
    assert converter.has_complete_chain(UnitId.PACK) is True


def test_multiplier_from_base_is_inverse(full_levels):
    assert multiplier_from_base(UnitId.CASE, full_levels) == Decimal(1) / Decimal(120)
    assert multiplier_from_base(UnitId.PIECE, full_levels) == Decimal(1)


def test_quantity_conversion(full_levels):
    converter = UnitConverter(full_levels)

    assert converter.to_base_qty("3", UnitId.CASE) == 360
    assert converter.to_base_qty("2.9", UnitId.PACK) == 24, "Quantity is truncated before multiplying"
    assert converter.to_base_qty("n/a", UnitId.PACK) == 0
    assert converter.from_base_qty(130, UnitId.CASE) == 1


def test_hierarchy_from_form_parses_definitions():
    """Blank, zero and non-numeric packaging quantities mean 'not set'."""
    hierarchy = UnitHierarchy.from_form([
        {"unit": 1, "unit_name": "Each", "definition": "7"},
        {"unit": 2, "unit_name": "Pack", "definition": "12"},
        {"unit": 3, "unit_name": "Case", "definition": "", "upc": "0123456789"},
        {"unit": 4, "unit_name": "Pallet", "definition": "0"},
    ])

    assert hierarchy[UnitId.PIECE].definition is None
    assert hierarchy[UnitId.PIECE].effective_definition == 1
    assert hierarchy[UnitId.PIECE].label == "Each"
    assert hierarchy[UnitId.PACK].definition == 12
    assert hierarchy[UnitId.CASE].definition is None
    assert hierarchy[UnitId.CASE].in_use is True, "A UPC alone keeps the level in use"
    assert hierarchy[UnitId.PALLET].definition is None
    assert hierarchy[UnitId.PALLET].in_use is False


def test_hierarchy_fills_missing_levels_in_order():
    hierarchy = UnitHierarchy([UnitLevel(UnitId.CASE, "Case", definition=4)])

    assert [level.id for level in hierarchy] == [UnitId.PIECE, UnitId.PACK, UnitId.CASE, UnitId.PALLET]
    assert hierarchy[UnitId.PALLET].label == "Pallet"
    assert [level.id for level in hierarchy.in_use()] == [UnitId.PIECE, UnitId.CASE]


@pytest.mark.parametrize("unit,child", [
    (UnitId.PALLET, UnitId.CASE),
    (UnitId.CASE, UnitId.PACK),
    (UnitId.PACK, UnitId.PIECE),
    (UnitId.PIECE, None),
])
def test_child_of(full_levels, unit, child):
    assert full_levels.child_of(unit) == child
