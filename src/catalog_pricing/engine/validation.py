"""
Submit-time validation for the product form.

Rules run in a fixed order and the first failure wins, so the form can focus
a single field. Nothing here builds any part of the payload.
"""
from typing import Any, Callable, Mapping, Optional

from .models import (
    ErrorKind,
    ProductAttributes,
    UnitId,
    UnitPriceForm,
    ValidationFailure,
)
from .money import decimal_places, parse_decimal
from .units import UnitHierarchy

# Piece figures every other price is derived from, in the order they are checked
PIECE_ECONOMICS_FIELDS = (
    ("net_cost", "net cost"),
    ("base_cost", "base cost"),
    ("sale_price", "sale price"),
)


def _join_ordinals(ordinals: list[str]) -> str:
    if len(ordinals) == 1:
        return ordinals[0]
    return f"{', '.join(ordinals[:-1])} and {ordinals[-1]}"


def check_unit_names(
    product: ProductAttributes,
    hierarchy: UnitHierarchy,
    forms: Mapping[UnitId, UnitPriceForm],
) -> Optional[ValidationFailure]:
    """A unit with a packaging quantity or UPC needs a name (Piece always has a quantity)."""
    missing = [
        level for level in hierarchy
        if (level.effective_definition is not None or level.upc.strip()) and not level.label.strip()
    ]
    if not missing:
        return None
    noun = "unit" if len(missing) == 1 else "units"
    return ValidationFailure(
        kind=ErrorKind.UNIT_NAME_MISSING,
        message=f"Please enter a unit name for the {_join_ordinals([lv.ordinal for lv in missing])} {noun}.",
        units=[level.id for level in missing],
        field="unit_name",
    )


def _piece_value_problem(raw: Any) -> Optional[str]:
    value = parse_decimal(raw)
    if value is None:
        return "is required"
    if value <= 0:
        return "must be greater than 0"
    if decimal_places(raw) > 2:
        return "cannot have more than 2 decimal places"
    return None


def check_piece_economics(
    product: ProductAttributes,
    hierarchy: UnitHierarchy,
    forms: Mapping[UnitId, UnitPriceForm],
) -> Optional[ValidationFailure]:
    """Piece net cost, base cost and sale price must be positive amounts in cents."""
    piece_form = forms.get(UnitId.PIECE) or UnitPriceForm(unit=UnitId.PIECE)
    label = hierarchy[UnitId.PIECE].label.strip() or "Piece"
    for attr, name in PIECE_ECONOMICS_FIELDS:
        problem = _piece_value_problem(getattr(piece_form, attr))
        if problem:
            return ValidationFailure(
                kind=ErrorKind.PIECE_ECONOMICS_INVALID,
                message=f"{label} {name} {problem}.",
                units=[UnitId.PIECE],
                field=attr,
            )
    return None


def check_categories(
    product: ProductAttributes,
    hierarchy: UnitHierarchy,
    forms: Mapping[UnitId, UnitPriceForm],
) -> Optional[ValidationFailure]:
    if not product.category_ids:
        return ValidationFailure(
            kind=ErrorKind.MISSING_CATEGORY_SELECTION,
            message="Please select at least one category.",
            field="category_ids",
        )
    if product.main_category_id is None:
        return ValidationFailure(
            kind=ErrorKind.MISSING_MAIN_CATEGORY,
            message="Please choose a main category.",
            field="main_category_id",
        )
    return None


def check_product_name(
    product: ProductAttributes,
    hierarchy: UnitHierarchy,
    forms: Mapping[UnitId, UnitPriceForm],
) -> Optional[ValidationFailure]:
    if not (product.name or "").strip():
        return ValidationFailure(
            kind=ErrorKind.PRODUCT_NAME_MISSING,
            message="Product name is required.",
            field="name",
        )
    return None


SUBMIT_RULES: tuple[Callable[..., Optional[ValidationFailure]], ...] = (
    check_unit_names,
    check_piece_economics,
    check_categories,
    check_product_name,
)


def validate_submission(
    product: ProductAttributes,
    hierarchy: UnitHierarchy,
    forms: Mapping[UnitId, UnitPriceForm],
) -> Optional[ValidationFailure]:
    """Run every submit rule in order and return the first failure, if any."""
    for rule in SUBMIT_RULES:
        failure = rule(product, hierarchy, forms)
        if failure is not None:
            return failure
    return None
