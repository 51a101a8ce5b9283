"""
Price Distributor - derives every unit's prices from one reference unit.

The reference is the product's bought-by unit, whose net cost and sale price
the user has filled in. Its seven monetary fields are brought down to a
per-Piece baseline and scaled back up for each other unit in use:

    baseline = reference / pieces_in(reference)
    unit     = baseline * pieces_in(unit)

Every intermediate is rounded half-up to cents, so figures drift by a few
cents on a round trip (Case 100.00 -> Piece 0.83 -> Case 99.60). That drift
is what the product form shows and is kept on purpose.
"""
import logging
from typing import Mapping, Optional

from .models import (
    DistributionResult,
    ErrorKind,
    UnitId,
    UnitLevel,
    UnitPriceRecord,
    ValidationFailure,
)
from .units import LevelsLike, UnitConverter

logger = logging.getLogger(__name__)


class PriceDistributor:
    """
    Distributes a reference unit's prices across the packaging hierarchy.

    Resolution order:
    1. Resolve how many Pieces the reference unit holds
    2. Require a positive net cost and sale price on the reference
    3. Derive the per-Piece baseline
    4. Scale the baseline into every other unit in use
    Tier prices are left exactly as entered.
    """

    def distribute(
        self,
        reference_unit,
        reference_record: UnitPriceRecord,
        levels: LevelsLike,
        records: Mapping[UnitId, UnitPriceRecord],
    ) -> DistributionResult:
        """
        Distribute prices from ``reference_unit``.

        Args:
            reference_unit: Unit whose record is fully priced (usually bought-by)
            reference_record: That unit's prices
            levels: Unit definitions
            records: Current records per unit; never modified

        Returns:
            DistributionResult with a new records dict, or a
            MISSING_REFERENCE_VALUES failure and the records untouched
        """
        converter = UnitConverter(levels)
        hierarchy = converter.hierarchy
        reference_unit = UnitId(reference_unit)
        reference_level = hierarchy[reference_unit]

        result = DistributionResult(reference_unit=reference_unit, records=dict(records))
        result.add_trace("Reference", f"Distributing from {reference_level.label or reference_unit.name.title()}")

        reference_lowest = converter.multiplier_to_base(reference_unit)
        if not converter.has_complete_chain(reference_unit):
            result.add_warning(
                f"{reference_level.label} has a missing packaging quantity below it; "
                f"treated as 1 Piece"
            )
        result.add_trace("Unit Conversion", f"Pieces per {reference_level.label}", str(reference_lowest))

        if reference_record.net_cost <= 0 or reference_record.sale_price <= 0:
            result.failure = ValidationFailure(
                kind=ErrorKind.MISSING_REFERENCE_VALUES,
                message=(
                    f"Enter a net cost and sale price greater than 0 for the "
                    f"{reference_level.label} unit before calculating prices."
                ),
                units=[reference_unit],
                field="net_cost" if reference_record.net_cost <= 0 else "sale_price",
            )
            result.add_trace("Stopped", "Reference unit is missing net cost or sale price")
            logger.info("Price distribution skipped: %s", result.failure.message)
            return result

        result.records[reference_unit] = reference_record
        result.priced_units.append(reference_unit)

        baseline = reference_record.divided_by(reference_lowest)
        result.add_trace(
            "Per-Piece Baseline",
            "Net cost / sale price per Piece",
            f"${baseline.net_cost} / ${baseline.sale_price}",
        )

        for level in hierarchy:
            if level.id == reference_unit:
                continue

            unit_lowest = self._unit_lowest(level, converter)
            if not unit_lowest:
                result.add_trace("Skipped", f"{level.label or level.id.name.title()} is not in use")
                continue
            if not converter.has_complete_chain(level.id):
                result.add_warning(
                    f"{level.label} has a missing packaging quantity below it; treated as 1 Piece"
                )

            current = result.records.get(level.id) or UnitPriceRecord(unit=level.id)
            derived = current.with_money_of(baseline.multiplied_by(unit_lowest))
            result.records[level.id] = derived
            result.priced_units.append(level.id)
            result.add_trace(
                "Derived",
                f"{level.label} = baseline x {unit_lowest}",
                f"${derived.net_cost} / ${derived.sale_price}",
            )

        return result

    @staticmethod
    def _unit_lowest(level: UnitLevel, converter: UnitConverter) -> Optional[int]:
        """Pieces in ``level``, or None when the level has no definition of its own."""
        if level.effective_definition is None:
            return None
        return converter.multiplier_to_base(level.id)
