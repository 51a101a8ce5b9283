"""
Catalog Pricing Engine - entry point for the product form's two actions.

"Calculate Prices" distributes the bought-by unit's prices across the other
units and hands back updated form values. "Save" validates and assembles
the multi-channel payload. Both are pure: inputs in, new values out.
"""
import logging
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..data import price_sheet as price_sheet_module
from .channel_pricing import ChannelPricingBuilder
from .models import (
    AssemblyResult,
    ChannelStock,
    DistributionResult,
    ProductAttributes,
    UnitId,
    UnitPriceForm,
    UnitPricePayload,
)
from .payload_assembler import CatalogPayloadAssembler
from .price_distributor import PriceDistributor
from .units import LevelsLike, UnitConverter, as_hierarchy

logger = logging.getLogger(__name__)


class CatalogPricingEngine:
    """
    Unit-of-measure and multi-channel pricing engine.

    Pipeline:
    1. UnitHierarchy / UnitConverter resolve Pieces per unit
    2. PriceDistributor derives every unit's prices from the bought-by unit
    3. ChannelPricingBuilder emits the unit-price list
    4. CatalogPayloadAssembler validates and builds the channel payload
    """

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize engine components from settings."""
        self.settings = settings or get_settings()
        self.distributor = PriceDistributor()
        self.builder = ChannelPricingBuilder(margin_type=self.settings.margin_type)
        self.assembler = CatalogPayloadAssembler(self.settings, builder=self.builder)

    def multipliers(self, levels: LevelsLike) -> dict[UnitId, int]:
        """Pieces per unit for every level."""
        return UnitConverter(levels).multipliers()

    def calculate_prices(
        self,
        levels: LevelsLike,
        bought_by_unit,
        forms: Mapping[UnitId, UnitPriceForm],
    ) -> DistributionResult:
        """
        Distribute prices from the bought-by unit.

        Args:
            levels: Unit definitions
            bought_by_unit: Reference unit the user priced
            forms: Raw price forms per unit

        Returns:
            DistributionResult; on failure the records mirror the forms
        """
        bought_by_unit = UnitId(bought_by_unit)
        records = {UnitId(unit): form.to_record() for unit, form in forms.items()}
        reference_form = forms.get(bought_by_unit) or UnitPriceForm(unit=bought_by_unit)

        result = self.distributor.distribute(
            reference_unit=bought_by_unit,
            reference_record=reference_form.to_record(),
            levels=levels,
            records=records,
        )
        if result.ok:
            logger.debug("Prices distributed from %s", bought_by_unit.name)
        return result

    @staticmethod
    def updated_forms(
        result: DistributionResult,
        forms: Mapping[UnitId, UnitPriceForm],
    ) -> dict[UnitId, UnitPriceForm]:
        """
        New form objects carrying a successful distribution's prices.

        Only the reference and derived units are rewritten; a unit the
        distributor skipped keeps exactly what was typed into it.
        """
        updated = {UnitId(unit): form for unit, form in forms.items()}
        if not result.ok:
            return updated
        for unit in result.priced_units:
            form = updated.get(unit) or UnitPriceForm(unit=unit)
            updated[unit] = form.with_prices(result.records[unit])
        return updated

    def build_unit_prices(
        self,
        levels: LevelsLike,
        forms: Mapping[UnitId, UnitPriceForm],
    ) -> list[UnitPricePayload]:
        return self.builder.build(levels, forms)

    def assemble_payload(
        self,
        product: ProductAttributes,
        levels: LevelsLike,
        sold_by_unit,
        bought_by_unit,
        forms: Mapping[UnitId, UnitPriceForm],
        channels: Iterable[ChannelStock] = (),
    ) -> AssemblyResult:
        return self.assembler.assemble(
            product=product,
            levels=levels,
            sold_by_unit=sold_by_unit,
            bought_by_unit=bought_by_unit,
            forms=forms,
            channels=channels,
        )

    def price_sheet(
        self,
        levels: LevelsLike,
        forms: Mapping[UnitId, UnitPriceForm],
    ) -> pd.DataFrame:
        """Tabular view of the unit prices that would be sent."""
        hierarchy = as_hierarchy(levels)
        return price_sheet_module.build_price_sheet(self.builder.build(hierarchy, forms), hierarchy)
