"""
Channel Pricing Builder - the unit_prices list sent with every channel.

One entry per unit in use, in canonical order. A Pack, Case or Pallet
without a packaging quantity is left out entirely, even when it has a UPC
or prices typed in.
"""
import logging
from typing import Mapping, Optional

from .models import (
    TIER_SLOTS,
    UnitId,
    UnitLevel,
    UnitPriceForm,
    UnitPricePayload,
    UnitTier,
)
from .money import round_amount
from .units import LevelsLike, as_hierarchy

logger = logging.getLogger(__name__)


class ChannelPricingBuilder:
    """Builds the unit-price records for one sales channel."""

    def __init__(self, margin_type: int = 1):
        self.margin_type = margin_type

    def build(
        self,
        levels: LevelsLike,
        forms: Mapping[UnitId, UnitPriceForm],
    ) -> list[UnitPricePayload]:
        """Build the ordered unit-price list, skipping units not in use."""
        unit_prices = []
        for level in as_hierarchy(levels):
            if level.effective_definition is None:
                logger.debug("Unit %s has no packaging quantity; excluded", level.id.name)
                continue
            form = forms.get(level.id) or UnitPriceForm(unit=level.id)
            unit_prices.append(self._build_entry(level, form))
        return unit_prices

    def excluded_units(self, levels: LevelsLike) -> list[UnitLevel]:
        """Levels that ``build`` leaves out."""
        return [level for level in as_hierarchy(levels) if level.effective_definition is None]

    def _build_entry(self, level: UnitLevel, form: UnitPriceForm) -> UnitPricePayload:
        return UnitPricePayload(
            unit=level.id,
            unit_name=level.label,
            definition=level.effective_definition,
            upc=level.upc or "",
            base_cost=round_amount(form.base_cost),
            cost=round_amount(form.net_cost),
            price=round_amount(form.sale_price),
            margin=round_amount(form.margin),
            margin_type=self.margin_type,
            lowest_selling_price=round_amount(form.lowest_selling_price),
            ecom_price=round_amount(form.ecom_price),
            msrp_price=round_amount(form.msrp),
            unit_price_tiers=self._build_tiers(form.tier_prices),
        )

    @staticmethod
    def _build_tiers(raw_tiers: Optional[list]) -> list[UnitTier]:
        raw_tiers = list(raw_tiers or [])
        tiers = []
        for slot in range(TIER_SLOTS):
            raw = raw_tiers[slot] if slot < len(raw_tiers) else None
            # Blank slots go out as 0, never null
            tiers.append(UnitTier(tier_id=slot + 1, price=round_amount(raw)))
        return tiers
