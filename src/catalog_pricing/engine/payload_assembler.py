"""
Catalog Payload Assembler - builds the create/update body for a product.

Validation runs before anything is built. On success every channel gets its
stock converted from the sold-by unit to Pieces and the same unit-price list.
"""
import logging
from typing import Iterable, Mapping, Optional

from ..config.settings import Settings, get_settings
from .channel_pricing import ChannelPricingBuilder
from .models import (
    AssemblyResult,
    CatalogPayload,
    ChannelInfo,
    ChannelStock,
    ErrorKind,
    ProductAttributes,
    UnitId,
    UnitPriceForm,
    UnitPricePayload,
)
from .money import parse_quantity
from .units import LevelsLike, UnitConverter
from .validation import validate_submission

logger = logging.getLogger(__name__)


class CatalogPayloadAssembler:
    """Combines product attributes, converted channel stock and unit prices."""

    def __init__(self, settings: Optional[Settings] = None, builder: Optional[ChannelPricingBuilder] = None):
        self.settings = settings or get_settings()
        self.builder = builder or ChannelPricingBuilder(margin_type=self.settings.margin_type)

    def assemble(
        self,
        product: ProductAttributes,
        levels: LevelsLike,
        sold_by_unit,
        bought_by_unit,
        forms: Mapping[UnitId, UnitPriceForm],
        channels: Iterable[ChannelStock] = (),
    ) -> AssemblyResult:
        """
        Assemble the payload for a save attempt.

        Returns:
            AssemblyResult holding either the payload or the first
            validation failure (never both)
        """
        converter = UnitConverter(levels)
        hierarchy = converter.hierarchy
        sold_by_unit = UnitId(sold_by_unit)
        bought_by_unit = UnitId(bought_by_unit)
        result = AssemblyResult()

        # 1. Validate before building anything
        failure = validate_submission(product, hierarchy, forms)
        if failure is not None:
            result.failure = failure
            result.add_trace("Validation", failure.message, failure.kind.value)
            logger.info("Product save blocked: %s", failure.message)
            return result
        result.add_trace("Validation", "All submit rules passed")

        # 2. Unit prices, shared by every channel
        unit_prices = self.builder.build(hierarchy, forms)
        for level in self.builder.excluded_units(hierarchy):
            result.add_trace(
                "Unit Excluded",
                f"{level.label or level.id.name.title()} has no packaging quantity",
                ErrorKind.UNIT_NOT_CONFIGURED.value,
            )
        result.add_trace("Unit Prices", "Units priced", ", ".join(up.unit_name for up in unit_prices))

        # 3. Sold-by -> Piece multiplier for stock
        in_base = converter.multiplier_to_base(sold_by_unit)
        if not converter.has_complete_chain(sold_by_unit):
            result.add_warning(
                f"Sold-by unit {hierarchy[sold_by_unit].label} has a missing packaging "
                f"quantity; stock is sent unconverted"
            )
        result.add_trace("Unit Conversion", f"Pieces per {hierarchy[sold_by_unit].label}", str(in_base))

        # 4. Channels, falling back to a single default channel
        channels = list(channels)
        if not channels:
            channels = [self._default_channel()]
            result.add_trace(
                "Channel Fallback",
                "No channels supplied, using default channel",
                self.settings.default_channel_name,
            )

        channel_info = [
            self._channel_info(channel, in_base, sold_by_unit, bought_by_unit, unit_prices)
            for channel in channels
        ]

        # 5. Compliance block only for compliant products
        msa_attributes = dict(product.msa_attributes or {}) if product.is_msa_compliant else None

        result.payload = CatalogPayload(
            product=product,
            channel_info=channel_info,
            msa_attributes=msa_attributes,
        )
        return result

    def _default_channel(self) -> ChannelStock:
        return ChannelStock(
            channel_id=self.settings.default_channel_id,
            channel_name=self.settings.default_channel_name,
        )

    @staticmethod
    def _channel_info(
        channel: ChannelStock,
        in_base: int,
        sold_by_unit: UnitId,
        bought_by_unit: UnitId,
        unit_prices: list[UnitPricePayload],
    ) -> ChannelInfo:
        back_order = parse_quantity(channel.back_order_qty) * in_base
        coming_soon = parse_quantity(channel.coming_soon_qty) * in_base
        ps_allowed = None if channel.ps_allowed_qty in (None, "") else parse_quantity(channel.ps_allowed_qty)

        return ChannelInfo(
            channel_id=channel.channel_id,
            channel_name=channel.channel_name,
            in_hand=parse_quantity(channel.available_qty) * in_base,
            on_hold=parse_quantity(channel.on_hold_qty) * in_base,
            damaged=parse_quantity(channel.damaged_qty) * in_base,
            # 0 means "not set" for these two
            back_order=back_order or None,
            coming_soon=coming_soon or None,
            min_qty=parse_quantity(channel.min_qty),
            max_qty=parse_quantity(channel.max_qty),
            sold_by_unit=sold_by_unit,
            bought_by_unit=bought_by_unit,
            unit_prices=list(unit_prices),
            ps_allowed_qty=ps_allowed,
        )
