"""Engine subpackage - unit conversion, price distribution and payload assembly."""
from .pricing_engine import CatalogPricingEngine
from .models import (
    AssemblyResult,
    CatalogPayload,
    ChannelStock,
    DistributionResult,
    ErrorKind,
    ProductAttributes,
    UnitId,
    UnitLevel,
    UnitPriceForm,
    UnitPriceRecord,
    ValidationFailure,
)
from .units import UnitConverter, UnitHierarchy, multiplier_from_base, multiplier_to_base
from .price_distributor import PriceDistributor
from .channel_pricing import ChannelPricingBuilder
from .payload_assembler import CatalogPayloadAssembler

__all__ = [
    'CatalogPricingEngine',
    'AssemblyResult',
    'CatalogPayload',
    'ChannelStock',
    'DistributionResult',
    'ErrorKind',
    'ProductAttributes',
    'UnitId',
    'UnitLevel',
    'UnitPriceForm',
    'UnitPriceRecord',
    'ValidationFailure',
    'UnitConverter',
    'UnitHierarchy',
    'multiplier_from_base',
    'multiplier_to_base',
    'PriceDistributor',
    'ChannelPricingBuilder',
    'CatalogPayloadAssembler',
]
