import os
import sys

import pytest

# Add src to path for internal imports
src_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from catalog_pricing.config.settings import Settings
from catalog_pricing.engine import (
    CatalogPricingEngine,
    ProductAttributes,
    UnitHierarchy,
    UnitId,
    UnitLevel,
    UnitPriceForm,
)


@pytest.fixture
def settings():
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def engine(settings):
    return CatalogPricingEngine(settings)


@pytest.fixture
def full_levels():
    """Pack = 12 Pieces, Case = 10 Packs, Pallet = 5 Cases."""
    return UnitHierarchy([
        UnitLevel(UnitId.PIECE, "Piece"),
        UnitLevel(UnitId.PACK, "Pack", definition=12),
        UnitLevel(UnitId.CASE, "Case", definition=10),
        UnitLevel(UnitId.PALLET, "Pallet", definition=5),
    ])


@pytest.fixture
def pack_only_levels():
    """Only Piece and Pack (12) in use."""
    return UnitHierarchy([
        UnitLevel(UnitId.PIECE, "Piece"),
        UnitLevel(UnitId.PACK, "Pack", definition=12),
    ])


@pytest.fixture
def piece_form():
    return UnitPriceForm(unit=UnitId.PIECE, base_cost="1.00", net_cost="1.00", sale_price="1.50")


@pytest.fixture
def product():
    return ProductAttributes(
        name="Cola 12oz",
        sku="COLA-12",
        main_category_id=7,
        category_ids=[7, 9],
        brand_id=3,
    )
