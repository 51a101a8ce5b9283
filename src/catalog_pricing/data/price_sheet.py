"""
Price Sheet - tabular view of a product's unit prices.

One row per unit that will be sent, with per-Piece figures alongside so
rounding drift between units is visible at a glance.
"""
from decimal import Decimal
from pathlib import Path
from typing import Optional

import pandas as pd

from ..engine.models import TIER_SLOTS, UnitId, UnitPricePayload
from ..engine.money import round_money
from ..engine.units import LevelsLike, UnitConverter

TIER_COLUMNS = [f"Tier {slot}" for slot in range(1, TIER_SLOTS + 1)]

PRICE_SHEET_COLUMNS = [
    "Unit", "Unit Name", "Definition", "Pieces", "UPC",
    "Base Cost", "Cost", "Price", "Margin",
    "Lowest Selling Price", "E-com Price", "MSRP",
    *TIER_COLUMNS,
    "Cost / Piece", "Price / Piece", "Cost Drift",
]


def build_price_sheet(unit_prices: list[UnitPricePayload], levels: LevelsLike) -> pd.DataFrame:
    """
    Build the price sheet for a unit-price list.

    Args:
        unit_prices: Entries as produced by ChannelPricingBuilder
        levels: Unit definitions, used for Pieces per unit

    Returns:
        DataFrame with PRICE_SHEET_COLUMNS, one row per entry
    """
    converter = UnitConverter(levels)

    piece_cost: Optional[Decimal] = None
    for entry in unit_prices:
        if entry.unit == UnitId.PIECE:
            piece_cost = entry.cost

    rows = []
    for entry in unit_prices:
        pieces = converter.multiplier_to_base(entry.unit)
        # Difference between this unit's cost and Piece cost scaled up to it
        drift = entry.cost - piece_cost * pieces if piece_cost is not None else Decimal(0)
        row = {
            "Unit": int(entry.unit),
            "Unit Name": entry.unit_name,
            "Definition": entry.definition,
            "Pieces": pieces,
            "UPC": entry.upc,
            "Base Cost": float(entry.base_cost),
            "Cost": float(entry.cost),
            "Price": float(entry.price),
            "Margin": float(entry.margin),
            "Lowest Selling Price": float(entry.lowest_selling_price),
            "E-com Price": float(entry.ecom_price),
            "MSRP": float(entry.msrp_price),
            "Cost / Piece": float(round_money(entry.cost / pieces)),
            "Price / Piece": float(round_money(entry.price / pieces)),
            "Cost Drift": float(round_money(drift)),
        }
        for column, tier in zip(TIER_COLUMNS, entry.unit_price_tiers):
            row[column] = float(tier.price)
        rows.append(row)

    return pd.DataFrame(rows, columns=PRICE_SHEET_COLUMNS)


def summarize_price_sheet(sheet: pd.DataFrame) -> dict:
    """Report metrics for a price sheet."""
    if sheet.empty:
        return {"units": 0, "tiered_units": 0, "max_cost_drift": 0.0}

    tiered = (sheet[TIER_COLUMNS].fillna(0) > 0).any(axis=1)
    return {
        "units": int(len(sheet)),
        "tiered_units": int(tiered.sum()),
        "max_cost_drift": round(float(sheet["Cost Drift"].abs().max()), 2),
    }


def export_price_sheet(sheet: pd.DataFrame, output_path: Path) -> Path:
    """Write the price sheet to CSV and return the path."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    sheet.to_csv(output_path, index=False)
    return output_path
