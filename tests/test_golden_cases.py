"""
Golden test cases for price distribution.

These capture the cent-level figures the product form shows for a
Pack = 12, Case = 10, Pallet = 5 hierarchy and should fail if rounding or
conversion changes unexpectedly.
"""
import csv
import os
from decimal import Decimal

import pytest

from catalog_pricing.engine import PriceDistributor, UnitId, UnitPriceRecord


def load_golden_cases():
    """Load golden test cases from CSV."""
    cases_path = os.path.join(os.path.dirname(__file__), 'golden_cases.csv')

    cases = []
    with open(cases_path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        for row in reader:
            cases.append(row)

    return cases


@pytest.mark.parametrize("case", load_golden_cases(), ids=lambda c: f"{c['case']}-{c['unit'].lower()}")
def test_golden_case(full_levels, case):
    """Test that distributed prices match the expected golden case."""
    reference_unit = UnitId[case['reference_unit']]
    unit = UnitId[case['unit']]
    reference = UnitPriceRecord(
        unit=reference_unit,
        net_cost=case['ref_net_cost'],
        sale_price=case['ref_sale_price'],
    )

    result = PriceDistributor().distribute(reference_unit, reference, full_levels, {reference_unit: reference})

    assert result.ok, result.failure
    record = result.records[unit]
    assert record.net_cost == Decimal(case['expected_net_cost']), \
        f"Net cost mismatch for {unit.name}: expected {case['expected_net_cost']}, got {record.net_cost}"
    assert record.sale_price == Decimal(case['expected_sale_price']), \
        f"Sale price mismatch for {unit.name}: expected {case['expected_sale_price']}, got {record.sale_price}"
