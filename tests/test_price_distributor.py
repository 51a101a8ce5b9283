from decimal import Decimal

from catalog_pricing.engine import (
    ErrorKind,
    PriceDistributor,
    UnitHierarchy,
    UnitId,
    UnitLevel,
    UnitPriceForm,
    UnitPriceRecord,
)


def D(value: str) -> Decimal:
    return Decimal(value)


def test_case_reference_rounds_piece_values(full_levels):
    """Case 100.00 over 120 Pieces gives 0.83 per Piece, and 0.83 x 120 is 99.60."""
    reference = UnitPriceRecord(unit=UnitId.CASE, net_cost="100.00", sale_price="150.00")
    result = PriceDistributor().distribute(UnitId.CASE, reference, full_levels, {UnitId.CASE: reference})

    assert result.ok
    piece = result.records[UnitId.PIECE]
    assert piece.net_cost == D("0.83")
    assert piece.sale_price == D("1.25")

    # Going back up from the rounded Piece value drifts by design
    round_trip = PriceDistributor().distribute(UnitId.PIECE, piece, full_levels, result.records)
    assert round_trip.records[UnitId.CASE].net_cost == D("99.60")
    assert round_trip.records[UnitId.CASE].sale_price == D("150.00")


def test_all_seven_fields_are_distributed(full_levels):
    reference = UnitPriceRecord(
        unit=UnitId.CASE,
        base_cost="96.00",
        net_cost="100.00",
        sale_price="150.00",
        margin="50.00",
        msrp="180.00",
        lowest_selling_price="140.00",
        ecom_price="155.00",
    )
    result = PriceDistributor().distribute(UnitId.CASE, reference, full_levels, {})
    piece = result.records[UnitId.PIECE]

    assert piece.base_cost == D("0.80")
    assert piece.margin == D("0.42")
    assert piece.msrp == D("1.50")
    assert piece.lowest_selling_price == D("1.17")
    assert piece.ecom_price == D("1.29")

    pack = result.records[UnitId.PACK]
    assert pack.base_cost == D("9.60")
    assert pack.msrp == D("18.00")


def test_missing_reference_values_fails_without_changes(full_levels):
    """No sale price on the reference: nothing is derived."""
    reference = UnitPriceRecord(unit=UnitId.PACK, net_cost="10.00")
    existing = {UnitId.PIECE: UnitPriceRecord(unit=UnitId.PIECE, net_cost="5.00", sale_price="6.00")}

    result = PriceDistributor().distribute(UnitId.PACK, reference, full_levels, existing)

    assert not result.ok
    assert result.failure.kind == ErrorKind.MISSING_REFERENCE_VALUES
    assert result.failure.field == "sale_price"
    assert result.records == existing
    assert UnitId.PACK not in result.records


def test_caller_records_are_not_mutated(full_levels):
    reference = UnitPriceRecord(unit=UnitId.PACK, net_cost="12.00", sale_price="24.00")
    records = {UnitId.PACK: reference, UnitId.PIECE: UnitPriceRecord(unit=UnitId.PIECE)}
    snapshot = dict(records)

    result = PriceDistributor().distribute(UnitId.PACK, reference, full_levels, records)

    assert records == snapshot
    assert result.records is not records
    assert result.records[UnitId.PIECE].net_cost == D("1.00")


def test_tier_prices_are_not_distributed(full_levels):
    reference = UnitPriceRecord(unit=UnitId.PIECE, net_cost="1.00", sale_price="2.00", tier_prices=("1.90",))
    pack = UnitPriceRecord(unit=UnitId.PACK, tier_prices=("22.00", "21.00"))

    result = PriceDistributor().distribute(UnitId.PIECE, reference, full_levels, {UnitId.PACK: pack})

    derived = result.records[UnitId.PACK]
    assert derived.sale_price == D("24.00")
    assert derived.tier_prices == (D("22.00"), D("21.00"), D("0"), D("0"), D("0"))
    assert UnitPriceRecord(unit=UnitId.CASE).tier_prices == (D("0"),) * 5
    assert result.records[UnitId.CASE].tier_prices == (D("0"),) * 5


def test_unit_without_definition_is_left_alone():
    """Pack is not in use; its record must not receive Piece values."""
    levels = UnitHierarchy([UnitLevel(UnitId.CASE, "Case", definition=24)])
    untouched = UnitPriceRecord(unit=UnitId.PACK, net_cost="3.00", sale_price="4.00")
    reference = UnitPriceRecord(unit=UnitId.PIECE, net_cost="0.50", sale_price="1.00")

    result = PriceDistributor().distribute(UnitId.PIECE, reference, levels, {UnitId.PACK: untouched})

    assert result.records[UnitId.PACK] == untouched
    assert UnitId.PALLET not in result.records


def test_broken_chain_uses_fallback_and_warns():
    """Pallet defined but Case missing: Pallet prices at 1 Piece, with a warning."""
    levels = UnitHierarchy([
        UnitLevel(UnitId.PACK, "Pack", definition=12),
        UnitLevel(UnitId.PALLET, "Pallet", definition=5),
    ])
    reference = UnitPriceRecord(unit=UnitId.PIECE, net_cost="0.50", sale_price="1.00")

    result = PriceDistributor().distribute(UnitId.PIECE, reference, levels, {})

    assert result.records[UnitId.PALLET].net_cost == D("0.50")
    assert result.records[UnitId.PACK].net_cost == D("6.00")
    assert any("Pallet" in w for w in result.warnings)


def test_engine_writes_prices_back_to_forms(engine, pack_only_levels):
    """'Calculate Prices' from the bought-by Pack fills in the Piece form."""
    forms = {
        UnitId.PACK: UnitPriceForm(unit=UnitId.PACK, net_cost="6", sale_price="9.00", tier_prices=["8.50"]),
        UnitId.PIECE: UnitPriceForm(unit=UnitId.PIECE, tier_prices=["", "0.70"]),
    }

    result = engine.calculate_prices(pack_only_levels, UnitId.PACK, forms)
    updated = engine.updated_forms(result, forms)

    assert result.ok
    assert updated[UnitId.PIECE].net_cost == "0.50"
    assert updated[UnitId.PIECE].sale_price == "0.75"
    assert updated[UnitId.PIECE].tier_prices == ["", "0.70"]
    assert forms[UnitId.PIECE].net_cost == "", "Original forms stay untouched"
    assert "Per-Piece Baseline" in result.get_trace_text()


def test_skipped_units_keep_their_typed_values(engine, pack_only_levels):
    """Pallet is not in use, so its form text survives a calculation untouched."""
    forms = {
        UnitId.PIECE: UnitPriceForm(unit=UnitId.PIECE, net_cost="0.50", sale_price="1.00"),
        UnitId.PALLET: UnitPriceForm(unit=UnitId.PALLET, net_cost="abc", sale_price=""),
    }

    result = engine.calculate_prices(pack_only_levels, UnitId.PIECE, forms)
    updated = engine.updated_forms(result, forms)

    assert result.priced_units == [UnitId.PIECE, UnitId.PACK]
    assert updated[UnitId.PALLET].net_cost == "abc"
    assert updated[UnitId.PALLET].sale_price == ""
    assert updated[UnitId.PIECE].net_cost == "0.50"
    assert updated[UnitId.PACK].net_cost == "6.00"
    assert UnitId.CASE not in updated
