"""
Data models for the catalog pricing engine.

Uses dataclasses for structured, type-safe data representation. Form-side
models keep the raw text the user typed; record-side models hold parsed
Decimals and are never mutated in place.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Callable, Optional

from .money import ZERO, round_amount, to_wire


class UnitId(IntEnum):
    """Packaging levels, valued as the catalog backend numbers them."""
    PIECE = 1
    PACK = 2
    CASE = 3
    PALLET = 4


UNIT_ORDER = (UnitId.PIECE, UnitId.PACK, UnitId.CASE, UnitId.PALLET)

DEFAULT_UNIT_LABELS = {
    UnitId.PIECE: "Piece",
    UnitId.PACK: "Pack",
    UnitId.CASE: "Case",
    UnitId.PALLET: "Pallet",
}

UNIT_ORDINALS = {
    UnitId.PIECE: "First",
    UnitId.PACK: "Second",
    UnitId.CASE: "Third",
    UnitId.PALLET: "Fourth",
}

TIER_SLOTS = 5


class ErrorKind(str, Enum):
    """Failure kinds reported back to the product form."""
    MISSING_REFERENCE_VALUES = "MISSING_REFERENCE_VALUES"
    UNIT_NOT_CONFIGURED = "UNIT_NOT_CONFIGURED"
    UNIT_NAME_MISSING = "UNIT_NAME_MISSING"
    PIECE_ECONOMICS_INVALID = "PIECE_ECONOMICS_INVALID"
    MISSING_CATEGORY_SELECTION = "MISSING_CATEGORY_SELECTION"
    MISSING_MAIN_CATEGORY = "MISSING_MAIN_CATEGORY"
    PRODUCT_NAME_MISSING = "PRODUCT_NAME_MISSING"


@dataclass
class ValidationFailure:
    """A single user-facing failure; the caller decides how to surface it."""
    kind: ErrorKind
    message: str
    units: list[UnitId] = field(default_factory=list)
    field: Optional[str] = None  # form field to focus

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "field": self.field,
            "units": [int(u) for u in self.units],
        }


@dataclass
class TraceStep:
    """A single step in a calculation trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class TracedResult:
    """Base for engine results: collects trace steps and warnings."""
    failure: Optional[ValidationFailure] = None
    warnings: list[str] = field(default_factory=list)
    trace: list[TraceStep] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure is None

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def add_warning(self, warning: str):
        """Add a warning, skipping duplicates."""
        if warning not in self.warnings:
            self.warnings.append(warning)

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Units
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnitLevel:
    """One rung of the packaging hierarchy."""
    id: UnitId
    label: str = ""
    definition: Optional[int] = None  # count of the child unit in one of this unit
    upc: str = ""

    @property
    def is_base(self) -> bool:
        return self.id == UnitId.PIECE

    @property
    def effective_definition(self) -> Optional[int]:
        return 1 if self.is_base else self.definition

    @property
    def in_use(self) -> bool:
        """Piece always is; other levels need a definition or a UPC."""
        return self.is_base or self.definition is not None or bool(self.upc.strip())

    @property
    def ordinal(self) -> str:
        return UNIT_ORDINALS[self.id]


# ---------------------------------------------------------------------------
# Prices
# ---------------------------------------------------------------------------

def _tier_tuple(values) -> tuple:
    """Exactly TIER_SLOTS rounded amounts, padding unset slots with 0."""
    tiers = [round_amount(v) for v in list(values or ())[:TIER_SLOTS]]
    tiers.extend([ZERO] * (TIER_SLOTS - len(tiers)))
    return tuple(tiers)


@dataclass(frozen=True)
class UnitPriceRecord:
    """Monetary profile of one unit, every amount rounded to cents and never below 0."""
    unit: UnitId
    base_cost: Decimal = ZERO
    net_cost: Decimal = ZERO
    sale_price: Decimal = ZERO
    margin: Decimal = ZERO
    msrp: Decimal = ZERO
    lowest_selling_price: Decimal = ZERO
    ecom_price: Decimal = ZERO
    tier_prices: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "unit", UnitId(self.unit))
        object.__setattr__(self, "base_cost", round_amount(self.base_cost))
        object.__setattr__(self, "net_cost", round_amount(self.net_cost))
        object.__setattr__(self, "sale_price", round_amount(self.sale_price))
        object.__setattr__(self, "margin", round_amount(self.margin))
        object.__setattr__(self, "msrp", round_amount(self.msrp))
        object.__setattr__(self, "lowest_selling_price", round_amount(self.lowest_selling_price))
        object.__setattr__(self, "ecom_price", round_amount(self.ecom_price))
        object.__setattr__(self, "tier_prices", _tier_tuple(self.tier_prices))

    def _map_money(self, op: Callable[[Decimal], Decimal]) -> 'UnitPriceRecord':
        # Tier prices are per-unit user input and never scaled
        return replace(
            self,
            base_cost=op(self.base_cost),
            net_cost=op(self.net_cost),
            sale_price=op(self.sale_price),
            margin=op(self.margin),
            msrp=op(self.msrp),
            lowest_selling_price=op(self.lowest_selling_price),
            ecom_price=op(self.ecom_price),
        )

    def multiplied_by(self, factor) -> 'UnitPriceRecord':
        """Scale every monetary field up by ``factor`` (rounded per field)."""
        factor = Decimal(factor)
        return self._map_money(lambda amount: amount * factor)

    def divided_by(self, divisor) -> 'UnitPriceRecord':
        """Scale every monetary field down by ``divisor`` (rounded per field)."""
        divisor = Decimal(divisor)
        return self._map_money(lambda amount: amount / divisor)

    def with_money_of(self, other: 'UnitPriceRecord') -> 'UnitPriceRecord':
        """Take the seven monetary fields from ``other``, keeping unit and tiers."""
        return replace(
            self,
            base_cost=other.base_cost,
            net_cost=other.net_cost,
            sale_price=other.sale_price,
            margin=other.margin,
            msrp=other.msrp,
            lowest_selling_price=other.lowest_selling_price,
            ecom_price=other.ecom_price,
        )

    def to_dict(self) -> dict:
        return {
            "unit": int(self.unit),
            "base_cost": to_wire(self.base_cost),
            "cost": to_wire(self.net_cost),
            "price": to_wire(self.sale_price),
            "margin": to_wire(self.margin),
            "msrp_price": to_wire(self.msrp),
            "lowest_selling_price": to_wire(self.lowest_selling_price),
            "ecom_price": to_wire(self.ecom_price),
            "tier_prices": [to_wire(t) for t in self.tier_prices],
        }


@dataclass
class UnitPriceForm:
    """Raw price fields for one unit exactly as typed into the product form."""
    unit: UnitId
    base_cost: Any = ""
    net_cost: Any = ""
    sale_price: Any = ""
    margin: Any = ""
    msrp: Any = ""
    lowest_selling_price: Any = ""
    ecom_price: Any = ""
    tier_prices: list = field(default_factory=list)

    def to_record(self) -> UnitPriceRecord:
        """Coerce the form into a record; non-numeric and negative amounts become 0."""
        return UnitPriceRecord(
            unit=self.unit,
            base_cost=round_amount(self.base_cost),
            net_cost=round_amount(self.net_cost),
            sale_price=round_amount(self.sale_price),
            margin=round_amount(self.margin),
            msrp=round_amount(self.msrp),
            lowest_selling_price=round_amount(self.lowest_selling_price),
            ecom_price=round_amount(self.ecom_price),
            tier_prices=tuple(self.tier_prices),
        )

    def with_prices(self, record: UnitPriceRecord) -> 'UnitPriceForm':
        """Write a record's monetary fields back into a copy of this form; tiers stay as typed."""
        return replace(
            self,
            base_cost=str(record.base_cost),
            net_cost=str(record.net_cost),
            sale_price=str(record.sale_price),
            margin=str(record.margin),
            msrp=str(record.msrp),
            lowest_selling_price=str(record.lowest_selling_price),
            ecom_price=str(record.ecom_price),
            tier_prices=list(self.tier_prices),
        )


# ---------------------------------------------------------------------------
# Channels and product
# ---------------------------------------------------------------------------

@dataclass
class ChannelStock:
    """Stock counts for one channel, entered in the product's sold-by unit."""
    channel_id: int
    channel_name: str = ""
    available_qty: Any = 0
    on_hold_qty: Any = 0
    damaged_qty: Any = 0
    back_order_qty: Any = 0
    coming_soon_qty: Any = 0
    min_qty: Any = 0
    max_qty: Any = 0
    ps_allowed_qty: Any = None


@dataclass
class SeoMeta:
    title: str = ""
    description: str = ""


@dataclass
class ProductAttributes:
    """Product-level attributes, carried into the payload verbatim."""
    name: str
    id: Optional[int] = None
    ecom_name: Optional[str] = None
    sku: str = ""
    slug: str = ""
    auto_generate_sku: bool = False
    upc: str = ""
    upc_2: str = ""
    upc_3: str = ""
    description: str = ""

    # References
    brand_id: Optional[int] = None
    main_category_id: Optional[int] = None
    category_ids: list[int] = field(default_factory=list)
    supplier_ids: list[int] = field(default_factory=list)
    manufacturer_ids: list[int] = field(default_factory=list)
    tag_values: list[str] = field(default_factory=list)

    # Flags
    is_tax_applicable: bool = False
    is_msa_compliant: bool = False
    is_online: bool = False
    is_featured: bool = False
    is_hot_seller: bool = False
    is_new_arrival: bool = False
    back_order_portal: bool = False
    back_order_ecom: bool = False

    weight: Optional[float] = None
    weight_unit: int = 1  # 1=kg, 2=lb
    status: int = 1  # 1=Active, 2=Inactive
    unit_of_measurement: int = 1  # 1=Count, 2=Weight

    # Warehouse location
    bin: str = ""
    mlc: str = ""
    zone: str = ""
    aisle: str = ""

    images: list[str] = field(default_factory=list)
    video: Optional[str] = None
    video_type: Optional[int] = None
    video_link: Optional[str] = None
    seo: SeoMeta = field(default_factory=SeoMeta)

    # Only sent when is_msa_compliant is set
    msa_attributes: Optional[dict] = None

    def to_dict(self) -> dict:
        """Product fields in wire shape (without id, channels or compliance block)."""
        return {
            "name": self.name,
            "ecom_name": self.ecom_name,
            "sku": self.sku,
            "slug": self.slug,
            "auto_generate_sku": self.auto_generate_sku,
            "upc": self.upc,
            "upc_2": self.upc_2,
            "upc_3": self.upc_3,
            "description": self.description,
            "brand_id": self.brand_id,
            "main_category_id": self.main_category_id,
            "category_ids": list(self.category_ids),
            "supplier_ids": list(self.supplier_ids),
            "manufacturer_ids": list(self.manufacturer_ids),
            "tag_values": list(self.tag_values),
            "is_tax_applicable": self.is_tax_applicable,
            "is_msa_compliant": self.is_msa_compliant,
            "is_online": self.is_online,
            "is_featured": self.is_featured,
            "is_hot_seller": self.is_hot_seller,
            "is_new_arrival": self.is_new_arrival,
            "back_order_portal": self.back_order_portal,
            "back_order_ecom": self.back_order_ecom,
            "weight": self.weight,
            "weight_unit": self.weight_unit,
            "status": self.status,
            "unit_of_measurement": self.unit_of_measurement,
            "bin": self.bin,
            "mlc": self.mlc,
            "zone": self.zone,
            "aisle": self.aisle,
            "images": list(self.images),
            "video": self.video,
            "video_type": self.video_type,
            "video_link": self.video_link,
            "product_seo_meta_data": {
                "title": self.seo.title,
                "description": self.seo.description,
            },
        }


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------

@dataclass
class UnitTier:
    tier_id: int
    price: Decimal = ZERO


@dataclass
class UnitPricePayload:
    """One entry of the unit_prices list sent for every channel."""
    unit: UnitId
    unit_name: str
    definition: int
    upc: str = ""
    base_cost: Decimal = ZERO
    cost: Decimal = ZERO
    price: Decimal = ZERO
    margin: Decimal = ZERO
    margin_type: int = 1
    lowest_selling_price: Decimal = ZERO
    ecom_price: Decimal = ZERO
    msrp_price: Decimal = ZERO
    unit_price_tiers: list[UnitTier] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "unit": int(self.unit),
            "unit_name": self.unit_name,
            "definition": self.definition,
            "upc": self.upc,
            "base_cost": to_wire(self.base_cost),
            "cost": to_wire(self.cost),
            "price": to_wire(self.price),
            "margin": to_wire(self.margin),
            "margin_type": self.margin_type,
            "lowest_selling_price": to_wire(self.lowest_selling_price),
            "ecom_price": to_wire(self.ecom_price),
            "msrp_price": to_wire(self.msrp_price),
            "unit_price_tiers": [
                {"tier_id": t.tier_id, "price": to_wire(t.price)}
                for t in self.unit_price_tiers
            ],
        }


@dataclass
class ChannelInfo:
    """One channel block: stock in Piece units plus the shared unit prices."""
    channel_id: int
    channel_name: str
    in_hand: int
    on_hold: int
    damaged: int
    back_order: Optional[int]
    coming_soon: Optional[int]
    min_qty: int
    max_qty: int
    sold_by_unit: UnitId
    bought_by_unit: UnitId
    unit_prices: list[UnitPricePayload] = field(default_factory=list)
    ps_allowed_qty: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "channel_id": self.channel_id,
            "channel_name": self.channel_name,
            "in_hand": self.in_hand,
            "on_hold": self.on_hold,
            "damaged": self.damaged,
            "back_order": self.back_order,
            "coming_soon": self.coming_soon,
            "min_qty": self.min_qty,
            "max_qty": self.max_qty,
            "ps_allowed_qty": self.ps_allowed_qty,
            "sold_by_unit": int(self.sold_by_unit),
            "bought_by_unit": int(self.bought_by_unit),
            "unit_prices": [up.to_dict() for up in self.unit_prices],
        }


@dataclass
class CatalogPayload:
    """The complete create/update body for one product."""
    product: ProductAttributes
    channel_info: list[ChannelInfo]
    msa_attributes: Optional[dict] = None

    def to_dict(self) -> dict:
        body = {}
        if self.product.id is not None:
            body["id"] = self.product.id
        body.update(self.product.to_dict())
        body["channel_info"] = [c.to_dict() for c in self.channel_info]
        # Absence, not null, marks a product the compliance block does not apply to
        if self.msa_attributes is not None:
            body["msa_attributes"] = dict(self.msa_attributes)
        return body

    def to_update_body(self) -> tuple[int, dict]:
        """Split into (product id, body without id) for an update call."""
        if self.product.id is None:
            raise ValueError("Cannot build an update body for a product without an id")
        body = self.to_dict()
        product_id = body.pop("id")
        return product_id, body


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class DistributionResult(TracedResult):
    """Outcome of distributing prices from a reference unit."""
    reference_unit: Optional[UnitId] = None
    records: dict = field(default_factory=dict)  # UnitId -> UnitPriceRecord
    priced_units: list[UnitId] = field(default_factory=list)  # reference plus derived units

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "reference_unit": int(self.reference_unit) if self.reference_unit else None,
            "records": [self.records[u].to_dict() for u in UNIT_ORDER if u in self.records],
            "priced_units": [int(u) for u in self.priced_units],
            "failure": self.failure.to_dict() if self.failure else None,
            "warnings": list(self.warnings),
        }


@dataclass
class AssemblyResult(TracedResult):
    """Outcome of a save attempt: a full payload or the first failure."""
    payload: Optional[CatalogPayload] = None

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "payload": self.payload.to_dict() if self.payload else None,
            "failure": self.failure.to_dict() if self.failure else None,
            "warnings": list(self.warnings),
        }
