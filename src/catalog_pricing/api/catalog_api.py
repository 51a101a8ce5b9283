"""
Catalog API - FastAPI router for the product form's pricing actions.
"""
from dataclasses import asdict
from typing import Optional, Union

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..data.price_sheet import summarize_price_sheet
from ..engine.models import (
    ChannelStock,
    ProductAttributes,
    SeoMeta,
    UnitId,
    UnitPriceForm,
)
from ..engine.units import UnitConverter, UnitHierarchy
from .state import engine

router = APIRouter(tags=["catalog"])

# Form fields arrive as typed text or as numbers
RawValue = Optional[Union[str, float]]


# Pydantic models for API
class UnitLevelIn(BaseModel):
    """One packaging level as entered in the form."""
    unit: int
    unit_name: Optional[str] = None
    definition: RawValue = None
    upc: Optional[str] = ""


class UnitPriceFormIn(BaseModel):
    """Raw price fields for one unit."""
    unit: int
    base_cost: RawValue = ""
    net_cost: RawValue = ""
    sale_price: RawValue = ""
    margin: RawValue = ""
    msrp: RawValue = ""
    lowest_selling_price: RawValue = ""
    ecom_price: RawValue = ""
    tier_prices: list[RawValue] = []

    def to_form(self) -> UnitPriceForm:
        data = self.model_dump()
        data["unit"] = UnitId(self.unit)
        return UnitPriceForm(**data)


class ChannelStockIn(BaseModel):
    """Stock counts for one channel, in the sold-by unit."""
    channel_id: int
    channel_name: str = ""
    available_qty: RawValue = 0
    on_hold_qty: RawValue = 0
    damaged_qty: RawValue = 0
    back_order_qty: RawValue = 0
    coming_soon_qty: RawValue = 0
    min_qty: RawValue = 0
    max_qty: RawValue = 0
    ps_allowed_qty: RawValue = None


class SeoMetaIn(BaseModel):
    title: str = ""
    description: str = ""


class ProductIn(BaseModel):
    """Product-level attributes."""
    name: str = ""
    id: Optional[int] = None
    ecom_name: Optional[str] = None
    sku: str = ""
    slug: str = ""
    auto_generate_sku: bool = False
    upc: str = ""
    upc_2: str = ""
    upc_3: str = ""
    description: str = ""
    brand_id: Optional[int] = None
    main_category_id: Optional[int] = None
    category_ids: list[int] = []
    supplier_ids: list[int] = []
    manufacturer_ids: list[int] = []
    tag_values: list[str] = []
    is_tax_applicable: bool = False
    is_msa_compliant: bool = False
    is_online: bool = False
    is_featured: bool = False
    is_hot_seller: bool = False
    is_new_arrival: bool = False
    back_order_portal: bool = False
    back_order_ecom: bool = False
    weight: Optional[float] = None
    weight_unit: int = 1
    status: int = 1
    unit_of_measurement: int = 1
    bin: str = ""
    mlc: str = ""
    zone: str = ""
    aisle: str = ""
    images: list[str] = []
    video: Optional[str] = None
    video_type: Optional[int] = None
    video_link: Optional[str] = None
    product_seo_meta_data: SeoMetaIn = SeoMetaIn()
    msa_attributes: Optional[dict] = None

    def to_attributes(self) -> ProductAttributes:
        data = self.model_dump(exclude={"product_seo_meta_data"})
        return ProductAttributes(**data, seo=SeoMeta(**self.product_seo_meta_data.model_dump()))


class PricingFormRequest(BaseModel):
    """Unit definitions plus the price form for each unit."""
    units: list[UnitLevelIn]
    prices: list[UnitPriceFormIn] = []

    def hierarchy(self) -> UnitHierarchy:
        return UnitHierarchy.from_form([u.model_dump() for u in self.units])

    def forms(self) -> dict[UnitId, UnitPriceForm]:
        return {UnitId(p.unit): p.to_form() for p in self.prices}


class CalculatePricesRequest(PricingFormRequest):
    bought_by_unit: int = int(UnitId.PIECE)


class PayloadRequest(PricingFormRequest):
    product: ProductIn
    sold_by_unit: int = int(UnitId.PIECE)
    bought_by_unit: int = int(UnitId.PIECE)
    channels: list[ChannelStockIn] = []


def _form_out(form: UnitPriceForm) -> dict:
    data = asdict(form)
    data["unit"] = int(form.unit)
    return data


# Endpoints

@router.post("/units/multipliers")
async def unit_multipliers(request: PricingFormRequest):
    """Pieces per unit, flagging units whose chain is incomplete."""
    try:
        converter = UnitConverter(request.hierarchy())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "multipliers": {int(unit): m for unit, m in converter.multipliers().items()},
        "incomplete": [
            int(level.id) for level in converter.hierarchy
            if level.in_use and not converter.has_complete_chain(level.id)
        ],
    }


@router.post("/prices/calculate")
async def calculate_prices(request: CalculatePricesRequest):
    """Distribute the bought-by unit's prices to every other unit in use."""
    try:
        forms = request.forms()
        result = engine.calculate_prices(request.hierarchy(), request.bought_by_unit, forms)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.failure.to_dict())

    updated = engine.updated_forms(result, forms)
    body = result.to_dict()
    body["forms"] = [_form_out(updated[u]) for u in sorted(updated)]
    body["trace"] = result.get_trace_text()
    return body


@router.post("/unit-prices")
async def unit_prices(request: PricingFormRequest):
    """The unit_prices list that would be sent with each channel."""
    try:
        entries = engine.build_unit_prices(request.hierarchy(), request.forms())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [up.to_dict() for up in entries]


@router.post("/products/payload")
async def product_payload(request: PayloadRequest):
    """Validate the product form and assemble the catalog payload."""
    try:
        result = engine.assemble_payload(
            product=request.product.to_attributes(),
            levels=request.hierarchy(),
            sold_by_unit=request.sold_by_unit,
            bought_by_unit=request.bought_by_unit,
            forms=request.forms(),
            channels=[ChannelStock(**c.model_dump()) for c in request.channels],
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not result.ok:
        raise HTTPException(status_code=422, detail=result.failure.to_dict())

    body = result.to_dict()
    body["trace"] = result.get_trace_text()
    return body


@router.post("/price-sheet")
async def price_sheet(request: PricingFormRequest):
    """Price sheet rows and summary metrics."""
    try:
        sheet = engine.price_sheet(request.hierarchy(), request.forms())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "rows": sheet.to_dict(orient="records"),
        "summary": summarize_price_sheet(sheet),
    }
