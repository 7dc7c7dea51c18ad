"""Bid template schema and the line items produced by applying a template.

A template is configuration (loaded once, read-only). Resolved line items are
transient output handed to the pricing layer, which attaches prices, margin
and tax totals outside this engine.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .enums import QtySource, Section


class PriceListLink(BaseModel):
    """Catalog price record linked to a template item."""
    id: str
    description: Optional[str] = None
    unit: Optional[str] = None
    unit_price: float = Field(default=0.0, ge=0)
    is_taxable: Optional[bool] = None


class TemplateItem(BaseModel):
    """One candidate line item in a bid template."""
    id: str = Field(description="Stable item identity")
    section: Section = Field(description="materials or labor")
    description: str = Field(description="Display text; also the key for {item:...} references")
    unit: str = Field(default="EA", description="Unit label")

    default_qty_formula: Optional[str] = Field(default=None, description="Quantity expression")
    default_qty: Optional[float] = Field(default=None, description="Fixed quantity when no formula")
    depends_on_item_id: Optional[str] = Field(default=None, description="Item resolved before this one")
    sort_order: int = Field(default=0, description="Display/sort order")
    is_required: bool = Field(default=False)

    measurement_key: Optional[str] = Field(default=None, description="Variable used as qty when no formula")
    library_key: Optional[str] = Field(
        default=None,
        description="Waste library item ('trade:Description') used when no formula",
    )
    price_list: Optional[PriceListLink] = Field(default=None, description="Linked catalog price")

    @property
    def has_formula(self) -> bool:
        return bool(self.default_qty_formula and self.default_qty_formula.strip())


class BidTemplate(BaseModel):
    """Reusable, ordered list of template items for one trade."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    trade: str = Field(description="roof, siding, gutters, fascia_soffit")
    name: str
    waste_pct: float = Field(default=0.0, ge=0, description="Template default waste percentage")
    items: List[TemplateItem] = Field(default_factory=list, alias="bid_template_items")


class ResolvedLineItem(BaseModel):
    """Output of applying a template once; never mutated afterwards."""
    model_config = ConfigDict(frozen=True)

    template_item_id: str
    section: Section
    description: str
    unit: str
    qty: float
    qty_source: QtySource
    qty_formula: Optional[str] = None
    sort_order: int = 0

    price_list_id: Optional[str] = None
    unit_price: float = 0.0
    margin_pct: float = 0.0
    is_taxable: bool = False
