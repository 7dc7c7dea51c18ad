"""Inputs, configuration and output records for the waste calculator."""
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from schemas.enums import MaterialVariant, QtySource, Section, Trade


class WasteInputs(BaseModel):
    """Measurement variables consumed by the waste library.

    Field aliases match the variable names produced by the default field
    mappings (``stepFlashing``, ``sidingArea``, ...).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Roof
    area: float = 0.0
    ridges: float = 0.0
    hips: float = 0.0
    valleys: float = 0.0
    rakes: float = 0.0
    eaves: float = 0.0
    flashing: float = 0.0
    step_flashing: float = 0.0
    ridge_vent_length: float = 0.0
    steep_areas: Dict[str, float] = Field(
        default_factory=dict,
        description="Roof area per steep pitch tier, e.g. {'8/12': 400}",
    )

    # Siding
    siding_area: float = 0.0
    outside_corners: float = 0.0
    inside_corners: float = 0.0
    openings_perimeter: float = 0.0
    sloped_trim: float = 0.0
    vertical_trim: float = 0.0
    level_frieze: float = 0.0
    sloped_frieze: float = 0.0
    level_starter: float = 0.0
    openings_sills: float = 0.0
    soffit_sf: float = 0.0
    openings_top: float = 0.0
    block_count: float = 0.0
    porch_soffit: float = 0.0

    # Gutters
    gutter_down_count: float = 0.0

    @classmethod
    def from_variables(
        cls,
        variables: Mapping[str, float],
        steep_areas: Optional[Mapping[str, float]] = None,
    ) -> "WasteInputs":
        """Build inputs from an extracted variable table; unknown names are ignored."""
        data = dict(variables)
        data["steepAreas"] = dict(steep_areas or {})
        return cls.model_validate(data)


class WasteCalcConfig(BaseModel):
    """Waste percentages per trade and the siding material variant."""
    waste_pct_roof: float = Field(default=10.0, ge=0, description="Typically 10, 15 or 20")
    waste_pct_siding: float = Field(default=25.0, ge=0, description="Typically 25-30")
    waste_pct_fascia: float = Field(default=15.0, ge=0)
    material_variant: MaterialVariant = MaterialVariant.VINYL

    def with_trade_waste(self, trade: str, waste_pct: float) -> "WasteCalcConfig":
        """Copy with ``waste_pct`` applied to the percentage ``trade`` uses."""
        field_name = {
            Trade.ROOF.value: "waste_pct_roof",
            Trade.SIDING.value: "waste_pct_siding",
            Trade.FASCIA_SOFFIT.value: "waste_pct_fascia",
        }.get(trade)
        if field_name is None:
            return self.model_copy()
        return self.model_copy(update={field_name: waste_pct})


class WasteCalcOutput(BaseModel):
    """One line produced by the code-defined waste library."""
    description: str
    qty: float
    unit: str
    section: Section
    formula: str = Field(description="Human-readable formula with the numbers substituted")
    qty_source: QtySource = QtySource.FORMULA
