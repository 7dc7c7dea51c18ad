"""Code-defined waste/unit library ported from the estimating spreadsheet."""
from .calculator import CALCULATORS, calculate_waste, library_quantity, parse_library_key
from .exterior import fascia_soffit_materials, guttering_materials
from .models import WasteCalcConfig, WasteCalcOutput, WasteInputs
from .roofing import roofing_labor, roofing_materials
from .siding import siding_labor, siding_materials

__all__ = [
    "CALCULATORS",
    "calculate_waste",
    "library_quantity",
    "parse_library_key",
    "fascia_soffit_materials",
    "guttering_materials",
    "WasteCalcConfig",
    "WasteCalcOutput",
    "WasteInputs",
    "roofing_labor",
    "roofing_materials",
    "siding_labor",
    "siding_materials",
]
