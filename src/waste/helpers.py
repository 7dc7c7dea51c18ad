"""Shared helpers for the per-trade calculators."""
from typing import Dict, List

from formula import round_up
from schemas.enums import Section

from .models import WasteCalcOutput


def fmt(value: float) -> str:
    """Number as it appears inside a displayed formula."""
    value = float(value)
    return str(int(value)) if value.is_integer() else repr(round(value, 6))


def fmt_factor(factor: float) -> str:
    return f"{factor:.2f}"


def out(description: str, qty: float, unit: str, section: Section, formula: str) -> WasteCalcOutput:
    """Output line with the quantity rounded up to whole units, never negative."""
    return WasteCalcOutput(
        description=description,
        qty=max(0.0, round_up(qty)),
        unit=unit,
        section=section,
        formula=formula,
    )


def quantities_by_description(items: List[WasteCalcOutput]) -> Dict[str, float]:
    return {item.description: item.qty for item in items}
