"""Dispatcher over the per-trade calculators and single-item lookup."""
import logging
from typing import Callable, Dict, List, Optional, Tuple

from schemas.enums import Trade

from .exterior import fascia_soffit_materials, guttering_materials
from .helpers import quantities_by_description
from .models import WasteCalcConfig, WasteCalcOutput, WasteInputs
from .roofing import roofing_labor, roofing_materials
from .siding import siding_labor, siding_materials

logger = logging.getLogger(__name__)

Materials = Callable[[WasteInputs, WasteCalcConfig], List[WasteCalcOutput]]
Labor = Callable[[WasteInputs, WasteCalcConfig, Dict[str, float]], List[WasteCalcOutput]]

# trade -> (materials, labor driven by material quantities)
CALCULATORS: Dict[str, Tuple[Materials, Optional[Labor]]] = {
    Trade.ROOF.value: (roofing_materials, roofing_labor),
    Trade.SIDING.value: (siding_materials, siding_labor),
    Trade.FASCIA_SOFFIT.value: (fascia_soffit_materials, None),
    Trade.GUTTERS.value: (guttering_materials, None),
}


def calculate_waste(inputs: WasteInputs, config: WasteCalcConfig, trade: str) -> List[WasteCalcOutput]:
    """All library lines for ``trade``: materials first, then labor.

    Unknown trades produce an empty list.
    """
    trade = trade.value if isinstance(trade, Trade) else str(trade)
    if trade not in CALCULATORS:
        logger.debug(f"No waste calculator for trade {trade!r}")
        return []

    materials, labor = CALCULATORS[trade]
    items = materials(inputs, config)
    if labor is not None:
        items = items + labor(inputs, config, quantities_by_description(items))
    return items


def parse_library_key(key: str, default_trade: Optional[str] = None) -> Tuple[Optional[str], str]:
    """Split ``'roof:Drip Edge'`` into (trade, description).

    Keys without a known trade prefix use ``default_trade``.
    """
    trade, sep, description = key.partition(":")
    if sep and trade.strip() in CALCULATORS:
        return trade.strip(), description.strip()
    return default_trade, key.strip()


def library_quantity(
    trade: str,
    description: str,
    inputs: WasteInputs,
    config: WasteCalcConfig,
) -> Optional[float]:
    """Quantity of one library line.

    Returns None for an unknown trade; 0.0 when the trade calculator does not
    produce that line for these inputs (zero driver or other variant).
    """
    trade = trade.value if isinstance(trade, Trade) else str(trade)
    if trade not in CALCULATORS:
        return None
    wanted = description.strip().lower()
    for item in calculate_waste(inputs, config, trade):
        if item.description.lower() == wanted:
            return item.qty
    return 0.0
