"""Fascia/soffit and guttering materials."""
from typing import List

from formula import waste_factor
from schemas.enums import Section

from .helpers import fmt, fmt_factor, out
from .models import WasteCalcConfig, WasteCalcOutput, WasteInputs

MATERIALS = Section.MATERIALS


def fascia_soffit_materials(inputs: WasteInputs, config: WasteCalcConfig) -> List[WasteCalcOutput]:
    w = waste_factor(config.waste_pct_fascia)
    wf = fmt_factor(w)
    rakes, eaves = inputs.rakes, inputs.eaves
    run = rakes + eaves
    items: List[WasteCalcOutput] = []

    if rakes > 0:
        items.append(out('Fascia 6" Pre-Bent (Rakes)', rakes / 12 * w, "EA", MATERIALS, f"({fmt(rakes)} / 12) * {wf}"))
    if eaves > 0:
        items.append(out('Fascia 6" Pre-Bent (Eaves)', eaves / 12 * w, "EA", MATERIALS, f"({fmt(eaves)} / 12) * {wf}"))
    if run > 0:
        items.append(out(
            "Trim Coil (Custom Fascia)", run * w / 100, "RL", MATERIALS,
            f"({fmt(rakes)} + {fmt(eaves)}) * {wf} / 100",
        ))
    if inputs.soffit_sf > 0:
        items.append(out(
            "Aluminum Soffit Q4", w * inputs.soffit_sf / 16, "PC", MATERIALS, f"{wf} * {fmt(inputs.soffit_sf)} / 16",
        ))
    if inputs.porch_soffit > 0:
        items.append(out(
            "Porch Soffit", w * inputs.porch_soffit / 16, "PC", MATERIALS, f"{wf} * {fmt(inputs.porch_soffit)} / 16",
        ))
    if run > 0:
        items.append(out("F-Channel", run * 1.05 / 12, "EA", MATERIALS, f"({fmt(rakes)} + {fmt(eaves)}) * 1.05 / 12"))
        # Nails and sealant share the same coverage rate
        per_run = f"{wf} * ({fmt(rakes)} + {fmt(eaves)}) / 300"
        items.append(out("Trim Nails", w * run / 300, "BX", MATERIALS, per_run))
        items.append(out("Sealant", w * run / 300, "EA", MATERIALS, per_run))

    return items


def guttering_materials(inputs: WasteInputs, config: WasteCalcConfig) -> List[WasteCalcOutput]:
    """Gutter runs follow the eaves; the waste percentage is not used here."""
    gutter_length = inputs.eaves * 1.05
    items: List[WasteCalcOutput] = []

    if inputs.eaves > 0:
        items.append(out("Gutter Length", gutter_length, "LF", MATERIALS, f"{fmt(inputs.eaves)} * 1.05"))
    if inputs.gutter_down_count > 0:
        items.append(out(
            "Gutter Downs", inputs.gutter_down_count * 15, "LF", MATERIALS, f"{fmt(inputs.gutter_down_count)} * 15",
        ))
    if gutter_length > 0:
        items.append(out("Gutter Guards", gutter_length, "LF", MATERIALS, f"= gutter_length ({gutter_length:.0f})"))

    return items
