"""Roofing materials and labor (Waste Calc sheet, cells C3-C17 / H4-H19)."""
from typing import Dict, List

from formula import round_up, waste_factor
from schemas.enums import Section

from .helpers import fmt, fmt_factor, out
from .models import WasteCalcConfig, WasteCalcOutput, WasteInputs

MATERIALS = Section.MATERIALS
LABOR = Section.LABOR


def _steep_tiers(inputs: WasteInputs):
    return [(pitch, area) for pitch, area in inputs.steep_areas.items() if area > 0]


def roofing_materials(inputs: WasteInputs, config: WasteCalcConfig) -> List[WasteCalcOutput]:
    w = waste_factor(config.waste_pct_roof)
    wf = fmt_factor(w)
    area = inputs.area
    rakes_eaves = inputs.rakes + inputs.eaves
    items: List[WasteCalcOutput] = []

    # Always listed, even for an unmeasured roof
    items.append(out("Shingles", area / 100 * w, "SQ", MATERIALS, f"({fmt(area)} / 100) * {wf}"))

    if rakes_eaves > 0:
        items.append(out(
            "Standard Starter", rakes_eaves / 116, "BD", MATERIALS,
            f"({fmt(inputs.rakes)} + {fmt(inputs.eaves)}) / 116",
        ))

    if inputs.hips + inputs.ridges > 0:
        items.append(out(
            "Standard Ridge Cap", (inputs.hips + inputs.ridges) * 1.15 / 30, "BD", MATERIALS,
            f"({fmt(inputs.hips)} + {fmt(inputs.ridges)}) * 1.15 / 30",
        ))

    if inputs.valleys + inputs.eaves > 0:
        items.append(out(
            "Ice & Water Shield", (inputs.valleys + inputs.eaves) * 1.1 / 67, "RL", MATERIALS,
            f"({fmt(inputs.valleys)} + {fmt(inputs.eaves)}) * 1.1 / 67",
        ))

    if area > 0:
        items.append(out("Synthetic Felt", area / 1000, "RL", MATERIALS, f"{fmt(area)} / 1000"))

    if rakes_eaves > 0:
        items.append(out(
            "Drip Edge", rakes_eaves * 1.15 / 10, "EA", MATERIALS,
            f"({fmt(inputs.rakes)} + {fmt(inputs.eaves)}) * 1.15 / 10",
        ))

    if inputs.flashing > 0:
        items.append(out(
            "Flashing (L)", inputs.flashing * 1.1 / 8, "EA", MATERIALS, f"{fmt(inputs.flashing)} * 1.1 / 8",
        ))

    if inputs.step_flashing > 0:
        items.append(out(
            "Step Flashing", inputs.step_flashing * 1.05 / 50, "BD", MATERIALS,
            f"{fmt(inputs.step_flashing)} * 1.05 / 50",
        ))

    # One box of coil nails per 100 nail units, a unit per 14 sq ft
    if area > 0:
        items.append(out(
            "Coil Nails", round_up(area / 14) / 100, "BX", MATERIALS, f"ROUNDUP({fmt(area)} / 14) / 100",
        ))

    if inputs.ridge_vent_length > 0:
        items.append(out(
            "Ridge Vent", inputs.ridge_vent_length / 28, "EA", MATERIALS, f"{fmt(inputs.ridge_vent_length)} / 28",
        ))

    for pitch, steep_area in _steep_tiers(inputs):
        items.append(out(
            f"Steep Fee ({pitch})", steep_area / 100 * w, "SQ", MATERIALS, f"({fmt(steep_area)} / 100) * {wf}",
        ))

    return items


def roofing_labor(
    inputs: WasteInputs,
    config: WasteCalcConfig,
    material_qtys: Dict[str, float],
) -> List[WasteCalcOutput]:
    """Labor lines; tear-off is driven by the rounded material quantities."""
    items: List[WasteCalcOutput] = []

    shingles = material_qtys.get("Shingles", 0.0)
    starter = material_qtys.get("Standard Starter", 0.0)
    ridge = material_qtys.get("Standard Ridge Cap", 0.0)
    if shingles > 0:
        items.append(out(
            "Tear Off & Install Shingles", shingles + starter / 3 + ridge / 3, "SQ", LABOR,
            f"{fmt(shingles)} + {fmt(starter)}/3 + {fmt(ridge)}/3",
        ))

    if inputs.valleys + inputs.eaves > 0:
        items.append(out(
            "Install I&W Shield", inputs.valleys + inputs.eaves, "LF", LABOR,
            f"{fmt(inputs.valleys)} + {fmt(inputs.eaves)}",
        ))

    if inputs.rakes + inputs.eaves > 0:
        items.append(out(
            "Install Drip Edge", inputs.rakes + inputs.eaves, "LF", LABOR,
            f"{fmt(inputs.rakes)} + {fmt(inputs.eaves)}",
        ))

    if inputs.ridge_vent_length > 0:
        items.append(out(
            "Install Ridge Vent", inputs.ridge_vent_length, "LF", LABOR, fmt(inputs.ridge_vent_length),
        ))

    w = waste_factor(config.waste_pct_roof)
    for pitch, steep_area in _steep_tiers(inputs):
        items.append(out(
            f"Steep Fee Labor ({pitch})", steep_area / 100 * w, "SQ", LABOR,
            f"({fmt(steep_area)} / 100) * {fmt_factor(w)}",
        ))

    return items
