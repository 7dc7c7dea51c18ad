"""Siding materials and labor (cells K3-K17 / O4).

Hardie swaps a few vinyl items for their fiber-cement counterparts and adds
blocks trim, touch-up paint and caulk.
"""
from typing import Dict, List

from formula import round_up, waste_factor
from schemas.enums import MaterialVariant, Section

from .helpers import fmt, fmt_factor, out
from .models import WasteCalcConfig, WasteCalcOutput, WasteInputs

MATERIALS = Section.MATERIALS
LABOR = Section.LABOR


def _is_hardie(config: WasteCalcConfig) -> bool:
    return config.material_variant == MaterialVariant.HARDIE


def siding_squares(inputs: WasteInputs, config: WasteCalcConfig) -> float:
    """Siding area in squares with waste applied (not rounded)."""
    return inputs.siding_area / 100 * waste_factor(config.waste_pct_siding)


def trim_coil_description(config: WasteCalcConfig) -> str:
    return "Coil for Z-Flashing" if _is_hardie(config) else "Trim Coil"


def siding_materials(inputs: WasteInputs, config: WasteCalcConfig) -> List[WasteCalcOutput]:
    w = waste_factor(config.waste_pct_siding)
    wf = fmt_factor(w)
    hardie = _is_hardie(config)
    sq = siding_squares(inputs, config)
    items: List[WasteCalcOutput] = []

    if inputs.siding_area > 0:
        items.append(out(
            "Hardie Siding" if hardie else "Vinyl Siding", sq, "SQ", MATERIALS,
            f"({fmt(inputs.siding_area)} / 100) * {wf}",
        ))

    for description, count in (
        ("Outside Corner Posts", inputs.outside_corners),
        ("Inside Corner Posts", inputs.inside_corners),
    ):
        if count > 0:
            items.append(out(
                description, count * 2 if hardie else count, "EA", MATERIALS,
                f"{fmt(count)} * 2" if hardie else fmt(count),
            ))

    if inputs.openings_perimeter > 0:
        items.append(out(
            "J-Channel (Openings)", inputs.openings_perimeter / 10 * w, "EA", MATERIALS,
            f"({fmt(inputs.openings_perimeter)} / 10) * {wf}",
        ))

    trim_total = inputs.sloped_trim + inputs.sloped_frieze
    if trim_total > 0:
        items.append(out("J-Channel (Trim)", trim_total / 10 * w, "EA", MATERIALS, f"({fmt(trim_total)} / 10) * {wf}"))

    finish_total = inputs.level_frieze + inputs.openings_sills
    if finish_total > 0:
        items.append(out(
            "Finish Trim", finish_total / 12.5 * w, "EA", MATERIALS, f"({fmt(finish_total)} / 12.5) * {wf}",
        ))

    if inputs.openings_perimeter > 0:
        items.append(out(
            "Lineal (Openings)", inputs.openings_perimeter / 20 * w, "EA", MATERIALS,
            f"({fmt(inputs.openings_perimeter)} / 20) * {wf}",
        ))

    if inputs.level_starter > 0:
        divisor = 18 if hardie else 10
        items.append(out(
            "PVC Starter Board" if hardie else "Starter Strip", inputs.level_starter / divisor, "EA", MATERIALS,
            f"{fmt(inputs.level_starter)} / {divisor}",
        ))

    coil_total = inputs.sloped_trim + inputs.vertical_trim + inputs.openings_top if hardie else inputs.vertical_trim
    if coil_total > 0:
        items.append(out(
            trim_coil_description(config), coil_total / 150 * w, "EA", MATERIALS, f"({fmt(coil_total)} / 150) * {wf}",
        ))

    if sq > 0:
        whole_sq = round_up(sq)
        items.append(out("Siding Nails", whole_sq / 5, "RL", MATERIALS, f"{fmt(whole_sq)} / 5"))
        items.append(out("OSA Quad Sealant", whole_sq / 3, "EA", MATERIALS, f"{fmt(whole_sq)} / 3"))
        items.append(out("Housewrap", whole_sq / 9, "RL", MATERIALS, f"{fmt(whole_sq)} / 9"))

    if hardie:
        if inputs.block_count > 0:
            items.append(out(
                '8" Trim for Blocks', inputs.block_count * 2 / 12, "EA", MATERIALS,
                f"({fmt(inputs.block_count)} * 2) / 12",
            ))
        if sq > 0:
            whole_sq = round_up(sq)
            items.append(out("Touch Up Paint", whole_sq / 10, "EA", MATERIALS, f"{fmt(whole_sq)} / 10"))
            items.append(out("Adfast Caulk", whole_sq / 3, "EA", MATERIALS, f"{fmt(whole_sq)} / 3"))

    return items


def siding_labor(
    inputs: WasteInputs,
    config: WasteCalcConfig,
    material_qtys: Dict[str, float],
) -> List[WasteCalcOutput]:
    sq = siding_squares(inputs, config)
    items: List[WasteCalcOutput] = []

    if sq > 0:
        items.append(out("Install Siding", sq, "SQ", LABOR, f"ROUNDUP({sq:.2f})"))
        items.append(out("Remove Siding", sq, "SQ", LABOR, f"ROUNDUP({sq:.2f})"))

    lineal = material_qtys.get("Lineal (Openings)", 0.0)
    if lineal > 0:
        items.append(out("Lineal Install", lineal * 20, "LF", LABOR, f"{fmt(lineal)} * 20"))

    trim_coil = material_qtys.get(trim_coil_description(config), 0.0)
    if trim_coil > 0:
        items.append(out("Custom Flashing", trim_coil * 150, "LF", LABOR, f"{fmt(trim_coil)} * 150"))

    return items
