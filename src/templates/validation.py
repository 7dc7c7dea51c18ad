"""Authoring checks for bid templates.

Application never fails on a bad template; these checks surface the same
problems up front so they can be fixed before a template is saved.
"""
from typing import Dict, Iterable, List, Optional

from formula import validate_formula
from formula.context import ITEM_PREFIX
from schemas.diagnostics import FormulaWarning
from schemas.enums import WarningKind
from schemas.template import BidTemplate, TemplateItem
from waste import CALCULATORS, parse_library_key

from .ordering import resolution_order


def _warning(kind: WarningKind, item: TemplateItem, message: str, reference: Optional[str] = None) -> FormulaWarning:
    return FormulaWarning(
        kind=kind,
        message=message,
        formula=item.default_qty_formula,
        item_id=item.id,
        item_description=item.description,
        reference=reference,
    )


def validate_template(
    template: BidTemplate,
    known_variables: Optional[Iterable[str]] = None,
) -> List[FormulaWarning]:
    """Report every problem found in ``template``.

    Args:
        template: Template to check
        known_variables: Measurement variable names formulas may use; when
            None only syntax and cross-item references are checked

    Returns:
        Warnings in template order; empty when the template is clean
    """
    warnings: List[FormulaWarning] = []
    items = template.items

    seen_ids = set()
    for item in items:
        if item.id in seen_ids:
            warnings.append(_warning(WarningKind.CONFIGURATION, item, f"Duplicate item id '{item.id}'", item.id))
        seen_ids.add(item.id)

    order = resolution_order(items)
    by_id: Dict[str, TemplateItem] = {}
    for item in items:
        by_id.setdefault(item.id, item)
    for dependent_id, dependency_id in order.broken_edges:
        warnings.append(_warning(
            WarningKind.CONFIGURATION, by_id[dependent_id],
            f"Circular dependency on '{by_id[dependency_id].description}' ({dependency_id})",
            dependency_id,
        ))
    for dependent_id, dependency_id in order.dangling:
        warnings.append(_warning(
            WarningKind.CONFIGURATION, by_id[dependent_id],
            f"Depends on missing item '{dependency_id}'",
            dependency_id,
        ))

    # Position at which each description's quantity becomes available
    resolved_at: Dict[str, int] = {}
    for index, item in enumerate(order.items):
        resolved_at.setdefault(item.description, index)

    for index, item in enumerate(order.items):
        if item.library_key:
            trade, _ = parse_library_key(item.library_key, template.trade)
            if trade not in CALCULATORS:
                warnings.append(_warning(
                    WarningKind.CONFIGURATION, item,
                    f"Library key '{item.library_key}' names no known trade", item.library_key,
                ))

        if not item.has_formula:
            continue

        result = validate_formula(item.default_qty_formula, known_variables)
        if not result.valid:
            kind = WarningKind.UNRESOLVED_REFERENCE if result.error.startswith("Unknown variable") \
                else WarningKind.SYNTAX
            warnings.append(_warning(kind, item, result.error))
            if kind == WarningKind.SYNTAX:
                continue

        for name in result.variables:
            if not name.startswith(ITEM_PREFIX):
                continue
            target = name[len(ITEM_PREFIX):].strip()
            if target not in resolved_at:
                warnings.append(_warning(
                    WarningKind.UNRESOLVED_REFERENCE, item, f"{{{name}}} names no item in this template", name,
                ))
            elif resolved_at[target] >= index:
                warnings.append(_warning(
                    WarningKind.CONFIGURATION, item,
                    f"{{{name}}} resolves after this item and will read 0; set depends_on_item_id",
                    name,
                ))

    return warnings
