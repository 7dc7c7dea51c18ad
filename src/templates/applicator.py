"""Apply a bid template to a measurement variable table.

Orchestration for one application:
1. Build the formula context (measurements, waste factor, material variant)
2. Order template items so dependencies resolve first
3. Resolve each item's quantity, recording it for ``{item:...}`` lookups
4. Re-sort the line items for display: materials, then labor
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from formula import FormulaContext, evaluate_formula
from formula.parser import DEFAULT_MAX_DEPTH
from schemas.diagnostics import FormulaWarning
from schemas.enums import SECTION_ORDER, QtySource, Section, WarningKind
from schemas.template import BidTemplate, ResolvedLineItem, TemplateItem
from waste import WasteCalcConfig, WasteInputs, library_quantity, parse_library_key

from .ordering import resolution_order

logger = logging.getLogger(__name__)


@dataclass
class TemplateApplication:
    """Result of one template application. Iterates over its line items."""
    line_items: List[ResolvedLineItem]
    warnings: List[FormulaWarning] = field(default_factory=list)
    # (dependent item id, dependency item id) edges ignored to break cycles
    broken_dependencies: List[Tuple[str, str]] = field(default_factory=list)

    def __iter__(self):
        return iter(self.line_items)

    def __len__(self) -> int:
        return len(self.line_items)

    def __getitem__(self, index: int) -> ResolvedLineItem:
        return self.line_items[index]

    def by_description(self) -> Dict[str, ResolvedLineItem]:
        return {item.description: item for item in self.line_items}

    def quantities(self) -> Dict[str, float]:
        return {item.description: item.qty for item in self.line_items}


class _LibraryLookup:
    """Lazily computed waste library inputs for ``library_key`` items."""

    def __init__(self, variables: Mapping[str, float], trade: str, waste_pct: float,
                 material_variant: Optional[str]):
        self.variables = variables
        self.trade = trade
        self.waste_pct = waste_pct
        self.material_variant = material_variant
        self._inputs: Optional[WasteInputs] = None
        self._configs: Dict[str, WasteCalcConfig] = {}

    def _config(self, trade: str) -> WasteCalcConfig:
        if trade not in self._configs:
            base = WasteCalcConfig(material_variant=self.material_variant) if self.material_variant \
                else WasteCalcConfig()
            self._configs[trade] = base.with_trade_waste(trade, self.waste_pct)
        return self._configs[trade]

    def quantity(self, key: str) -> Optional[float]:
        trade, description = parse_library_key(key, self.trade)
        if trade is None:
            return None
        if self._inputs is None:
            self._inputs = WasteInputs.from_variables(self.variables)
        return library_quantity(trade, description, self._inputs, self._config(trade))


def _dependency_warning(message: str, dependent: TemplateItem, dependency_id: str,
                        by_id: Dict[str, TemplateItem]) -> FormulaWarning:
    dependency = by_id.get(dependency_id)
    target = f"'{dependency.description}' ({dependency_id})" if dependency else f"'{dependency_id}'"
    return FormulaWarning(
        kind=WarningKind.CONFIGURATION,
        message=message.format(dependent=f"'{dependent.description}' ({dependent.id})", dependency=target),
        item_id=dependent.id,
        item_description=dependent.description,
        reference=dependency_id,
    )


def _formula_warnings(item: TemplateItem, error: Optional[str], unresolved: List[str]) -> List[FormulaWarning]:
    warnings = []
    if error:
        warnings.append(FormulaWarning(
            kind=WarningKind.SYNTAX,
            message=error,
            formula=item.default_qty_formula,
            item_id=item.id,
            item_description=item.description,
        ))
    for name in unresolved:
        warnings.append(FormulaWarning(
            kind=WarningKind.UNRESOLVED_REFERENCE,
            message=f"Unknown variable {{{name}}} evaluated as 0",
            formula=item.default_qty_formula,
            item_id=item.id,
            item_description=item.description,
            reference=name,
        ))
    return warnings


def apply_template(
    template: BidTemplate,
    variables: Mapping[str, float],
    waste_pct: Optional[float] = None,
    margin_pct: float = 0.0,
    material_variant: Optional[str] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> TemplateApplication:
    """Resolve every template item to a line item.

    Args:
        template: Bid template with its items
        variables: Measurement variable table (empty when nothing was measured)
        waste_pct: Waste percentage; the template's ``waste_pct`` when None
        margin_pct: Margin copied onto every line item
        material_variant: Active variant for ``{self:<variant>}`` flags and the waste library

    Returns:
        TemplateApplication with line items (materials first, then labor, each
        in configured order), warnings and the dependency edges ignored to
        break cycles
    """
    if waste_pct is None:
        waste_pct = template.waste_pct
    variables = variables if variables is not None else {}

    resolved: Dict[str, float] = {}
    context = FormulaContext.for_waste_pct(variables, waste_pct, resolved, material_variant)
    library = _LibraryLookup(variables, template.trade, waste_pct, material_variant)

    order = resolution_order(template.items)
    by_id: Dict[str, TemplateItem] = {}
    warnings: List[FormulaWarning] = []
    for item in template.items:
        if item.id in by_id:
            warnings.append(FormulaWarning(
                kind=WarningKind.CONFIGURATION,
                message=f"Duplicate item id '{item.id}'; dependencies resolve to the first item with this id",
                item_id=item.id,
                item_description=item.description,
                reference=item.id,
            ))
        by_id.setdefault(item.id, item)

    for dependent_id, dependency_id in order.broken_edges:
        warnings.append(_dependency_warning(
            "Circular dependency: {dependent} depends on {dependency}; dependency ignored",
            by_id[dependent_id], dependency_id, by_id,
        ))
    for dependent_id, dependency_id in order.dangling:
        warnings.append(_dependency_warning(
            "{dependent} depends on missing item {dependency}; dependency ignored",
            by_id[dependent_id], dependency_id, by_id,
        ))

    line_items: List[ResolvedLineItem] = []
    for item in order.items:
        qty = 0.0
        source = QtySource.MANUAL
        qty_formula = None

        if item.has_formula:
            result = evaluate_formula(item.default_qty_formula, context, max_depth=max_depth)
            warnings.extend(_formula_warnings(item, result.error, result.unresolved))
            qty = result.value
            source = QtySource.FORMULA
            qty_formula = item.default_qty_formula

        elif item.measurement_key:
            value = variables.get(item.measurement_key)
            if value is None:
                warnings.append(FormulaWarning(
                    kind=WarningKind.UNRESOLVED_REFERENCE,
                    message=f"Measurement '{item.measurement_key}' not available; quantity set to 0",
                    item_id=item.id,
                    item_description=item.description,
                    reference=item.measurement_key,
                ))
                value = 0.0
            qty = max(0.0, float(value))
            source = QtySource.MEASURED

        else:
            library_qty = library.quantity(item.library_key) if item.library_key else None
            if item.library_key and library_qty is None:
                warnings.append(FormulaWarning(
                    kind=WarningKind.CONFIGURATION,
                    message=f"Library key '{item.library_key}' names no known trade",
                    item_id=item.id,
                    item_description=item.description,
                    reference=item.library_key,
                ))
            if library_qty is not None:
                qty = library_qty
                source = QtySource.FORMULA
                qty_formula = f"library:{item.library_key}"
            elif item.default_qty is not None:
                qty = item.default_qty

        # Recorded before the next item so later {item:...} references see it
        resolved[item.description] = qty
        logger.debug(f"{item.description}: {qty} ({source.value})")

        price = item.price_list
        is_taxable = price.is_taxable if price and price.is_taxable is not None \
            else item.section == Section.MATERIALS
        line_items.append(ResolvedLineItem(
            template_item_id=item.id,
            section=item.section,
            description=item.description,
            unit=(price.unit if price and price.unit else item.unit),
            qty=qty,
            qty_source=source,
            qty_formula=qty_formula,
            sort_order=item.sort_order,
            price_list_id=price.id if price else None,
            unit_price=price.unit_price if price else 0.0,
            margin_pct=margin_pct,
            is_taxable=is_taxable,
        ))

    line_items.sort(key=lambda li: (SECTION_ORDER.index(li.section), li.sort_order))

    if warnings:
        logger.warning(f"Template {template.name!r}: {len(warnings)} warning(s) while resolving quantities")

    return TemplateApplication(line_items, warnings, list(order.broken_edges))
