"""Extract a flat variable table from raw Hover measurement data.

Mappings are processed in the order given; this layer never reorders them
(see ``order_mappings`` for the layer that owns the mapping list). Data
problems never raise: anything missing or non-numeric falls through to the
next path or to the mapping's default.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from formula import evaluate_expression
from schemas.diagnostics import FormulaWarning
from schemas.enums import MappingType, WarningKind
from schemas.mapping import FieldMapping
from schemas.variables import VariableTable

from .computations import COMPUTATIONS
from .defaults import default_mappings
from .paths import PathSyntaxError, resolve_path
from .validation import derived_cycle_members

logger = logging.getLogger(__name__)


@dataclass
class VariableSource:
    """Provenance of one extracted variable."""
    target_field: str
    mapping_type: MappingType
    detail: Optional[str] = None   # winning path, computation id or formula
    used_default: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_field": self.target_field,
            "mapping_type": self.mapping_type.value,
            "detail": self.detail,
            "used_default": self.used_default,
        }


@dataclass
class ExtractionReport:
    variables: VariableTable
    sources: Dict[str, VariableSource] = field(default_factory=dict)
    warnings: List[FormulaWarning] = field(default_factory=list)

    @property
    def defaulted(self) -> List[str]:
        return [name for name, src in self.sources.items() if src.used_default]


def _extract_direct(raw: Any, mapping: FieldMapping, warnings: List[FormulaWarning]):
    for path in mapping.json_paths:
        try:
            value = resolve_path(raw, path)
        except PathSyntaxError as e:
            warnings.append(FormulaWarning(
                kind=WarningKind.CONFIGURATION,
                message=str(e),
                item_id=mapping.target_field,
                reference=path,
            ))
            continue
        if value is not None:
            return value, path
    return None, None


def _extract_derived(values: Dict[str, float], mapping: FieldMapping, warnings: List[FormulaWarning]):
    result = evaluate_expression(mapping.derived_formula, values)
    if result.error:
        warnings.append(FormulaWarning(
            kind=WarningKind.SYNTAX,
            message=result.error,
            formula=mapping.derived_formula,
            item_id=mapping.target_field,
        ))
        return None
    for name in result.unresolved:
        warnings.append(FormulaWarning(
            kind=WarningKind.UNRESOLVED_REFERENCE,
            message=f"Unknown variable: {{{name}}}",
            formula=mapping.derived_formula,
            item_id=mapping.target_field,
            reference=name,
        ))
    return result.value


def extract_with_report(raw: Any, mappings: Optional[Sequence[FieldMapping]] = None) -> ExtractionReport:
    """Build the variable table and record where every value came from.

    Args:
        raw: Nested measurement payload (None when no measurements exist)
        mappings: Field mappings in resolution order; bundled defaults when None

    Returns:
        ExtractionReport with the table, per-variable provenance and warnings
    """
    if mappings is None:
        mappings = default_mappings()
    if not isinstance(raw, Mapping):
        raw = {}

    active = [m for m in mappings if m.active]
    cyclic = derived_cycle_members(active)
    values: Dict[str, float] = {}
    sources: Dict[str, VariableSource] = {}
    warnings: List[FormulaWarning] = []

    for mapping in active:
        target = mapping.target_field
        kind = mapping.mapping_type
        value: Optional[float] = None
        detail: Optional[str] = None

        if kind == MappingType.DIRECT:
            value, detail = _extract_direct(raw, mapping, warnings)

        elif kind == MappingType.COMPUTED:
            detail = mapping.computation_id
            computation = COMPUTATIONS.get(mapping.computation_id)
            if computation is None:
                warnings.append(FormulaWarning(
                    kind=WarningKind.CONFIGURATION,
                    message=f"Unknown computation '{mapping.computation_id}'",
                    item_id=target,
                    reference=mapping.computation_id,
                ))
            else:
                value = computation(raw)

        elif kind == MappingType.DERIVED:
            detail = mapping.derived_formula
            if target in cyclic:
                warnings.append(FormulaWarning(
                    kind=WarningKind.CONFIGURATION,
                    message="Derived formula references itself; using default value",
                    formula=mapping.derived_formula,
                    item_id=target,
                ))
            else:
                value = _extract_derived(values, mapping, warnings)

        used_default = value is None
        if used_default:
            value = mapping.default_value
        values[target] = value
        sources[target] = VariableSource(target, kind, detail, used_default)
        logger.debug(f"{target} = {value} ({kind.value}{', default' if used_default else ''})")

    for warning in warnings:
        logger.warning(f"Measurement extraction: {warning}")

    return ExtractionReport(VariableTable(values), sources, warnings)


def extract(raw: Any, mappings: Optional[Sequence[FieldMapping]] = None) -> VariableTable:
    """Flat variable-name -> number table for ``raw`` measurements."""
    return extract_with_report(raw, mappings).variables
