"""Authoring-time formula validation.

Stricter than evaluation: instead of defaulting to 0, it reports why a
formula is unusable so template and mapping editors can flag it before save.
"""
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .context import is_context_reference
from .dialect import referenced_names
from .errors import FormulaSyntaxError
from .evaluator import evaluate_tree
from .parser import DEFAULT_MAX_DEPTH, parse


@dataclass
class ValidationResult:
    valid: bool
    error: Optional[str] = None
    variables: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "error": self.error, "variables": list(self.variables)}


class _DummyValues:
    """Every variable evaluates to 1."""

    def get(self, name, default=None):
        return 1.0


def _collect_names(formula: str) -> List[str]:
    try:
        return referenced_names(formula)
    except FormulaSyntaxError:
        return []


def validate_formula(
    formula: Optional[str],
    known_variables: Optional[Iterable[str]] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ValidationResult:
    """Check formula syntax without a live variable table.

    Args:
        formula: Formula text in either dialect
        known_variables: Optional names the formula may reference. Context
            references (waste, waste_pct, item:..., self:...) are always allowed.
        max_depth: Maximum parenthesis/negation nesting

    Returns:
        ValidationResult with the failure reason and referenced variable names
    """
    if formula is None or not formula.strip():
        return ValidationResult(False, "Empty formula", [])

    variables = _collect_names(formula)

    try:
        tree = parse(formula, max_depth)
    except FormulaSyntaxError as e:
        return ValidationResult(False, f"Syntax error: {e}", variables)

    value = evaluate_tree(tree, _DummyValues())
    if not math.isfinite(value):
        return ValidationResult(False, "Formula does not produce a valid number", variables)

    if known_variables is not None:
        known = set(known_variables)
        unknown = [v for v in variables if v not in known and not is_context_reference(v)]
        if unknown:
            listed = ", ".join("{" + v + "}" for v in unknown)
            return ValidationResult(False, f"Unknown variable(s): {listed}", variables)

    return ValidationResult(True, None, variables)
