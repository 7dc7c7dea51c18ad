"""Evaluation context for template quantity formulas.

Reserved names resolved here rather than from measurements:

    waste                  -> waste factor, (waste_pct + 100) / 100
    waste_pct              -> raw waste percentage (10, 15, 20, ...)
    item:<description>     -> quantity already resolved for that template item
    self:<variant>         -> 1 if the active material variant matches, else 0

Everything else is looked up in the measurement variable table.
"""
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

WASTE = "waste"
WASTE_PCT = "waste_pct"
ITEM_PREFIX = "item:"
SELF_PREFIX = "self:"

RESERVED_NAMES = frozenset({WASTE, WASTE_PCT})


def waste_factor(waste_pct: float) -> float:
    """Multiplier applied to base quantities for material overage."""
    return (waste_pct + 100) / 100


def is_context_reference(name: str) -> bool:
    """True for names resolved by the context instead of measurements."""
    name = name.strip()
    return name in RESERVED_NAMES or name.startswith(ITEM_PREFIX) or name.startswith(SELF_PREFIX)


@dataclass(frozen=True)
class FormulaContext:
    """Variable lookup used while resolving one template application.

    ``resolved_items`` is read at lookup time, so the applicator can keep
    adding quantities to the same dict as items resolve.
    """
    measurements: Mapping[str, float] = field(default_factory=dict)
    waste: float = 1.0
    waste_pct: float = 0.0
    resolved_items: Mapping[str, float] = field(default_factory=dict)
    material_variant: Optional[str] = None

    @classmethod
    def for_waste_pct(
        cls,
        measurements: Mapping[str, float],
        waste_pct: float,
        resolved_items: Optional[Dict[str, float]] = None,
        material_variant: Optional[str] = None,
    ) -> "FormulaContext":
        return cls(
            measurements=measurements,
            waste=waste_factor(waste_pct),
            waste_pct=waste_pct,
            resolved_items=resolved_items if resolved_items is not None else {},
            material_variant=material_variant,
        )

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        name = name.strip()
        if name == WASTE:
            return self.waste
        if name == WASTE_PCT:
            return self.waste_pct
        if name.startswith(ITEM_PREFIX):
            return self.resolved_items.get(name[len(ITEM_PREFIX):].strip(), default)
        if name.startswith(SELF_PREFIX):
            variant = name[len(SELF_PREFIX):].strip().lower()
            active = (self.material_variant or "").strip().lower()
            return 1.0 if active and variant == active else 0.0
        return self.measurements.get(name, default)
