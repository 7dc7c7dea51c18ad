"""Closed table of functions callable from formulas.

Only the names listed here can ever be called. There is no registration
hook: adding a function means editing this table.
"""
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Optional, Sequence

# Digits kept before rounding up, so float noise such as
# 10 * 1.1 == 11.000000000000002 does not bump a quantity to the next unit.
ROUNDING_DIGITS = 9


def round_up(value: float) -> float:
    """Smallest whole number >= value, ignoring sub-1e-9 float noise."""
    return float(math.ceil(round(value, ROUNDING_DIGITS)))


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    apply: Callable[[Sequence[float]], float]
    min_args: int
    max_args: Optional[int]

    def accepts(self, count: int) -> bool:
        if count < self.min_args:
            return False
        return self.max_args is None or count <= self.max_args


FUNCTIONS = MappingProxyType({
    "ROUNDUP": FunctionSpec("ROUNDUP", lambda args: round_up(args[0]), 1, 1),
    "SUM": FunctionSpec("SUM", lambda args: float(sum(args)), 0, None),
})


def is_function(name: str) -> bool:
    return name.upper() in FUNCTIONS
