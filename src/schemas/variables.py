"""Read-only variable table used as evaluation context for formulas."""
import math
from typing import Dict, Iterator, Mapping, Optional


class VariableTable(Mapping):
    """Flat, immutable mapping of variable name -> finite float.

    Behaves like a normal read-only ``Mapping`` (``table["x"]`` raises
    ``KeyError`` for unknown names) but ``value()`` returns 0.0 for names
    that were never measured.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Optional[Mapping[str, float]] = None):
        clean: Dict[str, float] = {}
        for name, value in (values or {}).items():
            number = float(value)
            clean[str(name)] = number if math.isfinite(number) else 0.0
        self._values = clean

    def __getitem__(self, name: str) -> float:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableTable({self._values!r})"

    def value(self, name: str, default: float = 0.0) -> float:
        """Value for ``name``, or ``default`` when the name is undefined."""
        return self._values.get(name, default)

    def to_dict(self) -> Dict[str, float]:
        return dict(self._values)
