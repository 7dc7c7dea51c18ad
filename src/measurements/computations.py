"""Built-in computations for 'computed' field mappings.

Each computation derives one number from the raw Hover payload where a
single lookup path is not enough (summing facades across material types,
parsing opening sizes, falling back between roof area layouts). Returning
None means "nothing found"; the mapping's default is used instead.

The registry is closed: mappings can only name computations listed here.
"""
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Iterator, List, Optional

from .coerce import to_number
from .paths import resolve_path

# '40" x 18"' -> (40, 18), inches
SIZE_PATTERN = re.compile(r'(\d+(?:\.\d+)?)"\s*x\s*(\d+(?:\.\d+)?)"')
UNITED_INCHES_PATTERN = re.compile(r"(\d+(?:\.\d+)?)")


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return list(value)
    return []


def _roof(raw: Mapping) -> Optional[Mapping]:
    roof = raw.get("roof") or raw.get("roof_summary")
    return roof if isinstance(roof, Mapping) else None


def _facades(raw: Mapping) -> Iterator[Mapping]:
    """Every facade record, across all material types."""
    facades = raw.get("facades")
    if not isinstance(facades, Mapping):
        return
    for group in facades.values():
        for facade in _as_list(group):
            if isinstance(facade, Mapping):
                yield facade


def _openings(raw: Mapping, kind: str) -> Optional[List[Any]]:
    openings = raw.get("openings")
    if not isinstance(openings, Mapping) or kind not in openings:
        return None
    return _as_list(openings.get(kind))


def _sum_facades(raw: Mapping, path: str) -> Optional[float]:
    facades = list(_facades(raw))
    if not facades:
        return None
    return float(sum(resolve_path(f, path) or 0.0 for f in facades))


# ============================================================================
# Computations
# ============================================================================

def roof_area(raw: Mapping) -> Optional[float]:
    """Total roof area: area.total, area.facets_total, total_area, then summed facets."""
    roof = _roof(raw)
    if roof is None:
        return None
    for path in ("area.total", "area.facets_total", "total_area", "area"):
        value = resolve_path(roof, path)
        if value is not None:
            return value
    facets = [f for f in _as_list(roof.get("facets")) if isinstance(f, Mapping)]
    if facets:
        return float(sum(to_number(f.get("area")) or 0.0 for f in facets))
    return None


def facade_total_area(raw: Mapping) -> Optional[float]:
    """Siding area: sum of facade areas across every material type."""
    return _sum_facades(raw, "area")


def facade_openings_total(raw: Mapping) -> Optional[float]:
    return _sum_facades(raw, "openings.openings_total")


def facade_shutters(raw: Mapping) -> Optional[float]:
    return _sum_facades(raw, "shutters")


def facade_vents(raw: Mapping) -> Optional[float]:
    return _sum_facades(raw, "vents")


def _opening_perimeter_ft(opening: Any) -> float:
    if not isinstance(opening, Mapping):
        return 0.0
    size = opening.get("width_x_height")
    if not isinstance(size, str):
        return 0.0
    match = SIZE_PATTERN.search(size)
    if not match:
        return 0.0
    width, height = float(match.group(1)), float(match.group(2))
    return 2 * (width + height) / 12


def openings_perimeter(raw: Mapping) -> Optional[float]:
    """Perimeter of all windows and doors in LF, from their inch sizes."""
    windows = _openings(raw, "windows")
    doors = _openings(raw, "doors")
    if windows is None and doors is None:
        return None
    return float(sum(_opening_perimeter_ft(o) for o in (windows or []) + (doors or [])))


def openings_area(raw: Mapping) -> Optional[float]:
    windows = _openings(raw, "windows")
    doors = _openings(raw, "doors")
    if windows is None and doors is None:
        return None
    return float(sum(
        to_number(o.get("area")) or 0.0
        for o in (windows or []) + (doors or [])
        if isinstance(o, Mapping)
    ))


def window_count(raw: Mapping) -> Optional[float]:
    windows = _openings(raw, "windows")
    return None if windows is None else float(len(windows))


def door_count(raw: Mapping) -> Optional[float]:
    doors = _openings(raw, "doors")
    return None if doors is None else float(len(doors))


def window_united_inches(raw: Mapping) -> Optional[float]:
    """Sum of united inches over all windows ('59"' strings or numbers)."""
    windows = _openings(raw, "windows")
    if windows is None:
        return None
    total = 0.0
    for window in windows:
        if not isinstance(window, Mapping):
            continue
        value = window.get("united_inches")
        number = to_number(value)
        if number is None and isinstance(value, str):
            match = UNITED_INCHES_PATTERN.search(value)
            number = float(match.group(1)) if match else None
        total += number or 0.0
    return total


# ============================================================================
# Registry
# ============================================================================

@dataclass(frozen=True)
class Computation:
    id: str
    label: str
    description: str
    func: Callable[[Mapping], Optional[float]]

    def __call__(self, raw: Any) -> Optional[float]:
        if not isinstance(raw, Mapping):
            return None
        return self.func(raw)


COMPUTATIONS = MappingProxyType({c.id: c for c in (
    Computation("roof_area", "Roof Area",
                "roof.area.total, then area.facets_total, total_area, or the sum of roof facets", roof_area),
    Computation("facade_total_area", "Facade Total Area",
                "Sum of facade areas across all material types", facade_total_area),
    Computation("facade_openings_total", "Facade Openings",
                "Sum of openings_total across all facades", facade_openings_total),
    Computation("facade_shutters", "Facade Shutters", "Sum of shutters across all facades", facade_shutters),
    Computation("facade_vents", "Facade Vents", "Sum of vents across all facades", facade_vents),
    Computation("openings_perimeter", "Openings Perimeter",
                "2 x (width + height) of every window and door, inches converted to LF", openings_perimeter),
    Computation("openings_area", "Openings Area", "Sum of window and door areas", openings_area),
    Computation("window_count", "Window Count", "Number of windows", window_count),
    Computation("door_count", "Door Count", "Number of doors", door_count),
    Computation("window_united_inches", "Window United Inches",
                "Sum of united inches over all windows", window_united_inches),
)})


def run_computation(computation_id: str, raw: Any) -> Optional[float]:
    """Run a named computation; None when unknown or nothing was found."""
    computation = COMPUTATIONS.get(computation_id)
    if computation is None:
        return None
    return computation(raw)
