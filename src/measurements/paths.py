"""Dot-path access into nested measurement payloads.

Path syntax (dot-separated keys, optional selector per segment):

    roof.measurements.ridges        plain keys
    openings.windows[0].area        index into a sequence
    facades.vinyl_siding[*].area    sum the rest of the path across a sequence
    openings.windows[?].area        first element where the rest of the path resolves
    facades.*[*].area               bare '*' sums across the values of a mapping

Coercion to a number happens once, at the leaf.
"""
import re
from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any, List, Optional, Tuple

from .coerce import to_number

KEY = "key"
INDEX = "index"
SUM = "sum"
FIRST = "first"

Step = Tuple[str, Any]

_SEGMENT = re.compile(r"^([^\[\]]*)((?:\[[^\[\]]*\])*)$")
_SELECTOR = re.compile(r"\[([^\[\]]*)\]")


class PathSyntaxError(ValueError):
    """Lookup path cannot be parsed."""


@lru_cache(maxsize=512)
def parse_path(path: str) -> Tuple[Step, ...]:
    """Split a lookup path into steps.

    Raises:
        PathSyntaxError: If a segment is empty or a selector is malformed.
    """
    if not path or not path.strip():
        raise PathSyntaxError("Empty path")

    steps: List[Step] = []
    for segment in path.strip().split("."):
        match = _SEGMENT.match(segment.strip())
        if not match or (not match.group(1) and not match.group(2)):
            raise PathSyntaxError(f"Invalid segment {segment!r} in path {path!r}")
        key, selectors = match.group(1), match.group(2)
        if key == "*":
            steps.append((SUM, None))
        elif key:
            steps.append((KEY, key))
        for selector in _SELECTOR.findall(selectors):
            selector = selector.strip()
            if selector == "*":
                steps.append((SUM, None))
            elif selector == "?":
                steps.append((FIRST, None))
            elif re.fullmatch(r"-?\d+", selector):
                steps.append((INDEX, int(selector)))
            else:
                raise PathSyntaxError(f"Invalid selector [{selector}] in path {path!r}")
    return tuple(steps)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _elements(value: Any) -> Optional[List[Any]]:
    if isinstance(value, Mapping):
        return list(value.values())
    if _is_sequence(value):
        return list(value)
    return None


def _resolve(value: Any, steps: Tuple[Step, ...]) -> Optional[float]:
    if not steps:
        return to_number(value)

    (kind, arg), rest = steps[0], steps[1:]

    if kind == KEY:
        if isinstance(value, Mapping) and arg in value:
            return _resolve(value[arg], rest)
        # Numeric key on a sequence acts as an index
        if _is_sequence(value) and re.fullmatch(r"\d+", arg) and int(arg) < len(value):
            return _resolve(value[int(arg)], rest)
        return None

    if kind == INDEX:
        if _is_sequence(value) and -len(value) <= arg < len(value):
            return _resolve(value[arg], rest)
        return None

    elements = _elements(value)
    if elements is None:
        return None

    if kind == SUM:
        found = [r for r in (_resolve(e, rest) for e in elements) if r is not None]
        return float(sum(found)) if found else None

    for element in elements:
        result = _resolve(element, rest)
        if result is not None:
            return result
    return None


def resolve_path(data: Any, path: str) -> Optional[float]:
    """Numeric value at ``path``, or None when absent or not numeric.

    Raises:
        PathSyntaxError: If the path itself is malformed.
    """
    return _resolve(data, parse_path(path))
