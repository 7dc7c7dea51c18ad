"""Numeric coercion for values read out of provider payloads."""
import math
from typing import Any, Optional


def to_number(value: Any) -> Optional[float]:
    """Coerce a scalar to float, or None when it is not cleanly numeric.

    Mappings, sequences, booleans, None, unparseable strings and non-finite
    numbers are all treated as absent.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None
