"""Loading field mappings and the measurement-variable catalog from YAML/JSON."""
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from schemas.mapping import FieldMapping, MeasurementVariable

DEFAULT_MAPPINGS_PATH = Path(__file__).parent / "default_mappings.yaml"


def _read_config(path: Union[str, Path]) -> Any:
    """YAML loader; also reads JSON since JSON is a YAML subset."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def parse_mappings(data: Any) -> List[FieldMapping]:
    """Validate a raw mapping list (or {'mappings': [...]}) into models.

    Raises:
        pydantic.ValidationError: If a record is inconsistent with its kind.
    """
    if isinstance(data, dict):
        data = data.get("mappings", [])
    return [FieldMapping.model_validate(record) for record in (data or [])]


def load_mappings(path: Union[str, Path]) -> List[FieldMapping]:
    return parse_mappings(_read_config(path))


@lru_cache(maxsize=1)
def _bundled() -> Dict[str, Any]:
    return _read_config(DEFAULT_MAPPINGS_PATH)


def default_mappings() -> List[FieldMapping]:
    """Fresh copies of the bundled default mappings."""
    return parse_mappings(_bundled())


def measurement_variables(trade: Optional[str] = None) -> Dict[str, List[MeasurementVariable]]:
    """Variables available to formula authors, grouped by trade."""
    catalog = {
        trade_name: [MeasurementVariable.model_validate(v) for v in entries]
        for trade_name, entries in _bundled().get("variables", {}).items()
    }
    if trade is not None:
        return {trade: catalog.get(trade, [])}
    return catalog
