"""Load bid templates from YAML or JSON files."""
from pathlib import Path
from typing import Any, Union

import yaml

from schemas.template import BidTemplate


def parse_template(data: Any) -> BidTemplate:
    """Validate a raw template dict.

    Accepts ``items`` or ``bid_template_items`` for the item list, and a
    single-key ``{'template': {...}}`` wrapper.

    Raises:
        pydantic.ValidationError: If the template is malformed.
    """
    if isinstance(data, dict) and set(data) == {"template"}:
        data = data["template"]
    return BidTemplate.model_validate(data)


def load_template(path: Union[str, Path]) -> BidTemplate:
    with open(path, encoding="utf-8") as f:
        return parse_template(yaml.safe_load(f))
