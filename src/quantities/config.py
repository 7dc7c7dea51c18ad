"""Engine settings loaded from YAML."""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field

from schemas.enums import MaterialVariant
from waste import WasteCalcConfig

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


class EngineSettings(BaseModel):
    """Defaults applied when a command does not override them."""
    waste_pct: Dict[str, float] = Field(
        default_factory=lambda: {"roof": 10.0, "siding": 25.0, "fascia_soffit": 15.0, "gutters": 0.0},
        description="Default waste percentage per trade",
    )
    default_margin_pct: float = Field(default=0.0, ge=0)
    material_variant: MaterialVariant = MaterialVariant.VINYL
    max_formula_depth: int = Field(default=64, ge=1)

    def waste_config(self, material_variant: Optional[str] = None) -> WasteCalcConfig:
        """Waste library configuration built from these defaults."""
        config = WasteCalcConfig(material_variant=material_variant or self.material_variant)
        for trade, pct in self.waste_pct.items():
            config = config.with_trade_waste(trade, pct)
        return config


def load_settings(path: Optional[Union[str, Path]] = None) -> EngineSettings:
    """Load settings from ``path``, or the bundled settings.yaml when None.

    Raises:
        pydantic.ValidationError: If a value has the wrong type or range.
    """
    path = Path(path) if path else DEFAULT_SETTINGS_PATH
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    logger.debug(f"Loaded settings from {path}")
    return EngineSettings.model_validate(data)
