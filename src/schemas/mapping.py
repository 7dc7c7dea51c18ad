"""Field mapping schema: how one named measurement variable is derived.

A mapping reads the raw Hover measurement payload in exactly one way:

- direct:   ordered fallback list of dot-paths, first present value wins
- computed: a named built-in computation over the raw payload
- derived:  a formula over variables produced by earlier mappings
- manual:   no lookup at all, the default value is used
"""
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .enums import MappingType, SourceCategory


class FieldMapping(BaseModel):
    """Configuration for a single measurement variable."""
    id: Optional[str] = Field(default=None, description="Stable record identifier")
    target_field: str = Field(min_length=1, description="Variable name produced, e.g. 'ridges'")
    target_label: Optional[str] = Field(default=None, description="Human-readable label")
    target_unit: Optional[str] = Field(default=None, description="Unit label, e.g. 'LF' or 'sq ft'")
    trade_group: Optional[str] = Field(default=None, description="roof, siding, gutters, fascia_soffit")

    mapping_type: MappingType = Field(description="Extraction kind")
    json_paths: List[str] = Field(default_factory=list, description="Fallback lookup paths (direct only)")
    computation_id: Optional[str] = Field(default=None, description="Built-in computation name (computed only)")
    derived_formula: Optional[str] = Field(default=None, description="Formula over other variables (derived only)")
    default_value: float = Field(default=0.0, description="Used when extraction yields nothing")

    source_category: SourceCategory = Field(default=SourceCategory.NONE, description="Payload area read from")
    source_description: Optional[str] = Field(default=None, description="Where the value comes from")
    sort_order: int = Field(default=0, description="Display order within the trade group")
    active: bool = Field(default=True, description="Inactive mappings are ignored")

    @field_validator("json_paths", mode="before")
    @classmethod
    def _split_paths(cls, value: Union[str, List[str], None]) -> List[str]:
        """Accept the pipe-separated storage form ('a.b|a.c')."""
        if value is None:
            return []
        if isinstance(value, str):
            value = value.split("|")
        return [p.strip() for p in value if p and p.strip()]

    @field_validator("default_value", mode="before")
    @classmethod
    def _default_value(cls, value):
        return 0.0 if value is None else value

    @model_validator(mode="after")
    def _check_kind(self) -> "FieldMapping":
        """Exactly the fields of the active extraction kind may be set."""
        kind = self.mapping_type
        has_paths = bool(self.json_paths)
        has_computation = bool(self.computation_id)
        has_formula = bool(self.derived_formula and self.derived_formula.strip())

        expected = {
            MappingType.DIRECT: (True, False, False),
            MappingType.COMPUTED: (False, True, False),
            MappingType.DERIVED: (False, False, True),
            MappingType.MANUAL: (False, False, False),
        }[kind]
        actual = (has_paths, has_computation, has_formula)
        if actual != expected:
            configured = [
                name for name, present in zip(("json_paths", "computation_id", "derived_formula"), actual)
                if present
            ]
            raise ValueError(
                f"Mapping '{self.target_field}' is '{kind.value}' but has "
                f"{', '.join(configured) if configured else 'no source'} configured"
            )
        return self


class MeasurementVariable(BaseModel):
    """Catalog entry describing a variable available to formula authors."""
    key: str
    label: str
    unit: str
