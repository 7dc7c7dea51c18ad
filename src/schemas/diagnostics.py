"""Out-of-band diagnostics returned next to successful results."""
from typing import List, Optional

from pydantic import BaseModel, Field

from .enums import WarningKind


class FormulaWarning(BaseModel):
    """A recoverable problem met while resolving a formula or template."""
    kind: WarningKind = Field(description="syntax, unresolved_reference or configuration")
    message: str = Field(description="Text for the template/mapping author")
    formula: Optional[str] = Field(default=None, description="Formula text involved")
    item_id: Optional[str] = Field(default=None, description="Template item or mapping target")
    item_description: Optional[str] = Field(default=None)
    reference: Optional[str] = Field(default=None, description="Unresolved name or ignored dependency")

    def __str__(self) -> str:
        where = self.item_description or self.item_id
        return f"[{self.kind.value}] {where}: {self.message}" if where else f"[{self.kind.value}] {self.message}"


class MappingIssue(BaseModel):
    """Problem found when validating a field mapping list."""
    target_field: str
    kind: WarningKind
    message: str
    references: List[str] = Field(default_factory=list)
