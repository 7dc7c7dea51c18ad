"""Shared enums used across mappings, templates and resolved line items."""
from enum import Enum


class Section(str, Enum):
    MATERIALS = "materials"
    LABOR = "labor"


class QtySource(str, Enum):
    """Where a resolved quantity came from."""
    FORMULA = "formula"
    MANUAL = "manual"
    MEASURED = "measured"


class MappingType(str, Enum):
    """Extraction kind of a field mapping."""
    DIRECT = "direct"
    COMPUTED = "computed"
    DERIVED = "derived"
    MANUAL = "manual"


class SourceCategory(str, Enum):
    """Part of the measurement payload a mapping reads from."""
    ROOF = "roof"
    FACADES = "facades"
    OPENINGS = "openings"
    NONE = "none"


class Trade(str, Enum):
    ROOF = "roof"
    SIDING = "siding"
    GUTTERS = "gutters"
    FASCIA_SOFFIT = "fascia_soffit"


class MaterialVariant(str, Enum):
    VINYL = "vinyl"
    HARDIE = "hardie"
    LP_SMARTSIDE = "lp_smartside"


class WarningKind(str, Enum):
    """Diagnostic categories reported alongside results."""
    SYNTAX = "syntax"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    CONFIGURATION = "configuration"


# Sections in output order
SECTION_ORDER = (Section.MATERIALS, Section.LABOR)
