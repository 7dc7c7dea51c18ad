"""Bid quantity schemas - Pydantic models shared by extraction, formulas and templates."""
from .diagnostics import FormulaWarning, MappingIssue
from .enums import (
    MappingType,
    MaterialVariant,
    QtySource,
    Section,
    SECTION_ORDER,
    SourceCategory,
    Trade,
    WarningKind,
)
from .mapping import FieldMapping, MeasurementVariable
from .template import BidTemplate, PriceListLink, ResolvedLineItem, TemplateItem
from .variables import VariableTable

__all__ = [
    # Diagnostics
    "FormulaWarning",
    "MappingIssue",
    # Enums
    "MappingType",
    "MaterialVariant",
    "QtySource",
    "Section",
    "SECTION_ORDER",
    "SourceCategory",
    "Trade",
    "WarningKind",
    # Measurement mappings
    "FieldMapping",
    "MeasurementVariable",
    # Templates
    "BidTemplate",
    "PriceListLink",
    "ResolvedLineItem",
    "TemplateItem",
    # Variables
    "VariableTable",
]
