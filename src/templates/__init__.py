"""Bid template resolution: dependency ordering, application and validation."""
from .applicator import TemplateApplication, apply_template
from .loader import load_template, parse_template
from .ordering import ResolutionOrder, resolution_order
from .validation import validate_template

__all__ = [
    "TemplateApplication",
    "apply_template",
    "load_template",
    "parse_template",
    "ResolutionOrder",
    "resolution_order",
    "validate_template",
]
