"""Measurement extraction: raw Hover payloads -> flat variable tables."""
from .coerce import to_number
from .computations import COMPUTATIONS, run_computation
from .defaults import default_mappings, load_mappings, measurement_variables, parse_mappings
from .extractor import ExtractionReport, VariableSource, extract, extract_with_report
from .paths import PathSyntaxError, parse_path, resolve_path
from .validation import derived_cycle_members, order_mappings, validate_mappings

__all__ = [
    "to_number",
    "COMPUTATIONS",
    "run_computation",
    "default_mappings",
    "load_mappings",
    "measurement_variables",
    "parse_mappings",
    "ExtractionReport",
    "VariableSource",
    "extract",
    "extract_with_report",
    "PathSyntaxError",
    "parse_path",
    "resolve_path",
    "derived_cycle_members",
    "order_mappings",
    "validate_mappings",
]
