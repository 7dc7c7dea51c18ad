"""Safe arithmetic formula language for bid quantities.

No eval(): formulas are tokenized, parsed by recursive descent and walked.
Supported: + - * /, parentheses, unary minus, numeric literals, variables
(``{name}`` or bare ``name``), ROUNDUP(x) and SUM(x, ...).
"""
from .context import FormulaContext, waste_factor, is_context_reference
from .dialect import referenced_names, to_brace_dialect
from .errors import FormulaSyntaxError
from .evaluator import EvalResult, FormulaResult, evaluate, evaluate_expression, evaluate_formula
from .functions import FUNCTIONS, round_up
from .parser import parse
from .validation import ValidationResult, validate_formula

__all__ = [
    "FormulaContext",
    "waste_factor",
    "is_context_reference",
    "referenced_names",
    "to_brace_dialect",
    "FormulaSyntaxError",
    "EvalResult",
    "FormulaResult",
    "evaluate",
    "evaluate_expression",
    "evaluate_formula",
    "FUNCTIONS",
    "round_up",
    "parse",
    "ValidationResult",
    "validate_formula",
]
