"""Evaluate quantity formulas against a variable context.

The public functions never raise for bad formula text: a formula that cannot
be parsed evaluates to 0 and the problem is reported in the result, so one
broken template item never blocks the rest of a bid.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence

from .errors import FormulaSyntaxError
from .functions import FUNCTIONS, round_up
from .parser import DEFAULT_MAX_DEPTH, BinaryOp, Call, Negate, Node, Number, Variable, parse

logger = logging.getLogger(__name__)


@dataclass
class EvalResult:
    """Outcome of evaluating one expression."""
    value: float
    error: Optional[str] = None
    unresolved: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class FormulaResult:
    """Outcome of evaluating a quantity formula (rounded up, never negative)."""
    value: float
    raw_value: float
    error: Optional[str] = None
    unresolved: List[str] = field(default_factory=list)


def _children(node: Node) -> Sequence[Node]:
    if isinstance(node, BinaryOp):
        return (node.left, node.right)
    if isinstance(node, Negate):
        return (node.operand,)
    if isinstance(node, Call):
        return node.args
    return ()


def _combine(node: Node, args: List[float]) -> float:
    if isinstance(node, BinaryOp):
        left, right = args
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        # Division by exactly zero saturates to 0
        return left / right if right != 0 else 0.0
    if isinstance(node, Negate):
        return -args[0]
    return FUNCTIONS[node.name].apply(args)


def _lookup(variables: Any, name: str, unresolved: List[str]) -> float:
    value = variables.get(name) if variables is not None else None
    if value is None:
        if name not in unresolved:
            unresolved.append(name)
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Non-numeric value for variable {name!r}: {value!r}; using 0")
        return 0.0
    return number if math.isfinite(number) else 0.0


def evaluate_tree(node: Node, variables: Any, unresolved: Optional[List[str]] = None) -> float:
    """Walk the tree bottom-up with an explicit stack.

    ``variables`` is anything with a ``get(name)`` method returning a number
    or None (a dict, a VariableTable, a FormulaContext). Missing names count
    as 0 and are appended to ``unresolved``.
    """
    if unresolved is None:
        unresolved = []
    stack = [(node, False)]
    values: List[float] = []

    while stack:
        current, expanded = stack.pop()
        if isinstance(current, Number):
            values.append(current.value)
        elif isinstance(current, Variable):
            values.append(_lookup(variables, current.name, unresolved))
        elif not expanded:
            stack.append((current, True))
            for child in reversed(_children(current)):
                stack.append((child, False))
        else:
            count = len(_children(current))
            args = values[-count:] if count else []
            if count:
                del values[-count:]
            values.append(_combine(current, args))

    return values[-1]


def evaluate_expression(expression: str, variables: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> EvalResult:
    """Evaluate an expression, returning value plus diagnostics."""
    if expression is None or not str(expression).strip():
        return EvalResult(0.0, error="Empty expression")
    expression = str(expression)

    try:
        tree = parse(expression, max_depth)
    except FormulaSyntaxError as e:
        logger.warning(f"Formula evaluation failed: {expression!r}: {e}")
        return EvalResult(0.0, error=str(e))

    unresolved: List[str] = []
    value = evaluate_tree(tree, variables, unresolved)
    if not math.isfinite(value):
        logger.warning(f"Formula {expression!r} did not produce a finite number")
        return EvalResult(0.0, error="Expression did not produce a valid number", unresolved=unresolved)
    return EvalResult(value, unresolved=unresolved)


def evaluate(expression: str, variables: Any) -> float:
    """Evaluate an expression to a number; 0 on any formula error."""
    return evaluate_expression(expression, variables).value


def evaluate_formula(formula: str, context: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> FormulaResult:
    """Evaluate a quantity formula: round up to the next whole unit, floor at 0.

    Examples:
        evaluate_formula("{area} / 100 * {waste}", context)
        evaluate_formula("({rakes} + {eaves}) / 116", context)
        evaluate_formula("{item:Shingles} / 15", context)
    """
    result = evaluate_expression(formula, context, max_depth=max_depth)
    logger.debug(f"Formula {formula!r} => {result.value}")
    value = max(0.0, round_up(result.value))
    return FormulaResult(value=value, raw_value=result.value, error=result.error, unresolved=result.unresolved)
