"""Translation between the two formula authoring dialects.

Formulas have historically been written two ways:

    ({rakes} + {eaves}) * 1.15 / 10      brace references
    (rakes + eaves) * 1.15 / 10          bare identifiers

The tokenizer reads both. Stored formulas are kept in the brace form, which
is the only one able to express ``{item:...}`` and ``{self:...}``.
"""
from typing import List

from .tokenizer import TokenType, tokenize


def referenced_names(formula: str) -> List[str]:
    """Variable names referenced by a formula, in order of first appearance.

    Raises:
        FormulaSyntaxError: If a brace reference is unclosed or empty.
    """
    names: List[str] = []
    for token in tokenize(formula):
        if token.is_variable and token.value not in names:
            names.append(token.value)
    return names


def to_brace_dialect(formula: str) -> str:
    """Rewrite bare identifiers as ``{name}`` references, leaving the rest untouched.

    >>> to_brace_dialect("ROUNDUP(area / 100) * waste")
    'ROUNDUP({area} / 100) * {waste}'
    """
    parts: List[str] = []
    cursor = 0
    for token in tokenize(formula):
        if token.type == TokenType.IDENTIFIER:
            parts.append(formula[cursor:token.start])
            parts.append("{" + token.value + "}")
            cursor = token.end
    parts.append(formula[cursor:])
    return "".join(parts)
