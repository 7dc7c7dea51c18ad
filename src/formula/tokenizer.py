"""Tokenizer for quantity formulas.

Accepts both authoring dialects:

- brace references:  ``({rakes} + {eaves}) / 116``, ``{item:Shingles} / 15``
- bare identifiers:  ``(rakes + eaves) / 116``

Both become reference tokens carrying the variable name, so the parser never
sees a difference. Characters outside the grammar are skipped.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Union

from .errors import FormulaSyntaxError
from .functions import is_function

logger = logging.getLogger(__name__)

OPERATORS = "+-*/"


class TokenType(str, Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"  # bare variable name
    REFERENCE = "reference"    # {braced} variable name
    FUNCTION = "function"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    COMMA = "comma"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: Union[str, float]
    start: int
    end: int

    @property
    def is_variable(self) -> bool:
        return self.type in (TokenType.IDENTIFIER, TokenType.REFERENCE)


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def _is_ident_char(ch: str) -> bool:
    return _is_ident_start(ch) or ch.isdigit()


def tokenize(formula: str) -> List[Token]:
    """Split formula text into tokens, left to right."""
    tokens: List[Token] = []
    i = 0
    n = len(formula)

    while i < n:
        ch = formula[i]

        if ch.isspace():
            i += 1
            continue

        # Number: digits with at most one decimal point (".5" allowed)
        if ch.isdigit() or (ch == "." and i + 1 < n and formula[i + 1].isdigit()):
            start = i
            seen_dot = False
            while i < n and (formula[i].isdigit() or (formula[i] == "." and not seen_dot)):
                if formula[i] == ".":
                    seen_dot = True
                i += 1
            tokens.append(Token(TokenType.NUMBER, float(formula[start:i]), start, i))
            continue

        if _is_ident_start(ch):
            start = i
            while i < n and _is_ident_char(formula[i]):
                i += 1
            name = formula[start:i]
            if is_function(name):
                tokens.append(Token(TokenType.FUNCTION, name.upper(), start, i))
            else:
                tokens.append(Token(TokenType.IDENTIFIER, name, start, i))
            continue

        if ch == "{":
            close = formula.find("}", i + 1)
            if close == -1:
                raise FormulaSyntaxError(f"Unclosed '{{' at position {i}")
            name = formula[i + 1:close].strip()
            if not name:
                raise FormulaSyntaxError(f"Empty reference '{{}}' at position {i}")
            tokens.append(Token(TokenType.REFERENCE, name, i, close + 1))
            i = close + 1
            continue

        if ch in OPERATORS:
            tokens.append(Token(TokenType.OPERATOR, ch, i, i + 1))
        elif ch == "(":
            tokens.append(Token(TokenType.LPAREN, ch, i, i + 1))
        elif ch == ")":
            tokens.append(Token(TokenType.RPAREN, ch, i, i + 1))
        elif ch == ",":
            tokens.append(Token(TokenType.COMMA, ch, i, i + 1))
        else:
            logger.debug(f"Skipping unrecognized character {ch!r} at {i} in {formula!r}")
        i += 1

    return tokens
