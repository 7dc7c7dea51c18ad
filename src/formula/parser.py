"""Recursive-descent parser producing an expression tree.

Grammar:
    expression = term (('+' | '-') term)*
    term       = unary (('*' | '/') unary)*
    unary      = '-' unary | primary
    primary    = NUMBER | variable | FUNCTION '(' [expression (',' expression)*] ')'
               | '(' expression ')'
"""
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional, Tuple, Union

from .errors import FormulaSyntaxError
from .functions import FUNCTIONS
from .tokenizer import Token, TokenType, tokenize

DEFAULT_MAX_DEPTH = 64


# ============================================================================
# Tree nodes
# ============================================================================

@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Variable:
    name: str
    braced: bool = False


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Negate:
    operand: "Node"


@dataclass(frozen=True)
class Call:
    name: str
    args: Tuple["Node", ...]


Node = Union[Number, Variable, BinaryOp, Negate, Call]


# ============================================================================
# Parser
# ============================================================================

class Parser:
    def __init__(self, tokens: List[Token], max_depth: int = DEFAULT_MAX_DEPTH):
        self.tokens = tokens
        self.pos = 0
        self.max_depth = max_depth
        self._depth = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def consume(self) -> Token:
        tok = self.peek()
        if tok is None:
            raise FormulaSyntaxError("Unexpected end of expression")
        self.pos += 1
        return tok

    def expect(self, token_type: TokenType, what: str) -> Token:
        tok = self.peek()
        if tok is None:
            raise FormulaSyntaxError(f"Expected {what} but expression ended")
        if tok.type != token_type:
            raise FormulaSyntaxError(f"Expected {what} at position {tok.start}, found {tok.value!r}")
        return self.consume()

    def _is_operator(self, *ops: str) -> bool:
        tok = self.peek()
        return tok is not None and tok.type == TokenType.OPERATOR and tok.value in ops

    def _descend(self) -> None:
        self._depth += 1
        if self._depth > self.max_depth:
            raise FormulaSyntaxError(f"Expression nested deeper than {self.max_depth} levels")

    def parse(self) -> Node:
        if not self.tokens:
            raise FormulaSyntaxError("Empty expression")
        node = self.parse_expression()
        leftover = self.peek()
        if leftover is not None:
            if leftover.type == TokenType.RPAREN:
                raise FormulaSyntaxError(f"Unbalanced ')' at position {leftover.start}")
            raise FormulaSyntaxError(f"Unexpected token {leftover.value!r} at position {leftover.start}")
        return node

    def parse_expression(self) -> Node:
        self._descend()
        try:
            left = self.parse_term()
            while self._is_operator("+", "-"):
                op = self.consume().value
                left = BinaryOp(op, left, self.parse_term())
            return left
        finally:
            self._depth -= 1

    def parse_term(self) -> Node:
        left = self.parse_unary()
        while self._is_operator("*", "/"):
            op = self.consume().value
            left = BinaryOp(op, left, self.parse_unary())
        return left

    def parse_unary(self) -> Node:
        if self._is_operator("-"):
            self.consume()
            self._descend()
            try:
                return Negate(self.parse_unary())
            finally:
                self._depth -= 1
        return self.parse_primary()

    def parse_primary(self) -> Node:
        tok = self.peek()
        if tok is None:
            raise FormulaSyntaxError("Unexpected end of expression")

        if tok.type == TokenType.NUMBER:
            self.consume()
            return Number(tok.value)

        if tok.is_variable:
            self.consume()
            return Variable(tok.value, braced=tok.type == TokenType.REFERENCE)

        if tok.type == TokenType.FUNCTION:
            return self._parse_call()

        if tok.type == TokenType.LPAREN:
            self.consume()
            expr = self.parse_expression()
            self.expect(TokenType.RPAREN, "')'")
            return expr

        raise FormulaSyntaxError(f"Unexpected token {tok.value!r} at position {tok.start}")

    def _parse_call(self) -> Node:
        name = self.consume().value
        self.expect(TokenType.LPAREN, f"'(' after {name}")
        args: List[Node] = []
        tok = self.peek()
        if tok is not None and tok.type != TokenType.RPAREN:
            args.append(self.parse_expression())
            while self.peek() is not None and self.peek().type == TokenType.COMMA:
                self.consume()
                args.append(self.parse_expression())
        self.expect(TokenType.RPAREN, f"')' to close {name}(")

        spec = FUNCTIONS[name]
        if not spec.accepts(len(args)):
            raise FormulaSyntaxError(f"{name} takes {_arity(spec)} argument(s), got {len(args)}")
        return Call(name, tuple(args))


def _arity(spec) -> str:
    if spec.max_args is None:
        return f"at least {spec.min_args}"
    if spec.min_args == spec.max_args:
        return str(spec.min_args)
    return f"{spec.min_args}-{spec.max_args}"


@lru_cache(maxsize=1024)
def parse(formula: str, max_depth: int = DEFAULT_MAX_DEPTH) -> Node:
    """Parse formula text into an immutable tree.

    Raises:
        FormulaSyntaxError: If the text is not a well-formed expression.
    """
    return Parser(tokenize(formula), max_depth=max_depth).parse()
