"""Recursive-descent parser for the keypad grammar.

Grammar (lowest to highest precedence)::

    expression := term (("+" | "-") term)*
    term       := unary (("*" | "/") unary)*
    unary      := "-" unary | postfix
    postfix    := primary "%"*
    primary    := NUMBER | "(" expression ")"

Every node keeps the ``[start, end)`` span of the source text it came from,
so callers can cut sub-expressions back out of the original string.
Arithmetic follows IEEE-754: dividing by zero yields an infinity or NaN
instead of raising.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Tuple, Union

from calculator.errors import ParseError


_NUMBER_RE = re.compile(r"[0-9]+(?:\.[0-9]*)?|\.[0-9]+")


@dataclass(frozen=True)
class Number:
    text: str
    start: int
    end: int


@dataclass(frozen=True)
class Negate:
    operand: "Node"
    start: int
    end: int


@dataclass(frozen=True)
class Percent:
    operand: "Node"
    start: int
    end: int


@dataclass(frozen=True)
class Group:
    inner: "Node"
    start: int
    end: int


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: "Node"
    right: "Node"
    start: int
    end: int


Node = Union[Number, Negate, Percent, Group, BinaryOp]
Token = Tuple[str, str, int]  # (kind, text, position)


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if ch in "+-*/()%":
            tokens.append(("op", ch, i))
            i += 1
            continue
        match = _NUMBER_RE.match(text, i)
        if match is None:
            raise ParseError(f"unexpected character {ch!r}", i)
        tokens.append(("num", match.group(), i))
        i = match.end()
    return tokens


class Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def parse(self) -> Node:
        if not self.tokens:
            raise ParseError("empty expression", 0)
        node = self._expression()
        if self.pos != len(self.tokens):
            raise ParseError("unexpected token", self.tokens[self.pos][2])
        return node

    def _peek(self) -> str:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos][1]
        return ""

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        self.pos += 1
        return tok

    def _expression(self) -> Node:
        left = self._term()
        while self._peek() in ("+", "-"):
            op = self._advance()[1]
            right = self._term()
            left = BinaryOp(op, left, right, left.start, right.end)
        return left

    def _term(self) -> Node:
        left = self._unary()
        while self._peek() in ("*", "/"):
            op = self._advance()[1]
            right = self._unary()
            left = BinaryOp(op, left, right, left.start, right.end)
        return left

    def _unary(self) -> Node:
        if self._peek() == "-":
            start = self._advance()[2]
            operand = self._unary()
            return Negate(operand, start, operand.end)
        return self._postfix()

    def _postfix(self) -> Node:
        node = self._primary()
        while self._peek() == "%":
            pos = self._advance()[2]
            node = Percent(node, node.start, pos + 1)
        return node

    def _primary(self) -> Node:
        if self.pos >= len(self.tokens):
            raise ParseError("unexpected end of expression", len(self.text))
        kind, value, start = self._advance()
        if kind == "num":
            return Number(value, start, start + len(value))
        if value == "(":
            inner = self._expression()
            if self._peek() != ")":
                where = self.tokens[self.pos][2] if self.pos < len(self.tokens) else len(self.text)
                raise ParseError("missing )", where)
            close = self._advance()[2]
            return Group(inner, start, close + 1)
        raise ParseError(f"unexpected {value!r}", start)


def parse(text: str) -> Node:
    return Parser(text).parse()


def source_of(node: Node, text: str) -> str:
    return text[node.start:node.end]


def _divide(left: float, right: float) -> float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


def evaluate_tree(node: Node) -> float:
    if isinstance(node, Number):
        return float(node.text)
    if isinstance(node, Negate):
        return -evaluate_tree(node.operand)
    if isinstance(node, Percent):
        return evaluate_tree(node.operand) * 0.01
    if isinstance(node, Group):
        return evaluate_tree(node.inner)
    if isinstance(node, BinaryOp):
        left = evaluate_tree(node.left)
        right = evaluate_tree(node.right)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return _divide(left, right)
    raise ValueError(f"Unsupported node: {node!r}")
