"""Expression buffer with per-keystroke validation.

Every token is checked against the text already in the buffer before it is
admitted, so the buffer can always be extended or evaluated and never needs a
separate parse-error recovery step.
"""
from __future__ import annotations

import logging
import re
from typing import Optional

from calculator.errors import ParseError
from calculator.parser import BinaryOp, Group, Negate, Node, Number, parse, source_of
from calculator.tokens import is_digit, is_operator, normalize, unmatched_open_parens


logger = logging.getLogger(__name__)

WRAPPER_PREFIX = "(-1)*("
_SIMPLE_NUMBER_RE = re.compile(r"^-?[0-9]+(\.[0-9]+)?%?\Z")


class ExpressionBuffer:
    def __init__(self, text: str = "", *, max_length: int = 120) -> None:
        self._text = text
        self.max_length = int(max_length)

    @property
    def text(self) -> str:
        return self._text

    def __str__(self) -> str:
        return self._text

    def __len__(self) -> int:
        return len(self._text)

    def _last(self) -> str:
        return self._text[-1:]

    def _current_number(self) -> str:
        i = len(self._text) - 1
        while i >= 0:
            c = self._text[i]
            if is_operator(c) or c in "() ":
                break
            i -= 1
        return self._text[i + 1:]

    def rejection_reason(self, token: str) -> Optional[str]:
        """Return why ``token`` may not be appended, or ``None`` if it may."""
        v = normalize(token)
        if len(self._text) >= self.max_length:
            return "Too long"
        if is_digit(v):
            return None

        last = self._last()

        if v == ".":
            if "." in self._current_number():
                return "Invalid"
            if last == ")":
                return "Invalid"
            return None

        if v == "%":
            if not last or last in "(.%" or is_operator(last):
                return "% invalid"
            return None

        if v == "(":
            if not self._text or is_operator(last) or last == "(":
                return None
            return "Use * for ×"

        if v == ")":
            if unmatched_open_parens(self._text) <= 0:
                return "No matching ("
            if not last or is_operator(last) or last in "(.":
                return "Invalid )"
            return None

        if len(v) == 1 and is_operator(v):
            if not self._text:
                return None if v == "-" else "Start with number"
            if is_operator(last):
                if v == "-" and last != "-":
                    return None
                return "Invalid operator"
            if last == "(":
                return None if v == "-" else "Invalid after ("
            if last == ".":
                return "Invalid"
            return None

        return "Invalid"

    def can_append(self, token: str) -> bool:
        return self.rejection_reason(token) is None

    def append(self, token: str) -> bool:
        reason = self.rejection_reason(token)
        if reason is not None:
            logger.debug("Rejected %r after %r: %s", token, self._text, reason)
            return False
        v = normalize(token)
        if v == "." and (not self._text or self._last() == "("):
            self._text += "0."
        else:
            self._text += v
        return True

    def delete_last(self) -> None:
        self._text = self._text[:-1]

    def clear(self) -> None:
        self._text = ""

    def replace(self, text: str) -> None:
        self._text = text

    def open_parens(self) -> int:
        return unmatched_open_parens(self._text)

    def toggle_sign(self) -> None:
        self._text = toggle_sign(self._text)


def _is_negative_one(node: Node) -> bool:
    return (
        isinstance(node, Group)
        and isinstance(node.inner, Negate)
        and isinstance(node.inner.operand, Number)
        and node.inner.operand.text == "1"
    )


def _unwrap_parsed(tree: Node, text: str) -> Optional[str]:
    if (
        isinstance(tree, BinaryOp)
        and tree.op == "*"
        and tree.start == 0
        and _is_negative_one(tree.left)
        and isinstance(tree.right, Group)
        and tree.right.end == len(text)
    ):
        return source_of(tree.right.inner, text)
    return None


def _unwrap_textual(text: str) -> Optional[str]:
    # Unparsable buffers: the wrapper's "(" must stay open until the final ")".
    if not (text.startswith(WRAPPER_PREFIX) and text.endswith(")")):
        return None
    inner = text[len(WRAPPER_PREFIX):-1]
    depth = 0
    for ch in inner:
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return None
    return inner


def toggle_sign(text: str) -> str:
    """Flip the sign of a number, or negate a whole expression.

    A compound expression is wrapped as ``(-1)*(...)``; toggling a wrapped
    expression removes the wrapper again.
    """
    if text == "":
        return "-"

    try:
        tree: Optional[Node] = parse(text)
    except ParseError:
        tree = None

    inner = _unwrap_parsed(tree, text) if tree is not None else _unwrap_textual(text)
    if inner is not None:
        return inner

    if _SIMPLE_NUMBER_RE.match(text):
        return text[1:] if text.startswith("-") else "-" + text

    return WRAPPER_PREFIX + text + ")"
