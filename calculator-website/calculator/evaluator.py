"""Turn a finished expression into a canonical result string."""
from __future__ import annotations

import logging
import math
import re
from typing import Optional

from calculator.errors import (
    ArithmeticFailure,
    IncompleteExpression,
    MalformedExpression,
    ParseError,
    UnbalancedParentheses,
)
from calculator.parser import evaluate_tree, parse
from calculator.tokens import is_operator, normalize, unmatched_open_parens


logger = logging.getLogger(__name__)

PRECISION = 12
_ALLOWED_RE = re.compile(r"^[0-9+\-*/().\s]+$")


def normalize_expression(expression: str) -> str:
    """Map keypad glyphs to ASCII and spell ``%`` as ``*0.01``."""
    return normalize(expression).replace("%", "*0.01")


def to_precision(value: float, digits: int = PRECISION) -> str:
    """Render ``value`` the way JavaScript's ``Number.prototype.toPrecision`` does."""
    mantissa, exp_text = f"{value:.{digits - 1}e}".split("e")
    exponent = int(exp_text)
    if exponent < -6 or exponent >= digits:
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa}e{sign}{abs(exponent)}"
    return f"{value:.{max(digits - 1 - exponent, 0)}f}"


def _strip_zeros(text: str) -> str:
    if "e" in text or "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


def format_result(value: float) -> str:
    if not math.isfinite(value):
        raise ArithmeticFailure(f"non-finite result {value!r}")
    if value == 0:
        return "0"
    return _strip_zeros(to_precision(value))


def evaluate(expression: str) -> Optional[str]:
    """Evaluate ``expression``; ``None`` for a blank buffer.

    Raises an :class:`~calculator.errors.EvaluationError` subclass when the
    expression is malformed, unbalanced, incomplete or not finite.
    """
    text = normalize(expression).strip()
    if not text:
        return None

    normalized = normalize_expression(text)
    if not _ALLOWED_RE.match(normalized):
        raise MalformedExpression(f"unexpected characters in {expression!r}")

    if unmatched_open_parens(text) != 0:
        raise UnbalancedParentheses(expression)

    last = text[-1]
    if is_operator(last) or last in "(.":
        raise IncompleteExpression(expression)

    try:
        value = evaluate_tree(parse(normalized))
    except ParseError as exc:
        raise ArithmeticFailure(str(exc)) from exc

    if math.isnan(value):
        raise ArithmeticFailure(f"{expression!r} is not a number")
    return format_result(value)
