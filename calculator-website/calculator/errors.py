"""Evaluation errors.

Admission errors never surface as exceptions: a rejected keypress simply
leaves the buffer as it was. Only the evaluator raises, and the session
turns each error into a flashed message.
"""
from __future__ import annotations


class CalculatorError(Exception):
    """Base class for calculator failures."""


class EvaluationError(CalculatorError):
    kind = "error"
    reason = "Error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.reason)
        self.detail = detail


class MalformedExpression(EvaluationError):
    kind = "malformed"
    reason = "Error"


class UnbalancedParentheses(EvaluationError):
    kind = "unbalanced"
    reason = "Unbalanced ()"


class IncompleteExpression(EvaluationError):
    kind = "incomplete"
    reason = "Incomplete"


class ArithmeticFailure(EvaluationError):
    kind = "arithmetic"
    reason = "Error"


class ParseError(CalculatorError):
    """Raised by the parser; carries the offending position."""

    def __init__(self, message: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.position = position
