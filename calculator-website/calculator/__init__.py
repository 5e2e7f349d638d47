"""Keypad calculator with per-keystroke validation and persisted history."""

from .config import CalculatorConfig, configure_logging, get_config
from .evaluator import evaluate, format_result
from .session import CalculatorSession
from .validator import ExpressionBuffer, toggle_sign

__all__ = [
    "CalculatorConfig",
    "CalculatorSession",
    "ExpressionBuffer",
    "configure_logging",
    "evaluate",
    "format_result",
    "get_config",
    "toggle_sign",
]
