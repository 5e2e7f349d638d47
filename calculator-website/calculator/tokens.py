from __future__ import annotations

from typing import Optional


OPERATORS = ("+", "-", "*", "/")
DIGITS = "0123456789"

# Keypad glyphs and their ASCII operators.
GLYPHS = {"÷": "/", "×": "*", "−": "-"}

CLEAR = "clear"
DELETE = "delete"
EVALUATE = "evaluate"
TOGGLE_SIGN = "toggle-sign"
ACTIONS = (CLEAR, DELETE, EVALUATE, TOGGLE_SIGN)

_KEY_ACTIONS = {
    "Enter": EVALUATE,
    "=": EVALUATE,
    "Backspace": DELETE,
    "Escape": CLEAR,
}
_KEY_TOKENS = set(DIGITS) | set("+-*/.()%")


def normalize(text: str) -> str:
    for glyph, ascii_op in GLYPHS.items():
        text = text.replace(glyph, ascii_op)
    return text


def is_operator(ch: str) -> bool:
    return ch in OPERATORS


def is_digit(ch: str) -> bool:
    return len(ch) == 1 and ch in DIGITS


def unmatched_open_parens(text: str) -> int:
    return text.count("(") - text.count(")")


def key_to_input(key: str) -> Optional[tuple]:
    """Translate a keyboard key name into ``("token", ch)`` or ``("action", name)``.

    Unknown keys map to ``None`` and are ignored by the caller.
    """
    if key in _KEY_ACTIONS:
        return ("action", _KEY_ACTIONS[key])
    if key in _KEY_TOKENS:
        return ("token", key)
    if key == ",":
        return ("token", ".")
    return None
