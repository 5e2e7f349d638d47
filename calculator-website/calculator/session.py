"""Calculator session: one expression buffer, one display, one history ledger.

All keypad, keyboard and history interactions go through a single
:class:`CalculatorSession`, which owns the state they mutate.
"""
from __future__ import annotations

import logging
from typing import Optional

from calculator.config import CalculatorConfig
from calculator.display import Display
from calculator.errors import EvaluationError
from calculator.evaluator import evaluate
from calculator.history import HistoryEntry, HistoryLedger, KeyValueStore, MemoryKeyValueStore
from calculator.tokens import CLEAR, DELETE, EVALUATE, TOGGLE_SIGN, key_to_input
from calculator.validator import ExpressionBuffer


logger = logging.getLogger(__name__)


class CalculatorSession:
    def __init__(
        self,
        config: Optional[CalculatorConfig] = None,
        *,
        store: Optional[KeyValueStore] = None,
        ledger: Optional[HistoryLedger] = None,
        display: Optional[Display] = None,
    ) -> None:
        self.config = config or CalculatorConfig()
        if ledger is None:
            ledger = HistoryLedger(
                store if store is not None else MemoryKeyValueStore(),
                key=self.config.history_key,
                max_entries=self.config.history_max,
            )
        self.ledger = ledger
        self.buffer = ExpressionBuffer(max_length=self.config.max_expression_length)
        self.display = display or Display(flash_ms=self.config.flash_ms)
        self.last_error: Optional[EvaluationError] = None

    @property
    def expression(self) -> str:
        return self.buffer.text

    @property
    def display_text(self) -> str:
        return self.display.render(self.buffer.text)

    def press(self, token: str) -> bool:
        reason = self.buffer.rejection_reason(token)
        if reason is not None:
            logger.debug("Token %r rejected: %s", token, reason)
            self.display.flash(reason)
            return False
        return self.buffer.append(token)

    def delete_last(self) -> None:
        self.buffer.delete_last()

    def clear(self) -> None:
        self.buffer.clear()

    def toggle_sign(self) -> None:
        self.buffer.toggle_sign()

    def evaluate(self) -> Optional[str]:
        """Evaluate the buffer; on success record it and continue from the result."""
        expression = self.buffer.text
        try:
            result = evaluate(expression)
        except EvaluationError as exc:
            logger.debug("Evaluation of %r failed (%s): %s", expression, exc.kind, exc)
            self.last_error = exc
            self.display.flash(exc.reason)
            return None
        self.last_error = None
        if result is None:
            return None
        logger.info("Evaluated %r = %s", expression, result)
        self.ledger.record(expression, result)
        self.buffer.replace(result)
        return result

    def handle_action(self, action: str) -> None:
        if action == CLEAR:
            self.clear()
        elif action == DELETE:
            self.delete_last()
        elif action == EVALUATE:
            self.evaluate()
        elif action == TOGGLE_SIGN:
            self.toggle_sign()
        else:
            raise ValueError(f"Unknown action: {action!r}")

    def handle_key(self, key: str) -> bool:
        """Apply one keyboard key; returns False when the key is not mapped."""
        mapped = key_to_input(key)
        if mapped is None:
            return False
        kind, value = mapped
        if kind == "action":
            self.handle_action(value)
        else:
            self.press(value)
        return True

    def type_text(self, text: str) -> None:
        for ch in text:
            self.handle_key(ch)

    # history

    @property
    def history(self) -> tuple:
        return self.ledger.all()

    def refresh_history(self) -> None:
        """Pick up entries other sessions saved to the shared store."""
        self.ledger.refresh()

    def load_history(self, index: int) -> Optional[HistoryEntry]:
        entry = self.ledger.get(index)
        if entry is not None:
            self.buffer.replace(entry.expression)
        return entry

    def delete_history(self, index: int) -> bool:
        return self.ledger.delete_at(index)

    def clear_history(self) -> None:
        self.ledger.clear()

    def close(self) -> None:
        self.display.cancel_flash()
        self.ledger.flush()
