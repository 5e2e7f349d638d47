from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass
class Flash:
    message: str
    deadline: float


class Display:
    """Display text with a transient error flash.

    A flash replaces the expression for ``flash_ms`` milliseconds. Starting a
    new flash cancels the pending one. Expiry is detected lazily whenever the
    display is read, and ``on_expire`` fires once per flash.
    """

    def __init__(
        self,
        *,
        flash_ms: int = 700,
        clock: Callable[[], float] = time.monotonic,
        on_expire: Optional[Callable[[], None]] = None,
    ) -> None:
        self.flash_ms = int(flash_ms)
        self._clock = clock
        self.on_expire = on_expire
        self._flash: Optional[Flash] = None

    def flash(self, message: str = "Invalid", ms: Optional[int] = None) -> None:
        duration = self.flash_ms if ms is None else int(ms)
        self._flash = Flash(message=message, deadline=self._clock() + duration / 1000.0)

    def cancel_flash(self) -> None:
        self._flash = None

    def poll(self) -> Optional[str]:
        """Return the active flash message, expiring it if its time is up."""
        if self._flash is None:
            return None
        if self._clock() >= self._flash.deadline:
            self._flash = None
            if self.on_expire is not None:
                self.on_expire()
            return None
        return self._flash.message

    @property
    def flashing(self) -> bool:
        return self.poll() is not None

    def remaining(self) -> float:
        """Seconds left on the active flash (0 when idle)."""
        if self.poll() is None:
            return 0.0
        return max(0.0, self._flash.deadline - self._clock())

    def render(self, expression: str) -> str:
        message = self.poll()
        if message is not None:
            return message
        return expression if expression != "" else "0"
