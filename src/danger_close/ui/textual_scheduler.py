from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from textual.message_pump import MessagePump
from textual.timer import Timer


@dataclass(eq=False)
class TextualTimerHandle:
    timer: Timer

    def cancel(self) -> None:
        self.timer.stop()


class TextualScheduler:
    """Runs roll timers on a textual app, screen or widget.

    Timers created through `set_timer`/`set_interval` belong to the pump and
    are stopped with it, on top of explicit cancellation.
    """

    def __init__(self, pump: MessagePump) -> None:
        self.pump = pump

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> TextualTimerHandle:
        return TextualTimerHandle(self.pump.set_timer(max(0, delay_ms) / 1000.0, callback))

    def call_every(self, interval_ms: int, callback: Callable[[], None]) -> TextualTimerHandle:
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        return TextualTimerHandle(self.pump.set_interval(interval_ms / 1000.0, callback))
