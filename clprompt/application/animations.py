"""
Character-by-character reveal animations.

An animation is a resumable state machine (position, total length, delay
schedule). ``AnimationRunner`` drives one through a ``SchedulerPort``; the
animation itself never touches timers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from clprompt.application.ports import SchedulerPort, TimerHandle

CODE_CHAR_DELAY_MS = 12
PROMPT_CHAR_DELAY_MS = 18
SENTENCE_PAUSE_MS = 1000
SENTENCE_END = frozenset(".!?")

Pacing = Callable[[str], float]


def fixed_pacing(delay_ms: float) -> Pacing:
    return lambda _char: delay_ms


def reading_pacing(
    delay_ms: float = PROMPT_CHAR_DELAY_MS, pause_ms: float = SENTENCE_PAUSE_MS
) -> Pacing:
    """Short delay per character, long pause after sentence-ending punctuation."""
    return lambda char: pause_ms if char in SENTENCE_END else delay_ms


@dataclass
class RevealAnimation:
    text: str
    pacing: Pacing = field(default=fixed_pacing(PROMPT_CHAR_DELAY_MS))
    index: int = 0

    @property
    def total(self) -> int:
        return len(self.text)

    @property
    def visible(self) -> str:
        return self.text[: self.index]

    @property
    def done(self) -> bool:
        return self.index >= self.total

    def step(self) -> float:
        """Reveal the next character; returns the delay before the next step."""
        char = self.text[self.index]
        self.index += 1
        return self.pacing(char)


class AnimationRunner:
    """Drives one ``RevealAnimation`` to completion on a scheduler."""

    def __init__(
        self,
        scheduler: SchedulerPort,
        animation: RevealAnimation,
        on_frame: Callable[[RevealAnimation], None],
        on_complete: Callable[[RevealAnimation], None],
    ) -> None:
        self.scheduler = scheduler
        self.animation = animation
        self._on_frame = on_frame
        self._on_complete = on_complete
        self._timer: Optional[TimerHandle] = None
        self.cancelled = False
        self.finished = False

    def start(self) -> "AnimationRunner":
        self._tick()
        return self

    def cancel(self) -> None:
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self) -> None:
        self._timer = None
        if self.cancelled:
            return
        if self.animation.done:
            self.finished = True
            self._on_complete(self.animation)
            return
        delay = self.animation.step()
        self._on_frame(self.animation)
        self._timer = self.scheduler.call_later(delay, self._tick)
