"""
Suggestion typing queue.

Serializes typed-text effects (assistant replies, suggestions) onto the
prompt surface. Exactly one run types at a time; anything arriving while a
run is in flight, or while earlier items still wait, joins a FIFO. Runs are
never interrupted.

    Idle --push--> Typing --all characters revealed--> Idle
                     ^                                   |
                     +------ settle delay, FIFO not empty+
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Deque, Optional

from markupsafe import Markup

from clprompt.application.animations import (
    PROMPT_CHAR_DELAY_MS,
    SENTENCE_END,
    SENTENCE_PAUSE_MS,
    AnimationRunner,
    RevealAnimation,
)
from clprompt.application.ports import SchedulerPort
from clprompt.domain.services.highlighting import escape_text, format_chat_text
from clprompt.infra.config.logging_config import get_logger

QUEUE_SETTLE_MS = 50
SPEAKER_LABEL = "(Dezzy)"
APPEND_SEPARATOR = "\n\n"


class SurfaceFormat(str, Enum):
    RAW = "raw"  # plain prompt box
    CHAT = "chat"  # rich chat-reply prose


class PromptSurface:
    """The prompt/reply text area the queue types into."""

    def __init__(self) -> None:
        self.text = ""
        self.format = SurfaceFormat.RAW
        self.typing = False

    def has_meaningful_text(self) -> bool:
        return bool(self.text.strip())

    def set_text(self, text: str) -> None:
        self.text = text or ""

    def focus(self) -> None:
        """User focus returns the surface to the plain prompt format."""
        self.format = SurfaceFormat.RAW

    def render(self) -> Markup:
        if self.format is SurfaceFormat.CHAT:
            return format_chat_text(self.text, complete=not self.typing)
        return escape_text(self.text)


@dataclass
class QueuedSuggestion:
    text: str
    replace: bool = False
    on_done: Optional[Callable[[], None]] = None


class SuggestionTypingQueue:
    def __init__(
        self,
        scheduler: SchedulerPort,
        surface: PromptSurface,
        speaker_label: str = SPEAKER_LABEL,
        char_delay_ms: float = PROMPT_CHAR_DELAY_MS,
        sentence_pause_ms: float = SENTENCE_PAUSE_MS,
        settle_ms: float = QUEUE_SETTLE_MS,
    ) -> None:
        self.scheduler = scheduler
        self.surface = surface
        self.speaker_label = speaker_label
        self.char_delay_ms = char_delay_ms
        self.sentence_pause_ms = sentence_pause_ms
        self.settle_ms = settle_ms

        self.pending: Deque[QueuedSuggestion] = deque()
        self._runner: Optional[AnimationRunner] = None
        self._log = get_logger("workspace.typing_queue")

    @property
    def busy(self) -> bool:
        return self._runner is not None

    def push(
        self,
        text: Optional[str],
        replace: bool = False,
        on_done: Optional[Callable[[], None]] = None,
    ) -> bool:
        """
        Type ``text`` now, or queue it behind the run in flight.

        Returns True when typing started immediately.
        """
        text = (text or "").strip()
        if not text:
            if on_done:
                on_done()
            return False

        item = QueuedSuggestion(text=text, replace=replace, on_done=on_done)
        if self.busy or self.pending:
            self.pending.append(item)
            self._log.info("typing_queue.queued", depth=len(self.pending))
            return False
        self._start(item)
        return True

    def _attributed(self, text: str) -> str:
        if not self.speaker_label or text.startswith(self.speaker_label):
            return text
        return f"{self.speaker_label} {text}"

    def _delay_after(self, char: str) -> float:
        if self.surface.format is SurfaceFormat.CHAT and char in SENTENCE_END:
            return self.sentence_pause_ms
        return self.char_delay_ms

    def _start(self, item: QueuedSuggestion) -> None:
        surface = self.surface
        if item.replace or not surface.has_meaningful_text():
            surface.set_text("")
            typed = self._attributed(item.text)
            mode = "overwrite"
        else:
            typed = APPEND_SEPARATOR + self._attributed(item.text)
            mode = "append"

        surface.format = SurfaceFormat.CHAT
        surface.typing = True
        self._log.info("typing_queue.start", mode=mode, length=len(typed))
        self._runner = AnimationRunner(
            self.scheduler,
            RevealAnimation(typed, self._delay_after),
            on_frame=self._on_frame,
            on_complete=lambda animation: self._finish(item),
        )
        self._runner.start()

    def _on_frame(self, animation: RevealAnimation) -> None:
        # Only the newly revealed character is appended; earlier content is static.
        self.surface.text += animation.text[animation.index - 1]

    def _finish(self, item: QueuedSuggestion) -> None:
        self._runner = None
        self.surface.typing = False
        self._log.info("typing_queue.done", remaining=len(self.pending))
        if item.on_done:
            item.on_done()
        self.scheduler.call_later(self.settle_ms, self._drain)

    def _drain(self) -> None:
        if self.busy or not self.pending:
            return
        self._start(self.pending.popleft())
