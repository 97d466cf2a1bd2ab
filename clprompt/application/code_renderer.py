"""
Code output renderer: the "current code" panel.

Holds the settled code text plus, while animating, the revealed prefix.
Highlighting runs only on settled text; frames in flight are escaped only.
"""

from typing import Optional

from markupsafe import Markup

from clprompt.application.animations import (
    CODE_CHAR_DELAY_MS,
    AnimationRunner,
    RevealAnimation,
    fixed_pacing,
)
from clprompt.application.ports import SchedulerPort
from clprompt.domain.services.highlighting import escape_text, highlight_code
from clprompt.infra.config.logging_config import get_logger

NO_CODE_PLACEHOLDER = "# No code yet. Enter a prompt and click Generate."


class CodeOutputRenderer:
    def __init__(
        self, scheduler: SchedulerPort, char_delay_ms: float = CODE_CHAR_DELAY_MS
    ) -> None:
        self.scheduler = scheduler
        self.char_delay_ms = char_delay_ms
        self.text = NO_CODE_PLACEHOLDER
        self.visible = NO_CODE_PLACEHOLDER
        self._runner: Optional[AnimationRunner] = None
        self._log = get_logger("workspace.code_output")

    @property
    def animating(self) -> bool:
        return self._runner is not None

    @property
    def cursor_visible(self) -> bool:
        return self.animating

    def display(self, text: Optional[str], animate: bool = False) -> None:
        """Show ``text`` now, or reveal it one character at a time."""
        value = text or NO_CODE_PLACEHOLDER
        if self._runner is not None:
            self._runner.cancel()
            self._runner = None
            self._log.debug("code_output.animation_superseded")

        self.text = value
        if not animate:
            self.visible = value
            return

        self.visible = ""
        self._runner = AnimationRunner(
            self.scheduler,
            RevealAnimation(value, fixed_pacing(self.char_delay_ms)),
            on_frame=self._on_frame,
            on_complete=self._on_complete,
        ).start()

    def paste(self, text: str) -> None:
        """Pasted code replaces the panel content without animation."""
        self.display((text or "").rstrip(), animate=False)

    def _on_frame(self, animation: RevealAnimation) -> None:
        self.visible = animation.visible

    def _on_complete(self, animation: RevealAnimation) -> None:
        self._runner = None
        self.visible = animation.text

    def render(self) -> Markup:
        """HTML projection of the panel."""
        if self.animating:
            return escape_text(self.visible)
        return highlight_code(self.text)
