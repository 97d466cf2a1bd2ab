"""
Assistant chat history persisted to a JSON file across restarts.

Only the last day of turns is kept; each request replays at most
``max_turns`` of them ahead of the new user message.
"""

import json
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from clprompt.infra.config.logging_config import get_logger

DAY_MS = 24 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


class ChatTurn(BaseModel):
    role: str  # user | model
    text: str
    at: int


class ChatHistory:
    def __init__(
        self,
        path: Optional[str] = "dezzy-history.json",
        max_age_ms: int = DAY_MS,
        max_turns: int = 30,
        clock: Callable[[], int] = _now_ms,
    ):
        self.path = Path(path) if path else None
        self.max_age_ms = max_age_ms
        self.max_turns = max_turns
        self._clock = clock
        self.turns: List[ChatTurn] = []
        self._log = get_logger("infra.history")

    def _cutoff(self) -> int:
        return self._clock() - self.max_age_ms

    def _recent(self) -> List[ChatTurn]:
        cutoff = self._cutoff()
        return [t for t in self.turns if t.at > cutoff]

    def load(self) -> None:
        """Read the file; a missing or unreadable file starts an empty history."""
        self.turns = []
        if self.path is None or not self.path.is_file():
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            self._log.warning("history.unreadable", path=str(self.path), error=str(e))
            return
        if not isinstance(raw, list):
            return
        for item in raw:
            try:
                self.turns.append(ChatTurn.model_validate(item))
            except ValidationError:
                continue
        self.turns = self._recent()
        self._log.info("history.loaded", turns=len(self.turns))

    def save(self) -> None:
        self.turns = self._recent()
        if self.path is None:
            return
        try:
            self.path.write_text(
                json.dumps([t.model_dump() for t in self.turns], separators=(",", ":")),
                encoding="utf-8",
            )
        except OSError as e:
            self._log.warning("history.save_failed", path=str(self.path), error=str(e))

    def build_contents(self, user_text: str) -> List[Dict[str, Any]]:
        """Gemini ``contents``: recent turns followed by the new user message."""
        recent = self._recent()[-self.max_turns:] if self.max_turns > 0 else []
        contents = [{"role": t.role, "parts": [{"text": t.text}]} for t in recent]
        contents.append({"role": "user", "parts": [{"text": user_text}]})
        return contents

    def record(self, user_text: str, reply: str) -> None:
        """Append a completed exchange and persist it."""
        at = self._clock()
        self.turns.append(ChatTurn(role="user", text=user_text, at=at))
        self.turns.append(ChatTurn(role="model", text=reply, at=at))
        self.save()
