"""
Slide domain entity with core business rules.
"""

import re
from dataclasses import dataclass
from typing import Optional

SLIDE_ID_PREFIX = "slide-"
SUMMARY_MAX_LENGTH = 80
SUMMARY_PENDING_LABEL = "…"

_ID_SUFFIX = re.compile(r"^slide-(\d+)")


def make_slide_id(number: int) -> str:
    return f"{SLIDE_ID_PREFIX}{number}"


def slide_id_number(slide_id: str) -> int:
    """Numeric suffix of a ``slide-<n>`` id, 0 when there is none."""
    match = _ID_SUFFIX.match(slide_id or "")
    return int(match.group(1)) if match else 0


@dataclass
class Slide:
    id: str
    index: int
    code: Optional[str] = None
    summary: Optional[str] = None
    summary_pending: bool = False

    def has_code(self) -> bool:
        """Business rule: a slide has code when a non-empty payload is stored."""
        return bool(self.code)

    def store_code(self, code: Optional[str]) -> None:
        """
        Business rule: any code change makes the summary stale.

        Removing code also removes the summary; new code leaves the slide
        waiting for a fresh summary.
        """
        self.summary = None
        if not code:
            self.code = None
            self.summary_pending = False
            return
        self.code = code
        self.summary_pending = True

    def apply_summary(self, summary: Optional[str]) -> None:
        """Business rule: summaries are advisory and clamped to 80 characters."""
        text = (summary or "").strip()[:SUMMARY_MAX_LENGTH]
        self.summary = text or None
        self.summary_pending = False

    def label(self) -> str:
        """Thumbnail label: summary, pending marker, or positional fallback."""
        if self.summary_pending:
            return SUMMARY_PENDING_LABEL
        return self.summary or f"Slide {self.index + 1}"
