"""
Slide store: slide identity -> code payload and summary label.

Source of truth for the "has code" affordance. Summary requests are guarded
by per-slide generation tokens so that a late reply for old code never
overwrites the label of newer code.
"""

from itertools import count
from typing import Dict, Iterator, List, Optional

from clprompt.domain.entities.slide import Slide
from clprompt.domain.exceptions import SlideNotFoundError


class SlideStore:
    def __init__(self) -> None:
        self._slides: Dict[str, Slide] = {}
        self._summary_tokens: Dict[str, int] = {}
        self._token_counter = count(1)

    def __contains__(self, slide_id: str) -> bool:
        return slide_id in self._slides

    def __iter__(self) -> Iterator[Slide]:
        return iter(self._slides.values())

    def __len__(self) -> int:
        return len(self._slides)

    def add(self, slide: Slide) -> Slide:
        self._slides[slide.id] = slide
        return slide

    def get(self, slide_id: str) -> Slide:
        slide = self._slides.get(slide_id)
        if slide is None:
            raise SlideNotFoundError(slide_id)
        return slide

    def find(self, slide_id: str) -> Optional[Slide]:
        return self._slides.get(slide_id)

    def clear(self) -> None:
        self._slides.clear()
        self._summary_tokens.clear()

    def set_code(self, slide_id: str, text: Optional[str]) -> None:
        """Store ``text`` for the slide; empty text removes code and summary."""
        slide = self.get(slide_id)
        slide.store_code(text)
        # Any pending summary belongs to the previous code.
        self._summary_tokens.pop(slide_id, None)

    def set_summary(self, slide_id: str, text: Optional[str]) -> None:
        """Advisory label, never fails; unknown ids are ignored."""
        slide = self._slides.get(slide_id)
        if slide is not None:
            slide.apply_summary(text)

    def has_code(self, slide_id: str) -> bool:
        slide = self._slides.get(slide_id)
        return bool(slide and slide.has_code())

    def begin_summary(self, slide_id: str) -> int:
        """Register a summary request for the slide's current code."""
        self.get(slide_id)
        token = next(self._token_counter)
        self._summary_tokens[slide_id] = token
        return token

    def apply_summary(self, slide_id: str, token: int, text: Optional[str]) -> bool:
        """Apply a summary reply if it still belongs to the slide's current code."""
        if self._summary_tokens.get(slide_id) != token:
            return False
        del self._summary_tokens[slide_id]
        self.set_summary(slide_id, text)
        return True

    def code_map(self) -> Dict[str, str]:
        return {s.id: s.code for s in self._slides.values() if s.code}

    def ids(self) -> List[str]:
        return list(self._slides)
