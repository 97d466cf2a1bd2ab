"""
Deck ordering engine.

Keeps the visual order of slide cards, handles drag-and-drop reordering and
computes where the insertion marker should be drawn. Geometry comes in from
the rendering layer as ``CardBox`` values; nothing here touches a DOM.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from clprompt.domain.entities.slide import Slide, make_slide_id, slide_id_number
from clprompt.domain.exceptions import SlideNotFoundError
from clprompt.domain.services.slide_store import SlideStore
from clprompt.domain.value_objects.drag_state import DragState

DRAG_CLICK_SUPPRESS_MS = 100
MARKER_GAP_AFTER_LAST = 6
MARKER_GAP_BEFORE_CARD = 2


@dataclass(frozen=True)
class CardBox:
    """Horizontal extent of a rendered slide card."""

    left: float
    width: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def midpoint(self) -> float:
        return self.left + self.width / 2


def insertion_index_for_pointer(
    hovered_index: Optional[int], pointer_x: float, box: Optional[CardBox], length: int
) -> int:
    """
    Gap index a drop at ``pointer_x`` would insert at.

    Left of the hovered card's midpoint inserts before it, otherwise after it.
    No hovered card means the pointer is past the last card; a hovered card
    without known geometry inserts before it.
    """
    if hovered_index is None:
        return length
    if box is None:
        return hovered_index
    if pointer_x - box.left > box.width / 2:
        return hovered_index + 1
    return hovered_index


def marker_offset(insert_index: int, boxes: Sequence[CardBox], track_left: float) -> float:
    """Horizontal marker position relative to the track."""
    if insert_index <= 0 or not boxes:
        return 0
    if insert_index >= len(boxes):
        return boxes[-1].right - track_left + MARKER_GAP_AFTER_LAST
    return boxes[insert_index].left - track_left - MARKER_GAP_BEFORE_CARD


class DeckOrderingEngine:
    """Ordered deck of slides backed by a ``SlideStore``."""

    def __init__(self, store: SlideStore) -> None:
        self.store = store
        self._order: List[Slide] = []
        self._next_number = 1

        self.drag_state = DragState.IDLE
        self.dragged_id: Optional[str] = None
        self.insert_index: Optional[int] = None
        self._suppress_clicks_until: float = float("-inf")

    # ---------- order ----------
    @property
    def slides(self) -> List[Slide]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def ids(self) -> List[str]:
        return [slide.id for slide in self._order]

    def index_of(self, slide_id: str) -> int:
        for i, slide in enumerate(self._order):
            if slide.id == slide_id:
                return i
        raise SlideNotFoundError(slide_id)

    def _unused_id(self) -> str:
        slide_id = make_slide_id(self._next_number)
        while slide_id in self.store:
            self._next_number += 1
            slide_id = make_slide_id(self._next_number)
        self._next_number += 1
        return slide_id

    def create_slide(self, position: Optional[int] = None) -> Slide:
        """Insert a new slide (append by default) with the next unused id."""
        slide = self.store.add(Slide(id=self._unused_id(), index=len(self._order)))
        if position is None or position >= len(self._order):
            self._order.append(slide)
        else:
            self._order.insert(max(position, 0), slide)
        self._reindex()
        return slide

    def reorder(self, moved_id: str, target_index: int) -> None:
        """Move ``moved_id`` so it ends up at ``target_index``."""
        current = self.index_of(moved_id)
        slide = self._order.pop(current)
        target = min(max(target_index, 0), len(self._order))
        self._order.insert(target, slide)
        self._reindex()

    def replace(self, slides: Sequence[Slide]) -> None:
        """
        Discard the deck and install ``slides`` (project load).

        The id counter moves past every numeric suffix in ``slides``; a slide
        whose id is already taken gets a fresh one so each id stays unique.
        """
        self.cancel_drag()
        self._order = []
        self.store.clear()
        highest = max((slide_id_number(s.id) for s in slides), default=0)
        self._next_number = max(highest, len(slides)) + 1
        for slide in slides:
            if slide.id in self.store:
                slide.id = self._unused_id()
            self._order.append(self.store.add(slide))
        self._reindex()

    def _reindex(self) -> None:
        for i, slide in enumerate(self._order):
            slide.index = i

    # ---------- drag and drop ----------
    def _transition(self, new_state: DragState) -> None:
        if not self.drag_state.can_transition_to(new_state):
            raise ValueError(
                f"Invalid drag transition from {self.drag_state.value} to {new_state.value}"
            )
        self.drag_state = new_state

    def start_drag(self, slide_id: str) -> None:
        self.index_of(slide_id)
        if self.drag_state is not DragState.IDLE:
            self.cancel_drag()
        self._transition(DragState.DRAGGING)
        self.dragged_id = slide_id
        self.insert_index = None
        self._suppress_clicks_until = float("-inf")

    def drag_over(
        self, hovered_id: Optional[str], pointer_x: float, box: Optional[CardBox]
    ) -> Optional[int]:
        """Track the pointer during a drag; returns the live insertion index."""
        if not self.drag_state.is_dragging():
            return None
        hovered_index = self.index_of(hovered_id) if hovered_id else None
        self.insert_index = insertion_index_for_pointer(
            hovered_index, pointer_x, box, len(self._order)
        )
        return self.insert_index

    def drop(self) -> bool:
        """Complete the drag. Returns True when the deck was reordered."""
        if not self.drag_state.is_dragging() or self.dragged_id is None:
            return False
        if self.insert_index is None:
            self._transition(DragState.DROP_CANCELLED)
            return False

        current = self.index_of(self.dragged_id)
        # The gap index counts the dragged card itself.
        target = self.insert_index - 1 if self.insert_index > current else self.insert_index
        self.reorder(self.dragged_id, target)
        self._transition(DragState.DROP_ACCEPTED)
        self.insert_index = None
        return True

    def end_drag(self, now_ms: float) -> None:
        """Drag gesture finished (dropped or not); opens the click suppression window."""
        if self.drag_state is DragState.IDLE:
            return
        self.cancel_drag()
        self._suppress_clicks_until = now_ms + DRAG_CLICK_SUPPRESS_MS

    def cancel_drag(self) -> None:
        """Return to IDLE from any drag state without reordering."""
        if self.drag_state.is_dragging():
            self._transition(DragState.DROP_CANCELLED)
        if self.drag_state is not DragState.IDLE:
            self._transition(DragState.IDLE)
        self.dragged_id = None
        self.insert_index = None

    def is_click_suppressed(self, now_ms: float) -> bool:
        return now_ms < self._suppress_clicks_until

    def marker_position(
        self, boxes: Sequence[CardBox], track_left: float = 0
    ) -> Optional[float]:
        """Marker x while a drag has a live insertion index, else None (hidden)."""
        if not self.drag_state.is_dragging() or self.insert_index is None:
            return None
        return marker_offset(self.insert_index, boxes, track_left)
