"""
Domain layer: slides, deck ordering, highlighting rules and snapshots.
"""

from .entities.slide import Slide
from .services.deck_ordering import CardBox, DeckOrderingEngine
from .services.slide_store import SlideStore
from .value_objects.drag_state import DragState
from .value_objects.project_snapshot import ProjectSnapshot, SlideRecord

__all__ = [
    "Slide",
    "CardBox",
    "DeckOrderingEngine",
    "SlideStore",
    "DragState",
    "ProjectSnapshot",
    "SlideRecord",
]
