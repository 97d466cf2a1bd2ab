"""
Drag state value object - lifecycle of a slide drag gesture.
"""

from enum import Enum


class DragState(str, Enum):
    """
    Drag gesture lifecycle.

    IDLE -> DRAGGING -> (DROP_ACCEPTED | DROP_CANCELLED) -> IDLE
    """

    IDLE = "idle"
    DRAGGING = "dragging"
    DROP_ACCEPTED = "drop_accepted"
    DROP_CANCELLED = "drop_cancelled"

    def can_transition_to(self, new_state: "DragState") -> bool:
        valid_transitions = {
            DragState.IDLE: [DragState.DRAGGING],
            DragState.DRAGGING: [DragState.DROP_ACCEPTED, DragState.DROP_CANCELLED],
            DragState.DROP_ACCEPTED: [DragState.IDLE],
            DragState.DROP_CANCELLED: [DragState.IDLE],
        }
        return new_state in valid_transitions.get(self, [])

    def is_dragging(self) -> bool:
        return self is DragState.DRAGGING
