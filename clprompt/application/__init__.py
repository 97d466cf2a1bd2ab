"""
Application layer: workspace controller, animation scheduling, persistence
and the service use cases.
"""

from .workspace import CodeSelection, DeckLayout, WorkspaceController, WorkspaceView

__all__ = ["CodeSelection", "DeckLayout", "WorkspaceController", "WorkspaceView"]
