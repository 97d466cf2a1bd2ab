from .common import ErrorResponse, HealthResponse
from .workspace import (
    CardBoxIn,
    CodeUpdate,
    DragLayoutIn,
    DragOverRequest,
    GenerateRequest,
    LoadProjectOut,
    MoveSlideRequest,
    ProjectListOut,
    PromptUpdate,
    SaveProjectOut,
    SaveProjectRequest,
    SelectionIn,
    SlideClickRequest,
    SlideOut,
    StatusOut,
    WorkspaceOut,
)

__all__ = [
    "CardBoxIn",
    "CodeUpdate",
    "DragLayoutIn",
    "DragOverRequest",
    "ErrorResponse",
    "GenerateRequest",
    "HealthResponse",
    "LoadProjectOut",
    "MoveSlideRequest",
    "ProjectListOut",
    "PromptUpdate",
    "SaveProjectOut",
    "SaveProjectRequest",
    "SelectionIn",
    "SlideClickRequest",
    "SlideOut",
    "StatusOut",
    "WorkspaceOut",
]
