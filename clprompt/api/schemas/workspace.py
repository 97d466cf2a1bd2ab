"""
Request and response schemas for the workspace API.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------- REQUESTS ----------
class SelectionIn(BaseModel):
    text: str = ""
    in_code_panel: bool = True


class SlideClickRequest(BaseModel):
    """Click on a slide card, optionally with the user's current selection."""

    selection: Optional[SelectionIn] = None


class MoveSlideRequest(BaseModel):
    target_index: int = Field(..., ge=0, description="Final position of the slide")


class CardBoxIn(BaseModel):
    left: float
    width: float = Field(..., ge=0)


class DragLayoutIn(BaseModel):
    """Rendered card geometry, in deck order."""

    boxes: List[CardBoxIn] = Field(default_factory=list)
    track_left: float = 0


class DragOverRequest(BaseModel):
    hovered_id: Optional[str] = Field(
        None, description="Card under the pointer; omitted when past the last card"
    )
    pointer_x: float
    layout: Optional[DragLayoutIn] = None


class PromptUpdate(BaseModel):
    text: str = ""


class CodeUpdate(BaseModel):
    """Code pasted into the code panel."""

    text: str = ""


class GenerateRequest(BaseModel):
    prompt: Optional[str] = Field(
        None, description="Replaces the prompt text before generating"
    )


class SaveProjectRequest(BaseModel):
    name: str = Field(..., description="Project name; surrounding whitespace is trimmed")


# ---------- RESPONSES ----------
class SlideOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    index: int
    label: str
    has_code: bool
    summary_pending: bool


class StatusOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: str
    text: str


class WorkspaceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    slides: List[SlideOut]
    code_text: str
    code_html: str
    code_animating: bool
    code_cursor: bool
    prompt_text: str
    prompt_html: str
    prompt_format: str
    typing: bool
    queued_suggestions: int
    send_code_mode: bool
    generating: bool
    dezzy_thinking: bool
    drag_state: str
    drop_marker_x: Optional[float] = None
    status: Optional[StatusOut] = None


class ProjectListOut(BaseModel):
    projects: List[str]


class SaveProjectOut(BaseModel):
    ok: bool
    name: Optional[str] = None
    error: Optional[str] = None


class LoadProjectOut(BaseModel):
    status: str
    name: Optional[str] = None
    error: Optional[str] = None
    workspace: WorkspaceOut
