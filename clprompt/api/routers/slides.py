"""
Slide deck operations: add, send mode, click, clear, move and drag.
"""

from fastapi import APIRouter, Query

from clprompt.api.schemas.workspace import (
    DragOverRequest,
    MoveSlideRequest,
    SlideClickRequest,
    WorkspaceOut,
)
from clprompt.application.workspace import CodeSelection, DeckLayout
from clprompt.domain.services.deck_ordering import CardBox
from clprompt.infra.config.dependencies import WorkspaceDep
from clprompt.infra.config.logging_config import bind_context, get_logger

router = APIRouter(tags=["slides"])
log = get_logger("api.slides")


@router.post("/slides", response_model=WorkspaceOut, status_code=201)
async def add_slide(workspace: WorkspaceDep) -> WorkspaceOut:
    slide_id = workspace.add_slide()
    log.info("slides.add.request", slide_id=slide_id)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/send-mode", response_model=WorkspaceOut)
async def toggle_send_mode(workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.toggle_send_code_mode()
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/slides/{slide_id}/click", response_model=WorkspaceOut)
async def click_slide(
    slide_id: str,
    workspace: WorkspaceDep,
    request: SlideClickRequest | None = None,
    wait: bool = Query(False, description="Wait for the summary and suggestion replies"),
) -> WorkspaceOut:
    """
    Click a slide card.

    In send mode the selected code (or the whole code panel) is stored on the
    slide; otherwise the slide's code is shown in the code panel.
    """
    bind_context(slide_id=slide_id)
    selection = None
    if request is not None and request.selection is not None:
        selection = CodeSelection(
            text=request.selection.text, in_code_panel=request.selection.in_code_panel
        )
    workspace.click_slide(slide_id, selection)
    if wait:
        await workspace.wait_idle()
    return WorkspaceOut.model_validate(workspace.render())


@router.delete("/slides/{slide_id}/code", response_model=WorkspaceOut)
async def clear_slide_code(slide_id: str, workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.clear_slide_code(slide_id)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/slides/{slide_id}/move", response_model=WorkspaceOut)
async def move_slide(
    slide_id: str, request: MoveSlideRequest, workspace: WorkspaceDep
) -> WorkspaceOut:
    bind_context(slide_id=slide_id)
    log.info("slides.move.request", target_index=request.target_index)
    workspace.move_slide(slide_id, request.target_index)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/slides/{slide_id}/drag", response_model=WorkspaceOut)
async def start_drag(slide_id: str, workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.start_drag(slide_id)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/drag/over", response_model=WorkspaceOut)
async def drag_over(request: DragOverRequest, workspace: WorkspaceDep) -> WorkspaceOut:
    """Pointer moved during a drag; the view carries the live drop marker."""
    layout = None
    if request.layout is not None:
        layout = DeckLayout(
            boxes=tuple(CardBox(left=b.left, width=b.width) for b in request.layout.boxes),
            track_left=request.layout.track_left,
        )
    workspace.drag_over(request.hovered_id, request.pointer_x, layout)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/drag/drop", response_model=WorkspaceOut)
async def drop(workspace: WorkspaceDep) -> WorkspaceOut:
    moved = workspace.drop()
    log.info("slides.drop.request", moved=moved)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/drag/end", response_model=WorkspaceOut)
async def end_drag(workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.end_drag()
    return WorkspaceOut.model_validate(workspace.render())
