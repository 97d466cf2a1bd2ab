"""
Prompt box, code panel, code generation and the assistant.
"""

from fastapi import APIRouter

from clprompt.api.schemas.workspace import (
    CodeUpdate,
    GenerateRequest,
    PromptUpdate,
    WorkspaceOut,
)
from clprompt.infra.config.dependencies import WorkspaceDep
from clprompt.infra.config.logging_config import get_logger

router = APIRouter(tags=["editor"])
log = get_logger("api.editor")


@router.get("", response_model=WorkspaceOut)
async def get_workspace_view(workspace: WorkspaceDep) -> WorkspaceOut:
    return WorkspaceOut.model_validate(workspace.render())


@router.put("/prompt", response_model=WorkspaceOut)
async def set_prompt(request: PromptUpdate, workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.set_prompt(request.text)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/prompt/focus", response_model=WorkspaceOut)
async def focus_prompt(workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.focus_prompt()
    return WorkspaceOut.model_validate(workspace.render())


@router.put("/code", response_model=WorkspaceOut)
async def paste_code(request: CodeUpdate, workspace: WorkspaceDep) -> WorkspaceOut:
    workspace.paste_code(request.text)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/generate", response_model=WorkspaceOut)
async def generate_code(
    workspace: WorkspaceDep, request: GenerateRequest | None = None
) -> WorkspaceOut:
    """Generate CL code from the prompt; the result starts animating in the code panel."""
    log.info("generate.request")
    await workspace.generate(request.prompt if request else None)
    return WorkspaceOut.model_validate(workspace.render())


@router.post("/dezzy", response_model=WorkspaceOut)
async def ask_dezzy(workspace: WorkspaceDep) -> WorkspaceOut:
    log.info("dezzy.request")
    await workspace.ask_dezzy()
    return WorkspaceOut.model_validate(workspace.render())
