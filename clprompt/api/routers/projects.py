"""
Named project snapshots.
"""

from fastapi import APIRouter

from clprompt.api.schemas.workspace import (
    LoadProjectOut,
    ProjectListOut,
    SaveProjectOut,
    SaveProjectRequest,
    WorkspaceOut,
)
from clprompt.domain.exceptions import InvalidProjectNameError
from clprompt.infra.config.dependencies import WorkspaceDep
from clprompt.infra.config.logging_config import bind_context, get_logger

router = APIRouter(prefix="/projects", tags=["projects"])
log = get_logger("api.projects")


@router.get("", response_model=ProjectListOut)
async def list_projects(workspace: WorkspaceDep) -> ProjectListOut:
    return ProjectListOut(projects=await workspace.list_projects())


@router.post("", response_model=SaveProjectOut)
async def save_project(request: SaveProjectRequest, workspace: WorkspaceDep) -> SaveProjectOut:
    if not request.name.strip():
        raise InvalidProjectNameError(request.name)
    bind_context(project=request.name.strip())
    result = await workspace.save_project(request.name)
    log.info("projects.save.request", ok=result.ok)
    return SaveProjectOut(ok=result.ok, name=result.name, error=result.error)


@router.post("/{name}/load", response_model=LoadProjectOut)
async def load_project(name: str, workspace: WorkspaceDep) -> LoadProjectOut:
    """
    Open a saved project.

    A missing or unreadable project leaves the workspace untouched; the
    ``status`` field says which case happened.
    """
    bind_context(project=name)
    result = await workspace.load_project(name)
    log.info("projects.load.request", status=result.status.value)
    return LoadProjectOut(
        status=result.status.value,
        name=result.name,
        error=result.error,
        workspace=WorkspaceOut.model_validate(workspace.render()),
    )
