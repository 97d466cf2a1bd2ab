"""API v1 routers"""

from fastapi import APIRouter

from .editor import router as editor_router
from .projects import router as projects_router
from .slides import router as slides_router

WORKSPACE_PREFIX = "/workspace"

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(editor_router, prefix=WORKSPACE_PREFIX)
v1_router.include_router(slides_router, prefix=WORKSPACE_PREFIX)
v1_router.include_router(projects_router, prefix=WORKSPACE_PREFIX)
