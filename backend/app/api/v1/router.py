"""
Version 1 of the public API.
"""
from app.modules.workspace.router import router as workspaces_router
from fastapi import APIRouter

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(workspaces_router, tags=["Workspaces"])
