"""
Shared FastAPI dependencies.

Authentication is handled upstream; requests arrive with the caller's
workspace in the ``X-Workspace-Id`` header.
"""

from uuid import UUID

from fastapi import Header

from app.db.session import get_db
from app.errors import raise_app_error

__all__ = ["get_db", "get_workspace_id"]


async def get_workspace_id(x_workspace_id: str = Header(..., alias="X-Workspace-Id")) -> UUID:
    try:
        return UUID(x_workspace_id)
    except ValueError:
        raise_app_error(400, "invalid_workspace", "X-Workspace-Id must be a UUID")
