"""Health check router."""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.session import get_db
from app.errors import ProviderConfigError
from app.services.completion import build_completion_client

router = APIRouter()


def _ai_provider_configured() -> bool:
    try:
        build_completion_client(settings)
    except ProviderConfigError:
        return False
    return True


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """DB reachability, applied schema revision and AI provider configuration."""

    db_ok = False
    schema_revision: Optional[str] = None

    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except Exception:  # noqa: BLE001
        db_ok = False

    if db_ok:
        try:
            version_result = await db.execute(text("SELECT version_num FROM alembic_version"))
            schema_revision = version_result.scalar_one_or_none()
        except Exception:  # noqa: BLE001
            # Schema created without migrations
            await db.rollback()

    return {
        "api_ok": True,
        "db_ok": db_ok,
        "schema_revision": schema_revision,
        "ai_provider_configured": _ai_provider_configured(),
    }
