"""
AI job schemas: trigger requests and the polled job view.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.core.config import settings
from app.schemas.base import WorkspaceScopedRead
from app.services.seating.types import SeatingStrategy


class EnrichmentJobCreate(BaseModel):
    contact_ids: list[UUID] = Field(default_factory=list, max_length=settings.ENRICHMENT_MAX_CONTACTS)


class ScoringJobCreate(BaseModel):
    """Omit ``contact_ids`` to score every contact in the workspace."""

    contact_ids: Optional[list[UUID]] = None


class SeatingJobCreate(BaseModel):
    strategy: str = SeatingStrategy.DEFAULT
    max_per_table: Optional[int] = Field(default=None, ge=1, le=100)

    @field_validator("strategy")
    @classmethod
    def validate_strategy(cls, value: str) -> str:
        value = (value or SeatingStrategy.DEFAULT).upper()
        if value not in SeatingStrategy.ALL:
            raise ValueError(f"strategy must be one of {', '.join(SeatingStrategy.ALL)}")
        return value


class IntroductionJobCreate(BaseModel):
    max_pairings: int = Field(default=settings.INTRODUCTION_MAX_PAIRINGS, ge=1, le=100)


class AIJobRead(WorkspaceScopedRead):
    """
    Polled job state. ``status`` alone does not mean every item succeeded:
    a COMPLETED job can still carry a non-zero ``failed_count``.
    """

    kind: str
    status: str
    event_id: Optional[UUID] = None
    target_count: int
    completed_count: int
    failed_count: int
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    config: dict[str, Any] = Field(default_factory=dict)
