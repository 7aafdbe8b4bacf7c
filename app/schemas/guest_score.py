"""Guest score read schema."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from app.schemas.base import WorkspaceScopedRead


class GuestScoreRead(WorkspaceScopedRead):
    contact_id: UUID
    event_id: UUID
    relevance_score: int
    matched_objectives: list[dict[str, Any]]
    score_rationale: Optional[str] = None
    talking_points: list[str]
    model_version: Optional[str] = None
    scored_at: Optional[datetime] = None
