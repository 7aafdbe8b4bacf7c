"""
AIJob model.

Ledger row for one batch run of an AI pipeline (enrichment, scoring,
seating or introductions). Callers poll it for progress.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType
from app.models.base_model import WorkspaceScopedModel


class JobKind:
    ENRICHMENT = "enrichment"
    SCORING = "scoring"
    SEATING = "seating"
    INTRODUCTIONS = "introductions"

    ALL = (ENRICHMENT, SCORING, SEATING, INTRODUCTIONS)


class JobStatus:
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    TERMINAL = (COMPLETED, FAILED)


class AIJob(WorkspaceScopedModel):
    """
    AI job ledger.

    ``target_ids`` and ``config`` hold the trigger inputs so a worker can pick
    the job up later without the HTTP request that created it.
    """

    __tablename__ = "ai_jobs"

    kind: Mapped[str] = mapped_column(String(30), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=JobStatus.PENDING)

    # Event the job runs against (scoring, seating, introductions)
    event_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid(as_uuid=True), nullable=True, index=True)

    target_ids: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    config: Mapped[dict] = mapped_column(JSONType, nullable=False, default=dict)

    target_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    started_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_ai_jobs_status_created", "status", "created_at"),
        Index("ix_ai_jobs_workspace_kind", "workspace_id", "kind"),
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in JobStatus.TERMINAL
