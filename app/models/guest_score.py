"""
GuestScore model.

One relevance score per (contact, event). Re-scoring overwrites the row.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType
from app.models.base_model import WorkspaceScopedModel


class GuestScore(WorkspaceScopedModel):
    """AI relevance score of a contact against an event's objectives."""

    __tablename__ = "guest_scores"

    contact_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("people_contacts.id", ondelete="CASCADE"),
        nullable=False,
    )
    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )

    relevance_score: Mapped[int] = mapped_column(Integer, nullable=False)

    # [{"objective_id", "objective_text", "match_score", "explanation"}, ...]
    matched_objectives: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    score_rationale: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    talking_points: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    model_version: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    scored_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("contact_id", "event_id", name="uq_guest_scores_contact_event"),
        Index("ix_guest_scores_event_relevance", "event_id", "relevance_score"),
    )
