"""
SeatingSuggestion model.

AI (or fallback) table placements, tagged with the batch that produced them.
"""

import uuid
from typing import Optional

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import WorkspaceScopedModel


class SeatingSuggestion(WorkspaceScopedModel):
    """One guest's suggested table within a suggestion batch."""

    __tablename__ = "seating_suggestions"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    contact_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("people_contacts.id", ondelete="CASCADE"),
        nullable=False,
    )
    batch_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    table_number: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_number: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rationale: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    confidence: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    strategy: Mapped[str] = mapped_column(String(30), nullable=False)
    model_version: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_seating_suggestions_event_batch", "event_id", "batch_id"),
    )
