"""
IntroductionPairing model.

Suggested guest-to-guest introductions. Insert-only, tagged per batch.
"""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base_model import WorkspaceScopedModel


class IntroductionPairing(WorkspaceScopedModel):
    """Unordered pair of guests recommended to meet. Priority 1 is highest."""

    __tablename__ = "introduction_pairings"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
    )
    contact_a_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("people_contacts.id", ondelete="CASCADE"),
        nullable=False,
    )
    contact_b_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("people_contacts.id", ondelete="CASCADE"),
        nullable=False,
    )
    batch_id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), nullable=False, index=True)

    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    mutual_interest: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    model_version: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_introduction_pairings_event_batch", "event_id", "batch_id"),
    )
