"""
Event models.

An event, its weighted objectives and its guest list (invitations).
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType
from app.models.base_model import WorkspaceScopedModel


class InvitationStatus:
    INVITED = "INVITED"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    WAITLISTED = "WAITLISTED"


class Event(WorkspaceScopedModel):
    """Event with capacity and an optional explicit table layout."""

    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    starts_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Total seats; the seating layout is generated from this when tables_config is empty
    capacity: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # {"tables": [{"number": 1, "seats": 8}, ...], "max_per_table": 8}
    tables_config: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)


class EventObjective(WorkspaceScopedModel):
    """Weighted goal used as scoring criteria."""

    __tablename__ = "event_objectives"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    objective_text: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class EventInvitation(WorkspaceScopedModel):
    """Guest list entry, also carrying the applied seating placement."""

    __tablename__ = "event_invitations"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    contact_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("people_contacts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=InvitationStatus.INVITED)
    table_assignment: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    seat_assignment: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("event_id", "contact_id", name="uq_event_invitations_event_contact"),
    )
