"""
PeopleContact model.

A person on a workspace's guest list, enriched in place by the AI pipeline.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import JSONType
from app.models.base_model import WorkspaceScopedModel


class EnrichmentStatus:
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class PeopleContact(WorkspaceScopedModel):
    """People contact with enrichable profile fields."""

    __tablename__ = "people_contacts"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    emails: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    linkedin_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Enrichable fields
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    company: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    industry: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    role_seniority: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    ai_summary: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # Enrichment bookkeeping
    enrichment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=EnrichmentStatus.PENDING,
        index=True,
    )
    enrichment_data: Mapped[Optional[dict]] = mapped_column(JSONType, nullable=True)
    enrichment_cost_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enriched_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
