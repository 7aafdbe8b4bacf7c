"""Seating read and apply schemas."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from app.schemas.base import WorkspaceScopedRead


class SeatingAssignmentRead(BaseModel):
    invitation_id: UUID
    contact_id: UUID
    full_name: str
    company: Optional[str] = None
    title: Optional[str] = None
    table_assignment: Optional[int] = None
    seat_assignment: Optional[int] = None
    status: str
    relevance_score: Optional[int] = None


class SeatingApplyRequest(BaseModel):
    """Apply a stored suggestion batch, or place a single guest."""

    batch_id: Optional[UUID] = None
    contact_id: Optional[UUID] = None
    table_number: Optional[int] = Field(default=None, ge=1)
    seat_number: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def check_target(self):
        if self.batch_id is None and (self.contact_id is None or self.table_number is None):
            raise ValueError("Provide batch_id, or contact_id with table_number")
        return self


class SeatingApplyResult(BaseModel):
    applied: int


class SeatingSuggestionRead(WorkspaceScopedRead):
    event_id: UUID
    contact_id: UUID
    batch_id: UUID
    table_number: int
    seat_number: Optional[int] = None
    rationale: Optional[str] = None
    confidence: float
    strategy: str
    model_version: Optional[str] = None


class IntroductionPairingRead(WorkspaceScopedRead):
    event_id: UUID
    contact_a_id: UUID
    contact_b_id: UUID
    batch_id: UUID
    reason: Optional[str] = None
    mutual_interest: Optional[str] = None
    priority: int
    model_version: Optional[str] = None
