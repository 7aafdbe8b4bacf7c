"""
Models package.

Import all models here so they are registered with SQLAlchemy.
This file also makes it easy to import models from one place.
"""

from app.models.ai_job import AIJob, JobKind, JobStatus
from app.models.contact import EnrichmentStatus, PeopleContact
from app.models.event import Event, EventInvitation, EventObjective, InvitationStatus
from app.models.guest_score import GuestScore
from app.models.seating import SeatingSuggestion
from app.models.introduction import IntroductionPairing

# Export all models
__all__ = [
    "AIJob",
    "JobKind",
    "JobStatus",
    "PeopleContact",
    "EnrichmentStatus",
    "Event",
    "EventObjective",
    "EventInvitation",
    "InvitationStatus",
    "GuestScore",
    "SeatingSuggestion",
    "IntroductionPairing",
]
