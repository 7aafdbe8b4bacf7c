"""
Repository for events, objectives and the invitation guest list.
"""

from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import PeopleContact
from app.models.event import Event, EventInvitation, EventObjective, InvitationStatus
from app.models.guest_score import GuestScore

GuestRow = Tuple[EventInvitation, PeopleContact, Optional[GuestScore]]


class EventRepository:
    """Event reads plus the seating columns on invitations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, workspace_id: UUID, event_id: UUID) -> Optional[Event]:
        result = await self.db.execute(
            select(Event).where(Event.id == event_id, Event.workspace_id == workspace_id)
        )
        return result.scalar_one_or_none()

    async def list_objectives(self, workspace_id: UUID, event_id: UUID) -> List[EventObjective]:
        result = await self.db.execute(
            select(EventObjective)
            .where(
                EventObjective.event_id == event_id,
                EventObjective.workspace_id == workspace_id,
            )
            .order_by(EventObjective.sort_order.asc(), EventObjective.created_at.asc())
        )
        return list(result.scalars().all())

    def _guest_query(self, workspace_id: UUID, event_id: UUID):
        return (
            select(EventInvitation, PeopleContact, GuestScore)
            .join(PeopleContact, PeopleContact.id == EventInvitation.contact_id)
            .outerjoin(
                GuestScore,
                and_(
                    GuestScore.contact_id == PeopleContact.id,
                    GuestScore.event_id == event_id,
                ),
            )
            .where(
                EventInvitation.event_id == event_id,
                EventInvitation.workspace_id == workspace_id,
                EventInvitation.status == InvitationStatus.ACCEPTED,
            )
        )

    async def list_accepted_guests(
        self,
        workspace_id: UUID,
        event_id: UUID,
        limit: Optional[int] = None,
    ) -> List[GuestRow]:
        """Accepted guests with their score for the event, best score first."""
        query = self._guest_query(workspace_id, event_id).order_by(
            GuestScore.relevance_score.desc().nulls_last(),
            PeopleContact.full_name.asc(),
        )
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def list_seating_assignments(self, workspace_id: UUID, event_id: UUID) -> List[GuestRow]:
        """Accepted guests ordered by their applied table and seat."""
        query = self._guest_query(workspace_id, event_id).order_by(
            EventInvitation.table_assignment.asc().nulls_last(),
            EventInvitation.seat_assignment.asc().nulls_last(),
            PeopleContact.full_name.asc(),
        ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return [tuple(row) for row in result.all()]

    async def set_seat(
        self,
        workspace_id: UUID,
        event_id: UUID,
        contact_id: UUID,
        table_number: int,
        seat_number: Optional[int] = None,
    ) -> int:
        """Write the applied placement; returns the number of invitations updated."""
        result = await self.db.execute(
            update(EventInvitation)
            .where(
                EventInvitation.event_id == event_id,
                EventInvitation.workspace_id == workspace_id,
                EventInvitation.contact_id == contact_id,
            )
            .values(table_assignment=table_number, seat_assignment=seat_number)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
