"""
Repository for people contacts.
"""

from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.contact import PeopleContact
from app.models.guest_score import GuestScore


class PeopleContactRepository:
    """Contact lookups used by the enrichment and scoring pipelines."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, workspace_id: UUID, **fields) -> PeopleContact:
        contact = PeopleContact(workspace_id=workspace_id, **fields)
        self.db.add(contact)
        await self.db.flush()
        return contact

    async def get_by_id(self, workspace_id: UUID, contact_id: UUID) -> Optional[PeopleContact]:
        result = await self.db.execute(
            select(PeopleContact).where(
                PeopleContact.id == contact_id,
                PeopleContact.workspace_id == workspace_id,
            )
        )
        return result.scalar_one_or_none()

    async def set_enrichment_status(self, workspace_id: UUID, contact_id: UUID, status: str) -> None:
        """Status write that does not need the ORM object loaded."""
        await self.db.execute(
            update(PeopleContact)
            .where(
                PeopleContact.id == contact_id,
                PeopleContact.workspace_id == workspace_id,
            )
            .values(enrichment_status=status)
            .execution_options(synchronize_session=False)
        )

    async def list_for_scoring(
        self,
        workspace_id: UUID,
        event_id: UUID,
        contact_ids: Optional[Sequence[UUID]] = None,
    ) -> List[PeopleContact]:
        """
        Contacts to score, highest existing score for the event first.

        With ``contact_ids`` only those contacts are returned (an empty list
        returns nothing); with None every contact in the workspace.
        """
        if contact_ids is not None and len(contact_ids) == 0:
            return []
        query = (
            select(PeopleContact)
            .outerjoin(
                GuestScore,
                and_(
                    GuestScore.contact_id == PeopleContact.id,
                    GuestScore.event_id == event_id,
                ),
            )
            .where(PeopleContact.workspace_id == workspace_id)
        )
        if contact_ids is not None:
            query = query.where(PeopleContact.id.in_(list(contact_ids)))
        query = query.order_by(
            GuestScore.relevance_score.desc().nulls_last(),
            PeopleContact.full_name.asc(),
        )
        result = await self.db.execute(query)
        return list(result.scalars().all())
