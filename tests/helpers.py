"""Test doubles and row factories shared by the test modules."""

from typing import Callable, Optional, Sequence, Union

from app.errors import CompletionError
from app.models.contact import PeopleContact
from app.models.event import Event, EventInvitation, EventObjective, InvitationStatus
from app.repositories.contact_repository import PeopleContactRepository
from app.services.completion import CompletionResponse

Reply = Union[str, Exception]


class FakeCompletionClient:
    """Returns canned replies in order; an Exception entry is raised instead."""

    def __init__(self, replies: Union[Sequence[Reply], Callable[[str], Reply]] = (), model: str = "fake-model"):
        self.model = model
        self.replies = replies if callable(replies) else list(replies)
        self.prompts: list[str] = []

    async def complete(self, prompt: str, max_tokens: int) -> CompletionResponse:
        self.prompts.append(prompt)
        if callable(self.replies):
            reply = self.replies(prompt)
        elif self.replies:
            reply = self.replies.pop(0)
        else:
            raise CompletionError("no canned reply left")
        if isinstance(reply, Exception):
            raise reply
        return CompletionResponse(text=reply, model=self.model, input_tokens=1000, output_tokens=500)

    @property
    def calls(self) -> int:
        return len(self.prompts)


async def create_contact(db, workspace_id, full_name: str, **fields) -> PeopleContact:
    contact = await PeopleContactRepository(db).create(workspace_id, full_name=full_name, **fields)
    await db.commit()
    return contact


async def create_event(
    db,
    workspace_id,
    name: str = "Founders Dinner",
    objectives: Sequence[tuple[str, float]] = (),
    capacity: Optional[int] = None,
    tables_config: Optional[dict] = None,
) -> Event:
    event = Event(workspace_id=workspace_id, name=name, capacity=capacity, tables_config=tables_config)
    db.add(event)
    await db.flush()
    for position, (text, weight) in enumerate(objectives):
        db.add(
            EventObjective(
                workspace_id=workspace_id,
                event_id=event.id,
                objective_text=text,
                weight=weight,
                sort_order=position,
            )
        )
    await db.commit()
    return event


async def invite(db, workspace_id, event, contact, status: str = InvitationStatus.ACCEPTED) -> EventInvitation:
    invitation = EventInvitation(
        workspace_id=workspace_id,
        event_id=event.id,
        contact_id=contact.id,
        status=status,
    )
    db.add(invitation)
    await db.commit()
    return invitation
