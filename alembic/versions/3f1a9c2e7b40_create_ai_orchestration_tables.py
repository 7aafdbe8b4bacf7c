"""Create contacts, events, guest scores, seating and AI job tables

Revision ID: 3f1a9c2e7b40
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2e7b40"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def _base_columns() -> list:
    return [
        sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
        sa.Column("workspace_id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "people_contacts",
        *_base_columns(),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("emails", JSON, nullable=False),
        sa.Column("linkedin_url", sa.String(length=500), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=True),
        sa.Column("company", sa.String(length=255), nullable=True),
        sa.Column("industry", sa.String(length=255), nullable=True),
        sa.Column("role_seniority", sa.String(length=50), nullable=True),
        sa.Column("ai_summary", sa.Text(), nullable=True),
        sa.Column("tags", JSON, nullable=False),
        sa.Column("enrichment_status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("enrichment_data", JSON, nullable=True),
        sa.Column("enrichment_cost_cents", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("enriched_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_people_contacts_workspace_id", "people_contacts", ["workspace_id"])
    op.create_index("ix_people_contacts_enrichment_status", "people_contacts", ["enrichment_status"])

    op.create_table(
        "events",
        *_base_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("tables_config", JSON, nullable=True),
    )
    op.create_index("ix_events_workspace_id", "events", ["workspace_id"])

    op.create_table(
        "event_objectives",
        *_base_columns(),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("objective_text", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=False, server_default="1"),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_event_objectives_workspace_id", "event_objectives", ["workspace_id"])
    op.create_index("ix_event_objectives_event_id", "event_objectives", ["event_id"])

    op.create_table(
        "event_invitations",
        *_base_columns(),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("people_contacts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="INVITED"),
        sa.Column("table_assignment", sa.Integer(), nullable=True),
        sa.Column("seat_assignment", sa.Integer(), nullable=True),
        sa.UniqueConstraint("event_id", "contact_id", name="uq_event_invitations_event_contact"),
    )
    op.create_index("ix_event_invitations_workspace_id", "event_invitations", ["workspace_id"])
    op.create_index("ix_event_invitations_event_id", "event_invitations", ["event_id"])
    op.create_index("ix_event_invitations_contact_id", "event_invitations", ["contact_id"])

    op.create_table(
        "guest_scores",
        *_base_columns(),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("people_contacts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("relevance_score", sa.Integer(), nullable=False),
        sa.Column("matched_objectives", JSON, nullable=False),
        sa.Column("score_rationale", sa.Text(), nullable=True),
        sa.Column("talking_points", JSON, nullable=False),
        sa.Column("model_version", sa.String(length=100), nullable=True),
        sa.Column("scored_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("contact_id", "event_id", name="uq_guest_scores_contact_event"),
    )
    op.create_index("ix_guest_scores_workspace_id", "guest_scores", ["workspace_id"])
    op.create_index("ix_guest_scores_event_relevance", "guest_scores", ["event_id", "relevance_score"])

    op.create_table(
        "seating_suggestions",
        *_base_columns(),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact_id", sa.Uuid(), sa.ForeignKey("people_contacts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column("table_number", sa.Integer(), nullable=False),
        sa.Column("seat_number", sa.Integer(), nullable=True),
        sa.Column("rationale", sa.Text(), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=False, server_default="0"),
        sa.Column("strategy", sa.String(length=30), nullable=False),
        sa.Column("model_version", sa.String(length=100), nullable=True),
    )
    op.create_index("ix_seating_suggestions_workspace_id", "seating_suggestions", ["workspace_id"])
    op.create_index("ix_seating_suggestions_batch_id", "seating_suggestions", ["batch_id"])
    op.create_index("ix_seating_suggestions_event_batch", "seating_suggestions", ["event_id", "batch_id"])

    op.create_table(
        "introduction_pairings",
        *_base_columns(),
        sa.Column("event_id", sa.Uuid(), sa.ForeignKey("events.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact_a_id", sa.Uuid(), sa.ForeignKey("people_contacts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("contact_b_id", sa.Uuid(), sa.ForeignKey("people_contacts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("batch_id", sa.Uuid(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("mutual_interest", sa.Text(), nullable=True),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="2"),
        sa.Column("model_version", sa.String(length=100), nullable=True),
    )
    op.create_index("ix_introduction_pairings_workspace_id", "introduction_pairings", ["workspace_id"])
    op.create_index("ix_introduction_pairings_batch_id", "introduction_pairings", ["batch_id"])
    op.create_index("ix_introduction_pairings_event_batch", "introduction_pairings", ["event_id", "batch_id"])

    op.create_table(
        "ai_jobs",
        *_base_columns(),
        sa.Column("kind", sa.String(length=30), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="PENDING"),
        sa.Column("event_id", sa.Uuid(), nullable=True),
        sa.Column("target_ids", JSON, nullable=False),
        sa.Column("config", JSON, nullable=False),
        sa.Column("target_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("completed_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("failed_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
    )
    op.create_index("ix_ai_jobs_workspace_id", "ai_jobs", ["workspace_id"])
    op.create_index("ix_ai_jobs_event_id", "ai_jobs", ["event_id"])
    op.create_index("ix_ai_jobs_status_created", "ai_jobs", ["status", "created_at"])
    op.create_index("ix_ai_jobs_workspace_kind", "ai_jobs", ["workspace_id", "kind"])


def downgrade() -> None:
    op.drop_table("ai_jobs")
    op.drop_table("introduction_pairings")
    op.drop_table("seating_suggestions")
    op.drop_table("guest_scores")
    op.drop_table("event_invitations")
    op.drop_table("event_objectives")
    op.drop_table("events")
    op.drop_table("people_contacts")
