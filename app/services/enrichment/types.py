"""Typed inputs and outputs of the contact enrichment provider."""

from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from app.services.llm_provider import ProviderResult


@dataclass
class EnrichmentInput:
    full_name: str
    emails: list[str] = field(default_factory=list)
    company: Optional[str] = None
    title: Optional[str] = None
    linkedin_url: Optional[str] = None
    contact_id: Optional[UUID] = None


@dataclass
class EnrichedFields:
    """Profile fields returned by a provider; None means "unknown, keep what we have"."""

    ai_summary: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    role_seniority: Optional[str] = None
    company_info: Optional[str] = None
    notable_facts: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    raw_data: dict = field(default_factory=dict)


class EnrichmentResult(ProviderResult[EnrichedFields]):
    """Outcome of enriching one contact."""
