"""
Completion reply schemas.

JSON contract for what the model is asked to return in each pipeline.
Replies are untrusted, so validators normalize instead of rejecting:
numbers arrive as strings or out of range, text fields arrive empty, lists
arrive as scalars. Only a reply missing its top-level list (seating and
introductions) fails validation, and the caller falls back.

Index fields that cannot point at anything come out as None (or -1 for
``objective_index``, where None means "use the entry's position"); mapping
indexes to real ids stays with the parsers.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from app.services.ai_json import (
    as_index,
    clamp_float,
    clamp_int,
    clean_str,
    clean_str_list,
    coerce_number,
    round_half_up,
)

ROLE_SENIORITY_VALUES = (
    "C-Suite",
    "VP",
    "Director",
    "Manager",
    "IC",
    "Founder",
    "Investor",
    "Board Member",
    "Other",
)
_SENIORITY_LOOKUP = {value.lower(): value for value in ROLE_SENIORITY_VALUES}

MAX_TAGS = 20
MAX_NOTABLE_FACTS = 10
MAX_TALKING_POINTS = 5

# Largest value the INTEGER table_number column can hold
MAX_TABLE_NUMBER = 2_147_483_647


def _dict_entries(value):
    """Keep only object entries of a list; leave non-lists for the type check."""
    if isinstance(value, list):
        return [entry for entry in value if isinstance(entry, dict)]
    return value


# Enrichment


class EnrichmentReply(BaseModel):
    """Profile facts for one contact. None means unknown."""

    ai_summary: Optional[str] = None
    title: Optional[str] = None
    company: Optional[str] = None
    industry: Optional[str] = None
    role_seniority: Optional[str] = None
    company_info: Optional[str] = None
    notable_facts: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    @field_validator("ai_summary", "company_info", mode="before")
    @classmethod
    def clean_text(cls, v):
        return clean_str(v)

    @field_validator("title", "company", "industry", mode="before")
    @classmethod
    def clean_short_text(cls, v):
        return clean_str(v, max_length=255)

    @field_validator("role_seniority", mode="before")
    @classmethod
    def normalize_seniority(cls, v):
        # Unknown levels become unknown rather than an error
        text = clean_str(v)
        if text is None:
            return None
        return _SENIORITY_LOOKUP.get(text.lower())

    @field_validator("notable_facts", mode="before")
    @classmethod
    def clean_facts(cls, v):
        return clean_str_list(v, limit=MAX_NOTABLE_FACTS)

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v):
        return clean_str_list(v, limit=MAX_TAGS)


# Scoring


class MatchedObjectiveReply(BaseModel):
    objective_index: Optional[int] = None
    match_score: int = 0
    explanation: str = ""

    @field_validator("objective_index", mode="before")
    @classmethod
    def validate_index(cls, v):
        if v is None:
            return None
        index = as_index(v)
        return -1 if index is None else index

    @field_validator("match_score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return clamp_int(v, 0, 100)

    @field_validator("explanation", mode="before")
    @classmethod
    def clean_explanation(cls, v):
        return clean_str(v) or ""


class ScoringReply(BaseModel):
    relevance_score: int = 0
    matched_objectives: List[MatchedObjectiveReply] = Field(default_factory=list)
    score_rationale: str = ""
    talking_points: List[str] = Field(default_factory=list)

    @field_validator("relevance_score", mode="before")
    @classmethod
    def clamp_score(cls, v):
        return clamp_int(v, 0, 100)

    @field_validator("matched_objectives", mode="before")
    @classmethod
    def keep_objects(cls, v):
        return _dict_entries(v) if isinstance(v, list) else []

    @field_validator("score_rationale", mode="before")
    @classmethod
    def clean_rationale(cls, v):
        return clean_str(v) or ""

    @field_validator("talking_points", mode="before")
    @classmethod
    def clean_talking_points(cls, v):
        return clean_str_list(v, limit=MAX_TALKING_POINTS)


# Seating and introductions


class SeatingAssignmentReply(BaseModel):
    guest_index: Optional[int] = None
    table_number: Optional[int] = 1
    rationale: str = ""
    confidence: float = 0.0

    @field_validator("guest_index", mode="before")
    @classmethod
    def validate_index(cls, v):
        return as_index(v)

    @field_validator("table_number", mode="before")
    @classmethod
    def validate_table_number(cls, v):
        number = round_half_up(coerce_number(v))
        if number > MAX_TABLE_NUMBER:
            return None
        return max(1, number)

    @field_validator("rationale", mode="before")
    @classmethod
    def clean_rationale(cls, v):
        return clean_str(v) or ""

    @field_validator("confidence", mode="before")
    @classmethod
    def clamp_confidence(cls, v):
        return clamp_float(v, 0.0, 1.0)


class SeatingReply(BaseModel):
    assignments: List[SeatingAssignmentReply]

    @field_validator("assignments", mode="before")
    @classmethod
    def keep_objects(cls, v):
        return _dict_entries(v)


class PairingReply(BaseModel):
    guest_a_index: Optional[int] = None
    guest_b_index: Optional[int] = None
    reason: str = ""
    mutual_interest: str = ""
    priority: int = 1

    @field_validator("guest_a_index", "guest_b_index", mode="before")
    @classmethod
    def validate_index(cls, v):
        return as_index(v)

    @field_validator("reason", "mutual_interest", mode="before")
    @classmethod
    def clean_text(cls, v):
        return clean_str(v) or ""

    @field_validator("priority", mode="before")
    @classmethod
    def clamp_priority(cls, v):
        return clamp_int(v, 1, 3)


class IntroductionReply(BaseModel):
    pairings: List[PairingReply]

    @field_validator("pairings", mode="before")
    @classmethod
    def keep_objects(cls, v):
        return _dict_entries(v)
