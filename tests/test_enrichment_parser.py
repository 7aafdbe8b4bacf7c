import json

import pytest

from app.schemas.ai_reply import MAX_TAGS, EnrichmentReply
from app.services.enrichment.parser import parse_enrichment_response
from app.services.enrichment.pipeline import merge_tags
from app.services.enrichment.prompt import build_enrichment_prompt
from app.services.enrichment.types import EnrichmentInput

pytestmark = pytest.mark.unit


def test_parse_full_reply():
    text = json.dumps(
        {
            "ai_summary": "Climate investor focused on grid storage.",
            "title": "Partner",
            "company": "Greenfield Ventures",
            "industry": "Venture Capital",
            "role_seniority": "investor",
            "company_info": "Early-stage climate fund",
            "notable_facts": ["Led 12 seed rounds"],
            "tags": ["climate", "energy"],
        }
    )
    fields, used_fallback = parse_enrichment_response(text)

    assert used_fallback is False
    assert fields.title == "Partner"
    assert fields.role_seniority == "Investor"
    assert fields.tags == ["climate", "energy"]
    assert fields.notable_facts == ["Led 12 seed rounds"]
    assert fields.raw_data["company"] == "Greenfield Ventures"


def test_nulls_and_unknown_seniority_stay_unknown():
    fields, used_fallback = parse_enrichment_response(
        '```json\n{"ai_summary": null, "title": "", "role_seniority": "Wizard", "tags": null}\n```'
    )

    assert used_fallback is False
    assert fields.ai_summary is None
    assert fields.title is None
    assert fields.role_seniority is None
    assert fields.tags == []


def test_unparseable_reply_becomes_summary():
    fields, used_fallback = parse_enrichment_response("  Jane is a well known speaker.  ")

    assert used_fallback is True
    assert fields.ai_summary == "Jane is a well known speaker."
    assert fields.title is None
    assert fields.raw_data == {}


def test_tags_are_capped():
    fields, _ = parse_enrichment_response(json.dumps({"tags": [f"t{i}" for i in range(40)]}))
    assert len(fields.tags) == MAX_TAGS


@pytest.mark.parametrize("value,expected", [("c-suite", "C-Suite"), (" VP ", "VP"), ("ic", "IC"), ("chief", None), (None, None)])
def test_seniority_is_normalized_to_known_levels(value, expected):
    assert EnrichmentReply.model_validate({"role_seniority": value}).role_seniority == expected


def test_merge_tags_unions_case_insensitively():
    assert merge_tags(["AI", "climate"], ["ai", "Energy", " climate "]) == ["AI", "climate", "Energy"]


def test_prompt_includes_known_facts_and_null_instruction():
    prompt = build_enrichment_prompt(
        EnrichmentInput(full_name="Jane Doe", emails=["jane@example.com"], company="Acme", linkedin_url="https://linkedin.com/in/jane")
    )

    assert "Name: Jane Doe" in prompt
    assert "Email: jane@example.com" in prompt
    assert "Company: Acme" in prompt
    assert "use null" in prompt
    assert "no markdown" in prompt
