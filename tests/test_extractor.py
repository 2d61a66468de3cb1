"""
Tests for batched LLM extraction: prompt building, response parsing,
text verification and the single retry.

Run with: pytest tests/test_extractor.py -v

All tests use FakeCompletionProvider; nothing calls the Claude API.
"""

import pytest

from invest_radar.analyst.extractor import (
    AnthropicCompletionProvider,
    LLMExtractor,
    build_extraction_prompt,
    build_prompt_preview,
    parse_extraction_response,
    pick_json,
    verify_extracted,
)
from invest_radar.analyst.schemas import ExtractedRecord
from invest_radar.common.errors import MissingCredentialError
from invest_radar.common.outcome import Outcome
from tests.test_helpers import FakeCompletionProvider, llm_json, make_item


FOXCONN_TEXT = "Foxconn will invest ₹500 crore in an EV plant near Bengaluru, creating 2000 jobs."


@pytest.fixture
def articles():
    return [
        make_item(
            "Foxconn to invest ₹500 crore in Karnataka EV plant",
            url="https://economictimes.indiatimes.com/foxconn-ev",
            states=("Karnataka",),
            text=FOXCONN_TEXT,
        ),
        make_item(
            "JSW Steel expands Vijayanagar works",
            url="https://livemint.com/jsw-expansion",
            states=("Karnataka",),
            text="JSW Steel will add 5 MTPA at Vijayanagar in Karnataka with ₹15,000 crore capex.",
        ),
    ]


# =============================================================================
# Prompt building
# =============================================================================
class TestPrompt:
    def test_articles_numbered_in_order(self, articles):
        prompt = build_extraction_prompt(articles)
        assert prompt.index("### ARTICLE 1") < prompt.index("### ARTICLE 2")
        assert "URL: https://livemint.com/jsw-expansion" in prompt
        assert "STATE (target): Karnataka" in prompt
        assert "Return ONLY the JSON array." in prompt

    def test_text_truncated(self, articles):
        prompt = build_extraction_prompt(articles[:1], max_chars=10)
        assert FOXCONN_TEXT[:10] in prompt
        assert FOXCONN_TEXT[:11] not in prompt

    def test_preview_capped(self, articles):
        assert len(build_prompt_preview(articles, max_chars=100)) == 100


# =============================================================================
# Response parsing
# =============================================================================
class TestParseResponse:
    def test_fenced_json(self, articles):
        text = llm_json({"company": "Foxconn"}, {"company": "JSW Steel"})
        outcome = parse_extraction_response(text, articles)
        assert outcome.ok
        assert [s.company for s in outcome.value] == ["Foxconn", "JSW Steel"]

    def test_source_url_forced(self, articles):
        text = llm_json({"company": "Foxconn", "source_url": "https://made-up.example/x"})
        outcome = parse_extraction_response(text, articles[:1])
        assert outcome.value[0].source_url == articles[0].url

    def test_bare_object_becomes_single_slot(self, articles):
        outcome = parse_extraction_response('{"company": "Foxconn"}', articles[:1])
        assert outcome.value[0].company == "Foxconn"

    def test_short_array_pads_with_none(self, articles):
        outcome = parse_extraction_response('[{"company": "Foxconn"}]', articles)
        assert outcome.ok
        assert outcome.value[1] is None

    def test_non_object_element(self, articles):
        outcome = parse_extraction_response('["oops", {"company": "JSW Steel"}]', articles)
        assert outcome.value[0] is None
        assert outcome.value[1].company == "JSW Steel"

    def test_garbage(self, articles):
        outcome = parse_extraction_response("I could not find anything.", articles)
        assert not outcome.ok
        assert outcome.reason == "unparseable-json"

    def test_placeholders_and_coercion(self, articles):
        text = llm_json({
            "company": "N/A",
            "amount_in_inr_crore": "1,200",
            "jobs": "-5",
            "sector": "automobile",
            "state": "orissa",
            "status": "announced",
            "project_type": "Joint Venture",
        })
        slot = parse_extraction_response(text, articles[:1]).value[0]
        assert slot.company is None
        assert slot.amount_in_inr_crore == 1200
        assert slot.jobs is None
        assert slot.sector == "Automobile"
        assert slot.state == "Odisha"
        assert slot.status == "Announced"
        assert slot.project_type is None

    def test_pick_json_prefers_fence(self):
        assert pick_json('noise [1] ```json\n[{"a": 1}]\n``` tail') == '[{"a": 1}]'
        assert pick_json("prefix [1, 2] suffix") == "[1, 2]"
        assert pick_json("no json") is None


# =============================================================================
# Verification
# =============================================================================
class TestVerifyExtracted:
    def test_supported_fields_kept(self):
        record = ExtractedRecord(
            company="Foxconn", sector="Automobile", amount_in_inr_crore=500, jobs=2000,
            state="Karnataka", district="Bengaluru", source_url="u",
        )
        verified = verify_extracted(record, "Foxconn EV plant", FOXCONN_TEXT)
        assert verified == record

    def test_unsupported_fields_nulled(self):
        record = ExtractedRecord(
            company="Tata Motors", sector="Pharma", amount_in_inr_crore=9000, jobs=7000,
            state="Gujarat", district="Surat", source_url="u",
        )
        verified = verify_extracted(record, "Foxconn EV plant", FOXCONN_TEXT)
        assert verified.company is None
        assert verified.sector is None
        assert verified.amount_in_inr_crore is None
        assert verified.jobs is None
        assert verified.state is None
        assert verified.district is None


# =============================================================================
# Batched extraction with retry
# =============================================================================
class TestLLMExtractor:
    @pytest.mark.asyncio
    async def test_batches_and_slots_line_up(self, articles):
        def respond(prompt, call_number):
            if "foxconn-ev" in prompt:
                return llm_json({"company": "Foxconn", "amount_in_inr_crore": 500, "state": "Karnataka"})
            return llm_json({"company": "JSW Steel", "amount_in_inr_crore": 15000})

        provider = FakeCompletionProvider(respond)
        run = await LLMExtractor(provider, batch_size=1, retry_delay=0).extract_all(articles)

        assert run.batches_total == 2
        assert run.batches_failed == 0
        assert run.extracted_count == 2
        assert [s.company for s in run.slots] == ["Foxconn", "JSW Steel"]
        assert run.slots[1].amount_in_inr_crore == 15000

    @pytest.mark.asyncio
    async def test_retry_recovers_failed_batch(self, articles):
        provider = FakeCompletionProvider([
            Outcome.empty("llm-timeout"),
            llm_json({"company": "Foxconn"}, {"company": "JSW Steel"}),
        ])
        run = await LLMExtractor(provider, batch_size=6, retry_delay=0).extract_all(articles)

        assert len(provider.prompts) == 2
        assert run.failed_indices == []
        assert run.extracted_count == 2

    @pytest.mark.asyncio
    async def test_only_failed_batches_are_retried(self, articles):
        def respond(prompt, call_number):
            if "jsw-expansion" in prompt:
                return Outcome.empty("llm-rate-limited")
            return llm_json({"company": "Foxconn"})

        provider = FakeCompletionProvider(respond)
        run = await LLMExtractor(provider, batch_size=1, retry_delay=0).extract_all(articles)

        assert len(provider.prompts) == 3
        assert run.failed_indices == [1]
        assert run.batches_failed == 1
        assert run.slots[0].company == "Foxconn"
        assert run.slots[1] is None

    @pytest.mark.asyncio
    async def test_provider_exception_is_isolated(self, articles):
        class ExplodingProvider:
            async def complete(self, prompt, temperature=0.0):
                raise RuntimeError("socket closed")

        run = await LLMExtractor(ExplodingProvider(), batch_size=6, retry_delay=0).extract_all(articles)
        assert run.extracted_count == 0
        assert run.failed_indices == [0, 1]

    @pytest.mark.asyncio
    async def test_slots_are_verified(self, articles):
        provider = FakeCompletionProvider([llm_json({"company": "Reliance Industries"})])
        run = await LLMExtractor(provider, retry_delay=0).extract_all(articles[:1])
        assert run.slots[0] is not None
        assert run.slots[0].company is None

    @pytest.mark.asyncio
    async def test_no_articles(self):
        provider = FakeCompletionProvider(["[]"])
        run = await LLMExtractor(provider).extract_all([])
        assert run.slots == []
        assert provider.prompts == []


class TestAnthropicCompletionProvider:
    def test_missing_key(self):
        with pytest.raises(MissingCredentialError) as exc:
            AnthropicCompletionProvider(api_key="")
        assert str(exc.value) == "Missing ANTHROPIC_API_KEY"
