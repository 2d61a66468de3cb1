"""
Investment Pipeline - end-to-end request processing.

    discover -> merge -> fetch page text -> source whitelist -> relevance gate
    -> LLM extraction (batched, one retry) or heuristics -> heuristic backfill
    -> booster -> repairs -> normalize -> score -> reconcile (+ semantic)
    -> state fan-out / final filter

Every request is self-contained: clients are created and closed per run,
and nothing is cached between requests. Failures of external collaborators
degrade the result (heuristics instead of LLM, headline instead of page
text); only a missing credential in AI mode is raised to the caller.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from .analyst.amounts import max_amount_crore
from .analyst.booster import MissingFieldBooster
from .analyst.extractor import (
    AnthropicCompletionProvider,
    CompletionProvider,
    LLMExtractor,
    build_prompt_preview,
)
from .analyst.geo import StateMatcher, default_matcher
from .analyst.heuristics import base_record, enrich_from_heuristics, infer_project_type
from .analyst.relevance import RelevanceScorer, select_for_extraction
from .analyst.schemas import ExtractedRecord, InvestmentRecord, ProjectStatus, evolve, to_output
from .analyst.scoring import score_record
from .archivist.canonical import canonicalize_company, refine_sector
from .archivist.dedup import reconcile
from .archivist.fanout import fan_out
from .archivist.normalize import normalize_record
from .archivist.repairs import repair_amount, repair_weird_extraction, tag_government
from .archivist.semantic import EmbeddingProvider, OpenAIEmbeddingProvider, semantic_dedupe
from .common.url_utils import is_whitelisted_domain, normalize_url
from .config.keywords import DEFAULT_RELEVANCE_TABLE
from .config.settings import Settings, settings
from .harvester.article_fetcher import ArticleFetcher
from .harvester.base_scraper import DiscoveredItem, DiscoveryProvider
from .harvester.orchestrator import discover_all

logger = logging.getLogger(__name__)

WHITELIST_MODES = ("off", "ai", "hard")
EXTRACTION_MODES = ("ai", "heuristic")

RATIONALE_HEURISTIC_MODE = "Heuristic (EXTRACTION_MODE=heuristic)"
RATIONALE_NOT_WHITELISTED = "Heuristic (AI skipped: source not in AI whitelist)"
RATIONALE_AI_SKIPPED = "Heuristic (AI skipped)"
RATIONALE_EMPTY_AI = "Heuristic (auto fallback: empty AI result)"
RATIONALE_BATCH_FAILED = "Heuristic (LLM batch failed)"
RATIONALE_NO_SLOT = "Heuristic (no LLM result for article)"
RATIONALE_LLM = "LLM extraction"
RATIONALE_BYPASS = "Discovery-only bypass"

BYPASS_LIMIT = 30
DIAG_SAMPLE_SIZE = 3


# =============================================================================
# Request / result types
# =============================================================================

@dataclass
class PipelineRequest:
    """One dashboard query."""

    states: List[str]
    window: str = "30d"
    max_records: int = 60
    source: str = "gnews"
    mode: str = "ai"
    diag: bool = False
    llm_debug: bool = False
    bypass: bool = False

    @classmethod
    def from_settings(cls, config: Settings = settings, **overrides: Any) -> "PipelineRequest":
        values = dict(
            states=config.default_state_list,
            window=config.default_window,
            max_records=config.max_records,
            source=config.discovery_source,
            mode=config.extraction_mode,
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class PipelineDiagnostics:
    """Per-run counters, returned in diag mode and logged as one METRICS line."""

    def __init__(self, mode: str, source: str, whitelist_mode: str):
        self.mode = mode
        self.source = source
        self.whitelist_mode = whitelist_mode
        self.discovered = 0
        self.fetched_ok = 0
        self.dropped_by_whitelist = 0
        self.candidates = 0
        self.ai_items = 0
        self.extracted = 0
        self.post_extraction = 0
        self.post_dedupe = 0
        self.duplicates_removed = 0
        self.final = 0
        self.used_ai = False
        self.record_errors = 0
        self.categories: Counter = Counter()
        self.note: Optional[str] = None
        self.started_at = datetime.now(timezone.utc)
        self.completed_at: Optional[datetime] = None

    def complete(self):
        self.completed_at = datetime.now(timezone.utc)

    @property
    def duration_seconds(self) -> float:
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return 0

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "discovered": self.discovered,
            "fetched_ok": self.fetched_ok,
            "mode": self.mode,
            "sourceSel": self.source,
            "whitelistMode": self.whitelist_mode,
            "droppedByWhitelist": self.dropped_by_whitelist,
            "candidates": self.candidates,
            "extracted": self.extracted,
            "post_extraction": self.post_extraction,
            "post_dedupe": self.post_dedupe,
            "duplicates_removed": self.duplicates_removed,
            "final": self.final,
            "used_ai": self.used_ai,
            "categories": dict(self.categories),
        }
        if self.note:
            data["note"] = self.note
        return data

    def log_metrics(self):
        """Log pipeline metrics."""
        logger.info(
            f"METRICS pipeline mode={self.mode} source={self.source} "
            f"whitelist={self.whitelist_mode} "
            f"discovered={self.discovered} "
            f"fetched_ok={self.fetched_ok} "
            f"candidates={self.candidates} "
            f"extracted={self.extracted} "
            f"post_extraction={self.post_extraction} "
            f"post_dedupe={self.post_dedupe} "
            f"final={self.final} "
            f"used_ai={self.used_ai} "
            f"record_errors={self.record_errors} "
            f"duration_sec={self.duration_seconds:.2f}"
        )


@dataclass
class PipelineResult:
    records: List[InvestmentRecord] = field(default_factory=list)
    diagnostics: Optional[PipelineDiagnostics] = None
    prompt_preview: Optional[str] = None

    def payload(self, request: PipelineRequest) -> Any:
        """JSON body for the API response."""
        if request.llm_debug:
            d = self.diagnostics
            return {
                "whitelistMode": d.whitelist_mode,
                "droppedByWhitelist": d.dropped_by_whitelist,
                "aiItems_count": d.ai_items,
                "prompt_preview": self.prompt_preview or "",
            }
        if request.diag:
            return {
                "diag": self.diagnostics.to_dict(),
                "sample": [to_output(r) for r in self.records[:DIAG_SAMPLE_SIZE]],
            }
        return [to_output(r) for r in self.records]


# =============================================================================
# Pipeline
# =============================================================================

class InvestmentPipeline:
    """
    Wires the collaborators together. Every collaborator can be injected
    (tests pass fakes); anything not injected is built from settings per run.
    """

    def __init__(
        self,
        providers: Optional[Sequence[DiscoveryProvider]] = None,
        fetcher: Optional[ArticleFetcher] = None,
        completion_provider: Optional[CompletionProvider] = None,
        booster: Optional[MissingFieldBooster] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        scorer: Optional[RelevanceScorer] = None,
        matcher: StateMatcher = default_matcher,
        config: Settings = settings,
    ):
        self.providers = providers
        self.fetcher = fetcher
        self.completion_provider = completion_provider
        self.booster = booster
        self.embedding_provider = embedding_provider
        self.config = config
        self.scorer = scorer or RelevanceScorer(DEFAULT_RELEVANCE_TABLE, max_reasons=config.relevance_max_reasons)
        self.matcher = matcher

    # -------------------------------------------------------------------------
    # Collaborator construction
    # -------------------------------------------------------------------------

    def _completion_provider(self) -> CompletionProvider:
        # Raises MissingCredentialError when no key is configured
        if self.completion_provider is not None:
            return self.completion_provider
        return AnthropicCompletionProvider(
            api_key=self.config.anthropic_api_key,
            model=self.config.llm_model,
            max_tokens=self.config.llm_max_tokens,
        )

    def _booster(self) -> Optional[MissingFieldBooster]:
        if not self.config.booster_enabled:
            return None
        if self.booster is not None:
            return self.booster
        if self.completion_provider is not None or not self.config.anthropic_api_key:
            # No booster alongside an injected completion provider
            return None
        return MissingFieldBooster(
            api_key=self.config.anthropic_api_key,
            model=self.config.llm_model,
            cap=self.config.booster_cap,
            matcher=self.matcher,
        )

    def _embedding_provider(self) -> Optional[EmbeddingProvider]:
        if not self.config.semantic_dedupe_enabled:
            return None
        if self.embedding_provider is not None:
            return self.embedding_provider
        if not self.config.openai_api_key:
            logger.warning("Semantic dedupe enabled but OPENAI_API_KEY is not set; skipping")
            return None
        return OpenAIEmbeddingProvider(
            api_key=self.config.openai_api_key,
            model=self.config.embedding_model,
            batch_size=self.config.embedding_batch_size,
        )

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def _apply_whitelist(
        self, items: List[DiscoveredItem], whitelist_mode: str, diag: PipelineDiagnostics
    ) -> tuple[List[DiscoveredItem], set]:
        """Returns (items kept, normalized URLs allowed to reach the LLM)."""
        if whitelist_mode == "hard":
            kept = [it for it in items if is_whitelisted_domain(it.source)]
            diag.dropped_by_whitelist = len(items) - len(kept)
            return kept, {normalize_url(it.url) for it in kept}
        if whitelist_mode == "ai":
            allowed = {normalize_url(it.url) for it in items if is_whitelisted_domain(it.source)}
            diag.dropped_by_whitelist = len(items) - len(allowed)
            return items, allowed
        return items, {normalize_url(it.url) for it in items}

    def _select_candidates(
        self, items: List[DiscoveredItem], max_records: int, diag: PipelineDiagnostics
    ) -> List[DiscoveredItem]:
        categories = self.config.extraction_category_set
        eligible: List[DiscoveredItem] = []
        scores: List[float] = []
        category_of: Dict[str, str] = {}

        for item in items:
            full_text = item.full_text
            if self.config.require_state_mention and not any(
                self.matcher.is_explicit_for_state(full_text, s) for s in item.tagged_states
            ):
                continue
            category = self.scorer.classify(item.title, item.text).value
            if categories and category not in categories:
                continue
            eligible.append(item)
            scores.append(self.scorer.score(item.title, item.text).score)
            category_of[item.url] = category

        candidates = select_for_extraction(
            eligible,
            scores,
            threshold=self.config.relevance_threshold,
            fallback_top_n=self.config.relevance_fallback_top_n,
        )[:max_records]
        diag.categories = Counter(category_of[it.url] for it in candidates)
        diag.candidates = len(candidates)
        logger.info(f"Relevance gate: {len(items)} items -> {len(eligible)} eligible -> {len(candidates)} candidates")
        return candidates

    def _heuristic_record(self, item: DiscoveredItem, rationale: str) -> InvestmentRecord:
        return enrich_from_heuristics(item, base_record(item, rationale), self.matcher)

    def _record_from_extraction(self, item: DiscoveredItem, extracted: ExtractedRecord) -> InvestmentRecord:
        data = extracted.model_dump()
        data["source_url"] = item.url
        record = InvestmentRecord.model_validate({**data, "rationale": RATIONALE_LLM})
        return enrich_from_heuristics(item, record, self.matcher)

    def _build_records(self, pairs: Sequence[tuple], diag: PipelineDiagnostics) -> List[InvestmentRecord]:
        """Build one record per (item, builder) pair; a failing item is logged and skipped."""
        records = []
        for item, build in pairs:
            try:
                records.append(build(item))
            except Exception:
                diag.record_errors += 1
                logger.exception(f"Record build failed for {item.url}")
        return records

    async def _extract(
        self,
        candidates: List[DiscoveredItem],
        ai_allowed: set,
        mode: str,
        whitelist_mode: str,
        completion_provider: Optional[CompletionProvider],
        diag: PipelineDiagnostics,
    ) -> List[InvestmentRecord]:
        if mode != "ai":
            return self._build_records(
                [(it, lambda i: self._heuristic_record(i, RATIONALE_HEURISTIC_MODE)) for it in candidates], diag
            )

        ai_items = [it for it in candidates if normalize_url(it.url) in ai_allowed]
        other_items = [it for it in candidates if normalize_url(it.url) not in ai_allowed]
        diag.ai_items = len(ai_items)
        if not ai_items:
            rationale = RATIONALE_NOT_WHITELISTED if whitelist_mode == "ai" else RATIONALE_AI_SKIPPED
            return self._build_records([(it, lambda i: self._heuristic_record(i, rationale)) for it in candidates], diag)

        extractor = LLMExtractor(
            completion_provider or self._completion_provider(),
            batch_size=self.config.extraction_batch_size,
            retry_delay=self.config.extraction_retry_delay,
            temperature=self.config.llm_temperature,
            prompt_chars=self.config.article_prompt_chars,
            matcher=self.matcher,
        )
        run = await extractor.extract_all(ai_items)
        diag.extracted = run.extracted_count

        if run.extracted_count == 0:
            logger.warning(f"LLM returned no usable records for {len(ai_items)} articles; using heuristics")
            return self._build_records(
                [(it, lambda i: self._heuristic_record(i, RATIONALE_EMPTY_AI)) for it in candidates], diag
            )

        diag.used_ai = True
        failed = set(run.failed_indices)
        pairs = []
        for index, (item, slot) in enumerate(zip(ai_items, run.slots)):
            if slot is not None:
                pairs.append((item, lambda i, s=slot: self._record_from_extraction(i, s)))
            else:
                rationale = RATIONALE_BATCH_FAILED if index in failed else RATIONALE_NO_SLOT
                pairs.append((item, lambda i, r=rationale: self._heuristic_record(i, r)))
        for item in other_items:
            pairs.append((item, lambda i: self._heuristic_record(i, RATIONALE_NOT_WHITELISTED)))
        return self._build_records(pairs, diag)

    def _repair(self, record: InvestmentRecord, item: Optional[DiscoveredItem]) -> InvestmentRecord:
        text = item.full_text if item else ""
        record = repair_amount(record, max_amount_crore(text))
        record = tag_government(record, text)
        record = repair_weird_extraction(record, text)
        record = refine_sector(record, text)
        record = canonicalize_company(record, text)
        record = normalize_record(record)
        return score_record(record)

    def _bypass_records(self, items: List[DiscoveredItem]) -> List[InvestmentRecord]:
        records = []
        for item in items[:BYPASS_LIMIT]:
            project_type = infer_project_type(item.title)
            is_mou = project_type == "MoU"
            records.append(
                evolve(
                    base_record(item, RATIONALE_BYPASS),
                    project_type=project_type if project_type in ("MoU", "Expansion") else None,
                    status=ProjectStatus.MOU.value if is_mou else ProjectStatus.ANNOUNCED.value,
                )
            )
        return records

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    async def run(self, request: PipelineRequest) -> PipelineResult:
        mode = (request.mode or self.config.extraction_mode).lower()
        if mode not in EXTRACTION_MODES:
            logger.warning(f"Unknown extraction mode '{mode}', using heuristic")
            mode = "heuristic"
        whitelist_mode = self.config.ai_whitelist_mode if self.config.ai_whitelist_mode in WHITELIST_MODES else "off"
        states = [self.matcher.canonical_state(s) or s for s in request.states if s and s.strip()]

        diag = PipelineDiagnostics(mode=mode, source=request.source, whitelist_mode=whitelist_mode)
        result = PipelineResult(diagnostics=diag)

        # Credentials are checked before any network work
        completion_provider = None
        if mode == "ai" and not request.llm_debug:
            completion_provider = self._completion_provider()

        discovery = await discover_all(
            states, request.max_records, request.window, request.source, providers=self.providers
        )
        items = discovery.items
        diag.discovered = len(items)
        if not items:
            diag.note = "discovery-empty (no RSS/GDELT items)"
            diag.complete()
            diag.log_metrics()
            return result

        fetcher = self.fetcher or ArticleFetcher()
        items = await fetcher.fetch_all(items)
        diag.fetched_ok = sum(1 for it in items if it.text)

        items, ai_allowed = self._apply_whitelist(items, whitelist_mode, diag)
        if not items:
            diag.complete()
            diag.log_metrics()
            return result

        candidates = self._select_candidates(items, request.max_records, diag)

        if request.llm_debug:
            ai_items = [it for it in candidates if normalize_url(it.url) in ai_allowed]
            diag.ai_items = len(ai_items)
            result.prompt_preview = build_prompt_preview(ai_items) if ai_items else ""
            diag.complete()
            return result

        records = await self._extract(candidates, ai_allowed, mode, whitelist_mode, completion_provider, diag)

        if mode == "ai":
            booster = self._booster()
            if booster is not None:
                records = await booster.boost(records, {it.url: it for it in candidates})

        by_key = {normalize_url(it.url): it for it in items}
        repaired = []
        for record in records:
            try:
                repaired.append(self._repair(record, by_key.get(normalize_url(record.source_url))))
            except Exception:
                diag.record_errors += 1
                logger.exception(f"Repair chain failed for {record.source_url}")
        diag.post_extraction = len(repaired)

        titles_by_url = {key: it.title for key, it in by_key.items()}
        deduped = reconcile(repaired, titles_by_url)
        embedder = self._embedding_provider()
        if embedder is not None:
            deduped = await semantic_dedupe(
                deduped, embedder, self.config.semantic_similarity_threshold, titles_by_url
            )
        diag.post_dedupe = len(deduped)
        diag.duplicates_removed = len(repaired) - len(deduped)

        final = fan_out(
            deduped,
            states,
            tagged_by_url={key: it.tagged_states for key, it in by_key.items()},
            text_by_url={key: it.full_text for key, it in by_key.items()},
            matcher=self.matcher,
        )

        if not final and request.bypass:
            logger.info("No records after reconciliation; returning discovery-only bypass records")
            final = self._bypass_records(items)

        result.records = final
        diag.final = len(final)
        diag.complete()
        diag.log_metrics()
        return result
