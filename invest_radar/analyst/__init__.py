from .schemas import (
    ExtractedRecord,
    InvestmentCategory,
    InvestmentRecord,
    ProjectStatus,
    ProjectType,
    evolve,
    to_output,
    with_note,
)
from .amounts import all_amounts_crore, max_amount_crore
from .geo import StateMatcher, default_matcher
from .relevance import Relevance, RelevanceScorer, select_for_extraction
from .heuristics import base_record, enrich_from_heuristics
from .extractor import (
    AnthropicCompletionProvider,
    CompletionProvider,
    ExtractionRun,
    LLMExtractor,
    build_extraction_prompt,
    build_prompt_preview,
    parse_extraction_response,
    verify_extracted,
)
from .booster import BoostPatch, MissingFieldBooster
from .scoring import opportunity_score, score_record

__all__ = [
    "ExtractedRecord",
    "InvestmentCategory",
    "InvestmentRecord",
    "ProjectStatus",
    "ProjectType",
    "evolve",
    "to_output",
    "with_note",
    "all_amounts_crore",
    "max_amount_crore",
    "StateMatcher",
    "default_matcher",
    "Relevance",
    "RelevanceScorer",
    "select_for_extraction",
    "base_record",
    "enrich_from_heuristics",
    "AnthropicCompletionProvider",
    "CompletionProvider",
    "ExtractionRun",
    "LLMExtractor",
    "build_extraction_prompt",
    "build_prompt_preview",
    "parse_extraction_response",
    "verify_extracted",
    "BoostPatch",
    "MissingFieldBooster",
    "opportunity_score",
    "score_record",
]
