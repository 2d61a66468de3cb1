from .repairs import repair_amount, tag_government, repair_weird_extraction
from .canonical import refine_sector, canonicalize_company
from .normalize import normalize_record
from .dedup import (
    choose_best,
    collapse_by_url,
    collapse_by_title,
    collapse_cross_state,
    collapse_near_dates,
    reconcile,
)
from .semantic import EmbeddingProvider, OpenAIEmbeddingProvider, cosine_similarity, semantic_dedupe
from .fanout import fan_out

__all__ = [
    "repair_amount",
    "tag_government",
    "repair_weird_extraction",
    "refine_sector",
    "canonicalize_company",
    "normalize_record",
    "choose_best",
    "collapse_by_url",
    "collapse_by_title",
    "collapse_cross_state",
    "collapse_near_dates",
    "reconcile",
    "EmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "cosine_similarity",
    "semantic_dedupe",
    "fan_out",
]
