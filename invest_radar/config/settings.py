"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    """Application configuration from environment."""

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""  # Only needed for the semantic dedupe pass

    # Frontend URL for CORS (production)
    frontend_url: str = ""  # e.g., https://your-dashboard.vercel.app

    # LLM Settings
    llm_model: str = "claude-3-5-haiku-20241022"
    llm_temperature: float = 0.0
    llm_max_tokens: int = 4096
    llm_timeout: int = 90  # Total timeout for Claude API calls (seconds)
    llm_connect_timeout: int = 30  # Connection timeout for Claude API (seconds)

    # Pipeline modes
    # extraction_mode: "ai" (LLM with heuristic fallback) or "heuristic" (regex only)
    extraction_mode: str = "ai"
    # discovery_source: "gnews", "gdelt" or "both"
    discovery_source: str = "gnews"
    # ai_whitelist_mode: "off" (all sources to LLM), "ai" (only whitelisted
    # publishers go to the LLM) or "hard" (non-whitelisted publishers dropped)
    ai_whitelist_mode: str = "off"
    allow_query_overrides: bool = False

    # Request defaults
    default_states: str = "Odisha,Andhra Pradesh,Gujarat,Karnataka,Tamil Nadu,Uttar Pradesh,Maharashtra"
    default_window: str = "30d"
    max_records: int = 60

    # Extraction
    extraction_batch_size: int = 6
    extraction_retry_delay: float = 1.0  # Fixed delay before the single retry (seconds)
    article_prompt_chars: int = 8000  # Per-article text cap inside the prompt
    prompt_preview_chars: int = 16000

    # Relevance gate
    relevance_threshold: float = 1.0
    relevance_fallback_top_n: int = 50
    relevance_max_reasons: int = 16
    require_state_mention: bool = True
    # Comma-separated categories allowed into extraction (empty = no category gate)
    extraction_categories: str = ""

    # Missing-field booster (single-article structured calls)
    booster_enabled: bool = True
    booster_cap: int = 10

    # Semantic dedupe (optional, needs OPENAI_API_KEY)
    semantic_dedupe_enabled: bool = False
    semantic_similarity_threshold: float = 0.92
    embedding_model: str = "text-embedding-3-small"
    embedding_batch_size: int = 64

    # Scraping Settings
    request_timeout: int = 30  # Discovery request timeout (seconds)
    article_fetch_timeout: int = 15  # Individual article fetch timeout (seconds)
    page_text_max_chars: int = 20000
    max_concurrent_articles: int = 8  # Parallel article fetches
    gdelt_max_records: int = 70

    # Logging
    log_level: str = "INFO"

    @field_validator("extraction_mode", "discovery_source", "ai_whitelist_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: str) -> str:
        """Lowercase mode switches so AI/Heuristic/BOTH all work."""
        return (v or "").strip().lower()

    @property
    def default_state_list(self) -> list[str]:
        """Get list of default states to scan."""
        return [s.strip() for s in self.default_states.split(",") if s.strip()]

    @property
    def extraction_category_set(self) -> frozenset[str]:
        """Categories allowed into extraction; empty means every category passes."""
        return frozenset(
            c.strip().lower() for c in self.extraction_categories.split(",") if c.strip()
        )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Create settings instance at import time (singleton pattern)
# All code should import: from ..config.settings import settings
settings = Settings()
