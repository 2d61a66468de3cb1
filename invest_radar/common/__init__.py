"""
Common utilities and shared modules.
"""

from .http_client import (
    build_client,
    create_discovery_client,
    create_article_client,
    DISCOVERY_USER_AGENT,
    ARTICLE_USER_AGENT,
)
from .outcome import Outcome
from .errors import PipelineError, MissingCredentialError
from .rules import KeywordRule, RuleTable
from .url_utils import normalize_url, resolve_source_domain, is_whitelisted_domain, source_priority

__all__ = [
    # HTTP client utilities
    "build_client",
    "create_discovery_client",
    "create_article_client",
    "DISCOVERY_USER_AGENT",
    "ARTICLE_USER_AGENT",
    # Results and errors
    "Outcome",
    "PipelineError",
    "MissingCredentialError",
    # Rule tables
    "KeywordRule",
    "RuleTable",
    # URLs
    "normalize_url",
    "resolve_source_domain",
    "is_whitelisted_domain",
    "source_priority",
]
