"""
Shared URL normalization and publisher resolution utilities.

All modules should import from here for consistency: discovery merging,
record dedup and publisher ranking must agree on what "the same URL" is.
"""

import re
from typing import Optional
from urllib.parse import urlsplit, parse_qs

from ..config.sources import (
    AI_WHITELIST_DOMAINS,
    SOURCE_PRIORITY,
    UNLISTED_PRIORITY,
    MISSING_PRIORITY,
    PUBLISHER_NAME_TO_DOMAIN,
)

# Scheme prefix (http://, https://, //)
SCHEME_PATTERN = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//", re.IGNORECASE)


def normalize_url(url: Optional[str]) -> str:
    """
    Normalize a URL for identity comparisons.

    Strips scheme, leading www., trailing slashes, query string and fragment;
    lowercases the result.

    Examples:
        >>> normalize_url("https://www.Example.com/a/b/?utm=1#top")
        "example.com/a/b"
        >>> normalize_url("http://example.com/a/b")
        "example.com/a/b"
    """
    if not url:
        return ""
    raw = url.strip()
    if not SCHEME_PATTERN.match(raw):
        raw = "//" + raw
    try:
        parts = urlsplit(raw)
    except ValueError:
        return url.strip().lower()
    host = (parts.hostname or "").lower()
    if host.startswith("www."):
        host = host[4:]
    path = parts.path.rstrip("/")
    return f"{host}{path}".lower()


def clean_host(url: Optional[str]) -> Optional[str]:
    """Lowercased host without www., or None if the URL has no host."""
    if not url or not SCHEME_PATTERN.match(url.strip()):
        return None
    try:
        host = (urlsplit(url.strip()).hostname or "").lower()
    except ValueError:
        return None
    if host.startswith("www."):
        host = host[4:]
    return host or None


def unwrap_redirect(url: str) -> str:
    """Return the target of an aggregator redirect (?url=...) if present."""
    try:
        query = parse_qs(urlsplit(url).query)
    except ValueError:
        return url
    target = query.get("url")
    if target and target[0].startswith("http"):
        return target[0]
    return url


def resolve_source_domain(url: Optional[str], source: Optional[str] = None) -> Optional[str]:
    """
    Resolve the publisher domain for an article.

    Prefers the URL host; falls back to the reported source, which may be a
    URL, a bare domain, or a publisher name ("The Economic Times").
    """
    host = clean_host(url)
    if host and host != "news.google.com":
        return host
    src = (source or "").strip().lower()
    if not src:
        return host
    if SCHEME_PATTERN.match(src):
        return clean_host(src) or host
    mapped = PUBLISHER_NAME_TO_DOMAIN.get(src) or PUBLISHER_NAME_TO_DOMAIN.get(
        re.sub(r"^the\s+", "", src)
    )
    if mapped:
        return mapped
    if "." in src and " " not in src:
        return src[4:] if src.startswith("www.") else src
    return host


def _domain_matches(domain: str, listed: str) -> bool:
    return domain == listed or domain.endswith("." + listed)


def is_whitelisted_domain(domain: Optional[str]) -> bool:
    """True if the publisher is trusted enough to send to the LLM."""
    if not domain:
        return False
    d = domain.lower()
    return any(_domain_matches(d, allowed) for allowed in AI_WHITELIST_DOMAINS)


def source_priority(domain: Optional[str]) -> int:
    """Publisher rank for dedup tie-breaks (lower = more trusted)."""
    if not domain:
        return MISSING_PRIORITY
    d = domain.lower()
    if d.startswith("www."):
        d = d[4:]
    for idx, listed in enumerate(SOURCE_PRIORITY):
        if _domain_matches(d, listed):
            return idx
    return UNLISTED_PRIORITY
