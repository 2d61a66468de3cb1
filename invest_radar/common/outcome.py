"""
Tagged result for calls to external collaborators.

Every network-facing wrapper (discovery, page fetch, LLM, embeddings) returns
an Outcome instead of raising or returning a bare None, so pipeline stages
branch on `.ok` explicitly:

    outcome = await fetcher.fetch(url)
    text = outcome.unwrap_or("")
    if not outcome.ok:
        logger.debug(f"fetch skipped: {outcome.reason}")
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: Optional[T] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value, reason=None)

    @classmethod
    def empty(cls, reason: str) -> "Outcome[T]":
        return cls(value=None, reason=reason or "unknown")

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok and self.value is not None else default
