"""
Pipeline exceptions.

Only conditions with no sensible fallback are raised. Upstream failures and
malformed responses are reported through Outcome (see outcome.py) instead.
"""


class PipelineError(Exception):
    """Base class for errors surfaced to the API caller."""


class MissingCredentialError(PipelineError):
    """AI extraction was requested but no API key is configured."""

    def __init__(self, key_name: str):
        self.key_name = key_name
        super().__init__(f"Missing {key_name}")
