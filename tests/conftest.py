"""
Pytest fixtures for test infrastructure.

This module is automatically loaded by pytest and provides shared fixtures.
For builders and fake collaborators, see test_helpers.py.
"""

import pytest

from invest_radar.config.settings import Settings


# =============================================================================
# Shared fixtures
# =============================================================================
@pytest.fixture
def test_settings():
    """Settings isolated from the environment: no keys, no retry delay, no optional passes."""
    return Settings(
        _env_file=None,
        anthropic_api_key="",
        openai_api_key="",
        extraction_mode="heuristic",
        discovery_source="gnews",
        ai_whitelist_mode="off",
        extraction_retry_delay=0.0,
        booster_enabled=False,
        semantic_dedupe_enabled=False,
        require_state_mention=True,
        extraction_categories="",
    )


@pytest.fixture
def foxconn_title():
    return "Foxconn to invest ₹500 crore in Karnataka EV plant, 2000 jobs"


@pytest.fixture
def pan_india_text():
    """Body text naming three states explicitly."""
    return (
        "The company will build battery assembly units in Gujarat, Maharashtra and Tamil Nadu "
        "with a combined outlay of ₹1,200 crore over three years."
    )
