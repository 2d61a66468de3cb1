"""
Invest Radar: investment announcements in Indian states, pulled from news
feeds, extracted into structured records and reconciled across sources.
"""

from .pipeline import InvestmentPipeline, PipelineRequest, PipelineResult

__version__ = "0.1.0"

__all__ = ["InvestmentPipeline", "PipelineRequest", "PipelineResult", "__version__"]
