"""
Record normalization before scoring.

Re-validates each record through the schema (canonical state names, coerced
numbers, narrowed enums, ISO dates) and resolves source_name to a publisher
domain so dedup priority ranking sees one form.
"""

from ..analyst.geo import canonical_state
from ..analyst.schemas import InvestmentRecord, evolve
from ..common.url_utils import resolve_source_domain


def normalize_record(record: InvestmentRecord) -> InvestmentRecord:
    return evolve(
        record,
        state=canonical_state(record.state),
        source_name=resolve_source_domain(record.source_url, record.source_name),
    )