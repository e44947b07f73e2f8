"""
Hypothesis strategies for property-based testing.
"""

from tests.strategies.record_strategies import (
    severity_strategy,
    non_empty_string_strategy,
    iso_date_strategy,
    date_like_strategy,
    evidence_flags_strategy,
    qa_action_strategy,
    open_case_action_strategy,
    bundle_input_strategy,
)

__all__ = [
    "severity_strategy",
    "non_empty_string_strategy",
    "iso_date_strategy",
    "date_like_strategy",
    "evidence_flags_strategy",
    "qa_action_strategy",
    "open_case_action_strategy",
    "bundle_input_strategy",
]
