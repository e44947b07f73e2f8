"""Closed-loop compliance workflow engine.

Turns audit findings into tracked cases (a corrective QA action, an
education assignment and a re-audit) and evaluates them for duplicates,
due status, closure eligibility, workflow progress and escalations.
"""

__version__ = "0.1.0"

from compliance_loop.core import PolicyConfig, configure_logging
from compliance_loop.models import (
    AuditSession,
    BundleInput,
    CaseBundle,
    EducationSession,
    QaAction,
    ReAuditResult,
)
from compliance_loop.repository import CaseRepository, InMemoryCaseRepository
from compliance_loop.services import ComplianceCaseService

__all__ = [
    "__version__",
    "PolicyConfig",
    "configure_logging",
    "AuditSession",
    "BundleInput",
    "CaseBundle",
    "EducationSession",
    "QaAction",
    "ReAuditResult",
    "CaseRepository",
    "InMemoryCaseRepository",
    "ComplianceCaseService",
]
