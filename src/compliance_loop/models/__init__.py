"""
Pydantic data models for the compliance workflow engine.
"""

# QA action models
from .qa_action import (
    Severity,
    QaActionStatus,
    EVIDENCE_FIELDS,
    ReAuditResult,
    ChangeRecord,
    QaAction,
)

# Education models
from .education import (
    EducationStatus,
    EducationSession,
)

# Audit models
from .audit import (
    AuditSessionStatus,
    SessionHeader,
    AuditSample,
    AuditSession,
)

# Case models
from .case import (
    BundleInput,
    CaseBundle,
    CaseOpenResult,
)

__all__ = [
    "Severity",
    "QaActionStatus",
    "EVIDENCE_FIELDS",
    "ReAuditResult",
    "ChangeRecord",
    "QaAction",
    "EducationStatus",
    "EducationSession",
    "AuditSessionStatus",
    "SessionHeader",
    "AuditSample",
    "AuditSession",
    "BundleInput",
    "CaseBundle",
    "CaseOpenResult",
]
