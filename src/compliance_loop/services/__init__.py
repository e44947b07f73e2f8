"""Services that connect the engine to a record store."""

from compliance_loop.services.case_service import ComplianceCaseService

__all__ = [
    "ComplianceCaseService",
]
