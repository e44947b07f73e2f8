"""Record store contract and the in-memory implementation."""

from compliance_loop.repository.base import CaseRepository
from compliance_loop.repository.in_memory import InMemoryCaseRepository

__all__ = [
    "CaseRepository",
    "InMemoryCaseRepository",
]
