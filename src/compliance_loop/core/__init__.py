"""Core utilities for the compliance workflow engine."""

from compliance_loop.core.logging import bind_case_context, configure_logging, get_logger
from compliance_loop.core.errors import (
    ComplianceLoopError,
    ConfigurationError,
    IdentifierCollisionError,
    InvalidTransitionError,
    RecordNotFoundError,
)
from compliance_loop.core.config import PolicyConfig
from compliance_loop.core.clock import (
    Clock,
    FixedClock,
    IdGenerator,
    SystemClock,
    UuidIdGenerator,
    utc_date_iso,
    utc_timestamp_iso,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "bind_case_context",
    # Errors
    "ComplianceLoopError",
    "ConfigurationError",
    "IdentifierCollisionError",
    "InvalidTransitionError",
    "RecordNotFoundError",
    # Config
    "PolicyConfig",
    # Clock / identity
    "Clock",
    "FixedClock",
    "IdGenerator",
    "SystemClock",
    "UuidIdGenerator",
    "utc_date_iso",
    "utc_timestamp_iso",
]
