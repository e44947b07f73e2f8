"""Custom exception classes for the compliance workflow engine.

The pure engine signals bad input with sentinel values and business-rule
violations with structured error lists. These exceptions are raised only at
the service boundary and by infrastructure (identifier generation, config).
"""

from typing import Optional


class ComplianceLoopError(Exception):
    """Base exception for all compliance workflow errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class RecordNotFoundError(ComplianceLoopError):
    """A record referenced by id does not exist in the record store."""

    def __init__(
        self,
        message: str,
        record_type: Optional[str] = None,
        record_id: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="RECORD_NOT_FOUND", **kwargs)
        self.record_type = record_type
        self.record_id = record_id
        self.details.update({
            "record_type": record_type,
            "record_id": record_id,
        })


class InvalidTransitionError(ComplianceLoopError):
    """A mutation was attempted on a QA action in a terminal state."""

    def __init__(
        self,
        message: str,
        action_id: Optional[str] = None,
        current_status: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="INVALID_TRANSITION", **kwargs)
        self.action_id = action_id
        self.current_status = current_status
        self.details.update({
            "action_id": action_id,
            "current_status": current_status,
        })


class IdentifierCollisionError(ComplianceLoopError):
    """The id generator kept producing identifiers that are already taken."""

    def __init__(
        self,
        message: str,
        prefix: Optional[str] = None,
        attempts: int = 0,
        **kwargs,
    ):
        super().__init__(message, error_code="ID_COLLISION", **kwargs)
        self.prefix = prefix
        self.attempts = attempts
        self.details.update({
            "prefix": prefix,
            "attempts": attempts,
        })


class ConfigurationError(ComplianceLoopError):
    """Configuration could not be loaded."""

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        value: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(message, error_code="CONFIGURATION", **kwargs)
        self.setting = setting
        self.value = value
        self.details.update({
            "setting": setting,
            "value": value,
        })
