"""
GuildStay domain errors.

Every error raised by services derives from `GuildStayDomainException` and
carries a stable `error_code`, a `details` dict for structured logs, a
`severity`, and `is_retryable`. The award path never lets these escape: a
failed write is logged with them and reported as an outcome.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    INFO = "info"  # bad input, expected
    ERROR = "error"
    CRITICAL = "critical"  # process cannot run correctly


class GuildStayDomainException(Exception):
    """
    >>> str(GuildStayDomainException("Award failed", {"stay_id": 42}, error_code="X"))
    "[X] Award failed | Details: {'stay_id': 42}"
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})
        self.severity = severity or self.DEFAULT_SEVERITY
        self.is_retryable = self.DEFAULT_RETRYABLE if is_retryable is None else is_retryable
        self.error_code = error_code or type(self).__name__

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        if not self.details:
            return f"[{self.error_code}] {self.message}"
        return f"[{self.error_code}] {self.message} | Details: {self.details}"


class ValidationError(GuildStayDomainException):
    """A caller-supplied or configured value is out of range."""

    DEFAULT_SEVERITY = ErrorSeverity.INFO

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message, details={"field": field}, error_code="VALIDATION_ERROR")


class ConfigurationError(GuildStayDomainException):
    DEFAULT_SEVERITY = ErrorSeverity.CRITICAL

    def __init__(self, key: str, message: str) -> None:
        self.key = key
        super().__init__(message, details={"config_key": key}, error_code="CONFIGURATION_ERROR")


class AwardPersistenceError(GuildStayDomainException):
    """
    The award transaction raised and was rolled back. Neither the stay mark
    nor the score increment was written, so the award can be attempted again.
    """

    DEFAULT_RETRYABLE = True

    def __init__(
        self,
        stay_id: int,
        guild_id: Optional[int],
        cause: Optional[BaseException] = None,
    ) -> None:
        self.stay_id = stay_id
        self.guild_id = guild_id
        self.cause = cause

        details: Dict[str, Any] = {"stay_id": stay_id, "guild_id": guild_id}
        if cause is not None:
            details.update(cause_type=type(cause).__name__, cause=str(cause))

        super().__init__(
            f"Could not record recommendation award for stay {stay_id}",
            details=details,
            error_code="AWARD_PERSISTENCE_FAILURE",
        )
