"""
Common base for GuildStay services.

A service holds business rules. It opens sessions and transactions through
DatabaseService, delegates queries to repositories, and reports through the
structured logger it is given.

    class GuildContextService(BaseService):
        def __init__(self, database_service=DatabaseService, config=Config, logger=None):
            super().__init__(config, logger or get_logger(__name__))
            self.db = database_service
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any, Optional

from .exceptions import ConfigurationError, ValidationError

if TYPE_CHECKING:
    from logging import Logger


class BaseService:
    """
    Args:
        config: anything exposing settings as attributes (normally `Config`)
        logger: logger used for every record this service emits
    """

    def __init__(self, config: Any, logger: Logger) -> None:
        self._config = config
        self.log = logger

    def get_config(self, key: str, default: Optional[Any] = None, required: bool = False) -> Any:
        """
        Setting `key`, or `default` when it is absent or None.

        Raises:
            ConfigurationError: `required` is set and no value was found
        """
        value = getattr(self._config, key, None)
        if value is None:
            value = default
        if value is None and required:
            raise ConfigurationError(key, f"Configuration key {key} has no value")
        return value

    def log_operation(self, operation: str, **context: Any) -> None:
        self.log.info(f"{operation} completed", extra={"operation": operation, **context})

    def log_error(self, operation: str, error: BaseException, **context: Any) -> None:
        """ERROR record with the exception attached and its type in `extra`."""
        self.log.error(
            f"{operation} failed: {error}",
            extra={
                "operation": operation,
                "error_type": type(error).__name__,
                "error_message": str(error),
                **context,
            },
            exc_info=error,
        )

    # bool is an int subclass; True must not pass as 1

    def validate_positive_int(self, value: int, name: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(name, f"{name} must be a positive integer, got {value!r}")
        return value

    def validate_positive_number(self, value: float, name: str) -> float:
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or not math.isfinite(value)
            or value <= 0
        ):
            raise ValidationError(name, f"{name} must be a positive finite number, got {value!r}")
        return float(value)
