"""
Smart Money Exceptions - Error hierarchy for graceful degradation.

Profiling and detection degrade to sentinel values instead of
raising. These exceptions cover invalid caller input and
configuration; batch entry points catch per-wallet failures.
"""

from datetime import datetime
from typing import Any, Optional


class SmartMoneyError(Exception):
    """Base exception for all smart money module errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.utcnow()
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class InvalidRecordError(SmartMoneyError):
    """A raw transaction or holding record failed validation."""

    def __init__(self, message: str, record: Any = None) -> None:
        super().__init__(message, details={"record": repr(record)[:200]})


class InvalidThresholdError(SmartMoneyError):
    """A threshold argument is not a finite number."""

    def __init__(self, name: str, value: Any) -> None:
        super().__init__(
            f"Invalid {name}: {value!r}",
            details={"name": name, "value": repr(value)},
        )


class ConfigurationError(SmartMoneyError):
    """Invalid configuration."""
    pass
