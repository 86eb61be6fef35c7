"""
Activity Insights - Exceptions.

============================================================
CUSTOM EXCEPTIONS
============================================================

All exceptions inherit from ActivityInsightsError.

Aggregation itself degrades instead of raising: malformed
records are skipped, missing timestamps default to zero-length
activity. These exceptions surface configuration problems and
are used internally to mark records that must be skipped.

============================================================
"""

from datetime import datetime
from typing import Any, Optional


class ActivityInsightsError(Exception):
    """Base exception for the Activity Insights module."""

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


class ConfigurationError(ActivityInsightsError):
    """Raised when configuration is invalid."""
    pass


class InvalidRecordError(ActivityInsightsError):
    """
    Raised when a raw provider record cannot be interpreted.

    Callers inside the module catch this and skip the record.
    """

    def __init__(self, message: str, record: Any = None) -> None:
        super().__init__(message, details={"record": repr(record)[:200]})
