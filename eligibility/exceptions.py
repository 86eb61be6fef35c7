"""
Eligibility - Exceptions.

============================================================
CUSTOM EXCEPTIONS
============================================================

All exceptions inherit from EligibilityError.

Scoring itself never raises for a bad criterion: it is
counted as not met. These exceptions cover parsing legacy
check strings, configuration, and strict-mode dispatch.

============================================================
"""

from datetime import datetime
from typing import Any, Optional


class EligibilityError(Exception):
    """Base exception for the Eligibility module."""

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


class CriterionParseError(EligibilityError):
    """Raised when a legacy check string cannot be parsed."""

    def __init__(self, check: str, reason: str) -> None:
        super().__init__(
            f"Invalid criterion check '{check}': {reason}",
            details={"check": check, "reason": reason},
        )
        self.check = check


class UnsupportedCriterionError(EligibilityError):
    """Raised in strict mode when no handler is registered for a criterion."""

    def __init__(self, kind: str, name: Optional[str] = None) -> None:
        label = f"{kind}:{name}" if name else kind
        super().__init__(
            f"No handler registered for criterion '{label}'",
            details={"kind": kind, "name": name},
        )


class ConfigurationError(EligibilityError):
    """Raised when configuration is invalid."""
    pass
