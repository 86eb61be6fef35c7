"""
Core Module Package.

Shared infrastructure that every analysis package depends on.

Components:
- clock: Injectable UTC clock and timestamp parsing
- numbers: Division / rounding / clamping guards
"""

from .clock import (
    ClockFactory,
    ClockProtocol,
    MockClock,
    SystemClock,
    days_between,
    ensure_utc,
    from_iso8601,
    parse_timestamp,
    resolve_clock,
    to_iso8601,
)
from .numbers import clamp, round_half_up, safe_div


__all__ = [
    "ClockFactory",
    "ClockProtocol",
    "MockClock",
    "SystemClock",
    "days_between",
    "ensure_utc",
    "from_iso8601",
    "parse_timestamp",
    "resolve_clock",
    "to_iso8601",
    "clamp",
    "round_half_up",
    "safe_div",
]
