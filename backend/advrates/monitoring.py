"""Monitoring hooks for data-quality signals and rate band breaches.

The engine reports, it never alerts: callers plug in whatever sends the
e-mail or error-tracker event. ``LoggingRateMonitor`` is the default.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from advrates.core.terms import LoanType, TermKey
    from advrates.services.summary import SummaryEntry

_log = logging.getLogger(__name__)


class RateMonitor(Protocol):
    def blank_rate(self, loan_type: "LoanType", term: "TermKey", raw_point: Any) -> None:
        """A resolvable term arrived without a usable rate."""

    def threshold_exceeded(self, loan_type: "LoanType", term: "TermKey", entry: "SummaryEntry") -> None:
        """A tradeable, displayed term breached its rate band."""


class LoggingRateMonitor:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or _log

    def blank_rate(self, loan_type: "LoanType", term: "TermKey", raw_point: Any) -> None:
        self.logger.warning(
            "Blank rate returned: type=%s, term=%s, data=%r",
            loan_type.value, term, raw_point,
        )

    def threshold_exceeded(self, loan_type: "LoanType", term: "TermKey", entry: "SummaryEntry") -> None:
        band = entry.rate_band_info
        self.logger.error(
            "Rate band threshold exceeded: type=%s, term=%s, rate=%s, start_of_day_rate=%s, "
            "low_band_off_rate=%s, high_band_off_rate=%s",
            loan_type.value,
            term,
            entry.rate,
            entry.start_of_day_rate,
            band.low_band_off_rate if band else None,
            band.high_band_off_rate if band else None,
        )


class RecordingRateMonitor:
    """Keeps every event in memory; handy for batch jobs and tests."""

    def __init__(self) -> None:
        self.blank_rates: list[tuple["LoanType", "TermKey", Any]] = []
        self.breaches: list[tuple["LoanType", "TermKey", "SummaryEntry"]] = []

    def blank_rate(self, loan_type: "LoanType", term: "TermKey", raw_point: Any) -> None:
        self.blank_rates.append((loan_type, term, raw_point))

    def threshold_exceeded(self, loan_type: "LoanType", term: "TermKey", entry: "SummaryEntry") -> None:
        self.breaches.append((loan_type, term, entry))
