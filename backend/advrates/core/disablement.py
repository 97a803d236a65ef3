from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import AbstractSet, Any, Iterable, Mapping, Optional, Protocol

from advrates.core.bands import RateBandResult
from advrates.core.terms import LoanType, Term

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoanTermStatus:
    """Administrative flags for one (term, loan type) pair."""

    trade_status: bool
    display_status: bool

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LoanTermStatus":
        return cls(
            trade_status=bool(data.get("trade_status")),
            display_status=bool(data.get("display_status")),
        )


def loan_term_statuses_from_mapping(
    data: Mapping[Any, Mapping[Any, Any]],
) -> dict[tuple[Term, LoanType], LoanTermStatus]:
    """
    Flatten the store's ``{term: {loan_type: {trade_status, display_status}}}``
    shape into a ``(Term, LoanType)`` keyed map. Unknown terms or types are
    ignored; coverage is checked later by the summary.
    """
    out: dict[tuple[Term, LoanType], LoanTermStatus] = {}
    for raw_term, by_type in data.items():
        try:
            term = Term(raw_term)
        except ValueError:
            continue
        for raw_type, flags in by_type.items():
            try:
                loan_type = LoanType(raw_type)
            except ValueError:
                continue
            status = flags if isinstance(flags, LoanTermStatus) else LoanTermStatus.from_mapping(flags)
            out[(term, loan_type)] = status
    return out


class BandedEntry(Protocol):
    maturity_date: date
    rate_band_info: Optional[RateBandResult]


@dataclass(frozen=True)
class DisablementFlags:
    blacked_out: bool
    cant_trade: bool
    cant_display: bool
    min_threshold_exceeded: bool
    max_threshold_exceeded: bool

    @property
    def disabled(self) -> bool:
        return (
            self.blacked_out
            or self.cant_trade
            or self.cant_display
            or self.min_threshold_exceeded
            or self.max_threshold_exceeded
        )

    @property
    def reasons(self) -> list[str]:
        return [name for name, value in vars(self).items() if value]


def disablement_flags(
    maturity_date: date,
    rate_band_info: Optional[RateBandResult],
    status: LoanTermStatus,
    blackout_dates: AbstractSet[date] | Iterable[date],
) -> DisablementFlags:
    """Evaluate every operand of the disable decision, none short-circuited."""
    blackout = blackout_dates if isinstance(blackout_dates, (set, frozenset)) else frozenset(blackout_dates)
    return DisablementFlags(
        blacked_out=maturity_date in blackout,
        cant_trade=not status.trade_status,
        cant_display=not status.display_status,
        min_threshold_exceeded=bool(rate_band_info and rate_band_info.min_threshold_exceeded),
        max_threshold_exceeded=bool(rate_band_info and rate_band_info.max_threshold_exceeded),
    )


def is_disabled(
    entry: BandedEntry,
    status: LoanTermStatus,
    blackout_dates: AbstractSet[date] | Iterable[date],
) -> bool:
    flags = disablement_flags(entry.maturity_date, entry.rate_band_info, status, blackout_dates)
    if flags.disabled:
        _log.debug("Disabled (maturity %s): %s", entry.maturity_date, ", ".join(flags.reasons))
    return flags.disabled
