from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional, Union

import pandas as pd

from advrates.core.bands import RateBandConfig, RateBandResult, evaluate_rate_band, to_decimal
from advrates.core.calendar import resolve_maturity_date
from advrates.core.disablement import (
    LoanTermStatus,
    disablement_flags,
    loan_term_statuses_from_mapping,
)
from advrates.core.market_data import MarketDataPoint, MarketDataSnapshot
from advrates.core.terms import (
    CANONICAL_TERMS,
    CustomTerm,
    LoanType,
    Term,
    TermKey,
    days_to_maturity_term,
    parse_term_key,
)
from advrates.errors import ConfigurationGapError, MissingTermError, require_upstream
from advrates.monitoring import LoggingRateMonitor, RateMonitor
from advrates.schemas import RateBandInfo, RateSummaryEntry, RateSummaryResponse

_log = logging.getLogger(__name__)

RateBandsInput = Mapping[Union[Term, str], Union[RateBandConfig, Mapping[str, Any]]]
TermStatusesInput = Union[
    Mapping[tuple[Term, LoanType], LoanTermStatus],
    Mapping[Any, Mapping[Any, Any]],
]


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _band_schema(band: RateBandResult) -> RateBandInfo:
    return RateBandInfo(
        **{
            k: (v if isinstance(v, bool) else float(v))
            for k, v in band.as_dict().items()
        }
    )


@dataclass
class SummaryEntry:
    """Live point enriched with start-of-day rate, band, maturity and disablement."""

    rate: Optional[Decimal]
    start_of_day_rate: Decimal
    maturity_date: date
    payment_on: str
    interest_day_count: Optional[str]
    days_to_maturity: Optional[int] = None
    rate_band_info: Optional[RateBandResult] = None
    disabled: Optional[bool] = None
    end_of_day: Optional[bool] = None

    def to_schema(self) -> RateSummaryEntry:
        band = self.rate_band_info
        return RateSummaryEntry(
            rate=_as_float(self.rate),
            start_of_day_rate=float(self.start_of_day_rate),
            maturity_date=self.maturity_date,
            payment_on=self.payment_on,
            interest_day_count=self.interest_day_count,
            days_to_maturity=self.days_to_maturity,
            disabled=self.disabled,
            end_of_day=self.end_of_day,
            rate_band_info=_band_schema(band) if band is not None else None,
        )


@dataclass
class RateSummary:
    """
    Full rate summary: loan type -> term -> entry, plus the time it was built.
    Canonical terms are always present; ``custom_term`` is set when the
    caller asked for an explicit maturity date.
    """
    timestamp: datetime
    entries: dict[LoanType, dict[TermKey, SummaryEntry]] = field(default_factory=dict)
    custom_term: Optional[CustomTerm] = None

    def entry(self, loan_type: Union[LoanType, str], term: Union[TermKey, str]) -> SummaryEntry:
        lt = LoanType(loan_type)
        key = parse_term_key(term)
        by_term = self.entries.get(lt, {})
        if key not in by_term:
            raise KeyError(f"Summary has no entry for {lt.value}/{key}")
        return by_term[key]

    @property
    def disabled_terms(self) -> list[tuple[LoanType, TermKey]]:
        return [
            (lt, term)
            for lt, by_term in self.entries.items()
            for term, e in by_term.items()
            if e.disabled
        ]

    def to_frame(self) -> pd.DataFrame:
        """Long table (one row per loan type and term), for debugging and export."""
        rows = []
        for lt, by_term in self.entries.items():
            for term, e in by_term.items():
                band = e.rate_band_info
                rows.append(
                    {
                        "loan_type": lt.value,
                        "term": str(term),
                        "rate": e.rate,
                        "start_of_day_rate": e.start_of_day_rate,
                        "maturity_date": e.maturity_date,
                        "days_to_maturity": e.days_to_maturity,
                        "disabled": e.disabled,
                        "end_of_day": e.end_of_day,
                        "low_band_off_rate": band.low_band_off_rate if band else None,
                        "high_band_off_rate": band.high_band_off_rate if band else None,
                        "min_threshold_exceeded": band.min_threshold_exceeded if band else None,
                        "max_threshold_exceeded": band.max_threshold_exceeded if band else None,
                    }
                )
        return pd.DataFrame(rows)

    def to_response(self) -> RateSummaryResponse:
        return RateSummaryResponse(
            timestamp=self.timestamp,
            rates={
                lt.value: {str(term): e.to_schema() for term, e in by_term.items()}
                for lt, by_term in self.entries.items()
            },
        )


def _band_configs(rate_bands: RateBandsInput) -> dict[Term, RateBandConfig]:
    out: dict[Term, RateBandConfig] = {}
    for raw_term, cfg in rate_bands.items():
        try:
            term = Term(raw_term)
        except ValueError:
            continue
        if isinstance(cfg, RateBandConfig):
            out[term] = cfg
            continue
        try:
            out[term] = RateBandConfig.from_mapping(cfg)
        except (ValueError, TypeError, AttributeError) as exc:
            raise ConfigurationGapError(
                f"Configuration gap: rate band for {term.value} is unusable ({exc})"
            ) from exc
    return out


def _term_statuses(statuses: TermStatusesInput) -> dict[tuple[Term, LoanType], LoanTermStatus]:
    if not all(isinstance(k, tuple) for k in statuses.keys()):
        return loan_term_statuses_from_mapping(statuses)

    out: dict[tuple[Term, LoanType], LoanTermStatus] = {}
    for (raw_term, raw_type), s in statuses.items():
        try:
            key = (Term(raw_term), LoanType(raw_type))
        except ValueError:
            continue
        out[key] = s if isinstance(s, LoanTermStatus) else LoanTermStatus.from_mapping(s)
    return out


def check_configuration(
    bands: Mapping[Term, RateBandConfig],
    statuses: Mapping[tuple[Term, LoanType], LoanTermStatus],
) -> None:
    """Fail unless every canonical term has a band and a status per loan type."""
    missing_bands = [t.value for t in CANONICAL_TERMS if t not in bands]
    missing_statuses = [
        f"{t.value}/{lt.value}"
        for t in CANONICAL_TERMS
        for lt in LoanType
        if (t, lt) not in statuses
    ]
    if missing_bands or missing_statuses:
        raise ConfigurationGapError(
            f"Configuration gap: rate bands missing for {missing_bands}; "
            f"loan term status missing for {missing_statuses}"
        )


def _custom_entry(
    loan_type: LoanType,
    custom: CustomTerm,
    days: int,
    maturity_date: date,
    live: MarketDataSnapshot,
    start_of_day: MarketDataSnapshot,
) -> SummaryEntry:
    live_point = live.point(loan_type, custom)
    try:
        sod_rate = start_of_day.point(loan_type, custom).rate
    except MissingTermError:
        sod_rate = live_point.rate

    return SummaryEntry(
        rate=live_point.rate,
        start_of_day_rate=to_decimal(sod_rate),
        maturity_date=maturity_date,
        payment_on=live_point.payment_on,
        interest_day_count=live_point.interest_day_count,
        days_to_maturity=days,
    )


def _term_entry(
    live_point: MarketDataPoint,
    sod_point: MarketDataPoint,
    term: Term,
    band_config: RateBandConfig,
    status: LoanTermStatus,
    blackout: frozenset[date],
    holidays: frozenset[date],
) -> SummaryEntry:
    sod_rate = to_decimal(sod_point.rate)
    band = evaluate_rate_band(live_point.rate, sod_rate, band_config)
    maturity = resolve_maturity_date(live_point.maturity_date, term.frequency_unit, holidays)
    flags = disablement_flags(maturity, band, status, blackout)

    return SummaryEntry(
        rate=live_point.rate,
        start_of_day_rate=sod_rate,
        maturity_date=maturity,
        payment_on=live_point.payment_on,
        interest_day_count=live_point.interest_day_count,
        days_to_maturity=live_point.days_to_maturity,
        rate_band_info=band,
        disabled=flags.disabled,
        end_of_day=not status.trade_status,
    )


def assemble_rate_summary(
    live: MarketDataSnapshot,
    start_of_day: MarketDataSnapshot,
    loan_term_statuses: TermStatusesInput,
    rate_bands: RateBandsInput,
    blackout_dates: Iterable[date],
    holidays: Iterable[date],
    *,
    maturity_date: Optional[date] = None,
    funding_date: Optional[date] = None,
    monitor: Optional[RateMonitor] = None,
    today: Optional[date] = None,
    now: Optional[datetime] = None,
) -> RateSummary:
    """
    Build the rate summary for every loan type and canonical term.

    Pipeline per (loan type, term):
      live + start-of-day point -> rate band -> business-day maturity
      -> disablement (blackout, trade/display flags, band breach)

    With ``maturity_date`` a custom ``<days>day`` term is added per loan
    type; its maturity is the explicit date, not business-day adjusted.

    ``None`` for any collaborator input (snapshots, statuses, bands, blackout
    dates, holidays) raises ``UpstreamUnavailableError``; empty collections
    are valid data.

    Nothing is returned unless every entry could be built; breach events go
    to ``monitor`` only after the whole summary succeeded.
    """
    live = require_upstream(live, "live market data")
    start_of_day = require_upstream(start_of_day, "start-of-day market data")
    loan_term_statuses = require_upstream(loan_term_statuses, "loan term statuses")
    rate_bands = require_upstream(rate_bands, "rate bands")
    blackout = frozenset(require_upstream(blackout_dates, "blackout dates"))
    closed = frozenset(require_upstream(holidays, "holidays"))

    monitor = monitor or LoggingRateMonitor()
    bands = _band_configs(rate_bands)
    statuses = _term_statuses(loan_term_statuses)
    check_configuration(bands, statuses)

    custom: Optional[CustomTerm] = None
    days = 0
    if maturity_date is not None:
        dtm = days_to_maturity_term(maturity_date, funding_date, today=today)
        custom, days = dtm.term, dtm.days

    entries: dict[LoanType, dict[TermKey, SummaryEntry]] = {}
    breaches: list[tuple[LoanType, Term, SummaryEntry]] = []

    for loan_type in LoanType:
        by_term: dict[TermKey, SummaryEntry] = {}
        for term in CANONICAL_TERMS:
            status = statuses[(term, loan_type)]
            entry = _term_entry(
                live.point(loan_type, term),
                start_of_day.point(loan_type, term),
                term,
                bands[term],
                status,
                blackout,
                closed,
            )
            by_term[term] = entry
            if not entry.end_of_day and status.display_status and entry.rate_band_info.threshold_exceeded:
                breaches.append((loan_type, term, entry))

        if custom is not None:
            by_term[custom] = _custom_entry(loan_type, custom, days, maturity_date, live, start_of_day)

        entries[loan_type] = by_term

    for loan_type, term, entry in breaches:
        monitor.threshold_exceeded(loan_type, term, entry)

    summary = RateSummary(
        timestamp=now or datetime.now(timezone.utc),
        entries=entries,
        custom_term=custom,
    )
    _log.debug(
        "Rate summary built: %d entries, %d disabled, %d band breaches",
        sum(len(v) for v in entries.values()),
        len(summary.disabled_terms),
        len(breaches),
    )
    return summary
