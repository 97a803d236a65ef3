"""Shared pytest fixtures and document builders for the rates engine tests.

Provides:
- make_point / make_block / make_document: provider market-data document pieces
- standard_document: one standard block per loan type, every tabulated period
- custom_blocks: one custom block per loan type for an explicit maturity date
- rate_bands, term_statuses: configuration store payloads covering every term
- monitor: in-memory RateMonitor
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Mapping, Optional

import pytest

from advrates.core.terms import CANONICAL_TERMS, PERIOD_TO_TERM, LoanType, Term, nominal_maturity
from advrates.monitoring import RecordingRateMonitor


# Monday; no weekend or month-end surprises for the short terms.
AS_OF = date(2026, 10, 19)

DEFAULT_RATE = "1.25"


# ── Document builders ─────────────────────────────────────────────────────

def make_point(
    rate: Any,
    frequency: Any = None,
    unit: Optional[str] = None,
    maturity: Optional[str] = None,
) -> dict[str, Any]:
    tenor: dict[str, Any] = {}
    if maturity is not None:
        tenor["maturityDate"] = maturity
    if frequency is not None or unit is not None:
        tenor["interval"] = {"frequency": frequency, "frequencyUnit": unit}
    point: dict[str, Any] = {"tenor": tenor}
    if rate is not None:
        point["value"] = rate
    return point


def make_block(
    loan_type: LoanType,
    points: Iterable[dict[str, Any]],
    *,
    day_count: Optional[str] = "ACT/ACT",
    spot_date: Optional[str] = None,
    name: Optional[str] = None,
) -> dict[str, Any]:
    market_data: dict[str, Any] = {
        "name": name if name is not None else loan_type.display_name,
        "data": list(points),
    }
    if day_count is not None:
        market_data["dayCountBasis"] = day_count
    if spot_date is not None:
        market_data["spotDate"] = spot_date
    return {"marketData": market_data}


def make_document(*blocks: dict[str, Any]) -> dict[str, Any]:
    return {"responses": list(blocks)}


def standard_points(
    as_of: date = AS_OF,
    rate: str = DEFAULT_RATE,
    *,
    overrides: Optional[Mapping[Term, Any]] = None,
    skip: Iterable[Term] = (),
) -> list[dict[str, Any]]:
    overrides = overrides or {}
    skipped = set(skip)
    points = []
    for (frequency, unit), term in PERIOD_TO_TERM.items():
        if term in skipped:
            continue
        points.append(
            make_point(
                overrides.get(term, rate),
                str(frequency),
                unit,
                nominal_maturity(as_of, term).isoformat(),
            )
        )
    return points


def standard_blocks(
    as_of: date = AS_OF,
    rate: str = DEFAULT_RATE,
    *,
    overrides: Optional[Mapping[tuple[LoanType, Term], Any]] = None,
    skip: Iterable[tuple[LoanType, Term]] = (),
) -> list[dict[str, Any]]:
    overrides = overrides or {}
    skip = set(skip)
    return [
        make_block(
            lt,
            standard_points(
                as_of,
                rate,
                overrides={t: v for (olt, t), v in overrides.items() if olt == lt},
                skip=[t for (slt, t) in skip if slt == lt],
            ),
        )
        for lt in LoanType
    ]


def standard_document(
    as_of: date = AS_OF,
    rate: str = DEFAULT_RATE,
    *,
    overrides: Optional[Mapping[tuple[LoanType, Term], Any]] = None,
    skip: Iterable[tuple[LoanType, Term]] = (),
) -> dict[str, Any]:
    return make_document(*standard_blocks(as_of, rate, overrides=overrides, skip=skip))


def custom_blocks(
    maturity: date,
    rate: str = "0.95",
    *,
    spot_date: Optional[date] = None,
) -> list[dict[str, Any]]:
    return [
        make_block(
            lt,
            [make_point(rate, maturity=maturity.isoformat())],
            spot_date=spot_date.isoformat() if spot_date else None,
        )
        for lt in LoanType
    ]


# ── Configuration payloads ────────────────────────────────────────────────

def band_payload(low_off: int = 50, low_warn: int = 25, high_off: int = 50, high_warn: int = 25) -> dict[str, int]:
    return {
        "LOW_BAND_OFF_BP": low_off,
        "LOW_BAND_WARN_BP": low_warn,
        "HIGH_BAND_OFF_BP": high_off,
        "HIGH_BAND_WARN_BP": high_warn,
    }


def make_rate_bands(**kwargs: int) -> dict[str, dict[str, int]]:
    return {term.value: band_payload(**kwargs) for term in CANONICAL_TERMS}


def make_term_statuses(trade_status: bool = True, display_status: bool = True) -> dict[str, dict[str, dict[str, bool]]]:
    return {
        term.value: {
            lt.value: {"trade_status": trade_status, "display_status": display_status}
            for lt in LoanType
        }
        for term in CANONICAL_TERMS
    }


# ── Fixtures ──────────────────────────────────────────────────────────────

@pytest.fixture()
def rate_bands() -> dict[str, dict[str, int]]:
    return make_rate_bands()


@pytest.fixture()
def term_statuses() -> dict[str, dict[str, dict[str, bool]]]:
    return make_term_statuses()


@pytest.fixture()
def monitor() -> RecordingRateMonitor:
    return RecordingRateMonitor()
