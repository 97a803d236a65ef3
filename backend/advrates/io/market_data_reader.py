from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Callable, Optional

from advrates.core.daycount import normalize_day_count_basis
from advrates.core.market_data import MarketDataPoint, MarketDataSnapshot
from advrates.core.terms import (
    LoanType,
    TermKey,
    days_to_maturity_term,
    nominal_maturity,
    period_to_term,
)
from advrates.errors import MalformedDateError, MalformedDocumentError, require_upstream
from advrates.io._utils import dig, norm_token, parse_date, parse_rate, to_sequence
from advrates.monitoring import LoggingRateMonitor

_log = logging.getLogger(__name__)

BlankRateHook = Callable[[LoanType, TermKey, Any], None]


# Field locations inside the provider document. Block-level paths start at a
# response block; point-level paths start at a data point.
PATHS: dict[str, tuple[str, ...]] = {
    "type_data":       ("responses",),
    "term_data":       ("marketData", "data"),
    "day_count_basis": ("marketData", "dayCountBasis"),
    "type_long":       ("marketData", "name"),
    "spot_date":       ("marketData", "spotDate"),
    "frequency":       ("tenor", "interval", "frequency"),
    "unit":            ("tenor", "interval", "frequencyUnit"),
    "maturity_string": ("tenor", "maturityDate"),
    "rate":            ("value",),
}


def extract_text(node: Any, field: str) -> Optional[str]:
    return norm_token(dig(node, PATHS[field]))


def _type_blocks(document: Any) -> list[Any]:
    if isinstance(document, Mapping):
        if "responses" not in document:
            raise MalformedDocumentError("Market data document has no 'responses'")
        return to_sequence(dig(document, PATHS["type_data"]))
    if isinstance(document, (list, tuple)):
        return list(document)
    raise MalformedDocumentError(f"Unsupported market data document: {type(document).__name__}")


def _resolve_term(
    term_data: Any,
    *,
    is_custom: bool,
    spot_date: Optional[date],
    today: date,
) -> tuple[Optional[TermKey], Optional[date], Optional[int]]:
    """
    Term, maturity and days to maturity for one data point.

    Standard points go through the period table; custom points are keyed by
    days from the block's spot date to the point's own maturity.
    """
    maturity_string = extract_text(term_data, "maturity_string")

    if is_custom:
        maturity = parse_date(maturity_string, field="maturity date")
        dtm = days_to_maturity_term(maturity, spot_date, today=today)
        return dtm.term, maturity, dtm.days

    frequency = extract_text(term_data, "frequency")
    unit = extract_text(term_data, "unit")
    term = period_to_term(frequency, unit)
    if term is None:
        _log.debug("Skipping unmapped period %s%s", frequency, unit)
        return None, None, None

    if maturity_string is None:
        maturity = nominal_maturity(spot_date or today, term)
    else:
        maturity = parse_date(maturity_string, field="maturity date")
    return term, maturity, None


def read_market_data(
    document: Any,
    *,
    on_blank_rate: Optional[BlankRateHook] = None,
    today: Optional[date] = None,
) -> MarketDataSnapshot:
    """
    Provider document -> ``MarketDataSnapshot``.

    - One block per loan type; a second block for the same type carries
      custom-term points (keyed by days to maturity).
    - Unmapped periods are skipped. Blank rates are kept as None and
      reported through ``on_blank_rate``.
    - Unparseable dates abort the whole document.
    """
    document = require_upstream(document, "market data document")
    hook = on_blank_rate or LoggingRateMonitor().blank_rate
    today = today or date.today()

    snapshot = MarketDataSnapshot()
    seen: set[LoanType] = set()

    for type_data in _type_blocks(document):
        type_long = extract_text(type_data, "type_long")
        loan_type = LoanType.from_display_name(type_long) if type_long else None
        if loan_type is None:
            raise MalformedDocumentError(f"Unknown loan type name in market data: {type_long!r}")

        is_custom = loan_type in seen
        seen.add(loan_type)

        day_count_basis = normalize_day_count_basis(extract_text(type_data, "day_count_basis"))
        spot_text = extract_text(type_data, "spot_date")
        spot_date = parse_date(spot_text, field="spot date") if spot_text else None

        for term_data in to_sequence(dig(type_data, PATHS["term_data"])):
            try:
                term, maturity, days = _resolve_term(
                    term_data, is_custom=is_custom, spot_date=spot_date, today=today,
                )
            except MalformedDateError as exc:
                raise MalformedDateError(f"{loan_type.value}: {exc}") from exc
            if term is None:
                continue

            rate = parse_rate(dig(term_data, PATHS["rate"]))
            if rate is None:
                hook(loan_type, term, term_data)

            snapshot.rates_for(loan_type).put(
                term,
                MarketDataPoint(
                    rate=rate,
                    maturity_date=maturity,
                    interest_day_count=day_count_basis,
                    days_to_maturity=days,
                ),
            )

        if not is_custom and loan_type in snapshot:
            snapshot[loan_type].alias_open()

    return snapshot
