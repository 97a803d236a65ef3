"""Core domain objects: terms, business days, rate bands, disablement."""

from advrates.core.bands import RateBandConfig, RateBandResult, evaluate_rate_band
from advrates.core.calendar import is_business_day, next_business_day, resolve_maturity_date
from advrates.core.daycount import normalize_day_count_basis
from advrates.core.disablement import (
    DisablementFlags,
    LoanTermStatus,
    disablement_flags,
    is_disabled,
    loan_term_statuses_from_mapping,
)
from advrates.core.market_data import LoanTypeRates, MarketDataPoint, MarketDataSnapshot
from advrates.core.terms import (
    CANONICAL_TERMS,
    CustomTerm,
    LoanType,
    Term,
    days_to_maturity_term,
    nominal_maturity,
    parse_term_key,
    period_to_term,
    term_to_period,
)

__all__ = [
    "CANONICAL_TERMS",
    "CustomTerm",
    "DisablementFlags",
    "LoanTermStatus",
    "LoanType",
    "LoanTypeRates",
    "MarketDataPoint",
    "MarketDataSnapshot",
    "RateBandConfig",
    "RateBandResult",
    "Term",
    "days_to_maturity_term",
    "disablement_flags",
    "evaluate_rate_band",
    "is_business_day",
    "is_disabled",
    "loan_term_statuses_from_mapping",
    "next_business_day",
    "nominal_maturity",
    "normalize_day_count_basis",
    "parse_term_key",
    "period_to_term",
    "resolve_maturity_date",
    "term_to_period",
]
