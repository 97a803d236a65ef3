from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterator, Optional, Union

import pandas as pd

from advrates.config import PAYMENT_ON
from advrates.core.terms import CustomTerm, LoanType, Term, TermKey, parse_term_key
from advrates.errors import MissingTermError

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketDataPoint:
    rate: Optional[Decimal]         # None when the provider sent a blank value
    maturity_date: date             # provider maturity, not business-day adjusted
    interest_day_count: Optional[str]
    payment_on: str = PAYMENT_ON
    days_to_maturity: Optional[int] = None   # custom points only


@dataclass
class LoanTypeRates:
    """
    Points for one loan type: the canonical term structure plus any
    custom-sourced points (keyed by days to maturity).
    """
    loan_type: LoanType
    terms: dict[Term, MarketDataPoint] = field(default_factory=dict)
    custom: dict[int, MarketDataPoint] = field(default_factory=dict)

    def put(self, term: TermKey, point: MarketDataPoint) -> None:
        if isinstance(term, CustomTerm):
            if term.days in self.custom:
                _log.warning(
                    "Custom term %s for %s supplied twice; keeping the later point",
                    term, self.loan_type.value,
                )
            self.custom[term.days] = point
        else:
            self.terms[term] = point

    def alias_open(self) -> None:
        """``open`` is a copy of ``overnight`` from the same block."""
        overnight = self.terms.get(Term.OVERNIGHT)
        if overnight is not None and Term.OPEN not in self.terms:
            self.terms[Term.OPEN] = replace(overnight)


@dataclass
class MarketDataSnapshot:
    """Normalized provider document: loan type -> term -> point."""

    types: dict[LoanType, LoanTypeRates] = field(default_factory=dict)

    def __contains__(self, loan_type: object) -> bool:
        return loan_type in self.types

    def __getitem__(self, loan_type: LoanType) -> LoanTypeRates:
        return self.types[loan_type]

    def __iter__(self) -> Iterator[LoanType]:
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)

    def rates_for(self, loan_type: LoanType) -> LoanTypeRates:
        if loan_type not in self.types:
            self.types[loan_type] = LoanTypeRates(loan_type)
        return self.types[loan_type]

    def point(self, loan_type: LoanType, term: Union[TermKey, str]) -> MarketDataPoint:
        """Point lookup; a missing point is an upstream integrity error."""
        key = parse_term_key(term)
        rates = self.types.get(loan_type)

        found: Optional[MarketDataPoint] = None
        if rates is not None:
            if isinstance(key, CustomTerm):
                found = rates.custom.get(key.days)
            else:
                found = rates.terms.get(key)
        if found is None:
            raise MissingTermError(f"Market data has no point for {loan_type.value}/{key}")
        return found

    def to_frame(self) -> pd.DataFrame:
        """Long table (one row per point), for debugging and export."""
        rows = []
        for loan_type, rates in self.types.items():
            keyed: list[tuple[TermKey, MarketDataPoint]] = list(rates.terms.items())
            keyed += [(CustomTerm(days), p) for days, p in rates.custom.items()]
            for term, p in keyed:
                rows.append(
                    {
                        "loan_type": loan_type.value,
                        "term": str(term),
                        "rate": p.rate,
                        "maturity_date": p.maturity_date,
                        "interest_day_count": p.interest_day_count,
                        "days_to_maturity": p.days_to_maturity,
                    }
                )
        columns = ["loan_type", "term", "rate", "maturity_date", "interest_day_count", "days_to_maturity"]
        return pd.DataFrame(rows, columns=columns)
