from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import NamedTuple, Optional, Union

from dateutil.relativedelta import relativedelta

from advrates.config import LOAN_TYPE_NAMES, TERM_PERIODS


class LoanType(str, Enum):
    """Collateral class behind an advance."""

    WHOLE = "whole"
    AGENCY = "agency"
    AAA = "aaa"
    AA = "aa"

    @property
    def display_name(self) -> str:
        return LOAN_TYPE_NAMES[self.value]

    @classmethod
    def from_display_name(cls, name: str) -> Optional["LoanType"]:
        token = str(name).strip()
        for value, display in LOAN_TYPE_NAMES.items():
            if display == token:
                return cls(value)
        return None

    def __str__(self) -> str:
        return self.value


class Term(str, Enum):
    """Canonical advance terms. ``open`` is an alias of ``overnight``."""

    OVERNIGHT = "overnight"
    OPEN = "open"
    WEEK_1 = "1week"
    WEEK_2 = "2week"
    WEEK_3 = "3week"
    MONTH_1 = "1month"
    MONTH_2 = "2month"
    MONTH_3 = "3month"
    MONTH_6 = "6month"
    YEAR_1 = "1year"
    YEAR_2 = "2year"
    YEAR_3 = "3year"

    @property
    def frequency(self) -> int:
        return TERM_PERIODS[self.value][0]

    @property
    def frequency_unit(self) -> str:
        return TERM_PERIODS[self.value][1]

    def __str__(self) -> str:
        return self.value


_CUSTOM_TERM_RE = re.compile(r"^\s*(-?\d+)\s*day\s*$", re.IGNORECASE)


@dataclass(frozen=True, order=True)
class CustomTerm:
    """Ad-hoc term identified by its day count to maturity (wire key ``<days>day``)."""

    days: int

    @property
    def key(self) -> str:
        return f"{self.days}day"

    def __str__(self) -> str:
        return self.key

    @classmethod
    def parse(cls, key: str) -> Optional["CustomTerm"]:
        match = _CUSTOM_TERM_RE.match(str(key))
        if not match:
            return None
        return cls(int(match.group(1)))


TermKey = Union[Term, CustomTerm]

CANONICAL_TERMS: tuple[Term, ...] = tuple(Term)

# Provider period -> canonical term. ``open`` never comes from the provider.
PERIOD_TO_TERM: dict[tuple[int, str], Term] = {
    (1, "D"): Term.OVERNIGHT,
    (1, "W"): Term.WEEK_1,
    (2, "W"): Term.WEEK_2,
    (3, "W"): Term.WEEK_3,
    (1, "M"): Term.MONTH_1,
    (2, "M"): Term.MONTH_2,
    (3, "M"): Term.MONTH_3,
    (6, "M"): Term.MONTH_6,
    (1, "Y"): Term.YEAR_1,
    (2, "Y"): Term.YEAR_2,
    (3, "Y"): Term.YEAR_3,
}


def period_to_term(frequency: Union[str, int, None], unit: Optional[str]) -> Optional[Term]:
    """
    Map a provider period (``"3"``, ``"M"``) to a canonical term.

    Returns None for any combination outside the table (4M, 5M, 9M, blanks);
    callers skip such points.
    """
    if frequency is None or unit is None:
        return None
    try:
        n = int(str(frequency).strip())
    except ValueError:
        return None
    return PERIOD_TO_TERM.get((n, str(unit).strip().upper()))


def term_to_period(term: Union[Term, str]) -> tuple[int, str]:
    t = Term(term)
    return t.frequency, t.frequency_unit


def parse_term_key(key: Union[str, Term, CustomTerm]) -> TermKey:
    """Wire term string -> ``Term`` or ``CustomTerm``."""
    if isinstance(key, (Term, CustomTerm)):
        return key
    token = str(key).strip()
    try:
        return Term(token)
    except ValueError:
        pass
    custom = CustomTerm.parse(token)
    if custom is None:
        raise ValueError(f"Unknown term: {key!r}")
    return custom


class DaysToMaturity(NamedTuple):
    days: int
    term: CustomTerm


def _as_date(value: Union[date, datetime, str]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])
    return value


def days_to_maturity_term(
    maturity_date: Union[date, datetime, str],
    funding_date: Optional[Union[date, datetime, str]] = None,
    *,
    today: Optional[date] = None,
) -> DaysToMaturity:
    """
    Day count between the funding date (``today`` when absent) and the
    maturity date, with the matching custom term.
    """
    start = funding_date if funding_date is not None else (today or date.today())
    days = (_as_date(maturity_date) - _as_date(start)).days
    return DaysToMaturity(days=days, term=CustomTerm(days))


def nominal_maturity(base: date, term: Union[Term, str]) -> date:
    """
    Calendar maturity of a canonical term from ``base``.

    No business-day adjustment here; see ``core.calendar.resolve_maturity_date``.
    """
    n, unit = term_to_period(term)

    if unit == "D":
        return base + relativedelta(days=n)
    if unit == "W":
        return base + relativedelta(weeks=n)
    if unit == "M":
        return base + relativedelta(months=n)
    if unit == "Y":
        return base + relativedelta(years=n)

    raise ValueError(f"Unsupported frequency unit: {unit!r}")
