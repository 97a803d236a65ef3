from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet, Iterable, Optional, Union

from dateutil.relativedelta import relativedelta

from advrates.config import BUSINESS_DAY_SEARCH_LIMIT
from advrates.errors import BusinessDaySearchError

# Month- and year-denominated terms must not roll into the following month.
MONTH_END_UNITS = frozenset({"M", "Y"})

Holidays = Optional[Union[AbstractSet[date], Iterable[date]]]


def _as_holiday_set(holidays: Holidays) -> AbstractSet[date]:
    if not holidays:
        return frozenset()
    if isinstance(holidays, (set, frozenset)):
        return holidays
    return frozenset(holidays)


def _as_step(step: Union[int, timedelta]) -> timedelta:
    delta = step if isinstance(step, timedelta) else timedelta(days=step)
    if delta not in (timedelta(days=1), timedelta(days=-1)):
        raise ValueError(f"step must be +1 or -1 day, got {step!r}")
    return delta


def end_of_month(d: date) -> date:
    return d + relativedelta(day=31)


def is_business_day(d: date, holidays: Holidays = None) -> bool:
    """Not a Saturday, not a Sunday and not a holiday."""
    return d.weekday() < 5 and d not in _as_holiday_set(holidays)


def next_business_day(
    d: date,
    step: Union[int, timedelta],
    holidays: Holidays = None,
    *,
    limit: int = BUSINESS_DAY_SEARCH_LIMIT,
) -> date:
    """
    Walk from ``d`` by ``step`` (+1 / -1 day) until a business day is found.

    ``d`` itself is returned when it is already a business day. More than
    ``limit`` consecutive closed days means the holiday data is broken.
    """
    delta = _as_step(step)
    closed = _as_holiday_set(holidays)

    candidate = d
    for _ in range(limit + 1):
        if candidate.weekday() < 5 and candidate not in closed:
            return candidate
        candidate = candidate + delta

    raise BusinessDaySearchError(
        f"No business day within {limit} days of {d.isoformat()} (step {delta.days:+d})"
    )


def resolve_maturity_date(
    candidate_base: date,
    frequency_unit: str,
    holidays: Holidays = None,
) -> date:
    """
    Business-day corrected maturity for a term's literal maturity date.

    Rolls forward; month/year terms roll backward instead when the forward
    roll would leave ``candidate_base``'s month.
    """
    closed = _as_holiday_set(holidays)
    candidate = next_business_day(candidate_base, 1, closed)
    unit = str(frequency_unit).strip().upper()
    if unit in MONTH_END_UNITS and candidate > end_of_month(candidate_base):
        return next_business_day(candidate_base, -1, closed)
    return candidate
