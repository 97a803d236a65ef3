from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional

from advrates.errors import UpstreamUnavailableError
from advrates.io._utils import parse_date

_log = logging.getLogger(__name__)

FetchDates = Callable[[date], Optional[Iterable[date]]]


class LimitedPricingCalendar:
    """
    "Is this a limited-pricing day?" lookups backed by the calendar service.

    Build one per inbound request. Answers are cached per ISO date in
    ``cache``; with ``enabled=False`` every call goes to ``fetch_dates`` and
    the answers are the same.
    """

    def __init__(
        self,
        fetch_dates: FetchDates,
        cache: Optional[dict[str, frozenset[date]]] = None,
        *,
        enabled: bool = True,
    ) -> None:
        self.fetch_dates = fetch_dates
        self.cache = cache if cache is not None else {}
        self.enabled = enabled

    def _dates_for(self, d: date) -> frozenset[date]:
        key = d.isoformat()
        if self.enabled and key in self.cache:
            return self.cache[key]

        try:
            fetched = self.fetch_dates(d)
        except UpstreamUnavailableError:
            raise
        except Exception as exc:
            raise UpstreamUnavailableError(
                f"Holiday calendar service could not be reached for {key}"
            ) from exc
        if fetched is None:
            raise UpstreamUnavailableError(f"Holiday calendar service returned no data for {key}")

        dates = frozenset(parse_date(x, field="limited pricing day") for x in fetched)
        if self.enabled:
            self.cache[key] = dates
        return dates

    def is_limited_pricing_day(self, d: date | datetime) -> bool:
        day = d.date() if isinstance(d, datetime) else d
        return day in self._dates_for(day)


def filter_limited_pricing(
    rows: Iterable[Mapping[str, Any]],
    calendar: LimitedPricingCalendar,
    date_key: str = "effective_date",
) -> list[Mapping[str, Any]]:
    """Drop price-indication rows whose effective date is a limited-pricing day."""
    kept = []
    for row in rows:
        effective = parse_date(row[date_key], field=date_key)
        if calendar.is_limited_pricing_day(effective):
            _log.debug("Dropping row on limited pricing day %s", effective)
            continue
        kept.append(row)
    return kept
