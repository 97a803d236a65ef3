"""Calendar service responses, limited-pricing lookups and their request cache."""

from __future__ import annotations

from datetime import date, datetime

import pytest

from advrates.errors import MalformedDateError, UpstreamUnavailableError, require_upstream
from advrates.io.calendar_reader import (
    read_business_center_dates,
    read_holidays,
    read_limited_pricing_days,
)
from advrates.services.limited_pricing import LimitedPricingCalendar, filter_limited_pricing


CALENDAR = {
    "holidays": {
        "businessCenters": [
            {
                "businessCenter": "USNY",
                "days": {"day": [{"date": "2026-12-25"}, {"date": "2026-11-26"}]},
            },
            {
                "businessCenter": "FHLBSF Special Pricing Day",
                "days": {"day": {"date": "2026-11-27"}},
            },
        ]
    }
}


# ── Calendar reader ──────────────────────────────────────────────────────────

class TestCalendarReader:
    def test_holidays_sorted(self) -> None:
        assert read_holidays(CALENDAR) == [date(2026, 11, 26), date(2026, 12, 25)]

    def test_limited_pricing_single_day(self) -> None:
        assert read_limited_pricing_days(CALENDAR) == [date(2026, 11, 27)]

    def test_unknown_center_is_empty(self) -> None:
        assert read_business_center_dates(CALENDAR, "GBLO") == []
        assert read_holidays({}) == []

    def test_bad_date_is_fatal(self) -> None:
        bad = {"holidays": {"businessCenters": [{"businessCenter": "USNY", "days": {"day": [{"date": "xx"}]}}]}}
        with pytest.raises(MalformedDateError):
            read_holidays(bad)


# ── Limited pricing ──────────────────────────────────────────────────────────

class _CountingFetch:
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.calls: list[date] = []
        self.result = result if result is not None else [date(2026, 11, 27)]
        self.error = error

    def __call__(self, d: date):
        self.calls.append(d)
        if self.error is not None:
            raise self.error
        return self.result


class TestLimitedPricingCalendar:
    def test_lookup(self) -> None:
        cal = LimitedPricingCalendar(_CountingFetch())
        assert cal.is_limited_pricing_day(date(2026, 11, 27))
        assert not cal.is_limited_pricing_day(date(2026, 11, 30))

    def test_cache_hits_by_date(self) -> None:
        fetch = _CountingFetch()
        cal = LimitedPricingCalendar(fetch)
        for _ in range(3):
            cal.is_limited_pricing_day(date(2026, 11, 27))
        cal.is_limited_pricing_day(datetime(2026, 11, 27, 9, 0))
        assert fetch.calls == [date(2026, 11, 27)]
        assert set(cal.cache) == {"2026-11-27"}

    def test_shared_cache(self) -> None:
        cache: dict = {}
        fetch = _CountingFetch()
        LimitedPricingCalendar(fetch, cache).is_limited_pricing_day(date(2026, 11, 27))
        LimitedPricingCalendar(fetch, cache).is_limited_pricing_day(date(2026, 11, 27))
        assert len(fetch.calls) == 1

    def test_disabled_cache_gives_same_answers(self) -> None:
        days = [date(2026, 11, 26), date(2026, 11, 27), date(2026, 11, 27)]
        cached = LimitedPricingCalendar(_CountingFetch())
        fetch = _CountingFetch()
        uncached = LimitedPricingCalendar(fetch, enabled=False)
        assert [cached.is_limited_pricing_day(d) for d in days] == [
            uncached.is_limited_pricing_day(d) for d in days
        ]
        assert len(fetch.calls) == 3
        assert uncached.cache == {}

    def test_string_dates_from_service(self) -> None:
        cal = LimitedPricingCalendar(_CountingFetch(result=["2026-11-27"]))
        assert cal.is_limited_pricing_day(date(2026, 11, 27))

    def test_unreachable_service(self) -> None:
        cal = LimitedPricingCalendar(_CountingFetch(error=ConnectionError("boom")))
        with pytest.raises(UpstreamUnavailableError) as excinfo:
            cal.is_limited_pricing_day(date(2026, 11, 27))
        assert isinstance(excinfo.value.__cause__, ConnectionError)
        assert cal.cache == {}

    def test_empty_response(self) -> None:
        cal = LimitedPricingCalendar(lambda d: None)
        with pytest.raises(RuntimeError):
            cal.is_limited_pricing_day(date(2026, 11, 27))

    def test_filter_rows(self) -> None:
        rows = [
            {"effective_date": "2026-11-26", "rate": 1.0},
            {"effective_date": "2026-11-27", "rate": 1.1},
            {"effective_date": date(2026, 11, 30), "rate": 1.2},
        ]
        kept = filter_limited_pricing(rows, LimitedPricingCalendar(_CountingFetch()))
        assert [r["rate"] for r in kept] == [1.0, 1.2]


class TestRequireUpstream:
    def test_passes_values_through(self) -> None:
        assert require_upstream([], "holidays") == []

    def test_none_raises(self) -> None:
        with pytest.raises(UpstreamUnavailableError, match="rate bands"):
            require_upstream(None, "rate bands")
