from __future__ import annotations

from datetime import date
from typing import Any

from advrates.config import HOLIDAY_BUSINESS_CENTER, LIMITED_PRICING_BUSINESS_CENTER
from advrates.io._utils import dig, norm_token, parse_date, to_sequence


def read_business_center_dates(document: Any, business_center: str) -> list[date]:
    """
    Dates listed for ``business_center`` in a calendar service response:

      {"holidays": {"businessCenters": [
          {"businessCenter": "USNY", "days": {"day": [{"date": "2026-11-26"}, ...]}}]}}

    A missing business center gives []. A date that does not parse is fatal.
    """
    centers = to_sequence(dig(document, ("holidays", "businessCenters")))
    for center in centers:
        if norm_token(dig(center, ("businessCenter",))) != business_center:
            continue
        days = to_sequence(dig(center, ("days", "day")))
        return sorted(parse_date(dig(day, ("date",)), field="calendar date") for day in days)
    return []


def read_holidays(document: Any) -> list[date]:
    return read_business_center_dates(document, HOLIDAY_BUSINESS_CENTER)


def read_limited_pricing_days(document: Any) -> list[date]:
    return read_business_center_dates(document, LIMITED_PRICING_BUSINESS_CENTER)
