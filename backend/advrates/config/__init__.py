"""Static tables and environment overrides for the rates engine."""

from __future__ import annotations

import os

# Provider display name per loan type (the "name" field of a market-data block).
LOAN_TYPE_NAMES: dict[str, str] = {
    "whole": "FRC_WL",
    "agency": "FRC_AGCY",
    "aaa": "FRC_AAA",
    "aa": "FRC_AA",
}

# Canonical term order as shown to members. Frequency units: D, W, M, Y.
TERM_PERIODS: dict[str, tuple[int, str]] = {
    "overnight": (1, "D"),
    "open": (1, "D"),
    "1week": (1, "W"),
    "2week": (2, "W"),
    "3week": (3, "W"),
    "1month": (1, "M"),
    "2month": (2, "M"),
    "3month": (3, "M"),
    "6month": (6, "M"),
    "1year": (1, "Y"),
    "2year": (2, "Y"),
    "3year": (3, "Y"),
}

PAYMENT_ON = "Maturity"

# Calendar service business centers.
HOLIDAY_BUSINESS_CENTER = "USNY"
LIMITED_PRICING_BUSINESS_CENTER = "FHLBSF Special Pricing Day"


# Upper bound on consecutive non-business days walked by the resolver.
BUSINESS_DAY_SEARCH_LIMIT: int = int(os.environ.get("ADVRATES_BUSINESS_DAY_SEARCH_LIMIT", "14"))
