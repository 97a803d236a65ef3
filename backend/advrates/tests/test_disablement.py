"""Disable decision: blackout, administrative flags, rate band breaches."""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from advrates.core.bands import RateBandConfig, evaluate_rate_band
from advrates.core.disablement import (
    LoanTermStatus,
    disablement_flags,
    is_disabled,
    loan_term_statuses_from_mapping,
)
from advrates.core.terms import LoanType, Term


MATURITY = date(2026, 11, 19)
CONFIG = RateBandConfig(low_band_off_bp=50, low_band_warn_bp=25, high_band_off_bp=50, high_band_warn_bp=25)
INSIDE = evaluate_rate_band("2.00", "2.00", CONFIG)
BELOW = evaluate_rate_band("1.40", "2.00", CONFIG)
ABOVE = evaluate_rate_band("2.60", "2.00", CONFIG)
OPEN_STATUS = LoanTermStatus(trade_status=True, display_status=True)


# ── Single reasons ───────────────────────────────────────────────────────────

class TestDisablementFlags:
    def test_nothing_wrong(self) -> None:
        flags = disablement_flags(MATURITY, INSIDE, OPEN_STATUS, set())
        assert not flags.disabled
        assert flags.reasons == []

    @pytest.mark.parametrize(
        "band,status,blackout,reason",
        [
            (INSIDE, OPEN_STATUS, {MATURITY}, "blacked_out"),
            (INSIDE, LoanTermStatus(False, True), set(), "cant_trade"),
            (INSIDE, LoanTermStatus(True, False), set(), "cant_display"),
            (BELOW, OPEN_STATUS, set(), "min_threshold_exceeded"),
            (ABOVE, OPEN_STATUS, set(), "max_threshold_exceeded"),
        ],
    )
    def test_each_reason_alone_disables(self, band, status, blackout, reason) -> None:
        flags = disablement_flags(MATURITY, band, status, blackout)
        assert flags.disabled
        assert flags.reasons == [reason]

    def test_all_reasons_reported(self) -> None:
        flags = disablement_flags(MATURITY, BELOW, LoanTermStatus(False, False), [MATURITY])
        assert flags.reasons == ["blacked_out", "cant_trade", "cant_display", "min_threshold_exceeded"]

    def test_blackout_on_other_day_is_ignored(self) -> None:
        assert not disablement_flags(MATURITY, INSIDE, OPEN_STATUS, [date(2026, 11, 20)]).disabled

    def test_no_band_never_breaches(self) -> None:
        assert not disablement_flags(MATURITY, None, OPEN_STATUS, ()).disabled


class TestIsDisabled:
    def test_entry_like_object(self) -> None:
        entry = SimpleNamespace(maturity_date=MATURITY, rate_band_info=ABOVE)
        assert is_disabled(entry, OPEN_STATUS, ())
        entry.rate_band_info = INSIDE
        assert not is_disabled(entry, OPEN_STATUS, ())


# ── Status configuration ─────────────────────────────────────────────────────

class TestLoanTermStatuses:
    def test_nested_store_shape(self) -> None:
        statuses = loan_term_statuses_from_mapping(
            {
                "1week": {"whole": {"trade_status": True, "display_status": False}},
                "4month": {"whole": {"trade_status": True, "display_status": True}},
                "overnight": {"jumbo": {"trade_status": True, "display_status": True}},
            }
        )
        assert statuses == {(Term.WEEK_1, LoanType.WHOLE): LoanTermStatus(True, False)}

    def test_missing_flags_are_false(self) -> None:
        assert LoanTermStatus.from_mapping({}) == LoanTermStatus(False, False)
