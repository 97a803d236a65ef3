"""Pydantic models defining the JSON contract of the rate summary."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field


# ── Rate band ───────────────────────────────────────────────────────────────

class RateBandInfo(BaseModel):
    low_band_warn_delta: float
    low_band_off_delta: float
    high_band_warn_delta: float
    high_band_off_delta: float
    low_band_off_rate: float
    low_band_warn_rate: float
    high_band_warn_rate: float
    high_band_off_rate: float
    min_threshold_exceeded: bool
    max_threshold_exceeded: bool


# ── Summary ─────────────────────────────────────────────────────────────────

class RateSummaryEntry(BaseModel):
    rate: float | None = None
    start_of_day_rate: float
    maturity_date: date
    payment_on: str
    interest_day_count: str | None = None
    days_to_maturity: int | None = None
    disabled: bool | None = None
    end_of_day: bool | None = None
    rate_band_info: RateBandInfo | None = None

    def to_wire(self) -> dict[str, Any]:
        """JSON leaf; ``rate`` is always present, other unset fields are dropped."""
        payload = self.model_dump(mode="json", exclude_none=True)
        payload.setdefault("rate", None)
        return payload


class RateSummaryResponse(BaseModel):
    timestamp: datetime
    rates: dict[str, dict[str, RateSummaryEntry]] = Field(default_factory=dict)

    def to_flat_dict(self) -> dict[str, Any]:
        """``{"<loan_type>": {"<term>": {...}}, "timestamp": "<ISO-8601>"}``"""
        flat: dict[str, Any] = {
            loan_type: {term: entry.to_wire() for term, entry in by_term.items()}
            for loan_type, by_term in self.rates.items()
        }
        flat["timestamp"] = self.timestamp.isoformat()
        return flat
