from .limited_pricing import LimitedPricingCalendar, filter_limited_pricing
from .summary import (
    RateSummary,
    SummaryEntry,
    assemble_rate_summary,
    check_configuration,
)

__all__ = [
    "LimitedPricingCalendar",
    "filter_limited_pricing",
    "RateSummary",
    "SummaryEntry",
    "assemble_rate_summary",
    "check_configuration",
]
