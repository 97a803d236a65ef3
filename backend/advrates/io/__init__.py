from .calendar_reader import (
    read_business_center_dates,
    read_holidays,
    read_limited_pricing_days,
)
from .market_data_reader import PATHS, read_market_data

__all__ = [
    "PATHS",
    "read_market_data",
    "read_business_center_dates",
    "read_holidays",
    "read_limited_pricing_days",
]
