from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Union

Number = Union[Decimal, int, float, str, None]

_HUNDRED = Decimal(100)


def to_decimal(value: Number) -> Decimal:
    """
    Fixed-point view of a rate or basis-point value.

    Floats go through ``str`` so 1.4 stays 1.4; None and blanks count as zero.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a rate")
    s = str(value).strip()
    if s == "":
        return Decimal(0)
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


@dataclass(frozen=True)
class RateBandConfig:
    """Tolerance window around the start-of-day rate, in basis points."""

    low_band_off_bp: Decimal
    low_band_warn_bp: Decimal
    high_band_off_bp: Decimal
    high_band_warn_bp: Decimal

    def __post_init__(self) -> None:
        for name in ("low_band_off_bp", "low_band_warn_bp", "high_band_off_bp", "high_band_warn_bp"):
            object.__setattr__(self, name, to_decimal(getattr(self, name)))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RateBandConfig":
        """Build from the configuration store's ``LOW_BAND_OFF_BP`` style keys."""
        keys = {str(k).upper(): v for k, v in data.items()}
        missing = [
            k for k in ("LOW_BAND_OFF_BP", "LOW_BAND_WARN_BP", "HIGH_BAND_OFF_BP", "HIGH_BAND_WARN_BP")
            if k not in keys
        ]
        if missing:
            raise ValueError(f"Rate band configuration without {missing}")
        return cls(
            low_band_off_bp=keys["LOW_BAND_OFF_BP"],
            low_band_warn_bp=keys["LOW_BAND_WARN_BP"],
            high_band_off_bp=keys["HIGH_BAND_OFF_BP"],
            high_band_warn_bp=keys["HIGH_BAND_WARN_BP"],
        )


@dataclass(frozen=True)
class RateBandResult:
    low_band_warn_delta: Decimal
    low_band_off_delta: Decimal
    high_band_warn_delta: Decimal
    high_band_off_delta: Decimal
    low_band_off_rate: Decimal
    low_band_warn_rate: Decimal
    high_band_warn_rate: Decimal
    high_band_off_rate: Decimal
    min_threshold_exceeded: bool
    max_threshold_exceeded: bool

    @property
    def threshold_exceeded(self) -> bool:
        return self.min_threshold_exceeded or self.max_threshold_exceeded

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def evaluate_rate_band(
    live_rate: Number,
    start_of_day_rate: Number,
    config: RateBandConfig,
) -> RateBandResult:
    """
    Thresholds around the start-of-day rate and the two breach flags.

    Only the "off" thresholds set the flags; warn thresholds are informational.
    """
    live = to_decimal(live_rate)
    sod = to_decimal(start_of_day_rate)

    low_off_delta = config.low_band_off_bp / _HUNDRED
    low_warn_delta = config.low_band_warn_bp / _HUNDRED
    high_off_delta = config.high_band_off_bp / _HUNDRED
    high_warn_delta = config.high_band_warn_bp / _HUNDRED

    low_off_rate = sod - low_off_delta
    high_off_rate = sod + high_off_delta

    return RateBandResult(
        low_band_warn_delta=low_warn_delta,
        low_band_off_delta=low_off_delta,
        high_band_warn_delta=high_warn_delta,
        high_band_off_delta=high_off_delta,
        low_band_off_rate=low_off_rate,
        low_band_warn_rate=sod - low_warn_delta,
        high_band_warn_rate=sod + high_warn_delta,
        high_band_off_rate=high_off_rate,
        min_threshold_exceeded=live < low_off_rate,
        max_threshold_exceeded=live > high_off_rate,
    )
