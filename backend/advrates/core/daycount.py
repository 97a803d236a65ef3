from __future__ import annotations

import logging
import re
from typing import Optional

_log = logging.getLogger(__name__)


BASE_ACT_360 = "ACT/360"
BASE_ACT_365 = "ACT/365"
BASE_ACT_ACT = "ACT/ACT"
BASE_30_360 = "30/360"

# Compacted provider spellings (upper case, no blanks or brackets) per basis.
_SPELLINGS: dict[str, tuple[str, ...]] = {
    BASE_ACT_360: ("ACT/360", "ACT360", "A/360", "ACTUAL/360"),
    BASE_ACT_365: ("ACT/365", "ACT365", "A/365", "ACTUAL/365", "ACT/365F", "ACTUAL/365F", "ACT/365FIXED"),
    BASE_ACT_ACT: ("ACT/ACT", "ACTACT", "A/A", "ACTUAL/ACT", "ACTUAL/ACTUAL", "ACT/ACTISDA", "ACTUAL/ACTUALISDA"),
    BASE_30_360: ("30/360", "30360", "30E/360", "30E360", "30/360E", "30/360US", "30/360NASD", "30/360USNASD"),
}

DAY_COUNT_BASIS_MAP: dict[str, str] = {
    spelling: base for base, spellings in _SPELLINGS.items() for spelling in spellings
}

_NOISE = re.compile(r"[\s()\[\]]")


def _compact(value: str) -> str:
    return _NOISE.sub("", value.upper()).replace("-", "/")


def normalize_day_count_basis(value: Optional[str]) -> Optional[str]:
    """
    Canonical interest day-count basis for a rate record:
    ACT/360, ACT/365, ACT/ACT, 30/360.

    Blank input gives None. Unrecognized bases pass through upper-cased;
    the record stays usable and the provider value is logged.
    """
    if value is None:
        return None

    raw = str(value).strip()
    if raw == "":
        return None

    base = DAY_COUNT_BASIS_MAP.get(_compact(raw))
    if base is None:
        _log.warning("Unrecognized day count basis %r; passing through", raw)
        return raw.upper()
    return base
