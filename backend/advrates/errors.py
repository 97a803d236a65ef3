"""Exception taxonomy for the rates engine.

Every error raised on purpose by the package derives from
``AdvanceRatesError`` and from the builtin the rest of the codebase would
expect (``ValueError`` for bad documents, ``KeyError`` for missing lookups,
``RuntimeError`` for unreachable collaborators), so callers can catch at
either level.
"""

from __future__ import annotations

from typing import Optional, TypeVar

T = TypeVar("T")


class AdvanceRatesError(Exception):
    """Base class for all rates engine errors."""


class UpstreamUnavailableError(AdvanceRatesError, RuntimeError):
    """A collaborator (provider, calendar, configuration store) returned no data."""


class MalformedDocumentError(AdvanceRatesError, ValueError):
    """A provider document cannot be turned into typed records."""


class MalformedDateError(MalformedDocumentError):
    """A date field in a provider document does not parse."""


class ConfigurationGapError(AdvanceRatesError, KeyError):
    """Rate band or loan term configuration is missing for a canonical term."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class MissingTermError(AdvanceRatesError, KeyError):
    """An upstream snapshot omitted a canonical term for a loan type."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class BusinessDaySearchError(AdvanceRatesError, ValueError):
    """No business day found within the search limit (corrupt holiday data)."""


def require_upstream(value: Optional[T], name: str) -> T:
    """Return ``value`` or raise ``UpstreamUnavailableError`` when it is None."""
    if value is None:
        raise UpstreamUnavailableError(f"{name} unavailable: upstream returned no data")
    return value
