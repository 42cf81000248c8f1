"""Exception types raised at configuration and catalogue boundaries."""

from __future__ import annotations


class I18nError(ValueError):
    """Base class for errors surfaced by the translation engine."""


class InvalidLocaleError(I18nError):
    """Raised when a language tag does not satisfy the locale grammar."""

    def __init__(self, tag: object, reason: str) -> None:
        self.tag = tag
        self.reason = reason
        super().__init__(f"Invalid locale tag {tag!r}: {reason}")


class CatalogParseError(I18nError):
    """Raised when a translation payload cannot be turned into a catalogue."""


class ConfigurationError(I18nError):
    """Raised when engine settings violate schema expectations."""


__all__ = [
    "CatalogParseError",
    "ConfigurationError",
    "I18nError",
    "InvalidLocaleError",
]
