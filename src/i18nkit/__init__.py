"""Locale-aware translation, pluralisation and relative-time formatting."""

from .catalog import Catalog, CatalogMetadata, PluralForms, merge
from .config import EngineSettings, build_settings, load_settings
from .engine import TranslationEngine, create_engine
from .errors import CatalogParseError, ConfigurationError, I18nError, InvalidLocaleError
from .locales import Locale, canonicalize, fallback_chain, parent, parse_locale, try_parse_locale
from .plurals import PluralCategory, PluralOperands, get_operands, select_plural_category
from .relative_time import NumericMode, RelativeTimeConfig, RelativeTimeStyle, TimeUnit, format_delta

__all__ = [
    "Catalog",
    "CatalogMetadata",
    "CatalogParseError",
    "ConfigurationError",
    "EngineSettings",
    "I18nError",
    "InvalidLocaleError",
    "Locale",
    "NumericMode",
    "PluralCategory",
    "PluralForms",
    "PluralOperands",
    "RelativeTimeConfig",
    "RelativeTimeStyle",
    "TimeUnit",
    "TranslationEngine",
    "build_settings",
    "canonicalize",
    "create_engine",
    "fallback_chain",
    "format_delta",
    "get_operands",
    "load_settings",
    "merge",
    "parent",
    "parse_locale",
    "select_plural_category",
    "try_parse_locale",
]
