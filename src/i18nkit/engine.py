"""Immutable translation engine resolving keys through locale fallbacks.

The engine is a value: switching locale or loading translations returns a new
engine and leaves the original untouched, so one instance can be shared
between concurrent callers while each request holds its own locale override.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any

from .catalog import Catalog, PluralForms
from .config.schema import EngineSettings, build_settings
from .errors import ConfigurationError
from .interpolation import interpolate_named, interpolate_positional
from .locales import Locale, fallback_chain, parse_locale, try_parse_locale
from .plurals import TABLE_EVALUATOR, Number, PluralCategory, select_plural_category

_LOGGER = logging.getLogger(__name__)


def _format_count(count: Number) -> str:
    if isinstance(count, float) and count.is_integer():
        return str(int(count))
    return str(count)


@dataclass(frozen=True)
class TranslationEngine:
    """Translation lookups for a fixed configuration and a current locale."""

    settings: EngineSettings
    catalogs: Mapping[Locale, Catalog]
    current_locale: Locale

    @classmethod
    def create(
        cls, settings: EngineSettings | Mapping[str, Any] | None = None, **options: Any
    ) -> TranslationEngine:
        """Validate ``settings`` and build an engine with empty catalogues."""

        validated = build_settings(settings, **options)
        catalogs = {locale: Catalog.empty(locale) for locale in validated.locales}
        return cls(
            settings=validated,
            catalogs=MappingProxyType(catalogs),
            current_locale=validated.default,
        )

    @property
    def locale(self) -> Locale:
        return self.current_locale

    @property
    def locales(self) -> tuple[Locale, ...]:
        return self.settings.locales

    @property
    def default_locale(self) -> Locale:
        return self.settings.default

    def resolve_locale(self, locale: str | Locale | None) -> Locale:
        """Map any requested locale onto a configured one.

        Order: the locale itself, its fallback entry, its closest configured
        ancestor, then the default locale.
        """

        requested = try_parse_locale(locale)
        if requested is None:
            _LOGGER.debug("Unparseable locale %r; using default", locale)
            return self.default_locale
        if self.settings.is_configured(requested):
            return requested

        fallback = self.settings.fallbacks.get(requested)
        if fallback is not None:
            _LOGGER.debug("Locale %s resolved via fallback to %s", requested, fallback)
            return fallback

        for ancestor in fallback_chain(requested)[1:]:
            if self.settings.is_configured(ancestor):
                _LOGGER.debug("Locale %s resolved via ancestor %s", requested, ancestor)
                return ancestor
            target = self.settings.fallbacks.get(ancestor)
            if target is not None:
                _LOGGER.debug("Locale %s resolved via fallback to %s", requested, target)
                return target

        _LOGGER.debug("Locale %s is not configured; using default", requested)
        return self.default_locale

    def set_locale(self, locale: str | Locale | None) -> TranslationEngine:
        """Return an engine whose current locale is the resolved ``locale``."""

        resolved = self.resolve_locale(locale)
        if resolved == self.current_locale:
            return self
        return replace(self, current_locale=resolved)

    def get_catalog(self, locale: str | Locale | None = None) -> Catalog:
        """Return the catalogue for ``locale`` (resolved) or the current locale."""

        target = self.current_locale if locale is None else self.resolve_locale(locale)
        return self.catalogs[target]

    def load_translations(
        self,
        locale: str | Locale,
        payload: str | bytes | Mapping[str, Any],
        *,
        source: str | None = None,
        last_modified: datetime | None = None,
        strict: bool = False,
    ) -> TranslationEngine:
        """Parse ``payload`` and merge it over the catalogue of ``locale``.

        The merged catalogue records ``source`` and ``last_modified``; the
        latter defaults to the current UTC time.

        Raises :class:`CatalogParseError` for malformed payloads and
        :class:`ConfigurationError` when ``locale`` is not configured.
        """

        target = parse_locale(locale)
        if not self.settings.is_configured(target):
            raise ConfigurationError(f"Locale '{target}' is not configured")

        incoming = Catalog.from_json(
            target,
            payload,
            source=source,
            last_modified=last_modified or datetime.now(timezone.utc),
            strict=strict,
        )
        catalogs = dict(self.catalogs)
        catalogs[target] = catalogs[target].merge(incoming)
        _LOGGER.debug("Loaded %d entries into %s", len(incoming), target)
        return replace(self, catalogs=MappingProxyType(catalogs))

    def add_locale(self, locale: str | Locale) -> TranslationEngine:
        """Return an engine that also serves ``locale`` with an empty catalogue."""

        added = parse_locale(locale)
        if self.settings.is_configured(added):
            return self
        settings = build_settings(self.settings, locales=(*self.settings.locales, added))
        catalogs = dict(self.catalogs)
        catalogs[added] = Catalog.empty(added)
        return replace(self, settings=settings, catalogs=MappingProxyType(catalogs))

    def remove_locale(self, locale: str | Locale) -> TranslationEngine:
        """Return an engine without ``locale``; fallbacks pointing at it are dropped."""

        removed = parse_locale(locale)
        if not self.settings.is_configured(removed):
            return self
        if removed == self.default_locale:
            raise ConfigurationError("The default locale cannot be removed")

        fallbacks = {
            source: target
            for source, target in self.settings.fallbacks.items()
            if target != removed
        }
        settings = build_settings(
            self.settings,
            locales=tuple(entry for entry in self.settings.locales if entry != removed),
            fallbacks=fallbacks,
        )
        catalogs = {key: value for key, value in self.catalogs.items() if key != removed}
        current = self.current_locale
        engine = replace(self, settings=settings, catalogs=MappingProxyType(catalogs))
        if current == removed:
            engine = replace(engine, current_locale=engine.resolve_locale(current))
        return engine

    def _lookup_chain(self, locale: Locale) -> Iterator[Locale]:
        seen: set[Locale] = set()
        candidates = (locale, self.settings.fallbacks.get(locale), self.default_locale)
        for candidate in candidates:
            if candidate is not None and candidate not in seen:
                seen.add(candidate)
                yield candidate

    def _find(self, key: str, locale: Locale) -> tuple[Locale, str | PluralForms] | None:
        separator = self.settings.separator
        for candidate in self._lookup_chain(locale):
            catalog = self.catalogs.get(candidate)
            if catalog is None:
                continue
            value = catalog.get(key, separator)
            if isinstance(value, (str, PluralForms)):
                return candidate, value
        return None

    def _missing(self, key: str, locale: Locale) -> str:
        handler = self.settings.missing_key_handler
        if handler is None:
            _LOGGER.debug("Missing translation for %r in %s", key, locale)
            return key
        try:
            return str(handler(locale, key))
        except Exception:
            _LOGGER.warning("Missing-key handler failed for %r in %s", key, locale, exc_info=True)
            return key

    def _text(self, key: str, locale: Locale) -> str:
        found = self._find(key, locale)
        if found is None:
            return self._missing(key, locale)
        _, value = found
        if isinstance(value, PluralForms):
            return value.other
        return value

    def has_key(self, key: str, locale: str | Locale | None = None) -> bool:
        """Return whether the catalogue of ``locale`` itself defines ``key``."""

        catalog = self.get_catalog(locale)
        value = catalog.get(key, self.settings.separator)
        return isinstance(value, (str, PluralForms))

    def translate(self, key: str) -> str:
        """Translate ``key`` for the current locale; never fails.

        Lookup order: current catalogue, its configured fallback, the default
        catalogue, then the missing-key handler or the key itself.
        """

        return self._text(key, self.current_locale)

    def translate_in(self, locale: str | Locale, key: str) -> str:
        """Translate ``key`` as though ``locale`` were current."""

        return self._text(key, self.resolve_locale(locale))

    def translate_with(self, key: str, values: Mapping[str, Any]) -> str:
        """Translate ``key`` and fill its ``{{name}}`` placeholders."""

        return interpolate_named(self.translate(key), values)

    def translate_args(self, key: str, *args: Any) -> str:
        """Translate ``key`` and fill its ``%s``/``%d`` placeholders in order."""

        return interpolate_positional(self.translate(key), args)

    def plural_category(self, count: Number) -> PluralCategory:
        accelerated = TABLE_EVALUATOR if self.settings.accelerated_plurals else None
        return select_plural_category(count, self.current_locale, accelerated)

    def translate_plural(
        self, singular_key: str, plural_key: str, count: Number, *args: Any
    ) -> str:
        """Translate a count-dependent phrase.

        A plural entry stored under ``singular_key`` is projected onto the CLDR
        category of ``count``. Without one, the translations of the singular
        and plural keys (or the keys themselves) are chosen on one versus not
        one. The count fills the first positional placeholder and ``{{count}}``.
        """

        category = self.plural_category(count)
        found = self._find(singular_key, self.current_locale)

        if found is not None and isinstance(found[1], PluralForms):
            template = found[1].for_category(category)
        elif category is PluralCategory.ONE:
            template = self._text(singular_key, self.current_locale)
        else:
            template = self._text(plural_key, self.current_locale)

        rendered = interpolate_positional(template, (_format_count(count), *args))
        return interpolate_named(rendered, {"count": _format_count(count)})

    def translations_for(self, key: str) -> list[str]:
        """Return the translation of ``key`` in every configured locale."""

        return [self._text(key, locale) for locale in self.locales]

    def translation_map(self, key: str) -> dict[str, str]:
        """Return translations of ``key`` keyed by canonical locale tag."""

        return {locale.canonical: self._text(key, locale) for locale in self.locales}


def create_engine(
    settings: EngineSettings | Mapping[str, Any] | None = None, **options: Any
) -> TranslationEngine:
    """Convenience wrapper around :meth:`TranslationEngine.create`."""

    return TranslationEngine.create(settings, **options)


__all__ = ["TranslationEngine", "create_engine"]
