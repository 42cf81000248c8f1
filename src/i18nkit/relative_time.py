"""Human-readable relative time phrases ("yesterday", "3 days ago").

Unit vocabulary lives in ``data/relative_time.yaml`` and is validated with the
same frozen pydantic models used for engine settings. Plural forms of unit
names come from the plural rule engine, and the language family decides where
the direction marker goes.
"""

from __future__ import annotations

import logging
import math
import time as _time
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from functools import cache
from importlib import resources
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator

from .catalog import PluralForms
from .config.schema import ConfigurationError, ImmutableModel
from .locales import Locale, fallback_chain, parse_locale
from .plurals import select_plural_category

_LOGGER = logging.getLogger(__name__)

_DATA_PACKAGE = "i18nkit"
_DATA_RESOURCE = "data/relative_time.yaml"
_BASE_LANGUAGE = "en"
_NOW_THRESHOLD_SECONDS = 10
_UNIT_THRESHOLD = 0.5


class TimeUnit(str, Enum):
    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"


class RelativeTimeStyle(str, Enum):
    LONG = "long"
    SHORT = "short"
    NARROW = "narrow"


class NumericMode(str, Enum):
    ALWAYS = "always"
    AUTO = "auto"


class WordOrder(str, Enum):
    """Where the direction marker sits relative to the quantity."""

    CJK = "cjk"
    PREFIX = "prefix"
    SUFFIX_PAST = "suffix_past"


SECONDS_PER_UNIT: Mapping[TimeUnit, int] = MappingProxyType(
    {
        TimeUnit.YEAR: 365 * 24 * 60 * 60,
        TimeUnit.MONTH: 30 * 24 * 60 * 60,
        TimeUnit.WEEK: 7 * 24 * 60 * 60,
        TimeUnit.DAY: 24 * 60 * 60,
        TimeUnit.HOUR: 60 * 60,
        TimeUnit.MINUTE: 60,
        TimeUnit.SECOND: 1,
    }
)

_WORD_ORDER: Mapping[str, WordOrder] = MappingProxyType(
    {
        "ja": WordOrder.CJK,
        "zh": WordOrder.CJK,
        "ko": WordOrder.CJK,
        "de": WordOrder.PREFIX,
        "fr": WordOrder.PREFIX,
        "es": WordOrder.PREFIX,
        "ar": WordOrder.PREFIX,
        "en": WordOrder.SUFFIX_PAST,
        "it": WordOrder.SUFFIX_PAST,
        "ru": WordOrder.SUFFIX_PAST,
        "pl": WordOrder.SUFFIX_PAST,
    }
)


class UnitNames(ImmutableModel):
    """Long (plural-aware), short and narrow names of one unit."""

    long: PluralForms
    short: str
    narrow: str

    @field_validator("long", mode="before")
    @classmethod
    def _coerce_long(cls, value: Any) -> PluralForms:
        if isinstance(value, PluralForms):
            return value
        if not isinstance(value, Mapping) or not isinstance(value.get("other"), str):
            raise ConfigurationError("Long unit names require an 'other' form")
        return PluralForms(**{str(key): str(text) for key, text in value.items()})


class RelativePhrases(ImmutableModel):
    """Idiomatic phrases for the previous, current and next unit."""

    previous: str
    current: str
    next: str


class RelativeTimeLocaleData(ImmutableModel):
    """Relative-time vocabulary for one language."""

    past: str
    future: str
    now: str
    units: Mapping[TimeUnit, UnitNames]
    phrases: Mapping[TimeUnit, RelativePhrases] = Field(default_factory=dict)

    @field_validator("units")
    @classmethod
    def _require_all_units(cls, value: Mapping[TimeUnit, UnitNames]) -> Mapping[TimeUnit, UnitNames]:
        missing = [unit.value for unit in TimeUnit if unit not in value]
        if missing:
            raise ConfigurationError(f"Missing relative-time units: {', '.join(missing)}")
        return value


@cache
def _load_locale_data() -> Mapping[str, RelativeTimeLocaleData]:
    """Load and validate the bundled relative-time vocabulary."""

    resource = resources.files(_DATA_PACKAGE).joinpath(_DATA_RESOURCE)
    with resource.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigurationError("Relative-time data must define a mapping at the top level")

    parsed: dict[str, RelativeTimeLocaleData] = {}
    for language, entry in payload.items():
        try:
            parsed[str(language)] = RelativeTimeLocaleData.model_validate(entry)
        except ValidationError as error:
            raise ConfigurationError(
                f"Relative-time data validation failed for {language}: {error}"
            ) from error
    return MappingProxyType(parsed)


def supported_languages() -> tuple[str, ...]:
    return tuple(sorted(_load_locale_data()))


def _resolve_data(locale: Locale) -> tuple[str, RelativeTimeLocaleData]:
    data = _load_locale_data()
    for candidate in fallback_chain(locale):
        entry = data.get(candidate.canonical)
        if entry is not None:
            return candidate.canonical, entry
    _LOGGER.debug("No relative-time data for %s; using %s", locale, _BASE_LANGUAGE)
    return _BASE_LANGUAGE, data[_BASE_LANGUAGE]


def _round_half_up(value: float) -> int:
    return int(math.floor(abs(value) + 0.5))


@dataclass(frozen=True)
class RelativeTimeConfig:
    """Formatting options for relative time phrases."""

    locale: Locale
    style: RelativeTimeStyle = RelativeTimeStyle.LONG
    numeric: NumericMode = NumericMode.ALWAYS

    def __post_init__(self) -> None:
        object.__setattr__(self, "locale", parse_locale(self.locale))
        object.__setattr__(self, "style", RelativeTimeStyle(self.style))
        object.__setattr__(self, "numeric", NumericMode(self.numeric))

    def format(self, delta_seconds: float) -> str:
        return format_delta(self, delta_seconds)


def select_unit(delta_seconds: float) -> tuple[TimeUnit, float]:
    """Pick the largest unit in which ``delta_seconds`` exceeds half a unit."""

    magnitude = abs(delta_seconds)
    for unit, seconds in SECONDS_PER_UNIT.items():
        if unit is TimeUnit.SECOND:
            break
        if magnitude / seconds > _UNIT_THRESHOLD:
            return unit, delta_seconds / seconds
    return TimeUnit.SECOND, float(delta_seconds)


def get_unit_name(
    locale: Locale | str,
    unit: TimeUnit | str,
    magnitude: float,
    style: RelativeTimeStyle | str = RelativeTimeStyle.LONG,
) -> str:
    """Return the name of ``unit`` for ``magnitude`` in ``locale``.

    Long names follow the plural category of the rounded magnitude; short and
    narrow names are invariant.
    """

    language, data = _resolve_data(parse_locale(locale))
    names = data.units[TimeUnit(unit)]
    style = RelativeTimeStyle(style)

    if style is RelativeTimeStyle.NARROW:
        return names.narrow
    if style is RelativeTimeStyle.SHORT:
        return names.short

    category = select_plural_category(_round_half_up(magnitude), language)
    return names.long.for_category(category)


def _idiomatic_phrase(
    data: RelativeTimeLocaleData, unit: TimeUnit, value: float, magnitude: int
) -> str | None:
    if unit is TimeUnit.SECOND:
        return data.now if magnitude < _NOW_THRESHOLD_SECONDS else None

    phrases = data.phrases.get(unit)
    if phrases is None:
        return None
    if value == 0:
        return phrases.current
    if value == -1:
        return phrases.previous
    if value == 1:
        return phrases.next
    return None


def format_relative(config: RelativeTimeConfig, value: float, unit: TimeUnit | str) -> str:
    """Render ``value`` units relative to now; negative values lie in the past."""

    unit = TimeUnit(unit)
    language, data = _resolve_data(config.locale)
    magnitude = _round_half_up(value)

    if config.numeric is NumericMode.AUTO:
        phrase = _idiomatic_phrase(data, unit, value, magnitude)
        if phrase is not None:
            return phrase

    name = get_unit_name(config.locale, unit, magnitude, config.style)
    is_past = value < 0
    marker = data.past if is_past else data.future
    order = _WORD_ORDER.get(language.split("-")[0], WordOrder.SUFFIX_PAST)

    if order is WordOrder.CJK:
        return f"{magnitude}{name}{marker}"
    if order is WordOrder.PREFIX or not is_past:
        return f"{marker} {magnitude} {name}"
    return f"{magnitude} {name} {marker}"


def format_delta(config: RelativeTimeConfig, delta_seconds: float) -> str:
    """Select a unit for ``delta_seconds`` and render it."""

    unit, value = select_unit(delta_seconds)
    return format_relative(config, value, unit)


def _as_datetime(value: datetime | date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def _align(value: datetime, reference: datetime) -> tuple[datetime, datetime]:
    if (value.tzinfo is None) == (reference.tzinfo is None):
        return value, reference
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc), reference
    return value, reference.replace(tzinfo=timezone.utc)


def from_dates(
    config: RelativeTimeConfig,
    value: datetime | date,
    reference: datetime | date | None = None,
) -> str:
    """Describe ``value`` relative to ``reference`` (defaults to now)."""

    moment = _as_datetime(value)
    if reference is None:
        anchor = datetime.now(moment.tzinfo) if moment.tzinfo else datetime.now()
    else:
        anchor = _as_datetime(reference)
    moment, anchor = _align(moment, anchor)
    return format_delta(config, (moment - anchor).total_seconds())


def from_timestamp(
    config: RelativeTimeConfig, timestamp: float, now: float | None = None
) -> str:
    """Describe a POSIX timestamp (seconds) relative to ``now``."""

    reference = _time.time() if now is None else now
    return format_delta(config, timestamp - reference)


def from_iso_string(
    config: RelativeTimeConfig,
    text: str,
    reference: datetime | date | None = None,
) -> str | None:
    """Describe an ISO-8601 timestamp; malformed input yields ``None``."""

    if not isinstance(text, str) or not text.strip():
        return None
    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(candidate)
    except ValueError:
        _LOGGER.debug("Ignoring malformed ISO timestamp %r", text)
        return None
    return from_dates(config, moment, reference)


__all__ = [
    "NumericMode",
    "RelativePhrases",
    "RelativeTimeConfig",
    "RelativeTimeLocaleData",
    "RelativeTimeStyle",
    "SECONDS_PER_UNIT",
    "TimeUnit",
    "UnitNames",
    "WordOrder",
    "format_delta",
    "format_relative",
    "from_dates",
    "from_iso_string",
    "from_timestamp",
    "get_unit_name",
    "select_unit",
    "supported_languages",
]
