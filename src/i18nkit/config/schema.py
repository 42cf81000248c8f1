"""Pydantic models describing the translation engine configuration."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from typing_extensions import Self

from i18nkit.errors import ConfigurationError, InvalidLocaleError
from i18nkit.locales import Locale, parse_locale

MissingKeyHandler = Callable[[Locale, str], str]


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


def _coerce_locale(value: Any) -> Locale:
    try:
        return parse_locale(value)
    except InvalidLocaleError as error:
        raise ConfigurationError(str(error)) from error


class EngineSettings(ImmutableModel):
    """Validated, immutable configuration for a translation engine."""

    locales: tuple[Locale, ...]
    default_locale: Locale = Field(alias="defaultLocale")
    fallbacks: Mapping[Locale, Locale] = Field(default_factory=dict)
    object_notation: bool | str = Field(default=True, alias="objectNotation")
    accelerated_plurals: bool = Field(default=True, alias="acceleratedPlurals")
    missing_key_handler: MissingKeyHandler | None = Field(
        default=None, alias="missingKeyHandler", exclude=True
    )

    @model_validator(mode="before")
    @classmethod
    def _default_to_first_locale(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        if data.get("default_locale", data.get("defaultLocale")) is not None:
            return data

        locales = data.get("locales")
        if isinstance(locales, (list, tuple)):
            first = locales[0] if locales else None
        else:
            first = locales
        payload = {key: value for key, value in data.items() if key != "defaultLocale"}
        payload["default_locale"] = first
        return payload

    @field_validator("locales", mode="before")
    @classmethod
    def _coerce_locales(cls, value: Any) -> tuple[Locale, ...]:
        if isinstance(value, (str, Locale)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError("Locales must be provided as a list of tags")

        parsed: list[Locale] = []
        for entry in value:
            locale = _coerce_locale(entry)
            if locale not in parsed:
                parsed.append(locale)
        if not parsed:
            raise ConfigurationError("At least one locale must be configured")
        return tuple(parsed)

    @field_validator("default_locale", mode="before")
    @classmethod
    def _coerce_default(cls, value: Any) -> Locale:
        if value is None:
            raise ConfigurationError("A default locale requires at least one configured locale")
        return _coerce_locale(value)

    @field_validator("fallbacks", mode="before")
    @classmethod
    def _coerce_fallbacks(cls, value: Any) -> Mapping[Locale, Locale]:
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise ConfigurationError("Fallbacks must be provided as a mapping")
        return {_coerce_locale(key): _coerce_locale(target) for key, target in value.items()}

    @field_validator("object_notation", mode="before")
    @classmethod
    def _validate_separator(cls, value: Any) -> bool | str:
        if isinstance(value, str) and not value:
            raise ConfigurationError("Object notation separators cannot be empty")
        return value

    @model_validator(mode="after")
    def _validate_references(self) -> Self:
        default = self.default_locale
        if default not in self.locales:
            raise ConfigurationError(
                f"Default locale '{default}' is not one of the configured locales"
            )

        for source, target in self.fallbacks.items():
            if target not in self.locales:
                raise ConfigurationError(
                    f"Fallback target '{target}' for '{source}' is not a configured locale"
                )
        return self

    @property
    def default(self) -> Locale:
        """Return the resolved default locale."""

        return self.default_locale

    @property
    def separator(self) -> str | None:
        """Return the key separator, or ``None`` when keys are flat."""

        if self.object_notation is True:
            return "."
        if isinstance(self.object_notation, str):
            return self.object_notation
        return None

    def is_configured(self, locale: Locale) -> bool:
        return locale in self.locales


def build_settings(settings: EngineSettings | Mapping[str, Any] | None = None, **options: Any) -> EngineSettings:
    """Validate ``settings`` (or keyword options) into :class:`EngineSettings`.

    Validation failures surface as :class:`ConfigurationError`.
    """

    if isinstance(settings, EngineSettings):
        if not options:
            return settings
        settings = {name: getattr(settings, name) for name in EngineSettings.model_fields}

    raw: dict[str, Any] = dict(settings or {})
    raw.update(options)
    raw.setdefault("locales", ["en"])

    try:
        return EngineSettings.model_validate(raw)
    except ValidationError as error:
        raise ConfigurationError(f"Engine settings validation failed: {error}") from error


__all__ = [
    "ConfigurationError",
    "EngineSettings",
    "ImmutableModel",
    "MissingKeyHandler",
    "build_settings",
]
