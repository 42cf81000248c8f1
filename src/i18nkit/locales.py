"""Language tag parsing, canonicalisation, and fallback ancestry."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from .errors import InvalidLocaleError

_LANGUAGE_PATTERN = re.compile(r"^[A-Za-z]{2,3}$")
_SCRIPT_PATTERN = re.compile(r"^[A-Za-z]{4}$")
_REGION_PATTERN = re.compile(r"^(?:[A-Za-z]{2}|[0-9]{3})$")
_VARIANT_PATTERN = re.compile(r"^[A-Za-z0-9]{1,8}$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Locale:
    """Validated BCP-47 style locale identifier.

    Instances are produced by :func:`parse_locale`; the constructor re-checks
    every component so that a partially valid locale cannot exist. Equality,
    hashing and ordering all use the canonical tag.
    """

    language: str
    script: str | None = None
    region: str | None = None
    variants: tuple[str, ...] = ()
    canonical: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.language, str) or not _LANGUAGE_PATTERN.match(self.language):
            raise InvalidLocaleError(self.language, "language must be 2-3 letters")
        if self.language != self.language.lower():
            raise InvalidLocaleError(self.language, "language must be lowercase")
        if self.script is not None and (
            not _SCRIPT_PATTERN.match(self.script) or self.script != self.script.title()
        ):
            raise InvalidLocaleError(self.script, "script must be 4 letters in title case")
        if self.region is not None and (
            not _REGION_PATTERN.match(self.region) or self.region != self.region.upper()
        ):
            raise InvalidLocaleError(self.region, "region must be 2 uppercase letters or 3 digits")
        for variant in self.variants:
            if not _VARIANT_PATTERN.match(variant):
                raise InvalidLocaleError(variant, "variants must be 1-8 alphanumerics")

        parts = [self.language]
        if self.script:
            parts.append(self.script)
        if self.region:
            parts.append(self.region)
        parts.extend(self.variants)
        object.__setattr__(self, "canonical", "-".join(parts))

    def __str__(self) -> str:
        return self.canonical

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Locale):
            return NotImplemented
        return self.canonical == other.canonical

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Locale):
            return NotImplemented
        return self.canonical < other.canonical

    def __hash__(self) -> int:
        return hash(self.canonical)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            parse_locale,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def parse_locale(tag: str | Locale) -> Locale:
    """Parse ``tag`` into a :class:`Locale` or raise :class:`InvalidLocaleError`.

    Segments after the language are classified greedily: a 4-letter segment
    becomes the script, then a 2-letter or 3-digit segment becomes the region,
    and everything that remains is kept, in order, as variants. Underscores
    are accepted as separators so POSIX-style ``pt_BR`` tags parse too.
    """

    if isinstance(tag, Locale):
        return tag
    if not isinstance(tag, str):
        raise InvalidLocaleError(tag, "tag must be a string")

    stripped = tag.strip()
    if not stripped:
        raise InvalidLocaleError(tag, "tag is empty")

    segments = stripped.replace("_", "-").split("-")
    if any(not segment for segment in segments):
        raise InvalidLocaleError(tag, "empty subtag")

    language = segments[0]
    if not _LANGUAGE_PATTERN.match(language):
        raise InvalidLocaleError(tag, "language must be 2-3 letters")

    position = 1
    script: str | None = None
    region: str | None = None

    if position < len(segments) and _SCRIPT_PATTERN.match(segments[position]):
        script = segments[position].title()
        position += 1
    if position < len(segments) and _REGION_PATTERN.match(segments[position]):
        region = segments[position].upper()
        position += 1

    variants = tuple(segments[position:])
    for variant in variants:
        if not _VARIANT_PATTERN.match(variant):
            raise InvalidLocaleError(tag, f"invalid subtag {variant!r}")

    return Locale(language=language.lower(), script=script, region=region, variants=variants)


def try_parse_locale(tag: str | Locale | None) -> Locale | None:
    """Return the parsed locale, or ``None`` when ``tag`` is not valid."""

    if tag is None:
        return None
    try:
        return parse_locale(tag)
    except InvalidLocaleError:
        return None


def canonicalize(locale: Locale) -> str:
    """Join language, script, region and variants with ``-``."""

    return locale.canonical


def parent(locale: Locale) -> Locale | None:
    """Drop the most specific component present, or ``None`` for a bare language."""

    if locale.variants:
        return Locale(locale.language, locale.script, locale.region)
    if locale.region is not None:
        return Locale(locale.language, locale.script)
    if locale.script is not None:
        return Locale(locale.language)
    return None


def fallback_chain(locale: Locale) -> tuple[Locale, ...]:
    """Return ``locale`` followed by its ancestors down to the bare language."""

    chain: list[Locale] = []
    current: Locale | None = locale
    while current is not None:
        chain.append(current)
        current = parent(current)
    return tuple(chain)


__all__ = [
    "Locale",
    "canonicalize",
    "fallback_chain",
    "parent",
    "parse_locale",
    "try_parse_locale",
]
