"""Unit tests for language tag parsing and fallback ancestry."""

from __future__ import annotations

import pytest

from i18nkit.errors import InvalidLocaleError
from i18nkit.locales import (
    Locale,
    canonicalize,
    fallback_chain,
    parent,
    parse_locale,
    try_parse_locale,
)


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ("en", "en"),
        ("EN", "en"),
        ("en-us", "en-US"),
        ("zh-hans-cn", "zh-Hans-CN"),
        ("es-419", "es-419"),
        ("sr-Latn", "sr-Latn"),
        ("de-CH-1901", "de-CH-1901"),
        ("pt_BR", "pt-BR"),
        ("ast", "ast"),
    ],
)
def test_parse_canonicalises_components(tag: str, expected: str) -> None:
    locale = parse_locale(tag)

    assert canonicalize(locale) == expected
    assert canonicalize(parse_locale(canonicalize(locale))) == expected


@pytest.mark.parametrize("tag", ["", "123", "e", "english", "en--US", "en-", "en-toolongvariant"])
def test_parse_rejects_malformed_tags(tag: str) -> None:
    with pytest.raises(InvalidLocaleError):
        parse_locale(tag)


def test_try_parse_returns_none_for_invalid_tags() -> None:
    assert try_parse_locale("123") is None
    assert try_parse_locale(None) is None
    assert try_parse_locale("fr-CA") == parse_locale("fr-CA")


def test_components_are_classified_greedily() -> None:
    locale = parse_locale("zh-Hant-TW")

    assert locale.language == "zh"
    assert locale.script == "Hant"
    assert locale.region == "TW"
    assert locale.variants == ()


def test_constructor_rejects_partially_valid_components() -> None:
    with pytest.raises(InvalidLocaleError):
        Locale("EN")
    with pytest.raises(InvalidLocaleError):
        Locale("en", region="usa")


def test_equality_and_ordering_use_canonical_tag() -> None:
    assert parse_locale("en-us") == parse_locale("en-US")
    assert hash(parse_locale("en-us")) == hash(parse_locale("en-US"))
    assert sorted([parse_locale("fr"), parse_locale("de"), parse_locale("en")]) == [
        parse_locale("de"),
        parse_locale("en"),
        parse_locale("fr"),
    ]


def test_parent_drops_most_specific_component() -> None:
    assert parent(parse_locale("zh-Hans-CN")) == parse_locale("zh-Hans")
    assert parent(parse_locale("zh-Hans")) == parse_locale("zh")
    assert parent(parse_locale("de-CH-1901")) == parse_locale("de-CH")
    assert parent(parse_locale("en")) is None


def test_fallback_chain_runs_to_bare_language() -> None:
    chain = fallback_chain(parse_locale("zh-Hans-CN"))

    assert [str(locale) for locale in chain] == ["zh-Hans-CN", "zh-Hans", "zh"]
