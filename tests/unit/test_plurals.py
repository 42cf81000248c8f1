"""Unit tests for CLDR plural operands and category selection."""

from __future__ import annotations

from decimal import Decimal

import pytest

from i18nkit.plurals import (
    REFERENCE_EVALUATOR,
    TABLE_EVALUATOR,
    LanguageFamily,
    PluralCategory,
    get_operands,
    language_family,
    plural_categories,
    select_plural_category,
)

ONE = PluralCategory.ONE
FEW = PluralCategory.FEW
MANY = PluralCategory.MANY
OTHER = PluralCategory.OTHER


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1, (Decimal(1), 1, 0, 0, 0, 0)),
        (-7, (Decimal(7), 7, 0, 0, 0, 0)),
        (1.5, (Decimal("1.5"), 1, 1, 1, 5, 5)),
        (2.0, (Decimal(2), 2, 0, 0, 0, 0)),
        ("1.50", (Decimal("1.50"), 1, 2, 1, 50, 5)),
        (Decimal("0.030"), (Decimal("0.030"), 0, 3, 2, 30, 3)),
    ],
)
def test_get_operands(value, expected) -> None:
    ops = get_operands(value)

    assert (ops.n, ops.i, ops.v, ops.w, ops.f, ops.t) == expected


@pytest.mark.parametrize("value", ["abc", float("nan"), float("inf"), True])
def test_get_operands_rejects_non_numbers(value) -> None:
    with pytest.raises(ValueError):
        get_operands(value)


@pytest.mark.parametrize(
    ("locale", "value", "expected"),
    [
        ("en", 1, ONE),
        ("en", 0, OTHER),
        ("en", 2, OTHER),
        ("en", "1.0", OTHER),
        ("de-AT", 1, ONE),
        ("es", "1.0", ONE),
        ("fr", 0, ONE),
        ("fr", 1.5, ONE),
        ("fr", 2, OTHER),
        ("ru", 1, ONE),
        ("ru", 21, ONE),
        ("ru", 11, MANY),
        ("ru", 3, FEW),
        ("ru", 12, MANY),
        ("ru", 25, MANY),
        ("ru", 1.5, OTHER),
        ("pl", 1, ONE),
        ("pl", 22, FEW),
        ("pl", 21, MANY),
        ("pl", 14, MANY),
        ("ar", 0, PluralCategory.ZERO),
        ("ar", 1, ONE),
        ("ar", 2, PluralCategory.TWO),
        ("ar", 5, FEW),
        ("ar", 11, MANY),
        ("ar", 100, OTHER),
        ("ar", 103, FEW),
        ("ja", 1, OTHER),
        ("zh-Hans", 1, OTHER),
        ("xx", 1, OTHER),
    ],
)
def test_select_plural_category(locale: str, value, expected: PluralCategory) -> None:
    assert select_plural_category(value, locale) is expected
    assert select_plural_category(value, locale, accelerated=None) is expected


def test_non_finite_values_select_other() -> None:
    assert select_plural_category(float("nan"), "en") is OTHER


def test_unknown_language_uses_default_family() -> None:
    assert language_family("tlh") is LanguageFamily.DEFAULT
    assert plural_categories("tlh") == (OTHER,)


def test_every_family_has_categories() -> None:
    assert plural_categories("ar") == tuple(PluralCategory)
    assert plural_categories("ru") == (ONE, FEW, MANY, OTHER)


@pytest.mark.parametrize(
    "language", ["en", "de", "es", "fr", "pt", "ru", "uk", "pl", "ar", "ja", "zh", "ko"]
)
def test_table_evaluator_agrees_with_reference(language: str) -> None:
    samples = list(range(0, 1200)) + [10_001, 123_456, 1_000_000, 2_000_011, -1, -22]

    for value in samples:
        accelerated = TABLE_EVALUATOR.select(value, language)
        assert accelerated is REFERENCE_EVALUATOR.select(value, language), (language, value)


def test_table_evaluator_defers_unsupported_inputs() -> None:
    assert TABLE_EVALUATOR.select(1.5, "en") is None
    assert TABLE_EVALUATOR.select("3", "en") is None
    assert TABLE_EVALUATOR.select(3, "tlh") is None


class _RecordingEvaluator:
    def __init__(self, supported: set[str]) -> None:
        self.supported = supported
        self.calls: list[str] = []

    def supports(self, language: str) -> bool:
        return language in self.supported

    def select(self, value, language: str) -> PluralCategory | None:
        self.calls.append(language)
        return PluralCategory.MANY


def test_accelerated_evaluator_is_skipped_for_unsupported_languages() -> None:
    evaluator = _RecordingEvaluator({"en"})

    assert select_plural_category(1, "ru", evaluator) is ONE
    assert evaluator.calls == []
    assert select_plural_category(1, "en", evaluator) is PluralCategory.MANY
    assert evaluator.calls == ["en"]


def test_evaluators_report_supported_languages() -> None:
    assert TABLE_EVALUATOR.supports("ru")
    assert REFERENCE_EVALUATOR.supports("pl")
    assert not TABLE_EVALUATOR.supports("tlh")
