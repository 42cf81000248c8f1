"""CLDR plural operands and per-language-family plural category rules.

Each supported language belongs to one :class:`LanguageFamily`, and every
family owns one pure rule function. Supporting a new language means adding it
to ``_LANGUAGE_FAMILIES`` (and, for a new family, one rule plus one enum
member). Unknown languages resolve to ``other``.

Two evaluators share the :class:`PluralEvaluator` interface: the reference
evaluator applies the rule functions directly, while the table evaluator
answers non-negative integers from precomputed tables and defers everything
else. The reference evaluator is the oracle the table evaluator is tested
against.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import cache
from types import MappingProxyType
from typing import Protocol, Union

from .locales import Locale, try_parse_locale

_LOGGER = logging.getLogger(__name__)

Number = Union[int, float, Decimal, str]


class PluralCategory(str, Enum):
    """CLDR plural categories using their wire names."""

    ZERO = "zero"
    ONE = "one"
    TWO = "two"
    FEW = "few"
    MANY = "many"
    OTHER = "other"


class LanguageFamily(str, Enum):
    """Groups of languages sharing one plural rule."""

    GERMANIC = "germanic"
    ONE_EXACT = "one_exact"
    FRENCH = "french"
    EAST_SLAVIC = "east_slavic"
    POLISH = "polish"
    ARABIC = "arabic"
    CJK = "cjk"
    DEFAULT = "default"


@dataclass(frozen=True)
class PluralOperands:
    """CLDR operands of a number.

    ``n`` absolute value, ``i`` integer digits, ``v`` count of visible fraction
    digits, ``w`` the same without trailing zeros, ``f`` visible fraction
    digits and ``t`` those digits without trailing zeros.
    """

    n: Decimal
    i: int
    v: int
    w: int
    f: int
    t: int

    @property
    def is_integer(self) -> bool:
        return self.n == self.n.to_integral_value()


def _decimal_text(value: Number) -> str:
    if isinstance(value, bool):
        raise ValueError("Booleans are not plural operands")
    if isinstance(value, int):
        return str(abs(value))
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise ValueError(f"Non-finite value {value!r} has no plural operands")
        if value.is_integer():
            return str(abs(int(value)))
        return format(abs(Decimal(repr(value))), "f")
    if isinstance(value, (Decimal, str)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except InvalidOperation as error:
            raise ValueError(f"Value {value!r} is not numeric") from error
        if not number.is_finite():
            raise ValueError(f"Non-finite value {value!r} has no plural operands")
        return format(abs(number), "f")
    raise ValueError(f"Unsupported plural operand type: {type(value).__name__}")


def get_operands(value: Number) -> PluralOperands:
    """Derive CLDR plural operands from ``value``.

    Integral floats carry no visible fraction digits, while ``str`` and
    ``Decimal`` inputs keep their trailing zeros (``"1.50"`` gives ``v=2``).
    """

    text = _decimal_text(value)
    integer_part, _, fraction = text.partition(".")
    trimmed = fraction.rstrip("0")
    return PluralOperands(
        n=Decimal(text),
        i=int(integer_part or "0"),
        v=len(fraction),
        w=len(trimmed),
        f=int(fraction) if fraction else 0,
        t=int(trimmed) if trimmed else 0,
    )


def _germanic(ops: PluralOperands) -> PluralCategory:
    if ops.i == 1 and ops.v == 0:
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _one_exact(ops: PluralOperands) -> PluralCategory:
    if ops.n == 1:
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _french(ops: PluralOperands) -> PluralCategory:
    if ops.i in (0, 1):
        return PluralCategory.ONE
    return PluralCategory.OTHER


def _east_slavic(ops: PluralOperands) -> PluralCategory:
    if ops.v != 0:
        return PluralCategory.OTHER
    mod10 = ops.i % 10
    mod100 = ops.i % 100
    if mod10 == 1 and mod100 != 11:
        return PluralCategory.ONE
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.MANY


def _polish(ops: PluralOperands) -> PluralCategory:
    if ops.v != 0:
        return PluralCategory.OTHER
    if ops.i == 1:
        return PluralCategory.ONE
    mod10 = ops.i % 10
    mod100 = ops.i % 100
    if 2 <= mod10 <= 4 and not 12 <= mod100 <= 14:
        return PluralCategory.FEW
    return PluralCategory.MANY


def _arabic(ops: PluralOperands) -> PluralCategory:
    if ops.n == 0:
        return PluralCategory.ZERO
    if ops.n == 1:
        return PluralCategory.ONE
    if ops.n == 2:
        return PluralCategory.TWO
    if ops.is_integer:
        mod100 = ops.i % 100
        if 3 <= mod100 <= 10:
            return PluralCategory.FEW
        if 11 <= mod100 <= 99:
            return PluralCategory.MANY
    return PluralCategory.OTHER


def _always_other(ops: PluralOperands) -> PluralCategory:
    return PluralCategory.OTHER


_FAMILY_RULES: Mapping[LanguageFamily, Callable[[PluralOperands], PluralCategory]] = (
    MappingProxyType(
        {
            LanguageFamily.GERMANIC: _germanic,
            LanguageFamily.ONE_EXACT: _one_exact,
            LanguageFamily.FRENCH: _french,
            LanguageFamily.EAST_SLAVIC: _east_slavic,
            LanguageFamily.POLISH: _polish,
            LanguageFamily.ARABIC: _arabic,
            LanguageFamily.CJK: _always_other,
            LanguageFamily.DEFAULT: _always_other,
        }
    )
)

_FAMILY_CATEGORIES: Mapping[LanguageFamily, tuple[PluralCategory, ...]] = MappingProxyType(
    {
        LanguageFamily.GERMANIC: (PluralCategory.ONE, PluralCategory.OTHER),
        LanguageFamily.ONE_EXACT: (PluralCategory.ONE, PluralCategory.OTHER),
        LanguageFamily.FRENCH: (PluralCategory.ONE, PluralCategory.OTHER),
        LanguageFamily.EAST_SLAVIC: (
            PluralCategory.ONE,
            PluralCategory.FEW,
            PluralCategory.MANY,
            PluralCategory.OTHER,
        ),
        LanguageFamily.POLISH: (
            PluralCategory.ONE,
            PluralCategory.FEW,
            PluralCategory.MANY,
            PluralCategory.OTHER,
        ),
        LanguageFamily.ARABIC: tuple(PluralCategory),
        LanguageFamily.CJK: (PluralCategory.OTHER,),
        LanguageFamily.DEFAULT: (PluralCategory.OTHER,),
    }
)

_LANGUAGE_FAMILIES: Mapping[str, LanguageFamily] = MappingProxyType(
    {
        **dict.fromkeys(
            ("en", "de", "nl", "sv", "da", "nb", "nn", "no", "fy", "it", "fi", "et", "ca", "gl"),
            LanguageFamily.GERMANIC,
        ),
        **dict.fromkeys(("es", "el", "hu", "tr", "bg", "sq", "az"), LanguageFamily.ONE_EXACT),
        **dict.fromkeys(("fr", "pt", "hy", "kab"), LanguageFamily.FRENCH),
        **dict.fromkeys(("ru", "uk", "be"), LanguageFamily.EAST_SLAVIC),
        "pl": LanguageFamily.POLISH,
        "ar": LanguageFamily.ARABIC,
        **dict.fromkeys(
            ("ja", "zh", "ko", "th", "vi", "id", "ms", "lo", "my", "yue"), LanguageFamily.CJK
        ),
    }
)


def _language_of(locale: Locale | str) -> str:
    if isinstance(locale, Locale):
        return locale.language
    parsed = try_parse_locale(locale)
    return parsed.language if parsed is not None else str(locale).lower()


def language_family(locale: Locale | str) -> LanguageFamily:
    """Return the plural family for the bare language of ``locale``."""

    return _LANGUAGE_FAMILIES.get(_language_of(locale), LanguageFamily.DEFAULT)


def plural_categories(locale: Locale | str) -> tuple[PluralCategory, ...]:
    """Return the categories the language of ``locale`` distinguishes."""

    return _FAMILY_CATEGORIES[language_family(locale)]


class PluralEvaluator(Protocol):
    """Selects a plural category for a number in a language.

    Returning ``None`` means the evaluator cannot answer for this input and
    the caller should consult the reference rules instead.
    """

    def supports(self, language: str) -> bool: ...

    def select(self, value: Number, language: str) -> PluralCategory | None: ...


class ReferencePluralEvaluator:
    """Pure rule evaluation used as the correctness oracle."""

    def supports(self, language: str) -> bool:
        return language in _LANGUAGE_FAMILIES

    def select(self, value: Number, language: str) -> PluralCategory:
        family = _LANGUAGE_FAMILIES.get(language, LanguageFamily.DEFAULT)
        return _FAMILY_RULES[family](get_operands(value))


_TABLE_SIZE = 200
_PERIOD = 100


@cache
def _family_table(family: LanguageFamily) -> tuple[PluralCategory, ...]:
    rule = _FAMILY_RULES[family]
    return tuple(rule(get_operands(number)) for number in range(_TABLE_SIZE))


class TablePluralEvaluator:
    """Answers non-negative integers from precomputed category tables.

    Every supported rule depends on an integer only through its value below
    100 and its remainder modulo 100 above, so the category of ``n >= 200``
    equals that of ``100 + n % 100``. Non-integers and unknown languages are
    deferred to the reference rules.
    """

    def supports(self, language: str) -> bool:
        return language in _LANGUAGE_FAMILIES

    def select(self, value: Number, language: str) -> PluralCategory | None:
        family = _LANGUAGE_FAMILIES.get(language)
        if family is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        number = abs(value)
        table = _family_table(family)
        if number < _TABLE_SIZE:
            return table[number]
        return table[_PERIOD + number % _PERIOD]


REFERENCE_EVALUATOR = ReferencePluralEvaluator()
TABLE_EVALUATOR = TablePluralEvaluator()


def select_plural_category(
    value: Number,
    locale: Locale | str,
    accelerated: PluralEvaluator | None = TABLE_EVALUATOR,
) -> PluralCategory:
    """Return the CLDR plural category of ``value`` for ``locale``.

    The accelerated evaluator is consulted first when it supports the
    language; a ``None`` answer or a missing evaluator falls back to the
    reference rules. Values without plural operands (NaN, infinities,
    non-numeric text) select ``other``.
    """

    language = _language_of(locale)
    if accelerated is not None and accelerated.supports(language):
        category = accelerated.select(value, language)
        if category is not None:
            return category
    try:
        return REFERENCE_EVALUATOR.select(value, language)
    except ValueError:
        _LOGGER.debug("No plural operands for %r; using 'other'", value)
        return PluralCategory.OTHER


__all__ = [
    "LanguageFamily",
    "Number",
    "PluralCategory",
    "PluralEvaluator",
    "PluralOperands",
    "REFERENCE_EVALUATOR",
    "ReferencePluralEvaluator",
    "TABLE_EVALUATOR",
    "TablePluralEvaluator",
    "get_operands",
    "language_family",
    "plural_categories",
    "select_plural_category",
]
