"""Unit tests for placeholder substitution."""

from __future__ import annotations

from i18nkit.interpolation import interpolate_named, interpolate_positional, named_placeholders


def test_named_placeholders_are_replaced_everywhere() -> None:
    result = interpolate_named("{{name}} and {{ name }} met {{other}}", {"name": "Ada"})

    assert result == "Ada and Ada met {{other}}"


def test_named_without_values_returns_template() -> None:
    assert interpolate_named("Hi {{name}}", {}) == "Hi {{name}}"


def test_positional_substitutes_left_to_right() -> None:
    assert interpolate_positional("%s has %d cats", ["Ada", 3.9]) == "Ada has 3 cats"


def test_positional_double_percent_consumes_no_argument() -> None:
    assert interpolate_positional("%d%% of %s", [50, "users"]) == "50% of users"


def test_positional_leaves_surplus_placeholders() -> None:
    assert interpolate_positional("%s and %s", ["one"]) == "one and %s"


def test_positional_ignores_surplus_arguments() -> None:
    assert interpolate_positional("only %s", ["a", "b", "c"]) == "only a"


def test_positional_d_keeps_non_numeric_values() -> None:
    assert interpolate_positional("%d items", ["many"]) == "many items"


def test_named_placeholders_lists_names() -> None:
    assert named_placeholders("{{a}} {{ b }} {{a}}") == {"a", "b"}
