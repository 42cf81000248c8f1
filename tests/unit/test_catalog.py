"""Unit tests for immutable translation catalogues."""

from __future__ import annotations

import json
import logging

import pytest

from i18nkit.catalog import Catalog, PluralForms, merge
from i18nkit.errors import CatalogParseError
from i18nkit.locales import parse_locale

EN = parse_locale("en")


def test_empty_catalog_has_no_entries() -> None:
    catalog = Catalog.empty(EN)

    assert len(catalog) == 0
    assert catalog.get("anything") is None


def test_set_then_get_returns_value_without_mutating_original() -> None:
    original = Catalog.empty(EN)

    updated = original.set("home.title", "Home")

    assert updated.get("home.title") == "Home"
    assert original.get("home.title") is None
    assert updated.metadata.version == original.metadata.version + 1


def test_set_replaces_non_nested_intermediates() -> None:
    catalog = Catalog.empty(EN).set("home", "Home").set("home.title", "Title")

    assert catalog.get("home.title") == "Title"


def test_get_returns_none_through_simple_intermediate() -> None:
    catalog = Catalog.empty(EN).set("home", "Home")

    assert catalog.get("home.title") is None
    assert catalog.get("missing.key") is None


def test_get_without_separator_uses_literal_key() -> None:
    catalog = Catalog.from_json(EN, {"Hello. World": "Hi", "a": {"b": "nested"}})

    assert catalog.get("Hello. World", separator=None) == "Hi"
    assert catalog.get("a.b", separator=None) is None
    assert catalog.get("a.b") == "nested"


def test_get_string_unwraps_plural_other() -> None:
    catalog = Catalog.from_json(EN, {"cats": {"one": "a cat", "other": "cats"}})

    assert catalog.get_string("cats") == "cats"
    assert isinstance(catalog.get("cats"), PluralForms)


def test_plural_forms_project_missing_categories_to_other() -> None:
    forms = PluralForms(other="many things", one="one thing")

    assert forms.for_category("one") == "one thing"
    assert forms.for_category("few") == "many things"
    assert forms.for_category("zero") == "many things"


def test_merge_prefers_overlay_values() -> None:
    base = Catalog.from_json(EN, {"a": "base", "b": "base", "nested": {"x": "1", "y": "2"}})
    overlay = Catalog.from_json(EN, {"b": "overlay", "c": "new", "nested": {"y": "3"}}, source="overlay")

    merged = merge(base, overlay)

    assert merged.get("a") == "base"
    assert merged.get("b") == "overlay"
    assert merged.get("c") == "new"
    assert merged.get("nested.x") == "1"
    assert merged.get("nested.y") == "3"
    assert merged.metadata.source == "overlay"


def test_from_json_classifies_values() -> None:
    payload = json.dumps(
        {
            "simple": "text",
            "plural": {"one": "1 item", "other": "%s items"},
            "nested": {"inner": "value", "deeper": {"leaf": "x"}},
        }
    )

    catalog = Catalog.from_json(EN, payload)

    assert catalog.get("simple") == "text"
    assert catalog.get("plural") == PluralForms(one="1 item", other="%s items")
    assert catalog.get("nested.deeper.leaf") == "x"
    assert sorted(catalog.keys()) == ["nested.deeper.leaf", "nested.inner", "plural", "simple"]


@pytest.mark.parametrize("payload", ["[1, 2]", '"text"', "42", "null", "{not json"])
def test_from_json_rejects_non_object_roots(payload: str) -> None:
    with pytest.raises(CatalogParseError):
        Catalog.from_json(EN, payload)


def test_from_json_drops_unsupported_leaves_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="i18nkit.catalog"):
        catalog = Catalog.from_json(EN, {"count": 3, "flag": True, "items": [], "ok": "yes"})

    assert catalog.keys() == ["ok"]
    assert "count" in caplog.text


def test_from_json_strict_mode_rejects_unsupported_leaves() -> None:
    with pytest.raises(CatalogParseError):
        Catalog.from_json(EN, {"count": 3}, strict=True)


def test_to_json_is_structural_inverse() -> None:
    payload = {
        "simple": "text",
        "plural": {"one": "1 item", "other": "%s items"},
        "nested": {"inner": "Grüße"},
    }

    catalog = Catalog.from_json(EN, payload)

    assert json.loads(catalog.to_json()) == payload
    assert Catalog.from_json(EN, catalog.to_json()).to_dict() == payload


def test_contains_only_matches_leaves() -> None:
    catalog = Catalog.from_json(EN, {"home": {"title": "Home"}})

    assert "home.title" in catalog
    assert "home" not in catalog


def test_remove_prunes_emptied_parents_without_mutating_original() -> None:
    original = Catalog.from_json(EN, {"home": {"title": "Home"}, "bye": "Bye"})

    updated = original.remove("home.title")

    assert updated.to_dict() == {"bye": "Bye"}
    assert original.get("home.title") == "Home"
    assert updated.metadata.version == original.metadata.version + 1


def test_remove_missing_key_returns_same_catalog() -> None:
    catalog = Catalog.from_json(EN, {"home": "Home"})

    assert catalog.remove("home.title") is catalog
    assert catalog.remove("absent") is catalog
