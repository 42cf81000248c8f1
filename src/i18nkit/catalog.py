"""Immutable per-locale translation catalogues backed by JSON payloads."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Union

from .errors import CatalogParseError
from .locales import Locale

_LOGGER = logging.getLogger(__name__)

PLURAL_FORM_NAMES: tuple[str, ...] = ("zero", "one", "two", "few", "many", "other")
DEFAULT_SEPARATOR = "."


@dataclass(frozen=True)
class PluralForms:
    """Plural-aware translation entry; ``other`` is always present."""

    other: str
    zero: str | None = None
    one: str | None = None
    two: str | None = None
    few: str | None = None
    many: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.other, str):
            raise CatalogParseError("Plural entries require an 'other' string")

    def for_category(self, category: str) -> str:
        """Return the form for ``category``, projecting to ``other`` when absent."""

        name = getattr(category, "value", category)
        if name in PLURAL_FORM_NAMES:
            value = getattr(self, name)
            if value is not None:
                return value
        return self.other

    def as_dict(self) -> dict[str, str]:
        return {
            name: getattr(self, name)
            for name in PLURAL_FORM_NAMES
            if getattr(self, name) is not None
        }


TranslationValue = Union[str, PluralForms, Mapping[str, "TranslationValue"]]


@dataclass(frozen=True)
class CatalogMetadata:
    """Bookkeeping attached to every catalogue revision."""

    version: int = 0
    last_modified: datetime | None = None
    source: str | None = None


def _is_plural_payload(value: Mapping[str, Any]) -> bool:
    return isinstance(value.get("other"), str)


def _build_plural(path: str, value: Mapping[str, Any], strict: bool) -> PluralForms:
    forms: dict[str, str] = {}
    for name, text in value.items():
        if name in PLURAL_FORM_NAMES and isinstance(text, str):
            forms[name] = text
        elif strict:
            raise CatalogParseError(f"Invalid plural form {name!r} in {path!r}")
        else:
            _LOGGER.warning("Dropping invalid plural form %r in %r", name, path)
    return PluralForms(**forms)


def _build_tree(
    payload: Mapping[str, Any], strict: bool, prefix: str = ""
) -> Mapping[str, TranslationValue]:
    tree: dict[str, TranslationValue] = {}
    for raw_key, value in payload.items():
        key = str(raw_key)
        path = f"{prefix}.{key}" if prefix else key
        if isinstance(value, PluralForms) or isinstance(value, str):
            tree[key] = value
        elif isinstance(value, Mapping):
            if _is_plural_payload(value):
                tree[key] = _build_plural(path, value, strict)
            else:
                tree[key] = _build_tree(value, strict, path)
        elif strict:
            raise CatalogParseError(
                f"Unsupported value of type {type(value).__name__} at {path!r}"
            )
        else:
            _LOGGER.warning(
                "Dropping unsupported %s value at %r", type(value).__name__, path
            )
    return MappingProxyType(tree)


def _coerce_value(value: Any) -> TranslationValue:
    if isinstance(value, (str, PluralForms)):
        return value
    if isinstance(value, Mapping):
        if _is_plural_payload(value):
            return _build_plural("<value>", value, strict=True)
        return _build_tree(value, strict=True)
    raise CatalogParseError(f"Unsupported translation value: {type(value).__name__}")


def _merge_trees(
    base: Mapping[str, TranslationValue], overlay: Mapping[str, TranslationValue]
) -> Mapping[str, TranslationValue]:
    merged: dict[str, TranslationValue] = dict(base)
    for key, value in overlay.items():
        existing = merged.get(key)
        if _is_nested(existing) and _is_nested(value):
            merged[key] = _merge_trees(existing, value)  # type: ignore[arg-type]
        else:
            merged[key] = value
    return MappingProxyType(merged)


def _is_nested(value: object) -> bool:
    return isinstance(value, Mapping)


def _set_path(
    tree: Mapping[str, TranslationValue], segments: list[str], value: TranslationValue
) -> Mapping[str, TranslationValue]:
    head, *rest = segments
    updated: dict[str, TranslationValue] = dict(tree)
    if not rest:
        updated[head] = value
    else:
        child = tree.get(head)
        container = child if _is_nested(child) else MappingProxyType({})
        updated[head] = _set_path(container, rest, value)  # type: ignore[arg-type]
    return MappingProxyType(updated)


def _remove_path(
    tree: Mapping[str, TranslationValue], segments: list[str]
) -> Mapping[str, TranslationValue]:
    head, *rest = segments
    if head not in tree:
        return tree
    updated: dict[str, TranslationValue] = dict(tree)
    if not rest:
        del updated[head]
        return MappingProxyType(updated)

    child = tree[head]
    if not _is_nested(child):
        return tree
    pruned = _remove_path(child, rest)  # type: ignore[arg-type]
    if pruned is child:
        return tree
    if pruned:
        updated[head] = pruned
    else:
        del updated[head]
    return MappingProxyType(updated)


def _tree_to_dict(tree: Mapping[str, TranslationValue]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for key, value in tree.items():
        if isinstance(value, PluralForms):
            payload[key] = value.as_dict()
        elif isinstance(value, Mapping):
            payload[key] = _tree_to_dict(value)
        else:
            payload[key] = value
    return payload


def _iter_leaves(
    tree: Mapping[str, TranslationValue], separator: str, prefix: str = ""
) -> Iterator[tuple[str, str | PluralForms]]:
    for key, value in tree.items():
        path = f"{prefix}{separator}{key}" if prefix else key
        if isinstance(value, Mapping):
            yield from _iter_leaves(value, separator, path)
        else:
            yield path, value


@dataclass(frozen=True)
class Catalog:
    """Immutable translation store for a single locale.

    Every update returns a new catalogue; references to earlier revisions stay
    valid and unchanged.
    """

    locale: Locale
    translations: Mapping[str, TranslationValue] = field(
        default_factory=lambda: MappingProxyType({})
    )
    metadata: CatalogMetadata = field(default_factory=CatalogMetadata)

    @classmethod
    def empty(cls, locale: Locale) -> Catalog:
        return cls(locale=locale)

    @classmethod
    def from_json(
        cls,
        locale: Locale,
        payload: str | bytes | Mapping[str, Any],
        *,
        source: str | None = None,
        last_modified: datetime | None = None,
        strict: bool = False,
    ) -> Catalog:
        """Build a catalogue from a JSON document or an already decoded mapping.

        The root must be an object. Objects holding an ``other`` string become
        plural entries, other objects nest, strings are simple entries. Leaves
        of any other JSON type are dropped with a warning unless ``strict`` is
        set, in which case they raise :class:`CatalogParseError`.
        """

        data: Any = payload
        if isinstance(payload, (str, bytes, bytearray)):
            try:
                data = json.loads(payload)
            except ValueError as error:
                raise CatalogParseError(f"Malformed catalogue JSON: {error}") from error

        if not isinstance(data, Mapping):
            raise CatalogParseError(
                f"Catalogue root must be a JSON object, found {type(data).__name__}"
            )

        return cls(
            locale=locale,
            translations=_build_tree(data, strict),
            metadata=CatalogMetadata(source=source, last_modified=last_modified),
        )

    def get(self, key: str, separator: str | None = DEFAULT_SEPARATOR) -> TranslationValue | None:
        """Walk ``key`` through nested entries, returning ``None`` when absent.

        With ``separator=None`` the key is looked up as one literal member.
        """

        if separator is None:
            return self.translations.get(key)

        node: Any = self.translations
        for segment in key.split(separator):
            if not isinstance(node, Mapping):
                return None
            node = node.get(segment)
            if node is None:
                return None
        return node

    def get_string(self, key: str, separator: str | None = DEFAULT_SEPARATOR) -> str | None:
        """Return the text for ``key``; plural entries resolve via ``other``."""

        value = self.get(key, separator)
        if isinstance(value, str):
            return value
        if isinstance(value, PluralForms):
            return value.other
        return None

    def set(
        self, key: str, value: Any, separator: str | None = DEFAULT_SEPARATOR
    ) -> Catalog:
        """Return a new catalogue with ``value`` stored under ``key``."""

        coerced = _coerce_value(value)
        segments = [key] if separator is None else key.split(separator)
        return replace(
            self,
            translations=_set_path(self.translations, segments, coerced),
            metadata=replace(self.metadata, version=self.metadata.version + 1),
        )

    def remove(self, key: str, separator: str | None = DEFAULT_SEPARATOR) -> Catalog:
        """Return a new catalogue without ``key``; emptied parents are pruned."""

        segments = [key] if separator is None else key.split(separator)
        pruned = _remove_path(self.translations, segments)
        if pruned is self.translations:
            return self
        return replace(
            self,
            translations=pruned,
            metadata=replace(self.metadata, version=self.metadata.version + 1),
        )

    def merge(self, overlay: Catalog) -> Catalog:
        """Return the union of both catalogues; ``overlay`` wins on conflicts."""

        return Catalog(
            locale=overlay.locale,
            translations=_merge_trees(self.translations, overlay.translations),
            metadata=replace(
                overlay.metadata,
                version=max(self.metadata.version, overlay.metadata.version) + 1,
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return _tree_to_dict(self.translations)

    def to_json(self, *, indent: int | str | None = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    def flatten(self, separator: str = DEFAULT_SEPARATOR) -> dict[str, str | PluralForms]:
        """Return every leaf entry keyed by its joined path."""

        return dict(_iter_leaves(self.translations, separator))

    def keys(self, separator: str = DEFAULT_SEPARATOR) -> list[str]:
        return list(self.flatten(separator))

    def __len__(self) -> int:
        return sum(1 for _ in _iter_leaves(self.translations, DEFAULT_SEPARATOR))

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        value = self.get(key)
        return value is not None and not isinstance(value, Mapping)


def merge(base: Catalog, overlay: Catalog) -> Catalog:
    """Module-level alias for :meth:`Catalog.merge`."""

    return base.merge(overlay)


__all__ = [
    "Catalog",
    "CatalogMetadata",
    "DEFAULT_SEPARATOR",
    "PLURAL_FORM_NAMES",
    "PluralForms",
    "TranslationValue",
    "merge",
]
