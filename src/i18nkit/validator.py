"""Utilities for validating translation catalogues and reporting coverage."""

from __future__ import annotations

import argparse
import re
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path

from .catalog import Catalog, PluralForms
from .errors import CatalogParseError, InvalidLocaleError
from .interpolation import named_placeholders
from .locales import Locale, parse_locale
from .plurals import plural_categories

PACKAGE_NAME = "i18nkit"
MAX_VALUE_LENGTH = 500
UNTRANSLATED_MARKER = "[{locale}] "
_UPPERCASE_PLACEHOLDER = re.compile(r"%[SD]")
_UNSAFE_MARKUP = re.compile(r"<script|javascript:", re.IGNORECASE)


@dataclass(frozen=True)
class CoverageReport:
    """Translation coverage of one locale against a reference locale."""

    locale: Locale
    total: int
    translated: int
    missing: tuple[str, ...]
    extra: tuple[str, ...]

    @property
    def coverage(self) -> float:
        if not self.total:
            return 100.0
        return round(self.translated / self.total * 100, 1)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _texts(value: str | PluralForms) -> Iterable[tuple[str, str]]:
    if isinstance(value, PluralForms):
        yield from value.as_dict().items()
    else:
        yield "", value


def _validate_text(scope: str, text: str) -> list[str]:
    errors: list[str] = []

    if _UPPERCASE_PLACEHOLDER.search(text):
        errors.append(_format_scope(scope, "placeholders must be lowercase (%s or %d)"))

    if text.count("{{") != text.count("}}"):
        errors.append(_format_scope(scope, "unbalanced mustache braces"))

    if text != text.strip():
        errors.append(_format_scope(scope, "leading or trailing whitespace"))

    if len(text) > MAX_VALUE_LENGTH:
        errors.append(_format_scope(scope, f"value longer than {MAX_VALUE_LENGTH} characters"))

    if _UNSAFE_MARKUP.search(text):
        errors.append(_format_scope(scope, "contains script markup"))

    return errors


def _validate_plural_forms(scope: str, forms: PluralForms, locale: Locale) -> list[str]:
    used = {category.value for category in plural_categories(locale)}
    unused = sorted(set(forms.as_dict()) - used)
    if not unused:
        return []
    return [
        _format_scope(
            scope,
            f"plural forms {', '.join(unused)} are never selected for '{locale.language}'",
        )
    ]


def validate_catalog(catalog: Catalog) -> list[str]:
    """Return human-readable issues found in ``catalog``."""

    errors: list[str] = []
    for key, value in catalog.flatten().items():
        scope = f"{catalog.locale}:{key}"
        for form, text in _texts(value):
            errors.extend(_validate_text(f"{scope}.{form}" if form else scope, text))
        if isinstance(value, PluralForms):
            errors.extend(_validate_plural_forms(scope, value, catalog.locale))
    return errors


def missing_keys(reference: Catalog, catalog: Catalog) -> list[str]:
    """Keys present in ``reference`` but absent from ``catalog``."""

    return sorted(set(reference.keys()) - set(catalog.keys()))


def extra_keys(reference: Catalog, catalog: Catalog) -> list[str]:
    """Keys present in ``catalog`` but absent from ``reference``."""

    return sorted(set(catalog.keys()) - set(reference.keys()))


def _mark_untranslated(value: str | PluralForms, reference_locale: Locale) -> str | PluralForms:
    marker = UNTRANSLATED_MARKER.format(locale=reference_locale)
    if isinstance(value, PluralForms):
        return PluralForms(**{form: f"{marker}{text}" for form, text in value.as_dict().items()})
    return f"{marker}{value}"


def sync_catalog(
    reference: Catalog,
    catalog: Catalog,
    *,
    add_missing: bool = True,
    remove_extra: bool = False,
) -> Catalog:
    """Align the keys of ``catalog`` with ``reference``.

    Missing entries are copied from the reference with an untranslated marker
    so they stay visible to translators; extra entries are dropped when
    ``remove_extra`` is set. The input catalogue is left untouched.
    """

    synced = catalog
    if add_missing:
        for key in missing_keys(reference, catalog):
            value = reference.get(key)
            if isinstance(value, (str, PluralForms)):
                synced = synced.set(key, _mark_untranslated(value, reference.locale))
    if remove_extra:
        for key in extra_keys(reference, catalog):
            synced = synced.remove(key)
    return synced


def coverage_report(
    catalogs: Mapping[Locale, Catalog], reference_locale: Locale
) -> dict[Locale, CoverageReport]:
    """Compare every catalogue with the reference catalogue."""

    reference = catalogs.get(reference_locale)
    if reference is None:
        raise KeyError(f"Reference locale '{reference_locale}' has no catalogue")

    total = len(reference.keys())
    reports: dict[Locale, CoverageReport] = {}
    for locale, catalog in catalogs.items():
        if locale == reference_locale:
            continue
        missing = tuple(missing_keys(reference, catalog))
        reports[locale] = CoverageReport(
            locale=locale,
            total=total,
            translated=total - len(missing),
            missing=missing,
            extra=tuple(extra_keys(reference, catalog)),
        )
    return reports


def placeholder_inconsistencies(catalogs: Mapping[Locale, Catalog]) -> list[str]:
    """Report keys whose ``{{name}}`` placeholders differ between locales."""

    placeholders: dict[str, dict[Locale, frozenset[str]]] = {}
    for locale, catalog in catalogs.items():
        for key, value in catalog.flatten().items():
            names: set[str] = set()
            for _, text in _texts(value):
                names |= named_placeholders(text)
            placeholders.setdefault(key, {})[locale] = frozenset(names)

    inconsistencies: list[str] = []
    for key, locale_map in sorted(placeholders.items()):
        if len(set(locale_map.values())) <= 1:
            continue
        details = ", ".join(
            f"{locale}={{{', '.join(sorted(values))}}}"
            for locale, values in sorted(locale_map.items())
        )
        inconsistencies.append(f"{key} placeholders differ: {details}")
    return inconsistencies


def validate_catalogs(
    catalogs: Mapping[Locale, Catalog], reference_locale: Locale | None = None
) -> dict[Locale, list[str]]:
    """Validate all catalogues and return issues keyed by locale."""

    results: dict[Locale, list[str]] = {
        locale: validate_catalog(catalog) for locale, catalog in catalogs.items()
    }

    if reference_locale is not None and reference_locale in catalogs:
        for locale, report in coverage_report(catalogs, reference_locale).items():
            if report.missing:
                results[locale].append(
                    _format_scope(
                        str(locale),
                        f"missing {len(report.missing)} keys: {', '.join(report.missing)}",
                    )
                )

    for issue in placeholder_inconsistencies(catalogs):
        results.setdefault(reference_locale or next(iter(catalogs)), []).append(issue)

    return results


def load_catalog_file(path: Path) -> Catalog:
    """Read a ``<locale>.json`` catalogue file."""

    locale = parse_locale(path.stem)
    return Catalog.from_json(locale, path.read_text(encoding="utf-8"), source=str(path))


def _package_version() -> str:
    try:
        return metadata.version(PACKAGE_NAME)
    except metadata.PackageNotFoundError:
        return "unknown"


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Validate translation catalogues and report coverage against a reference locale."
    )
    parser.add_argument(
        "files",
        nargs="+",
        type=Path,
        help="Catalogue files named after their locale (e.g. en.json, de-AT.json)",
    )
    parser.add_argument(
        "--reference",
        default="en",
        help="Reference locale used for missing-key checks (default: en)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_package_version()}",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    exit_code = 0
    catalogs: dict[Locale, Catalog] = {}

    for path in args.files:
        try:
            catalog = load_catalog_file(path)
        except (OSError, CatalogParseError, InvalidLocaleError) as error:
            print(f"[{path.name}] failed to load catalogue: {error}")
            exit_code = 1
            continue
        catalogs[catalog.locale] = catalog

    if not catalogs:
        return 1

    try:
        reference = parse_locale(args.reference)
    except InvalidLocaleError as error:
        parser.error(str(error))

    for locale, issues in sorted(validate_catalogs(catalogs, reference).items()):
        if issues:
            exit_code = 1
            print(f"[{locale}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{locale}] OK")

    if reference in catalogs:
        for locale, report in sorted(coverage_report(catalogs, reference).items()):
            print(f"[{locale}] coverage {report.coverage}% ({report.translated}/{report.total})")

    return exit_code


__all__ = [
    "CoverageReport",
    "coverage_report",
    "extra_keys",
    "load_catalog_file",
    "main",
    "missing_keys",
    "placeholder_inconsistencies",
    "sync_catalog",
    "validate_catalog",
    "validate_catalogs",
]


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
