"""Placeholder substitution for named and positional translation arguments."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Any

NAMED_PLACEHOLDER_PATTERN = re.compile(r"{{\s*([a-zA-Z0-9_.-]+)\s*}}")
POSITIONAL_PLACEHOLDER_PATTERN = re.compile(r"%%|%s|%d")


def _format_integer(value: Any) -> str:
    if isinstance(value, int):
        return str(int(value))
    try:
        return str(int(float(value)))
    except (TypeError, ValueError, OverflowError):
        return str(value)


def interpolate_named(template: str, values: Mapping[str, Any]) -> str:
    """Replace ``{{name}}`` placeholders; unknown names are left untouched."""

    if not values or "{{" not in template:
        return template

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in values:
            return str(values[name])
        return match.group(0)

    return NAMED_PLACEHOLDER_PATTERN.sub(_substitute, template)


def interpolate_positional(template: str, args: Sequence[Any]) -> str:
    """Replace ``%s``/``%d`` placeholders left to right.

    ``%%`` always renders as ``%`` without consuming an argument. Placeholders
    beyond the supplied arguments stay verbatim; surplus arguments are ignored.
    """

    if "%" not in template:
        return template

    remaining = iter(args)
    exhausted = False

    def _substitute(match: re.Match[str]) -> str:
        nonlocal exhausted
        token = match.group(0)
        if token == "%%":
            return "%"
        if exhausted:
            return token
        try:
            value = next(remaining)
        except StopIteration:
            exhausted = True
            return token
        if token == "%d":
            return _format_integer(value)
        return str(value)

    return POSITIONAL_PLACEHOLDER_PATTERN.sub(_substitute, template)


def named_placeholders(template: str) -> set[str]:
    """Return the names of every ``{{name}}`` placeholder in ``template``."""

    return set(NAMED_PLACEHOLDER_PATTERN.findall(template))


__all__ = [
    "NAMED_PLACEHOLDER_PATTERN",
    "POSITIONAL_PLACEHOLDER_PATTERN",
    "interpolate_named",
    "interpolate_positional",
    "named_placeholders",
]
