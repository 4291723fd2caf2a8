"""Resource name helpers."""

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS = re.compile(r"[^A-Za-z0-9]+")


def to_kebab_case(value: str) -> str:
    """Convert an arbitrary name to a lowercase, dash-separated resource name.

    Examples:
        >>> to_kebab_case("appSettings")
        'app-settings'
        >>> to_kebab_case("DB_PASSWORD")
        'db-password'
        >>> to_kebab_case("nginx.conf")
        'nginx-conf'
    """
    value = _ACRONYM_BOUNDARY.sub(r"\1-\2", value)
    value = _WORD_BOUNDARY.sub(r"\1-\2", value)
    return _SEPARATORS.sub("-", value).strip("-").lower()
