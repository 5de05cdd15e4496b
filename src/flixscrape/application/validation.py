"""Request parameter validation shared by the use cases."""

from __future__ import annotations

import re

from flixscrape.domain.exceptions import MissingRequiredParameter

ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def require_id(name: str, value: str | None) -> str:
    """Return *value* if it is a well-formed site identifier.

    Raises:
        MissingRequiredParameter: If *value* is missing or malformed.
    """
    if value is None or not value.strip():
        raise MissingRequiredParameter(name)
    value = value.strip()
    if not ID_PATTERN.fullmatch(value):
        raise MissingRequiredParameter(name, f"{name} is malformed")
    return value


def optional_id(name: str, value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return require_id(name, value)
