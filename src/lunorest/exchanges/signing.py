"""Request path construction and authentication helpers."""

from __future__ import annotations

import base64
import re
from decimal import Decimal
from typing import Any, Mapping
from urllib.parse import quote, urlencode

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def basic_auth_header(api_key: str, secret: str) -> str:
    """Build an HTTP Basic ``Authorization`` header value from a key pair."""
    token = base64.b64encode(f"{api_key}:{secret}".encode()).decode()
    return f"Basic {token}"


def format_value(value: Any) -> str:
    """Render a param for the URL; Decimals always in fixed-point notation."""
    if isinstance(value, Decimal):
        return f"{value:f}"
    return str(value)


def build_path(path: str, params: Mapping[str, Any] | None = None) -> tuple[str, dict[str, Any]]:
    """Resolve a path template against params.

    Placeholders such as ``{id}`` are replaced by the URL-escaped value of the
    matching param, which is consumed. Whatever is left becomes the query string,
    in the order it was supplied.

    Returns:
        Tuple of (path with query string, remaining params)

    Raises:
        ValueError: If a placeholder has no matching param
    """
    remaining = dict(params or {})

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in remaining:
            raise ValueError(f"Missing path parameter {name!r} for {path!r}")
        return quote(format_value(remaining.pop(name)), safe="")

    resolved = _PLACEHOLDER.sub(_substitute, path)
    if remaining:
        query = urlencode([(key, format_value(value)) for key, value in remaining.items()])
        resolved = f"{resolved}?{query}"
    return resolved, remaining
