"""Utility helpers for the Melulu client."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote, unquote


HTML_TAG_RE = re.compile(r"<[^>]+>")
TAG_SEPARATOR_RE = re.compile(r"[,，]")
FRAGMENT_ID_RE = re.compile(r"id=([^&]+)")

# Characters encodeURIComponent leaves untouched besides the unreserved set.
_SHARE_SAFE = "!~*'()"


def strip_html(value: str) -> str:
    """Remove markup tags and surrounding whitespace."""

    return HTML_TAG_RE.sub("", value).strip()


def split_tags(value: str) -> list[str]:
    """Split a comma separated tag string (Latin or full-width commas)."""

    return [part.strip() for part in TAG_SEPARATOR_RE.split(value) if part.strip()]


def to_text(value: Any) -> str:
    """Coerce a JSON scalar into display text."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_views(value: Any) -> str:
    """Return a compact view counter such as ``1.2K`` or ``3.4M``."""

    if isinstance(value, bool):
        return to_text(value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return to_text(value)
    if number != number:  # NaN
        return to_text(value)
    for threshold, suffix in ((1e9, "B"), (1e6, "M"), (1e3, "K")):
        if number >= threshold:
            return f"{number / threshold:.1f}{suffix}"
    return to_text(number)


def parse_fragment_id(fragment: str | None) -> str | None:
    """Extract the deep-linked identifier from a ``#id=...`` fragment."""

    if not fragment:
        return None
    match = FRAGMENT_ID_RE.search(fragment)
    if not match:
        return None
    identifier = unquote(match.group(1)).strip()
    return identifier or None


def build_share_link(origin: str, path: str, identifier: str) -> str:
    """Compose the shareable deep link for a title."""

    return f"{origin}{path}#id={quote(identifier, safe=_SHARE_SAFE)}"
