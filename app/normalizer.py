"""Coerce loosely typed catalog payloads into canonical models.

The upstream API renames keys between versions and deployments, so every
output field is resolved from an ordered list of candidate keys and falls back
to a safe default. Nothing in this module raises on malformed input; the only
rejection is a list entry without an identifier, which is dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from .models import Detail, ListItem, PlayableMedia
from .utils import split_tags, strip_html, to_text

logger = logging.getLogger(__name__)

_MISSING = object()

LIST_WRAPPER_KEYS: tuple[str, ...] = ("data", "list", "items")
DETAIL_WRAPPER_KEYS: tuple[str, ...] = ("data", "detail")
VIDEO_WRAPPER_KEYS: tuple[str, ...] = ("data",)


def coalesce(source: Mapping[str, Any], keys: Sequence[str], default: Any = None) -> Any:
    """Return the first value among ``keys`` that is present and not ``None``."""

    for key in keys:
        value = source.get(key, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def _number_or_text(value: Any) -> int | float | str:
    if isinstance(value, bool):
        return to_text(value)
    if isinstance(value, (int, float, str)):
        return value
    return to_text(value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else to_text(value)


def _url(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _plain_text(value: Any) -> str:
    return strip_html(_text(value))


@dataclass(frozen=True, slots=True)
class FieldRule:
    """How to resolve one canonical field from a raw object."""

    name: str
    candidates: tuple[str, ...]
    default: Any
    coerce: Callable[[Any], Any] = _text

    def resolve(self, source: Mapping[str, Any]) -> Any:
        return self.coerce(coalesce(source, self.candidates, self.default))


ID_KEYS: tuple[str, ...] = ("id", "video_id", "mid", "_id")

LIST_ITEM_RULES: tuple[FieldRule, ...] = (
    FieldRule("id", ID_KEYS, ""),
    FieldRule("title", ("title", "name", "vod_name"), "Untitled"),
    FieldRule("poster", ("poster", "cover", "pic", "vod_pic"), "", _url),
    FieldRule("tag", ("tag", "category", "type", "vod_class"), "—"),
    FieldRule("views", ("views", "play", "hot", "vod_hits"), 0, _number_or_text),
    FieldRule("year", ("year", "release_year", "vod_year"), ""),
    FieldRule("duration", ("duration", "len", "vod_duration"), ""),
)

DETAIL_RULES: tuple[FieldRule, ...] = (
    FieldRule("id", ID_KEYS, ""),
    FieldRule("title", ("title", "name", "vod_name"), "Untitled"),
    FieldRule("poster", ("poster", "cover", "pic", "vod_pic"), "", _url),
    FieldRule("rating", ("rating", "score", "vod_score"), "—", _number_or_text),
    FieldRule("desc", ("desc", "description", "vod_content"), "—", _plain_text),
    FieldRule("year", ("year", "vod_year"), ""),
    FieldRule("views", ("views", "vod_hits"), ""),
)

VIDEO_URL_KEYS: tuple[str, ...] = ("url", "play_url", "m3u8", "mp4")


def _unwrap(raw: Any, keys: Sequence[str]) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        return {}
    container = coalesce(raw, keys, raw)
    return container if isinstance(container, Mapping) else {}


def _locate_items(raw: Any) -> list[Any]:
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, Mapping):
        return []
    for key in LIST_WRAPPER_KEYS:
        entries = raw.get(key)
        if isinstance(entries, list):
            return entries
    return []


def _resolve_tags(source: Mapping[str, Any]) -> list[str]:
    tags = source.get("tags")
    if isinstance(tags, (list, tuple)):
        return [to_text(tag) for tag in tags if tag is not None]
    if isinstance(tags, str):
        return split_tags(tags)
    category = source.get("vod_class")
    if isinstance(category, str):
        return split_tags(category)
    return []


def normalize_list(raw: Any) -> list[ListItem]:
    """Return the list items found in ``raw``, skipping entries without an id."""

    items: list[ListItem] = []
    entries = _locate_items(raw)
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        fields = {rule.name: rule.resolve(entry) for rule in LIST_ITEM_RULES}
        if not fields["id"]:
            continue
        items.append(ListItem(**fields))

    dropped = len(entries) - len(items)
    if dropped:
        logger.debug("Dropped %s list entries without an identifier", dropped)
    return items


def normalize_detail(raw: Any) -> Detail:
    """Return the detail record described by ``raw``."""

    source = _unwrap(raw, DETAIL_WRAPPER_KEYS)
    fields = {rule.name: rule.resolve(source) for rule in DETAIL_RULES}
    return Detail(tags=_resolve_tags(source), **fields)


def normalize_video(raw: Any) -> PlayableMedia:
    """Return the playable media url, or an empty one when none is present."""

    source = _unwrap(raw, VIDEO_WRAPPER_KEYS)
    return PlayableMedia(url=_url(coalesce(source, VIDEO_URL_KEYS, "")))
