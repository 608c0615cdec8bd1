"""Pydantic models describing canonical catalog payloads."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Mode(str, Enum):
    """Which feed the item grid is showing."""

    HOME = "home"
    SEARCH = "search"


class ListItem(BaseModel):
    """A single card in the catalog grid."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str = "Untitled"
    poster: str = ""
    tag: str = "—"
    views: int | float | str = 0
    year: str = ""
    duration: str = ""


class Detail(BaseModel):
    """Full description of a title, shown in the detail drawer."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = "Untitled"
    poster: str = ""
    tags: list[str] = Field(default_factory=list)
    rating: str | int | float = "—"
    desc: str = "—"
    year: str = ""
    views: str = ""


class PlayableMedia(BaseModel):
    """Resolved media source; an empty url means nothing is playable."""

    model_config = ConfigDict(frozen=True)

    url: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.url


class NavigationSnapshot(BaseModel):
    """Read-only copy of the navigation state handed to renderers."""

    model_config = ConfigDict(frozen=True)

    mode: Mode = Mode.HOME
    page: int = Field(default=1, ge=1)
    query: str = ""
    items: tuple[ListItem, ...] = ()
    selected: Detail | None = None
