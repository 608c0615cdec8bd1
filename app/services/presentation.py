"""Collaborator protocols and view-models handed to the render surface."""

from __future__ import annotations

from typing import Callable, Literal, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from ..models import Detail, ListItem, NavigationSnapshot, Mode
from ..utils import format_views

StatusKind = Literal["ok", "warn", "err"]
StatusSink = Callable[[str, StatusKind], None]

CHIP_PRESETS: tuple[str, ...] = (
    "Trending",
    "Romance",
    "Comedy",
    "Action",
    "CEO",
    "Revenge",
    "校园",
    "甜宠",
)
HOME_CHIP = "Trending"
PLACEHOLDER = "—"


class GridView(BaseModel):
    """Items to render in the catalog grid."""

    model_config = ConfigDict(frozen=True)

    heading: str
    items: tuple[ListItem, ...]
    append: bool
    summary: str
    snapshot: NavigationSnapshot

    @classmethod
    def build(
        cls,
        snapshot: NavigationSnapshot,
        items: Sequence[ListItem],
        *,
        append: bool,
    ) -> "GridView":
        if snapshot.mode is Mode.SEARCH:
            heading = f"Search: “{snapshot.query}”"
        else:
            heading = "Trending / Home"
        count = len(snapshot.items)
        summary = f"{count} item{'' if count == 1 else 's'} shown"
        return cls(
            heading=heading,
            items=tuple(items),
            append=append,
            summary=summary,
            snapshot=snapshot,
        )


class DetailView(BaseModel):
    """Detail drawer contents for the selected title."""

    model_config = ConfigDict(frozen=True)

    detail: Detail
    meta: str
    rating: str
    tags: str

    @classmethod
    def build(cls, detail: Detail) -> "DetailView":
        views = f"{format_views(detail.views)} views" if detail.views else PLACEHOLDER
        return cls(
            detail=detail,
            meta=f"{detail.year or PLACEHOLDER} • {views}",
            rating=str(detail.rating),
            tags=" • ".join(detail.tags) if detail.tags else PLACEHOLDER,
        )


class PlayerView(BaseModel):
    """Player chrome for a title that is playing."""

    model_config = ConfigDict(frozen=True)

    title: str
    meta: str
    url: str
    format_hint: str

    @classmethod
    def build(cls, detail: Detail, url: str, format_hint: str) -> "PlayerView":
        tags = " • ".join(detail.tags[:3]) or PLACEHOLDER
        return cls(
            title=detail.title or "Playing",
            meta=f"{detail.year or PLACEHOLDER} • {tags}",
            url=url,
            format_hint=format_hint,
        )


class RenderSurface(Protocol):
    """Receives view-models; never writes back into navigation state."""

    def set_status(self, text: str, kind: StatusKind = "ok") -> None: ...

    def show_message(self, text: str) -> None: ...

    def render_grid(self, view: GridView) -> None: ...

    def show_detail(self, view: DetailView) -> None: ...

    def hide_detail(self) -> None: ...

    def open_player(self, view: PlayerView) -> None: ...

    def close_player(self) -> None: ...


class Clipboard(Protocol):
    """Writes text to the system clipboard, raising ``ClipboardError`` when denied."""

    async def write_text(self, text: str) -> None: ...
