"""Client navigation state machine: home, search, pagination and selection."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from ..errors import ClientError, ClipboardError, EmptyMediaError
from ..models import Detail, ListItem, Mode, NavigationSnapshot, PlayableMedia
from ..utils import build_share_link, parse_fragment_id
from .playback import PlaybackResolver, PlayerState
from .presentation import (
    HOME_CHIP,
    Clipboard,
    DetailView,
    GridView,
    PlayerView,
    RenderSurface,
)

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Normalized catalog resources consumed by the controller."""

    async def home(self, page: int = 1) -> list[ListItem]: ...

    async def search(self, query: str, page: int = 1) -> list[ListItem]: ...

    async def detail(self, item_id: str) -> Detail: ...

    async def media(self, item_id: str) -> PlayableMedia: ...


@dataclass(slots=True)
class NavigationState:
    """Mutable navigation record owned exclusively by the controller."""

    mode: Mode = Mode.HOME
    page: int = 1
    query: str = ""
    items: list[ListItem] = field(default_factory=list)
    selected: Detail | None = None

    def snapshot(self) -> NavigationSnapshot:
        return NavigationSnapshot(
            mode=self.mode,
            page=self.page,
            query=self.query,
            items=tuple(self.items),
            selected=self.selected,
        )


class NavigationController:
    """Owns :class:`NavigationState` and exposes the transitions that mutate it.

    Every fetch captures a generation token when it is issued. List-replacing
    transitions bump the list generation, selection transitions bump the
    selection generation and playback bumps the player generation; a response is applied only if its token is still
    current, so a late answer for a superseded request never reaches the
    state or the render surface. State changes and the render call that
    reflects them run without an ``await`` in between.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        surface: RenderSurface,
        resolver: PlaybackResolver,
        *,
        share_origin: str,
        share_path: str = "/",
        clipboard: Clipboard | None = None,
        mode_label: str = "",
    ) -> None:
        self._catalog = catalog
        self._surface = surface
        self._resolver = resolver
        self._share_origin = share_origin
        self._share_path = share_path
        self._clipboard = clipboard
        self._mode_label = mode_label
        self._state = NavigationState()
        self._list_generation = 0
        self._settled_list_generation = 0
        self._selection_generation = 0
        self._player_generation = 0
        self._append_lock = asyncio.Lock()
        self.last_error: ClientError | None = None

    @property
    def state(self) -> NavigationSnapshot:
        """Return a read-only copy of the current state."""

        return self._state.snapshot()

    @property
    def player_state(self) -> PlayerState:
        return self._resolver.state

    # ------------------------------------------------------------------
    # List transitions
    # ------------------------------------------------------------------
    async def go_home(self) -> None:
        """Replace the grid with the first page of the home feed."""

        await self._replace(Mode.HOME, "")

    async def run_search(self, query: str) -> None:
        """Replace the grid with the first page of results for ``query``."""

        await self._replace(Mode.SEARCH, query)

    async def refresh(self) -> None:
        """Reload page one of the active feed, keeping mode and query."""

        await self._replace(self._state.mode, self._state.query)

    async def submit_query(self, text: str) -> None:
        """Search for ``text``, or go home when it is blank."""

        query = text.strip()
        if not query:
            await self.go_home()
        else:
            await self.run_search(query)

    async def apply_chip(self, name: str) -> None:
        """Run the preset filter named ``name``."""

        if name == HOME_CHIP:
            await self.go_home()
        else:
            await self.run_search(name)

    async def load_more(self) -> None:
        """Append the next page of the active feed."""

        async with self._append_lock:
            generation = self._list_generation
            if generation != self._settled_list_generation:
                logger.debug("Ignoring load more while a list refresh is pending")
                return

            mode, query = self._state.mode, self._state.query
            page = self._state.page + 1
            logger.debug("Loading %s page %s", mode.value, page)
            try:
                items = await self._fetch_page(mode, query, page)
            except ClientError as exc:
                if generation == self._list_generation:
                    self._report(exc)
                else:
                    logger.debug("Ignoring failure of superseded page %s: %s", page, exc)
                return

            if generation != self._list_generation:
                logger.debug("Discarding stale %s page %s", mode.value, page)
                return

            self._state.items.extend(items)
            self._state.page = page
            self._surface.render_grid(
                GridView.build(self._state.snapshot(), items, append=True)
            )

    async def _replace(self, mode: Mode, query: str) -> None:
        self._list_generation += 1
        generation = self._list_generation
        logger.info("Loading %s feed (query=%r)", mode.value, query)

        try:
            items = await self._fetch_page(mode, query, 1)
        except ClientError as exc:
            if generation == self._list_generation:
                self._settled_list_generation = generation
                self._report(exc)
            else:
                logger.debug("Ignoring failure of superseded %s load: %s", mode.value, exc)
            return

        if generation != self._list_generation:
            logger.debug("Discarding stale %s response (query=%r)", mode.value, query)
            return

        self._state.mode = mode
        self._state.query = query
        self._state.page = 1
        self._state.items = list(items)
        self._settled_list_generation = generation
        self._surface.render_grid(
            GridView.build(self._state.snapshot(), items, append=False)
        )

    async def _fetch_page(self, mode: Mode, query: str, page: int) -> list[ListItem]:
        if mode is Mode.SEARCH:
            return await self._catalog.search(query, page)
        return await self._catalog.home(page)

    # ------------------------------------------------------------------
    # Selection transitions
    # ------------------------------------------------------------------
    async def select(self, item_id: str) -> None:
        """Load the detail for ``item_id`` and make it the selection."""

        if not item_id:
            return
        self._selection_generation += 1
        generation = self._selection_generation

        try:
            detail = await self._catalog.detail(item_id)
        except ClientError as exc:
            if generation == self._selection_generation:
                self._report(exc)
            else:
                logger.debug("Ignoring failure of superseded detail %s: %s", item_id, exc)
            return

        if generation != self._selection_generation:
            logger.debug("Discarding stale detail for %s", item_id)
            return

        self._state.selected = detail
        self._surface.show_detail(DetailView.build(detail))

    def clear_selection(self) -> None:
        """Drop the selection; late detail responses are ignored afterwards."""

        self._selection_generation += 1
        self._state.selected = None
        self._surface.hide_detail()

    async def boot(self, fragment: str | None = None) -> None:
        """Load the home feed and open the title named by a ``#id=`` fragment."""

        self.last_error = None
        await self.go_home()
        identifier = parse_fragment_id(fragment)
        if identifier:
            logger.info("Opening deep-linked title %s", identifier)
            await self.select(identifier)
        if self.last_error is None and self._mode_label:
            self._surface.set_status(self._mode_label)

    # ------------------------------------------------------------------
    # Playback and sharing
    # ------------------------------------------------------------------
    async def play(self) -> None:
        """Resolve the selected title's media and hand it to the player."""

        detail = self._state.selected
        if detail is None or not detail.id:
            return
        generation = self._selection_generation
        self._player_generation += 1
        player_generation = self._player_generation

        try:
            media = await self._catalog.media(detail.id)
        except ClientError as exc:
            if self._is_current_play(generation, player_generation):
                self._report(exc, status="Play error")
            else:
                logger.debug("Ignoring failure of superseded media %s: %s", detail.id, exc)
            return

        if not self._is_current_play(generation, player_generation):
            logger.debug("Discarding media for closed or deselected title %s", detail.id)
            return
        if media.is_empty:
            self._report(
                EmptyMediaError(f"No video url returned for {detail.id}."),
                status="Play error",
            )
            return

        self._surface.hide_detail()
        outcome = await self._resolver.play(media.url)
        if player_generation != self._player_generation:
            logger.debug("Player closed while starting %s", outcome.url)
            if self._resolver.state is PlayerState.CLOSED:
                self._resolver.release()
            return
        if outcome.playing:
            self._surface.open_player(
                PlayerView.build(detail, outcome.url, outcome.format_hint)
            )

    def close_player(self) -> None:
        """Close the player; pending playback for it is ignored afterwards."""

        self._player_generation += 1
        self._resolver.close()
        self._surface.close_player()

    def _is_current_play(self, selection_generation: int, player_generation: int) -> bool:
        return (
            selection_generation == self._selection_generation
            and player_generation == self._player_generation
        )

    def share_link(self) -> str | None:
        """Return the deep link for the current selection."""

        detail = self._state.selected
        if detail is None or not detail.id:
            return None
        return build_share_link(self._share_origin, self._share_path, detail.id)

    async def copy_share_link(self) -> str | None:
        """Copy the selection's deep link to the clipboard."""

        link = self.share_link()
        if link is None or self._clipboard is None:
            return None
        try:
            await self._clipboard.write_text(link)
        except ClipboardError as exc:
            self._report(exc, status="Copy failed")
            return None
        self._surface.set_status("Link copied")
        return link

    def _report(self, exc: ClientError, *, status: str = "Error") -> None:
        logger.warning("%s: %s", status, exc)
        self.last_error = exc
        self._surface.set_status(status, "err")
        self._surface.show_message(str(exc))
