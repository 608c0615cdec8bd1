"""Pytest configuration and test helpers."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


from app.errors import ClientError, ClipboardError  # noqa: E402
from app.models import Detail, ListItem, PlayableMedia  # noqa: E402
from app.services.navigation import NavigationController  # noqa: E402
from app.services.playback import PlaybackResolver  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


class RecordingSurface:
    """Render surface that records every call for assertions."""

    def __init__(self) -> None:
        self.statuses: list[tuple[str, str]] = []
        self.messages: list[str] = []
        self.grids: list = []
        self.details: list = []
        self.players: list = []
        self.detail_hidden = 0
        self.player_closed = 0

    def set_status(self, text: str, kind: str = "ok") -> None:
        self.statuses.append((text, kind))

    def show_message(self, text: str) -> None:
        self.messages.append(text)

    def render_grid(self, view) -> None:
        self.grids.append(view)

    def show_detail(self, view) -> None:
        self.details.append(view)

    def hide_detail(self) -> None:
        self.detail_hidden += 1

    def open_player(self, view) -> None:
        self.players.append(view)

    def close_player(self) -> None:
        self.player_closed += 1


class FakeCapability:
    """Playback capability recording the calls made by the resolver."""

    def __init__(self, *, native_hls: bool = False, reject_start: bool = False) -> None:
        self.native_hls = native_hls
        self.reject_start = reject_start
        self.start_gate: asyncio.Event | None = None
        self.calls: list[tuple] = []

    def supports_native_hls(self) -> bool:
        return self.native_hls

    def detach(self) -> None:
        self.calls.append(("detach",))

    def load(self, url: str, format_hint: str) -> None:
        self.calls.append(("load", url, format_hint))

    async def start(self) -> None:
        self.calls.append(("start",))
        if self.start_gate is not None:
            await self.start_gate.wait()
        if self.reject_start:
            raise RuntimeError("play() request was interrupted by autoplay policy")

    def pause(self) -> None:
        self.calls.append(("pause",))


class FakeOpener:
    def __init__(self) -> None:
        self.opened: list[tuple[str, bool, bool]] = []

    def open_external(self, url: str, *, noopener: bool, noreferrer: bool) -> None:
        self.opened.append((url, noopener, noreferrer))


class FakeClipboard:
    def __init__(self, *, deny: bool = False) -> None:
        self.deny = deny
        self.written: list[str] = []

    async def write_text(self, text: str) -> None:
        if self.deny:
            raise ClipboardError("Clipboard permission denied")
        self.written.append(text)


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def opener() -> FakeOpener:
    return FakeOpener()


@pytest.fixture
def clipboard() -> FakeClipboard:
    return FakeClipboard()


@pytest.fixture
def resolver(capability: FakeCapability, opener: FakeOpener, surface: RecordingSurface) -> PlaybackResolver:
    return PlaybackResolver(capability, opener, status_sink=surface.set_status)


class FakeCatalog:
    """In-memory catalog whose responses can be held back or made to fail."""

    def __init__(self) -> None:
        self.pages: dict[tuple[str, str, int], list[ListItem]] = {}
        self.details: dict[str, Detail] = {}
        self.media_urls: dict[str, str] = {}
        self.failures: dict[tuple, ClientError] = {}
        self.gates: dict[tuple, asyncio.Event] = {}
        self.calls: list[tuple] = []

    def hold(self, *key) -> asyncio.Event:
        """Block the response for ``key`` until the returned event is set."""

        gate = asyncio.Event()
        self.gates[tuple(key)] = gate
        return gate

    async def _answer(self, key: tuple) -> None:
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get(key)
        if failure is not None:
            raise failure

    async def home(self, page: int = 1) -> list[ListItem]:
        key = ("home", "", page)
        await self._answer(key)
        return list(self.pages.get(key, []))

    async def search(self, query: str, page: int = 1) -> list[ListItem]:
        key = ("search", query, page)
        await self._answer(key)
        return list(self.pages.get(key, []))

    async def detail(self, item_id: str) -> Detail:
        await self._answer(("detail", item_id))
        return self.details.get(item_id, Detail(id=item_id))

    async def media(self, item_id: str) -> PlayableMedia:
        await self._answer(("video", item_id))
        return PlayableMedia(url=self.media_urls.get(item_id, ""))


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


@pytest.fixture
def controller(
    catalog: FakeCatalog,
    surface: RecordingSurface,
    resolver: PlaybackResolver,
    clipboard: FakeClipboard,
) -> NavigationController:
    return NavigationController(
        catalog,
        surface,
        resolver,
        share_origin="https://melulu.example",
        share_path="/watch",
        clipboard=clipboard,
        mode_label="Proxy mode",
    )
