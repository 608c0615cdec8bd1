"""Decide how a resolved media url reaches the playback capability."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol
from urllib.parse import urlparse

from .presentation import StatusSink

logger = logging.getLogger(__name__)

HLS_MIME_TYPE = "application/vnd.apple.mpegurl"
PROGRESSIVE_MIME_TYPE = "video/mp4"
HLS_FALLBACK_MESSAGE = "HLS detected — open in new tab (or add hls.js)"


class PlaybackCapability(Protocol):
    """Media element able to decode a url."""

    def supports_native_hls(self) -> bool: ...

    def detach(self) -> None:
        """Stop the current source and unbind it."""

    def load(self, url: str, format_hint: str) -> None: ...

    async def start(self) -> None: ...

    def pause(self) -> None: ...


class ExternalOpener(Protocol):
    """Opens a url in a separate browsing context."""

    def open_external(self, url: str, *, noopener: bool, noreferrer: bool) -> None: ...


class PlayerState(str, Enum):
    CLOSED = "closed"
    PLAYING = "playing"


class PlaybackRoute(str, Enum):
    DIRECT = "direct"
    EXTERNAL = "external"


@dataclass(frozen=True, slots=True)
class PlaybackOutcome:
    """Result of handing a url to the playback layer."""

    route: PlaybackRoute
    url: str
    format_hint: str

    @property
    def playing(self) -> bool:
        return self.route is PlaybackRoute.DIRECT


def is_hls(url: str) -> bool:
    """Return ``True`` when the url path names an HLS playlist."""

    return urlparse(url).path.lower().endswith(".m3u8")


def format_hint_for(url: str) -> str:
    return HLS_MIME_TYPE if is_hls(url) else PROGRESSIVE_MIME_TYPE


class PlaybackResolver:
    """Route media urls to native playback or to an external browsing context."""

    def __init__(
        self,
        capability: PlaybackCapability,
        opener: ExternalOpener,
        status_sink: StatusSink | None = None,
    ) -> None:
        self._capability = capability
        self._opener = opener
        self._status_sink = status_sink
        self._state = PlayerState.CLOSED
        self._current_url: str | None = None

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def current_url(self) -> str | None:
        return self._current_url

    async def play(self, url: str) -> PlaybackOutcome:
        """Load ``url`` and start playback, or fall back to a new context."""

        format_hint = format_hint_for(url)
        self.release()

        if format_hint == HLS_MIME_TYPE and not self._capability.supports_native_hls():
            logger.info("Native HLS unavailable, opening %s externally", url)
            self._opener.open_external(url, noopener=True, noreferrer=True)
            if self._status_sink is not None:
                self._status_sink(HLS_FALLBACK_MESSAGE, "warn")
            return PlaybackOutcome(PlaybackRoute.EXTERNAL, url, format_hint)

        self._capability.load(url, format_hint)
        self._current_url = url
        self._state = PlayerState.PLAYING
        try:
            await self._capability.start()
        except Exception as exc:
            # Autoplay rejections are recovered by the user pressing play.
            logger.debug("Playback start rejected for %s: %s", url, exc)
        return PlaybackOutcome(PlaybackRoute.DIRECT, url, format_hint)

    def close(self) -> None:
        """Pause playback and leave the playing state."""

        if self._state is PlayerState.PLAYING:
            self._capability.pause()
        self._state = PlayerState.CLOSED

    def release(self) -> None:
        """Stop and unbind the current source."""

        self._capability.detach()
        self._current_url = None
        self._state = PlayerState.CLOSED
