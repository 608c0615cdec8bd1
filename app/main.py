"""Wiring for a client session: HTTP client, catalog, resolver and controller."""

from __future__ import annotations

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator

import httpx

from .config import Settings
from .services.catalog import CatalogClient
from .services.fetcher import RemoteFetcher
from .services.navigation import NavigationController
from .services.playback import ExternalOpener, PlaybackCapability, PlaybackResolver
from .services.presentation import Clipboard, RenderSurface

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_controller(
    settings: Settings,
    http_client: httpx.AsyncClient,
    *,
    surface: RenderSurface,
    capability: PlaybackCapability,
    opener: ExternalOpener,
    clipboard: Clipboard | None = None,
) -> NavigationController:
    """Assemble a controller around an existing HTTP client."""

    endpoints = settings.endpoints
    fetcher = RemoteFetcher(http_client, status_sink=surface.set_status)
    catalog = CatalogClient(endpoints, fetcher)
    resolver = PlaybackResolver(capability, opener, status_sink=surface.set_status)
    logger.info("Catalog API at %s (%s)", endpoints.origin, endpoints.label)
    return NavigationController(
        catalog,
        surface,
        resolver,
        share_origin=settings.share_origin,
        share_path=settings.share_path,
        clipboard=clipboard,
        mode_label=endpoints.label,
    )


@asynccontextmanager
async def open_session(
    settings: Settings,
    *,
    surface: RenderSurface,
    capability: PlaybackCapability,
    opener: ExternalOpener,
    clipboard: Clipboard | None = None,
) -> AsyncIterator[NavigationController]:
    """Yield a controller whose HTTP client is closed when the session ends."""

    exit_stack = AsyncExitStack()
    http_client = await exit_stack.enter_async_context(
        httpx.AsyncClient(
            timeout=httpx.Timeout(settings.request_timeout_seconds, connect=10.0),
            follow_redirects=True,
        )
    )
    try:
        yield create_controller(
            settings,
            http_client,
            surface=surface,
            capability=capability,
            opener=opener,
            clipboard=clipboard,
        )
    finally:
        await exit_stack.aclose()
