"""Endpoint composition for the short-drama catalog API."""

from __future__ import annotations

import logging
from urllib.parse import quote, urlencode

from ..config import EndpointConfig
from ..models import Detail, ListItem, PlayableMedia
from ..normalizer import normalize_detail, normalize_list, normalize_video
from .fetcher import RemoteFetcher

logger = logging.getLogger(__name__)


class CatalogClient:
    """Fetch and normalize catalog resources for proxied or direct deployments."""

    def __init__(self, endpoints: EndpointConfig, fetcher: RemoteFetcher) -> None:
        self._endpoints = endpoints
        self._fetcher = fetcher

    @property
    def endpoints(self) -> EndpointConfig:
        return self._endpoints

    def home_url(self, page: int) -> str:
        return f"{self._endpoints.origin}{self._endpoints.home}?{urlencode({'page': page})}"

    def search_url(self, query: str, page: int) -> str:
        params = urlencode({"q": query, "page": page}, quote_via=quote)
        return f"{self._endpoints.origin}{self._endpoints.search}?{params}"

    def detail_url(self, item_id: str) -> str:
        return f"{self._endpoints.origin}{self._endpoints.detail}/{quote(item_id, safe='')}"

    def video_url(self, item_id: str) -> str:
        return f"{self._endpoints.origin}{self._endpoints.video}/{quote(item_id, safe='')}"

    async def home(self, page: int = 1) -> list[ListItem]:
        """Return one page of the home feed."""

        items = normalize_list(await self._fetcher.fetch_json(self.home_url(page)))
        logger.debug("Home page %s returned %s items", page, len(items))
        return items

    async def search(self, query: str, page: int = 1) -> list[ListItem]:
        """Return one page of search results for ``query``."""

        items = normalize_list(
            await self._fetcher.fetch_json(self.search_url(query, page))
        )
        logger.debug("Search %r page %s returned %s items", query, page, len(items))
        return items

    async def detail(self, item_id: str) -> Detail:
        return normalize_detail(await self._fetcher.fetch_json(self.detail_url(item_id)))

    async def media(self, item_id: str) -> PlayableMedia:
        return normalize_video(await self._fetcher.fetch_json(self.video_url(item_id)))
