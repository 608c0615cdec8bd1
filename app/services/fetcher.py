"""HTTP access to the catalog API with classified failures."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..errors import DecodeError, NetworkError, TransportError
from .presentation import StatusKind, StatusSink

logger = logging.getLogger(__name__)

BODY_PREFIX_LIMIT = 200


class RemoteFetcher:
    """Issue single GET requests and decode their JSON bodies.

    Failures are raised as :class:`NetworkError`, :class:`TransportError` or
    :class:`DecodeError` without any retry; callers decide how to recover.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        status_sink: StatusSink | None = None,
    ) -> None:
        self._client = http_client
        self._status_sink = status_sink

    def _signal(self, text: str, kind: StatusKind) -> None:
        if self._status_sink is None:
            return
        try:
            self._status_sink(text, kind)
        except Exception:
            logger.exception("Status sink failed while reporting %r", text)

    async def fetch_json(self, url: str) -> Any:
        """Return the decoded JSON payload served at ``url``."""

        self._signal("Loading…", "warn")
        try:
            payload = await self._fetch(url)
        except Exception:
            self._signal("Error", "err")
            raise
        self._signal("OK", "ok")
        return payload

    async def _fetch(self, url: str) -> Any:
        try:
            response = await self._client.get(
                url, headers={"Accept": "application/json"}
            )
        except httpx.TransportError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise NetworkError(f"Could not reach {url}: {exc}") from exc

        if not response.is_success:
            body = response.text[:BODY_PREFIX_LIMIT]
            logger.warning(
                "Request to %s returned HTTP %s: %s", url, response.status_code, body
            )
            raise TransportError(response.status_code, response.reason_phrase, body)

        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Response from %s is not valid JSON", url)
            raise DecodeError(f"Invalid JSON from {url}") from exc
