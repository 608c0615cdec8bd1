"""Typed user intents and the dispatcher that feeds them to the controller."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Union

from .navigation import NavigationController

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GoHome:
    pass


@dataclass(frozen=True, slots=True)
class SubmitQuery:
    text: str


@dataclass(frozen=True, slots=True)
class ApplyChip:
    name: str


@dataclass(frozen=True, slots=True)
class LoadMore:
    pass


@dataclass(frozen=True, slots=True)
class Refresh:
    pass


@dataclass(frozen=True, slots=True)
class SelectItem:
    item_id: str


@dataclass(frozen=True, slots=True)
class ClearSelection:
    pass


@dataclass(frozen=True, slots=True)
class Play:
    pass


@dataclass(frozen=True, slots=True)
class ClosePlayer:
    pass


@dataclass(frozen=True, slots=True)
class CopyLink:
    pass


Intent = Union[
    GoHome,
    SubmitQuery,
    ApplyChip,
    LoadMore,
    Refresh,
    SelectItem,
    ClearSelection,
    Play,
    ClosePlayer,
    CopyLink,
]


class IntentDispatcher:
    """Consume intents in submission order and drive the controller.

    Intents that fetch are started as tasks in the order they arrive, so the
    controller's generation tokens follow submission order while a slow list
    load does not hold up a selection. Intents without I/O run inline.
    """

    def __init__(self, controller: NavigationController) -> None:
        self._controller = controller
        self._queue: asyncio.Queue[Intent | None] = asyncio.Queue()
        self._tasks: set[asyncio.Task[object]] = set()

    def submit(self, intent: Intent) -> None:
        self._queue.put_nowait(intent)

    def close(self) -> None:
        """Stop consuming once every queued intent has been dispatched."""

        self._queue.put_nowait(None)

    async def run(self) -> None:
        while True:
            intent = await self._queue.get()
            if intent is None:
                break
            self.dispatch(intent)
        await self.drain()

    async def drain(self) -> None:
        """Wait for every started transition to finish."""

        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def dispatch(self, intent: Intent) -> None:
        logger.debug("Dispatching %s", intent)
        controller = self._controller
        operation: Awaitable[object] | None = None

        if isinstance(intent, GoHome):
            operation = controller.go_home()
        elif isinstance(intent, SubmitQuery):
            operation = controller.submit_query(intent.text)
        elif isinstance(intent, ApplyChip):
            operation = controller.apply_chip(intent.name)
        elif isinstance(intent, LoadMore):
            operation = controller.load_more()
        elif isinstance(intent, Refresh):
            operation = controller.refresh()
        elif isinstance(intent, SelectItem):
            operation = controller.select(intent.item_id)
        elif isinstance(intent, Play):
            operation = controller.play()
        elif isinstance(intent, CopyLink):
            operation = controller.copy_share_link()
        elif isinstance(intent, ClearSelection):
            controller.clear_selection()
        elif isinstance(intent, ClosePlayer):
            controller.close_player()
        else:
            raise TypeError(f"Unsupported intent: {intent!r}")

        if operation is not None:
            task = asyncio.ensure_future(operation)
            self._tasks.add(task)
            task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[object]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Intent handler failed", exc_info=exc)
