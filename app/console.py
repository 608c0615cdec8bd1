"""Terminal front-end: renders view-models and turns typed commands into intents."""

from __future__ import annotations

import asyncio
import logging
import sys
import webbrowser

import click

from .config import Settings
from .main import open_session
from .services.intents import (
    ApplyChip,
    ClearSelection,
    ClosePlayer,
    CopyLink,
    GoHome,
    Intent,
    IntentDispatcher,
    LoadMore,
    Play,
    Refresh,
    SelectItem,
    SubmitQuery,
)
from .services.presentation import (
    CHIP_PRESETS,
    DetailView,
    GridView,
    PlayerView,
    StatusKind,
)
from .utils import format_views

logger = logging.getLogger(__name__)

QUIT_COMMANDS = frozenset({"quit", "exit", "q"})

HELP_TEXT = """Commands:
  home               show the home feed
  search <text>      search the catalog (blank goes home)
  chip <name>        apply a preset filter ({chips})
  more               load the next page
  refresh            reload the current feed
  open <id>          show a title
  close              close the title drawer
  play               play the open title
  stop               close the player
  share              copy a link to the open title
  quit               leave"""

_STATUS_COLOURS: dict[str, str] = {"ok": "green", "warn": "blue", "err": "red"}


class ConsoleSurface:
    """Render surface printing to the terminal."""

    def set_status(self, text: str, kind: StatusKind = "ok") -> None:
        click.echo(click.style(f"[{text}]", fg=_STATUS_COLOURS.get(kind)))

    def show_message(self, text: str) -> None:
        click.echo(text)

    def render_grid(self, view: GridView) -> None:
        if not view.append:
            click.echo(click.style(view.heading, bold=True))
        for item in view.items:
            line = f"  {item.id:<12} {item.title}"
            extras = [item.tag, item.year or "—"]
            if item.duration:
                extras.append(item.duration)
            extras.append(f"{format_views(item.views)} ▶")
            click.echo(f"{line}  ({' • '.join(extras)})")
        click.echo(view.summary)

    def show_detail(self, view: DetailView) -> None:
        detail = view.detail
        click.echo(click.style(detail.title, bold=True))
        click.echo(f"  {view.meta}")
        click.echo(f"  Rating: {view.rating}")
        click.echo(f"  Tags: {view.tags}")
        click.echo(f"  {detail.desc}")

    def hide_detail(self) -> None:
        logger.debug("Detail drawer closed")

    def open_player(self, view: PlayerView) -> None:
        click.echo(click.style(f"▶ {view.title}", bold=True))
        click.echo(f"  {view.meta}")
        click.echo(f"  {view.url}")

    def close_player(self) -> None:
        click.echo("Player closed")


class ConsolePlayback:
    """Playback capability that hands progressive streams to the system browser."""

    def __init__(self) -> None:
        self._source: str | None = None

    def supports_native_hls(self) -> bool:
        return False

    def detach(self) -> None:
        self._source = None

    def load(self, url: str, format_hint: str) -> None:
        logger.debug("Loading %s as %s", url, format_hint)
        self._source = url

    async def start(self) -> None:
        if self._source:
            webbrowser.open_new_tab(self._source)

    def pause(self) -> None:
        self._source = None


class BrowserOpener:
    """Open urls in a new browser tab."""

    def open_external(self, url: str, *, noopener: bool, noreferrer: bool) -> None:
        webbrowser.open_new_tab(url)


class EchoClipboard:
    """Clipboard stand-in for terminals: prints the text."""

    async def write_text(self, text: str) -> None:
        click.echo(text)


def parse_command(line: str) -> Intent | None:
    """Return the intent for a typed command, or ``None`` when unrecognised."""

    command, _, argument = line.strip().partition(" ")
    command = command.lower()
    argument = argument.strip()

    if command == "home":
        return GoHome()
    if command == "search":
        return SubmitQuery(argument)
    if command == "chip" and argument:
        return ApplyChip(argument)
    if command == "more":
        return LoadMore()
    if command == "refresh":
        return Refresh()
    if command == "open" and argument:
        return SelectItem(argument)
    if command == "close":
        return ClearSelection()
    if command == "play":
        return Play()
    if command == "stop":
        return ClosePlayer()
    if command == "share":
        return CopyLink()
    return None


async def run_console(settings: Settings, fragment: str | None = None) -> None:
    """Boot a session and feed typed commands into it until ``quit`` or EOF."""

    click.echo(HELP_TEXT.format(chips=", ".join(CHIP_PRESETS)))
    async with open_session(
        settings,
        surface=ConsoleSurface(),
        capability=ConsolePlayback(),
        opener=BrowserOpener(),
        clipboard=EchoClipboard(),
    ) as controller:
        await controller.boot(fragment)
        dispatcher = IntentDispatcher(controller)
        consumer = asyncio.create_task(dispatcher.run())
        try:
            while True:
                line = await asyncio.to_thread(sys.stdin.readline)
                if not line or line.strip().lower() in QUIT_COMMANDS:
                    break
                if not line.strip():
                    continue
                intent = parse_command(line)
                if intent is None:
                    click.echo(f"Unknown command: {line.strip()}")
                    continue
                dispatcher.submit(intent)
        finally:
            dispatcher.close()
            await consumer
