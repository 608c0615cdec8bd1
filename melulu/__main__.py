"""Module executed when running ``python -m melulu``."""

from __future__ import annotations

import asyncio

import click

from app.config import Settings, get_settings
from app.console import run_console
from app.main import configure_logging


@click.command()
@click.option(
    "--fragment",
    default=None,
    help="Deep-link fragment such as '#id=123' to open after boot.",
)
@click.option(
    "--proxy/--direct",
    "proxy_mode",
    default=None,
    help="Route requests through the proxy or straight to API_BASE_URL.",
)
def main(fragment: str | None, proxy_mode: bool | None) -> None:
    """Browse and play short dramas from the terminal."""

    try:
        if proxy_mode is None:
            settings = get_settings()
        else:
            settings = Settings(USE_PROXY=proxy_mode)  # type: ignore[call-arg]
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(settings)
    asyncio.run(run_console(settings, fragment))


if __name__ == "__main__":  # pragma: no cover - runtime entrypoint
    main()
