"""Tests for the playback resolver."""

from __future__ import annotations

import pytest

from app.services.playback import (
    HLS_FALLBACK_MESSAGE,
    HLS_MIME_TYPE,
    PROGRESSIVE_MIME_TYPE,
    PlaybackResolver,
    PlaybackRoute,
    PlayerState,
    is_hls,
)


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://cdn.example/show/index.m3u8", True),
        ("https://cdn.example/show/INDEX.M3U8?token=abc", True),
        ("https://cdn.example/show/ep1.mp4", False),
        ("https://cdn.example/m3u8/ep1.mp4?fmt=.m3u8", False),
    ],
)
def test_is_hls_inspects_url_path(url: str, expected: bool) -> None:
    assert is_hls(url) is expected


@pytest.mark.anyio("asyncio")
async def test_hls_without_native_support_opens_new_context(
    resolver: PlaybackResolver, capability, opener, surface
) -> None:
    url = "https://cdn.example/show/index.m3u8"

    outcome = await resolver.play(url)

    assert outcome.route is PlaybackRoute.EXTERNAL
    assert outcome.playing is False
    assert resolver.state is PlayerState.CLOSED
    assert opener.opened == [(url, True, True)]
    assert capability.calls == [("detach",)]
    assert surface.statuses == [(HLS_FALLBACK_MESSAGE, "warn")]


@pytest.mark.anyio("asyncio")
async def test_hls_with_native_support_plays_directly(capability, opener, resolver) -> None:
    capability.native_hls = True
    url = "https://cdn.example/show/index.m3u8"

    outcome = await resolver.play(url)

    assert outcome.playing is True
    assert outcome.format_hint == HLS_MIME_TYPE
    assert resolver.state is PlayerState.PLAYING
    assert opener.opened == []
    assert capability.calls == [("detach",), ("load", url, HLS_MIME_TYPE), ("start",)]


@pytest.mark.anyio("asyncio")
async def test_progressive_source_plays_directly(capability, resolver) -> None:
    url = "https://cdn.example/show/ep1.mp4"

    outcome = await resolver.play(url)

    assert outcome.route is PlaybackRoute.DIRECT
    assert resolver.state is PlayerState.PLAYING
    assert resolver.current_url == url
    assert capability.calls == [
        ("detach",),
        ("load", url, PROGRESSIVE_MIME_TYPE),
        ("start",),
    ]


@pytest.mark.anyio("asyncio")
async def test_start_rejection_is_not_escalated(capability, resolver, surface) -> None:
    capability.reject_start = True

    outcome = await resolver.play("https://cdn.example/show/ep1.mp4")

    assert outcome.playing is True
    assert resolver.state is PlayerState.PLAYING
    assert surface.statuses == []


@pytest.mark.anyio("asyncio")
async def test_previous_source_detached_before_next_load(capability, resolver) -> None:
    await resolver.play("https://cdn.example/ep1.mp4")
    await resolver.play("https://cdn.example/ep2.mp4")

    names = [call[0] for call in capability.calls]
    assert names == ["detach", "load", "start", "detach", "load", "start"]
    assert resolver.current_url == "https://cdn.example/ep2.mp4"


@pytest.mark.anyio("asyncio")
async def test_close_pauses_playback(capability, resolver) -> None:
    await resolver.play("https://cdn.example/ep1.mp4")

    resolver.close()

    assert capability.calls[-1] == ("pause",)
    assert resolver.state is PlayerState.CLOSED
