"""Exception types raised by the catalog client."""

from __future__ import annotations


class ClientError(Exception):
    """Base class for failures surfaced to the user."""


class NetworkError(ClientError):
    """The remote host could not be reached."""


class TransportError(ClientError):
    """The server answered with a non-success HTTP status."""

    def __init__(self, status: int, status_text: str, body_prefix: str = "") -> None:
        self.status = status
        self.status_text = status_text
        self.body_prefix = body_prefix[:200]
        message = f"HTTP {status} {status_text}".rstrip()
        if self.body_prefix:
            message = f"{message} — {self.body_prefix}"
        super().__init__(message)


class DecodeError(ClientError):
    """The response body was not valid JSON."""


class EmptyMediaError(ClientError):
    """The video endpoint did not return a playable URL."""


class ClipboardError(ClientError):
    """Writing to the clipboard was refused."""
