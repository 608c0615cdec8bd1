"""Compatibility shim exposing the client session helpers."""

from __future__ import annotations

from app.main import create_controller, open_session

__all__ = ["create_controller", "open_session"]
