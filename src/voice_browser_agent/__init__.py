"""Provide the public `voice_browser_agent` package exports."""

from __future__ import annotations

from .server import create_app

__all__ = ["create_app"]
