"""Command-line interface for autorelease."""

from __future__ import annotations

from autorelease.cli.app import app, main

__all__ = ["app", "main"]
