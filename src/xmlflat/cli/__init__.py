"""Command-line interface for xmlflat."""

from .main import main

__all__ = ["main"]
