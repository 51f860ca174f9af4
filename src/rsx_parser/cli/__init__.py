"""Command-line interface module for the rsx parser."""

from .main import main

__all__ = ["main"]
