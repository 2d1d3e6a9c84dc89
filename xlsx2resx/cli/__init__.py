"""Command line interface (``xlsx2resx`` / ``python -m xlsx2resx.cli``)."""

from .__main__ import main

__all__ = ["main"]
