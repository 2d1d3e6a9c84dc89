"""Convert an Excel translation sheet to per-locale .resx documents and back."""

__version__ = "0.1.0"
