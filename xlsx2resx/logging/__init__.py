"""Logging helpers: labeled console logger and JSON Lines error log."""
