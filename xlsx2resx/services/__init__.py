"""Conversion services: forward / inverse converters, watch loop, reporting."""
