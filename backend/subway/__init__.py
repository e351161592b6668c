"""Subway line topology service."""

__version__ = "0.1.0"
