"""Composite player scoring and Best XI selection."""

__version__ = "0.1.0"
