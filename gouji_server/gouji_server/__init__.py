"""Gouji card game rule server."""

__version__ = "0.1.0"
