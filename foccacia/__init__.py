"""FOCCACIA: football groups backed by API-Football."""

__version__ = "0.1.0"
