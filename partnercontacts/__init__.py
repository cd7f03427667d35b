"""Encrypted partner contact storage."""

__version__ = "0.1.0"
