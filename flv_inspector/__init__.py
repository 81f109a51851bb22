"""Streaming FLV container decoder and tag inspector."""

__version__ = "0.1.0"
