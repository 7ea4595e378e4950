"""Synthesize partial declarations that reuse another member's default value."""

__version__ = "0.1.0"
