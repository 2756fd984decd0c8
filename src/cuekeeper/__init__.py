"""Billiards Scorekeeper - round-robin scoring for small groups."""

__version__ = "0.1.0"
