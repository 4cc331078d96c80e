"""Quakeview - live earthquake map pipeline."""

__version__ = "1.0.0"
