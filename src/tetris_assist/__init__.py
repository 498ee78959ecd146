"""Falling-block puzzle engine with a best-drop placement assistant."""

__version__ = "0.1.0"
