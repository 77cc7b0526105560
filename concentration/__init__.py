"""Concentration: a memory card matching game engine and server."""

__version__ = "1.0.0"
