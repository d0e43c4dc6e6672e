"""Kalenuxer command line interface."""
from kalenuxer import __version__

__all__ = ["__version__"]
