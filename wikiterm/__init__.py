"""Terminal reader for Wikipedia articles."""

__version__ = "0.1.0"
