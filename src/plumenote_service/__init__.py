"""PlumeNote analytics and note-tracking service."""

__version__ = "1.0.0"
