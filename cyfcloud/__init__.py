"""Storage layer for a personal blog server: SQLite stores and Redis counters."""

__version__ = "0.1.0"