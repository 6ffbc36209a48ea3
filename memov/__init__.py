"""memov - daily todo files and categorised memos kept as plain markdown."""

__version__ = "0.1.0"
