"""Personal knowledge base: one query across Google Drive, Gmail and future sources."""

__version__ = "0.1.0"
