"""localbiz: local business directory and review backend."""

__version__ = "0.1.0"
