"""Terminal explorer for railway infrastructure topology."""

__version__ = "0.1.0"
