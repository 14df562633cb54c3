"""Go-Stop (Matgo) rules engine and synchronized session server."""

__version__ = "0.1.0"
