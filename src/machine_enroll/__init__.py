"""Remote machine enrollment: credential validation and connection verification."""

__version__ = "0.3.0"
