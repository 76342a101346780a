"""Thread synchronization primitives, synchronized lists, mailboxes and a line console."""

__version__ = "0.1.0"

__all__ = ["__version__"]