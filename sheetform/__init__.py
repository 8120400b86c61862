"""Schema-driven form engine backed by a spreadsheet data service."""

__version__ = "0.1.0"
