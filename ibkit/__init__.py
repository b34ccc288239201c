"""Mach-O analysis helpers: report databases, reflection reports, header detection and scanner state."""

__version__ = "0.1.0"