"""Quotation management service for interior and POP work."""

__version__ = "0.1.0"
