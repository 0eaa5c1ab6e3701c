"""Bookkeeping API: accounting CRUD service."""

__version__ = "2.0.0"
