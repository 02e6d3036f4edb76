"""Bulk order form engine: set many quantities, add them to the cart at once."""

__version__ = "1.0.0"
