"""shopledger — inventory, category, and customer book for a small shop."""

__version__ = "0.4.0"
