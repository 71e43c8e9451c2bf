"""Periodic refresh of company news, article images and closing prices."""

__version__ = "0.1.0"
