"""
Router modules for API endpoints
"""

from . import health
from . import stocks

__all__ = [
    "health",
    "stocks",
]
