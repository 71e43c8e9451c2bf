# backend/stockwatch/services/__init__.py
"""
Service modules for the refresh pipeline
"""

from . import articles
from . import discovery_client
from . import images
from . import market_data
from . import prices
from . import stock_update

__all__ = [
    "articles",
    "discovery_client",
    "images",
    "market_data",
    "prices",
    "stock_update",
]
