# backend/stockwatch/db/__init__.py
"""Database package - MongoDB document store"""

from .mongo import (
    connect_to_mongo,
    close_mongo_connection,
    get_db,
    get_client,
    ensure_indexes,
)

from .repositories import (
    BaseRepository,
    StockRepository,
)

__all__ = [
    # Connection management
    "connect_to_mongo",
    "close_mongo_connection",
    "get_db",
    "get_client",
    "ensure_indexes",

    # Repositories
    "BaseRepository",
    "StockRepository",
]
