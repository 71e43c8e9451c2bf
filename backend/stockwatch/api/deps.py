# backend/stockwatch/api/deps.py
from stockwatch.core.config import settings
from stockwatch.db.mongo import get_db
from stockwatch.db.repositories import StockRepository
from stockwatch.services.stock_update import StockUpdate, build_stock_update


def get_stock_repository() -> StockRepository:
    return StockRepository(get_db(), settings.STOCKS_COLLECTION)


def get_stock_update() -> StockUpdate:
    return build_stock_update(settings)
