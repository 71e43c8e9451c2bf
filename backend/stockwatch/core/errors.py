# backend/stockwatch/core/errors.py
"""Exception types shared across the update pipeline."""


class StockwatchError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(StockwatchError):
    """External services are not configured; nothing can run."""


class NoCompaniesError(StockwatchError):
    """The run resolved to an empty list of companies."""


class StoreError(StockwatchError):
    """The document store could not be read or written."""


class DiscoveryError(StockwatchError):
    """Raised when the discovery service can't return articles properly."""


class MarketDataError(StockwatchError):
    """Raised when the market-data provider can't return prices properly."""


class ScrapeError(StockwatchError):
    """An article page could not be fetched or parsed."""


class NoImageFound(ScrapeError):
    """The article page was fetched but contains no usable <img>."""
