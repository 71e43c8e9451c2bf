# backend/stockwatch/services/stock_update.py
"""
One refresh run over the tracked companies:

  list targets -> fetch articles (per company) -> merge against stored history
  -> refresh + trim prices -> resolve images -> upsert

Per-company work is concurrent and all-settle: one company's failure never
aborts the others. Only configuration, an empty target list and a failed
store listing make run() raise.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from stockwatch.core.config import Settings, settings as default_settings
from stockwatch.core.errors import (
    ConfigurationError,
    MarketDataError,
    NoCompaniesError,
    StoreError,
)
from stockwatch.core.outcome import Outcome, failures, settle_all
from stockwatch.logger import get_logger
from stockwatch.schemas.stock import NO_TICKER, Article, StockRecord
from stockwatch.services.articles import (
    dedupe_batch,
    filter_new_articles,
    merge_articles,
    parse_results,
)
from stockwatch.services.discovery_client import DiscoveryClient
from stockwatch.services.images import ImageResolver, attach_images
from stockwatch.services.market_data import MarketDataClient
from stockwatch.services.prices import merge_price_history, trim_price_history
from stockwatch.utils.dates import article_date_to_av_date
from stockwatch.utils.validators import normalize_company

log = get_logger(__name__)

CompanyArticles = Tuple[str, List[Article]]


def find_ticker_for_company(name: str, config: Optional[Settings] = None) -> Optional[str]:
    """Ticker from the configured company list, or None"""
    config = config or default_settings
    for c in config.COMPANIES:
        if c.name == name and c.ticker != NO_TICKER:
            return c.ticker
    return None


def needed_price_dates(articles: Iterable[Article]) -> List[str]:
    """Distinct market-data dates for the articles, in first-seen order"""
    dates: Dict[str, None] = {}
    for a in articles:
        if not a.date:
            continue
        try:
            dates[article_date_to_av_date(a.date)] = None
        except ValueError:
            log.warning("Skipping price lookup for unparseable date %r (%s)", a.date, a.url)
    return list(dates)


class StockUpdate:
    """Refreshes article and price data for companies and persists the result."""

    def __init__(
        self,
        config: Optional[Settings] = None,
        repository=None,
        discovery: Optional[DiscoveryClient] = None,
        market_data: Optional[MarketDataClient] = None,
        images: Optional[ImageResolver] = None,
    ):
        self.config = config or default_settings
        self.repository = repository
        self.discovery = discovery or DiscoveryClient(self.config)
        self.market_data = market_data or MarketDataClient(self.config)
        self.images = images or ImageResolver(self.config)

    # ---------- articles ----------

    async def fetch_articles_for_company(self, company: str) -> CompanyArticles:
        data = await self.discovery.query(company)
        articles = dedupe_batch(parse_results(data.get("results", [])), company)
        log.info('Received %d unique articles for "%s" from discovery', len(articles), company)
        return company, articles

    async def fetch_articles(self, companies: Sequence[str]) -> Tuple[List[CompanyArticles], List[BaseException]]:
        """Fan out one discovery query per company; failures are collected, not raised."""
        for c in companies:
            log.info('Starting discovery for "%s"', c)
        outcomes = await settle_all(self.fetch_articles_for_company(c) for c in companies)

        fetched: List[CompanyArticles] = []
        for company, outcome in zip(companies, outcomes):
            if outcome.ok:
                fetched.append(outcome.value)
            else:
                log.error('Discovery failed for "%s": %s', company, outcome.error)
        return fetched, failures(outcomes)

    # ---------- prices ----------

    async def refresh_prices(self, record: StockRecord) -> Outcome[StockRecord]:
        """Merge the latest price history into the record; soft failure."""
        if not record.ticker or record.ticker == NO_TICKER:
            return Outcome.failure(MarketDataError(f"no ticker known for {record.company!r}"))

        log.info("Beginning stock price update for %s", record.ticker)
        try:
            fresh = await self.market_data.get_price_history_for_ticker(record.ticker)
        except Exception as e:
            return Outcome.failure(e)
        record.price_history = merge_price_history(record.price_history, fresh)
        return Outcome.success(record)

    # ---------- per company ----------

    async def update_company(self, record: StockRecord, incoming: List[Article]) -> StockRecord:
        company = record.company
        log.info('Beginning article insertion for "%s"', company)
        existing = list(record.history)
        new_articles = filter_new_articles(existing, incoming)
        if not new_articles:
            log.info('No new articles to insert into "%s"', company)
            return record

        refreshed = await self.refresh_prices(record)
        if refreshed.ok:
            log.info("stock price retrieval successful for %s", record.ticker)
            record.price_history = trim_price_history(
                record.price_history, needed_price_dates(existing + new_articles)
            )
        else:
            log.warning("stock price retrieval failed for %s: %s", record.ticker, refreshed.error)

        images = await self.images.resolve_images(new_articles)
        attach_images(new_articles, images)

        record.history = merge_articles(
            existing, new_articles, self.config.MAX_ARTICLES_PER_COMPANY, company
        )
        log.info('Inserting %d new article(s) into company "%s"', len(new_articles), company)

        try:
            await self.repository.insert_or_update(record)
        except StoreError as e:
            log.error("Persisting %r failed: %s", company, e)
        return record

    # ---------- run ----------

    def _resolve_targets(self, companies: Optional[Iterable[str]], records: List[StockRecord]) -> List[str]:
        if companies is None:
            names = [r.company for r in records]
        else:
            names = [normalize_company(c) for c in companies]
        # a company listed twice is processed once
        return [n for n in dict.fromkeys(names) if n]

    def _record_for(self, company: str, by_company: Dict[str, StockRecord], results: List[StockRecord]) -> StockRecord:
        record = by_company.get(company)
        if record is None:
            record = StockRecord(
                company=company,
                ticker=find_ticker_for_company(company, self.config) or NO_TICKER,
            )
            by_company[company] = record
            results.append(record)
        return record

    async def run(self, companies: Optional[Iterable[str]] = None) -> List[StockRecord]:
        """
        Retrieve new data for the given companies (default: every stored company).
        Returns all known records, updated in memory; a returned record is not
        a guarantee that its write succeeded.
        """
        if not self.config.configured or self.repository is None:
            log.error("Project is not configured correctly...terminating")
            raise ConfigurationError("discovery, market data and store must be configured")

        try:
            rows = await self.repository.search()
        except Exception as e:
            log.error("Listing stock records failed: %s", e)
            if isinstance(e, StoreError):
                raise
            raise StoreError(str(e)) from e

        results = [row["doc"] for row in rows]
        targets = self._resolve_targets(companies, results)
        if not targets:
            log.warning("No companies to update")
            raise NoCompaniesError("no companies to update")

        fetched, errors = await self.fetch_articles(targets)
        if errors:
            log.warning("%d of %d discovery queries failed", len(errors), len(targets))

        by_company = {r.company: r for r in results}
        work = [
            (company, self._record_for(company, by_company, results), articles)
            for company, articles in fetched
        ]
        outcomes = await settle_all(self.update_company(record, articles) for _, record, articles in work)
        for (company, _, _), outcome in zip(work, outcomes):
            if not outcome.ok:
                log.error("Error inserting stock data for %s: %s", company, outcome.error)

        return results


def build_stock_update(config: Optional[Settings] = None) -> StockUpdate:
    """StockUpdate wired to the shared MongoDB database."""
    from stockwatch.db.mongo import get_db
    from stockwatch.db.repositories import StockRepository

    config = config or default_settings
    return StockUpdate(config, repository=StockRepository(get_db(), config.STOCKS_COLLECTION))
