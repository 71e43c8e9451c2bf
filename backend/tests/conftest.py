# backend/tests/conftest.py
import os

import pytest

# must be set before stockwatch.core.config is imported
os.environ["ENABLE_SCHEDULER"] = "0"
os.environ.setdefault("DISCOVERY_API_KEY", "test-discovery-key")
os.environ.setdefault("ALPHA_VANTAGE_API_KEY", "test-av-key")

from stockwatch.core.config import Settings
from stockwatch.schemas.stock import Article, StockRecord


@pytest.fixture
def config():
    return Settings(
        _env_file=None,
        DISCOVERY_API_KEY="k",
        ALPHA_VANTAGE_API_KEY="k",
        COMPANIES=[
            {"name": "Apple", "ticker": "AAPL"},
            {"name": "IBM", "ticker": "IBM"},
            {"name": "Tesla", "ticker": "TSLA"},
        ],
        MAX_ARTICLES_PER_COMPANY=5,
        REQUEST_TIMEOUT_SECONDS=1.0,
    )


def make_article(url, date="2018-01-25T10:00:00Z", **kw):
    return Article(url=url, date=date, title=kw.pop("title", f"title {url}"), **kw)


def discovery_result(url, crawl_date="2018-01-25T10:00:00Z", label="positive", title="t", source="src"):
    return {
        "url": url,
        "crawl_date": crawl_date,
        "title": title,
        "forum_title": source,
        "enriched_text": {"sentiment": {"document": {"label": label}}},
    }


class FakeRepository:
    """In-memory stand-in for StockRepository"""

    def __init__(self, records=None, fail_search=False, fail_upsert=()):
        self.records = {r.company: r for r in (records or [])}
        self.fail_search = fail_search
        self.fail_upsert = set(fail_upsert)
        self.upserts = []

    async def search(self):
        from stockwatch.core.errors import StoreError
        if self.fail_search:
            raise StoreError("search failed")
        return [{"doc": r.model_copy(deep=True)} for r in self.records.values()]

    async def find_by_company(self, company):
        return self.records.get(company)

    async def insert_or_update(self, record: StockRecord):
        from stockwatch.core.errors import StoreError
        if record.company in self.fail_upsert:
            raise StoreError(f"upsert of {record.company!r} failed")
        record.touch()
        self.upserts.append(record.company)
        self.records[record.company] = record.model_copy(deep=True)
        return record
