# backend/stockwatch/services/discovery_client.py
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import requests

from stockwatch.core.config import Settings, settings as default_settings
from stockwatch.core.errors import ConfigurationError, DiscoveryError
from stockwatch.logger import get_logger

log = get_logger(__name__)

_RETURN_FIELDS = "url,title,crawl_date,forum_title,enriched_text.sentiment.document.label"


class DiscoveryClient:
    """News search over a Watson-Discovery-style query endpoint."""

    def __init__(self, config: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.config = config or default_settings
        self.session = session or requests.Session()

    def _ensure_api_key(self) -> str:
        key = self.config.DISCOVERY_API_KEY or ""
        if not key:
            raise ConfigurationError(
                "DISCOVERY_API_KEY is missing. Put it in backend/.env as DISCOVERY_API_KEY=..."
            )
        return key

    def _endpoint(self) -> str:
        c = self.config
        return (
            f"{c.DISCOVERY_URL.rstrip('/')}/v1/environments/{c.DISCOVERY_ENVIRONMENT_ID}"
            f"/collections/{c.DISCOVERY_COLLECTION_ID}/query"
        )

    def query_sync(self, company: str) -> Dict[str, Any]:
        """
        Return the raw query payload ({"results": [...], ...}) for a company.
        Raises DiscoveryError on provider errors.
        """
        key = self._ensure_api_key()
        params = {
            "version": self.config.DISCOVERY_VERSION,
            "natural_language_query": company,
            "count": self.config.DISCOVERY_COUNT,
            "return": _RETURN_FIELDS,
            "deduplicate": "true",
        }

        try:
            r = self.session.get(
                self._endpoint(),
                params=params,
                auth=("apikey", key),
                timeout=self.config.REQUEST_TIMEOUT_SECONDS,
            )
            if r.status_code in (401, 403):
                raise DiscoveryError(f"Discovery denied access ({r.status_code}).")
            if r.status_code == 429:
                raise DiscoveryError("Discovery rate-limited the request (429).")
            r.raise_for_status()
            data = r.json()
        except DiscoveryError:
            raise
        except (requests.RequestException, ValueError) as e:
            raise DiscoveryError(f"Discovery query failed for {company!r}: {e}") from e

        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise DiscoveryError(f"Discovery response for {company!r} has no results list")
        return data

    async def query(self, company: str) -> Dict[str, Any]:
        return await asyncio.to_thread(self.query_sync, company)
