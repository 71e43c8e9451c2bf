# backend/stockwatch/core/config.py
from __future__ import annotations
import json
from pathlib import Path
from typing import Annotated, Any, List, Optional
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import field_validator

from stockwatch.schemas.stock import NO_TICKER, Company
from stockwatch.utils.validators import normalize_company, normalize_ticker

# Resolves to <repo-root>/backend/.env when this file is at backend/stockwatch/core/config.py
ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Document store
    MONGO_URI: str = "mongodb://127.0.0.1:27017"
    MONGO_DB_NAME: str = "stockwatch"
    STOCKS_COLLECTION: str = "stocks"

    # --- Discovery (news search with sentiment enrichment)
    DISCOVERY_URL: str = "https://gateway.watsonplatform.net/discovery/api"
    DISCOVERY_API_KEY: Optional[str] = None
    DISCOVERY_ENVIRONMENT_ID: str = "system"
    DISCOVERY_COLLECTION_ID: str = "news-en"
    DISCOVERY_VERSION: str = "2018-08-01"
    DISCOVERY_COUNT: int = 10

    # --- Market data (Alpha Vantage daily series)
    ALPHA_VANTAGE_URL: str = "https://www.alphavantage.co/query"
    ALPHA_VANTAGE_API_KEY: Optional[str] = None
    ALPHA_VANTAGE_OUTPUT_SIZE: str = "compact"

    # --- Tracked companies and history cap
    COMPANIES: Annotated[List[Company], NoDecode] = []
    MAX_ARTICLES_PER_COMPANY: int = 100

    # --- Requests / scheduling
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    SCHEDULE_MINUTES: int = 60
    ENABLE_SCHEDULER: bool = True

    # --- Server
    API_PREFIX: str = "/api"
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    RELOAD: bool = False
    LOG_LEVEL: str = "INFO"
    # empty LOG_DIR means backend/logs; empty LOG_FILE disables the file handler
    LOG_DIR: str = ""
    LOG_FILE: str = "stockwatch.log"
    LOG_MAX_BYTES: int = 2_000_000
    LOG_BACKUP_COUNT: int = 5

    @property
    def configured(self) -> bool:
        """True when both external services have credentials."""
        return bool(self.DISCOVERY_API_KEY and self.ALPHA_VANTAGE_API_KEY)

    @field_validator("COMPANIES", mode="before")
    @classmethod
    def _parse_companies(cls, v: Any):
        # Accept a JSON list, or "Apple Inc.:AAPL,Microsoft:MSFT"; a missing ticker stays unresolved
        if v is None or v == "":
            return []
        if isinstance(v, str):
            raw = v.strip()
            if raw.startswith("["):
                v = json.loads(raw)
            else:
                v = []
                for item in raw.split(","):
                    if not item.strip():
                        continue
                    name, _, ticker = item.rpartition(":")
                    if not name:
                        name, ticker = ticker, ""
                    v.append({"name": name, "ticker": ticker})
        out = []
        for c in v:
            if isinstance(c, Company):
                c = c.model_dump()
            ticker = normalize_ticker(c.get("ticker") or "")
            out.append(Company(name=normalize_company(c["name"]), ticker=ticker or NO_TICKER))
        return out

    @field_validator("RELOAD", "ENABLE_SCHEDULER", mode="before")
    @classmethod
    def _parse_bool(cls, v):
        if isinstance(v, bool):
            return v
        return str(v).lower() in ("1", "true", "yes", "on")

    @field_validator("MAX_ARTICLES_PER_COMPANY", "DISCOVERY_COUNT", "SCHEDULE_MINUTES")
    @classmethod
    def _validate_positive(cls, v):
        if v < 1:
            raise ValueError("value must be at least 1")
        return v

    @field_validator("ALPHA_VANTAGE_OUTPUT_SIZE")
    @classmethod
    def _validate_output_size(cls, v):
        if v not in ("compact", "full"):
            raise ValueError("ALPHA_VANTAGE_OUTPUT_SIZE must be 'compact' or 'full'")
        return v


settings = Settings()
