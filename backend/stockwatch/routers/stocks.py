# backend/stockwatch/routers/stocks.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException

from stockwatch.api.deps import get_stock_repository, get_stock_update
from stockwatch.core.errors import ConfigurationError, NoCompaniesError, StoreError
from stockwatch.db.repositories import StockRepository
from stockwatch.logger import get_logger
from stockwatch.schemas.stock import RefreshRequest, StockRecord
from stockwatch.services.stock_update import StockUpdate
from stockwatch.utils.validators import validate_company

log = get_logger(__name__)

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=List[StockRecord])
async def list_stocks(repo: StockRepository = Depends(get_stock_repository)):
    try:
        rows = await repo.search()
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return [row["doc"] for row in rows]


@router.get("/{company}", response_model=StockRecord)
async def get_stock(company: str, repo: StockRepository = Depends(get_stock_repository)):
    try:
        name = validate_company(company)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        record = await repo.find_by_company(name)
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
    if record is None:
        raise HTTPException(status_code=404, detail=f"No stock record for {name!r}")
    return record


@router.post("/refresh", response_model=List[StockRecord])
async def refresh_stocks(
    body: Optional[RefreshRequest] = Body(default=None),
    updater: StockUpdate = Depends(get_stock_update),
):
    companies = body.companies if body else None
    if companies is not None:
        try:
            companies = [validate_company(c) for c in companies]
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    try:
        return await updater.run(companies)
    except ConfigurationError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except NoCompaniesError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreError as e:
        raise HTTPException(status_code=502, detail=str(e))
