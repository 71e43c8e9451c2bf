# backend/stockwatch/tasks/scheduler.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from stockwatch.core.config import settings
from stockwatch.core.errors import StockwatchError
from stockwatch.logger import get_logger
from stockwatch.schemas.stock import StockRecord
from stockwatch.services.stock_update import build_stock_update

log = get_logger(__name__)
_scheduler: AsyncIOScheduler | None = None

_last_run: Dict[str, Any] = {}


async def job_refresh_stocks(companies: Optional[List[str]] = None) -> List[StockRecord]:
    """Run one update over every stored company; errors are logged, never raised."""
    when = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log.info("[SCHEDULE] stock refresh running at %s", when)
    _last_run.update({"started_at": when, "finished_at": None, "error": None})

    try:
        results = await build_stock_update().run(companies)
    except StockwatchError as e:
        log.error("[SCHEDULE] stock refresh aborted: %s", e)
        _last_run.update({"finished_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"), "error": str(e)})
        return []

    _last_run.update({
        "finished_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        "records": len(results),
    })
    log.info("[SCHEDULE] stock refresh finished, %d record(s)", len(results))
    return results


def start_scheduler():
    """Start the periodic refresh; must be called with an event loop running."""
    global _scheduler
    if _scheduler:
        return _scheduler
    if not settings.ENABLE_SCHEDULER:
        log.info("[SCHEDULE] disabled by ENABLE_SCHEDULER")
        return None

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        job_refresh_stocks,
        "interval",
        minutes=settings.SCHEDULE_MINUTES,
        id="stock_refresh",
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    log.info("[SCHEDULE] started: stock refresh every %d min", settings.SCHEDULE_MINUTES)
    return _scheduler


def shutdown_scheduler():
    """Shutdown scheduler"""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        log.info("[SCHEDULE] stopped")
        _scheduler = None


def get_scheduler_status():
    """Get current scheduler status and job info"""
    if not _scheduler:
        return {"running": False, "jobs": [], "last_run": dict(_last_run)}

    jobs = []
    for job in _scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name or str(job.func),
            "next_run": job.next_run_time,
            "trigger": str(job.trigger),
        })

    return {
        "running": _scheduler.running,
        "jobs": jobs,
        "last_run": dict(_last_run),
    }
