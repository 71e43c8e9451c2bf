# backend/stockwatch/core/outcome.py
"""Success-or-failure results and the all-settle combinator used by every fan-out."""

from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or the exception that prevented it."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome[T]":
        return cls(error=error)


async def _settle(aw: Awaitable[Any]) -> Outcome[Any]:
    try:
        result = await aw
    except asyncio.CancelledError:
        raise
    except Exception as e:
        return Outcome.failure(e)
    if isinstance(result, Outcome):
        return result
    return Outcome.success(result)


async def settle_all(awaitables: Iterable[Awaitable[T]]) -> List[Outcome[T]]:
    """
    Run awaitables concurrently and wait for every one of them.
    Returns one Outcome per input, in input order; never raises for item failures.
    Awaitables that already return an Outcome are passed through unchanged.
    """
    return list(await asyncio.gather(*(_settle(aw) for aw in awaitables)))


def successes(outcomes: Iterable[Outcome[T]]) -> List[T]:
    return [o.value for o in outcomes if o.ok]  # type: ignore[misc]


def failures(outcomes: Iterable[Outcome[Any]]) -> List[BaseException]:
    return [o.error for o in outcomes if o.error is not None]
