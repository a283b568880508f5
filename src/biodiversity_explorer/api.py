"""
Awaitable entry points for interactive consumers.

Each coroutine runs the matching fail-soft datasource call off the event
loop, so several regions can be queried concurrently::

    async with asyncio.TaskGroup() as tg:
        nairobi = tg.create_task(api.get_aggregates("Nairobi", limit=60))
        mombasa = tg.create_task(api.get_aggregates("Mombasa", limit=60))

Cancelling a task abandons its request: the worker thread finishes on its
own but its result is discarded. ``LatestOnly`` does this automatically for
queries superseded by a newer one (e.g. a changed filter selection).
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from biodiversity_explorer.datasources import gbif, inaturalist
from biodiversity_explorer.schemas import (
    IdentificationCandidate,
    OccurrenceAggregate,
    OccurrencePage,
    Region,
    ResolvedPlace,
    TaxonDetail,
)

T = TypeVar("T")


async def list_regions() -> list[Region]:
    return await asyncio.to_thread(gbif.list_regions)


async def resolve_place(
    name: str, resolver: inaturalist.PlaceResolver | None = None
) -> ResolvedPlace:
    return await asyncio.to_thread((resolver or inaturalist.PlaceResolver()).resolve, name)


async def get_aggregates(
    region_name: str,
    taxon_scope: int | None = None,
    limit: int = 60,
    page: int = 1,
    *,
    resolver: inaturalist.PlaceResolver | None = None,
) -> list[OccurrenceAggregate]:
    return await asyncio.to_thread(
        inaturalist.get_aggregates, region_name, taxon_scope, limit, page, resolver=resolver
    )


async def get_detail(
    taxon_id: int | None, *, cache: inaturalist.DetailCache | None = None
) -> TaxonDetail | None:
    return await asyncio.to_thread(inaturalist.get_detail, taxon_id, cache=cache)


async def identify(
    image: bytes, lat: float | None = None, lon: float | None = None
) -> list[IdentificationCandidate]:
    return await asyncio.to_thread(inaturalist.identify, image, lat, lon)


async def search_occurrences(
    region_id: str,
    kingdom: int | None = None,
    class_key: int | None = None,
    limit: int = 20,
    offset: int = 0,
    require_image: bool = True,
) -> OccurrencePage:
    return await asyncio.to_thread(
        gbif.search_occurrences, region_id, kingdom, class_key, limit, offset, require_image
    )


class LatestOnly:
    """
    Keep at most one in-flight task per key.

    Submitting a new coroutine for a key cancels the task previously
    submitted for it, so a stale result can never be awaited after a newer
    request has been made.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def submit(self, key: str, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        previous = self._tasks.get(key)
        if previous is not None and not previous.done():
            previous.cancel()
        task = asyncio.ensure_future(coro)
        self._tasks[key] = task
        task.add_done_callback(lambda t: self._forget(key, t))
        return task

    def cancel_all(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
