"""
Tests for the awaitable entry points.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any
from unittest.mock import Mock, patch

from biodiversity_explorer import api
from biodiversity_explorer.schemas import OccurrenceAggregate, TaxonSummary


def _response(payload: object) -> Mock:
    resp = Mock()
    resp.json.return_value = payload
    resp.raise_for_status = Mock()
    return resp


class TestCoroutines:
    """Each coroutine delegates to the matching datasource call."""

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.get")
    def test_regions_resolve_concurrently(self, mock_get: Mock) -> None:
        def fake_get(url: str, params: dict | None = None, **_: Any) -> Mock:
            q = (params or {}).get("q")
            return _response({"results": [{"id": q, "display_name": f"{q}, Kenya"}]})

        mock_get.side_effect = fake_get

        async def scenario() -> list:
            return await asyncio.gather(
                api.resolve_place("Nairobi"),
                api.resolve_place("Mombasa"),
                api.resolve_place("Kisumu"),
            )

        results = asyncio.run(scenario())
        assert [r.place_id for r in results] == ["Nairobi", "Mombasa", "Kisumu"]

    @patch("biodiversity_explorer.api.inaturalist.get_aggregates")
    def test_get_aggregates(self, mock_aggregates: Mock) -> None:
        agg = OccurrenceAggregate(
            taxon=TaxonSummary(id=3, scientific_name="Aves"), observation_count=5
        )
        mock_aggregates.return_value = [agg]

        result = asyncio.run(api.get_aggregates("Nairobi", 3, 10))

        assert result == [agg]
        mock_aggregates.assert_called_once_with("Nairobi", 3, 10, 1, resolver=None)

    @patch("biodiversity_explorer.datasources.inaturalist.client.session.post")
    def test_identify_empty_image(self, mock_post: Mock) -> None:
        assert asyncio.run(api.identify(b"")) == []
        mock_post.assert_not_called()

    @patch("biodiversity_explorer.datasources.gbif.client.session.get")
    def test_search_occurrences_failure(self, mock_get: Mock) -> None:
        mock_get.side_effect = ValueError("bad json")

        page = asyncio.run(api.search_occurrences("KEN.30_1"))

        assert page.total == 0
        assert page.records == []

    @patch("biodiversity_explorer.api.inaturalist.get_detail")
    def test_get_detail(self, mock_detail: Mock) -> None:
        mock_detail.return_value = None
        assert asyncio.run(api.get_detail(0)) is None
        mock_detail.assert_called_once_with(0, cache=None)

    @patch("biodiversity_explorer.api.gbif.list_regions")
    def test_list_regions(self, mock_list: Mock) -> None:
        mock_list.return_value = []
        assert asyncio.run(api.list_regions()) == []


class TestCancellation:
    """Abandoned requests never deliver their result."""

    def test_cancelled_task_discards_result(self) -> None:
        release = threading.Event()

        def slow_aggregates(*_: Any, **__: Any) -> list:
            release.wait(timeout=5)
            return ["stale"]

        async def scenario() -> asyncio.Task:
            task = asyncio.create_task(api.get_aggregates("Nairobi"))
            await asyncio.sleep(0.05)
            task.cancel()
            release.set()
            await asyncio.gather(task, return_exceptions=True)
            return task

        with patch("biodiversity_explorer.api.inaturalist.get_aggregates", slow_aggregates):
            task = asyncio.run(scenario())

        assert task.cancelled()


class TestLatestOnly:
    """Newer submissions supersede older ones for the same key."""

    def test_supersedes_previous(self) -> None:
        async def scenario() -> tuple[asyncio.Task, str]:
            guard = api.LatestOnly()
            started = asyncio.Event()

            async def slow() -> str:
                started.set()
                await asyncio.sleep(10)
                return "stale"

            async def fresh() -> str:
                return "fresh"

            first = guard.submit("Nairobi", slow())
            await started.wait()
            second = guard.submit("Nairobi", fresh())
            result = await second
            await asyncio.gather(first, return_exceptions=True)
            return first, result

        first, result = asyncio.run(scenario())
        assert first.cancelled()
        assert result == "fresh"

    def test_independent_keys(self) -> None:
        async def scenario() -> list:
            guard = api.LatestOnly()

            async def value(v: str) -> str:
                await asyncio.sleep(0)
                return v

            a = guard.submit("Nairobi", value("a"))
            b = guard.submit("Mombasa", value("b"))
            return await asyncio.gather(a, b)

        assert asyncio.run(scenario()) == ["a", "b"]

    def test_cancel_all(self) -> None:
        async def scenario() -> asyncio.Task:
            guard = api.LatestOnly()
            task = guard.submit("Nairobi", asyncio.sleep(10))
            await asyncio.sleep(0)
            guard.cancel_all()
            await asyncio.gather(task, return_exceptions=True)
            return task

        assert asyncio.run(scenario()).cancelled()
