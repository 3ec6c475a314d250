"""
Tests for the daily data refresh.
"""
import asyncio
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from veer.adapters.http_client import HTTPClientAdapterFactory
from veer.functions import daily_data
from veer.functions.daily_data import DailyDataService
from veer.storage.repositories import to_utc_iso

NOW = datetime(2026, 10, 19, 8, 15, tzinfo=UTC)


def upstream(news_ok=True, fail=()):
    """MockTransport handler serving every daily source; hosts in ``fail`` answer 503."""

    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host in fail:
            return httpx.Response(503)
        if host == "api.quotable.io":
            return httpx.Response(200, json={"content": "Stay hungry.", "author": "Steve Jobs", "tags": ["life"]})
        if host == "uselessfacts.jsph.pl":
            return httpx.Response(200, json={"text": "Honey never spoils.", "permalink": "https://facts/1"})
        if host == "today.zenquotes.io":
            return httpx.Response(200, json={"data": {"Events": ["1987: Black Monday"]}})
        if host == "newsapi.org":
            if not news_ok:
                return httpx.Response(401)
            return httpx.Response(200, json={"articles": [{
                "title": "Headline",
                "description": "Something happened",
                "source": {"name": "Wire"},
                "url": "https://news/1",
                "publishedAt": "2026-10-19T07:00:00Z",
                "author": "Reporter",
                "urlToImage": None,
            }]})
        if request.url.path == "/v0/topstories.json":
            return httpx.Response(200, json=[101, 102, 103, 104, 105, 106, 107])
        if request.url.path.startswith("/v0/item/"):
            story_id = int(request.url.path.rsplit("/", 1)[1].split(".")[0])
            return httpx.Response(200, json={
                "title": f"Story {story_id}",
                "score": 10,
                "descendants": 3,
                "by": "pg",
                "time": 1,
            })
        return httpx.Response(404)

    return handler


def make_service(store, handler, news_api_key=None, now=NOW):
    return DailyDataService(
        store.daily_data,
        news_api_key=news_api_key,
        client_kwargs={"transport": httpx.MockTransport(handler)},
        clock=lambda: now,
    )


class TestUpdate:
    """Tests for the once-a-day refresh."""

    def test_fetches_and_stores_everything(self, store):
        service = make_service(store, upstream())
        result = asyncio.run(service.update())

        # quote + fact + date info + 5 Hacker News stories
        assert result == {
            "message": "Daily data updated successfully",
            "updated": True,
            "items_count": 8,
            "timestamp": to_utc_iso(NOW),
        }
        rows = store.daily_data.list()
        assert sorted({r["data_type"] for r in rows}) == ["date_info", "fact", "quote", "tech_news"]
        assert {r["fetched_at"] for r in rows} == {to_utc_iso(NOW)}

    def test_second_run_same_day_is_skipped(self, store):
        service = make_service(store, upstream())
        asyncio.run(service.update())
        result = asyncio.run(service.update())
        assert result == {"message": "Data already updated today", "updated": False}
        assert len(store.daily_data.list()) == 8

    def test_force_refreshes_again(self, store):
        service = make_service(store, upstream())
        asyncio.run(service.update())
        result = asyncio.run(service.update(force=True))
        assert result["updated"] is True
        assert len(store.daily_data.list()) == 16

    def test_yesterdays_data_does_not_block(self, store):
        store.daily_data.create({
            "data_type": "quote", "title": "old", "content": "old",
            "fetched_at": to_utc_iso(NOW - timedelta(days=1)),
        })
        result = asyncio.run(make_service(store, upstream()).update())
        assert result["updated"] is True

    def test_offset_timestamp_from_yesterday_does_not_block(self, store):
        store.daily_data.create({
            "data_type": "quote", "title": "late", "content": "x",
            "fetched_at": "2026-10-19T05:00:00+05:30",
        })
        early = datetime(2026, 10, 19, 1, 0, tzinfo=UTC)
        result = asyncio.run(make_service(store, upstream(), now=early).update())
        assert result["updated"] is True

    def test_prunes_rows_older_than_a_week(self, store):
        store.daily_data.create({
            "data_type": "quote", "title": "ancient", "content": "x",
            "fetched_at": to_utc_iso(NOW - timedelta(days=8)),
        })
        asyncio.run(make_service(store, upstream()).update())
        assert "ancient" not in {r["title"] for r in store.daily_data.list()}

    def test_all_sources_down(self, store):
        handler = upstream(fail={
            "api.quotable.io", "uselessfacts.jsph.pl", "today.zenquotes.io", "hacker-news.firebaseio.com",
        })
        result = asyncio.run(make_service(store, handler).update())
        # The date entry always has a fallback
        assert result["items_count"] == 1
        row = store.daily_data.list()[0]
        assert row["data_type"] == "date_info"
        assert row["content"] == "Day 292 of 2026"
        assert row["source"] == "system"


class TestFetchers:
    def _run(self, handler, coro_factory):
        async def scenario():
            async with HTTPClientAdapterFactory.create_async_client(
                transport=httpx.MockTransport(handler)
            ) as client:
                return await coro_factory(client)
        return asyncio.run(scenario())

    def test_quote(self):
        item = self._run(upstream(), daily_data.fetch_quote)
        assert item == {
            "data_type": "quote",
            "title": "Quote by Steve Jobs",
            "content": "Stay hungry.",
            "source": "Steve Jobs",
            "metadata": {"tags": ["life"]},
        }

    def test_quote_failure(self):
        assert self._run(upstream(fail={"api.quotable.io"}), daily_data.fetch_quote) is None

    def test_date_info_from_api(self):
        item = self._run(upstream(), lambda c: daily_data.fetch_date_info(c, NOW))
        assert item["title"] == "Today: Monday, October 19, 2026"
        assert item["source"] == "zenquotes.io"
        assert item["metadata"] == {"data": {"Events": ["1987: Black Monday"]}}

    def test_date_info_unreachable(self):
        def boom(request):
            raise httpx.ConnectError("down", request=request)

        item = self._run(boom, lambda c: daily_data.fetch_date_info(c, NOW))
        assert item["content"] == f"Current date information for {NOW.isoformat()}"

    def test_news_api_used_when_key_set(self):
        items = self._run(upstream(), lambda c: daily_data.fetch_headlines(c, "news-key"))
        assert len(items) == 1
        assert items[0]["data_type"] == "news"
        assert items[0]["source"] == "Wire"
        assert items[0]["metadata"]["author"] == "Reporter"

    def test_news_api_failure_falls_back_to_hacker_news(self):
        items = self._run(upstream(news_ok=False), lambda c: daily_data.fetch_headlines(c, "bad-key"))
        assert [i["title"] for i in items] == [f"Story {i}" for i in range(101, 106)]
        assert items[0]["content"] == "10 points | 3 comments"
        assert items[0]["source_url"] == "https://news.ycombinator.com/item?id=101"

    @pytest.mark.parametrize("key", [None, ""])
    def test_no_key_uses_hacker_news(self, key):
        items = self._run(upstream(), lambda c: daily_data.fetch_headlines(c, key))
        assert len(items) == daily_data.HN_STORY_COUNT
