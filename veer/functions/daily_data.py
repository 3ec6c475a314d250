"""
Daily data refresh: quote, fact, date info and headlines, at most once a day.

Each fetcher swallows its own failure (logged) and returns None or an empty
list so one broken source never blocks the others.
"""
import asyncio
import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from veer.adapters.http_client import HTTPClientAdapterFactory, HttpxAsyncClientAdapter
from veer.storage.repositories import DailyDataRepository, to_utc_iso

logger = logging.getLogger(__name__)

QUOTE_URL = "https://api.quotable.io/random"
FACT_URL = "https://uselessfacts.jsph.pl/random.json?language=en"
DATE_INFO_URL = "https://today.zenquotes.io/api/{month}/{day}"
NEWS_URL = "https://newsapi.org/v2/top-headlines"
HN_TOP_URL = "https://hacker-news.firebaseio.com/v0/topstories.json"
HN_ITEM_URL = "https://hacker-news.firebaseio.com/v0/item/{id}.json"

RETENTION_DAYS = 7
HN_STORY_COUNT = 5

DailyItem = Dict[str, Any]


def long_date(now: datetime) -> str:
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


async def fetch_quote(client: HttpxAsyncClientAdapter) -> Optional[DailyItem]:
    try:
        response = await client.get(QUOTE_URL)
        if not response.ok:
            return None
        data = response.json()
        return {
            "data_type": "quote",
            "title": f"Quote by {data.get('author')}",
            "content": data.get("content"),
            "source": data.get("author"),
            "metadata": {"tags": data.get("tags")},
        }
    except Exception as e:
        logger.error(f"Failed to fetch quote: {e}")
        return None


async def fetch_fact(client: HttpxAsyncClientAdapter) -> Optional[DailyItem]:
    try:
        response = await client.get(FACT_URL)
        if not response.ok:
            return None
        data = response.json()
        return {
            "data_type": "fact",
            "title": "Interesting Fact",
            "content": data.get("text"),
            "source": "uselessfacts.jsph.pl",
            "source_url": data.get("permalink"),
        }
    except Exception as e:
        logger.error(f"Failed to fetch fact: {e}")
        return None


async def fetch_date_info(client: HttpxAsyncClientAdapter, now: datetime) -> DailyItem:
    """Events for today, falling back to a plain description of the date."""
    title = f"Today: {long_date(now)}"
    try:
        response = await client.get(DATE_INFO_URL.format(month=now.month, day=now.day))
        if not response.ok:
            return {
                "data_type": "date_info",
                "title": title,
                "content": f"Day {now.timetuple().tm_yday} of {now.year}",
                "source": "system",
            }
        data = response.json()
        return {
            "data_type": "date_info",
            "title": title,
            "content": json.dumps(data),
            "source": "zenquotes.io",
            "metadata": data,
        }
    except Exception as e:
        logger.error(f"Failed to fetch date info: {e}")
        return {
            "data_type": "date_info",
            "title": title,
            "content": f"Current date information for {now.isoformat()}",
            "source": "system",
        }


async def fetch_news_api(client: HttpxAsyncClientAdapter, api_key: str) -> List[DailyItem]:
    response = await client.get(
        NEWS_URL, params={"country": "us", "pageSize": 10, "apiKey": api_key}
    )
    if not response.ok:
        logger.warning(f"NewsAPI returned {response.status_code}")
        return []
    items = []
    for article in response.json().get("articles") or []:
        items.append({
            "data_type": "news",
            "title": article.get("title"),
            "content": article.get("description") or article.get("content") or "",
            "source": (article.get("source") or {}).get("name"),
            "source_url": article.get("url"),
            "metadata": {
                "publishedAt": article.get("publishedAt"),
                "author": article.get("author"),
                "urlToImage": article.get("urlToImage"),
            },
        })
    return items


async def fetch_hn_story(client: HttpxAsyncClientAdapter, story_id: int) -> Optional[DailyItem]:
    try:
        response = await client.get(HN_ITEM_URL.format(id=story_id))
        if not response.ok:
            return None
        story = response.json()
        return {
            "data_type": "tech_news",
            "title": story.get("title"),
            "content": story.get("text") or f"{story.get('score')} points | {story.get('descendants') or 0} comments",
            "source": "Hacker News",
            "source_url": story.get("url") or f"https://news.ycombinator.com/item?id={story_id}",
            "metadata": {"score": story.get("score"), "by": story.get("by"), "time": story.get("time")},
        }
    except Exception as e:
        logger.error(f"Failed to fetch HN story {story_id}: {e}")
        return None


async def fetch_headlines(client: HttpxAsyncClientAdapter, news_api_key: Optional[str]) -> List[DailyItem]:
    """NewsAPI headlines when a key is set; Hacker News top stories otherwise or when empty."""
    items: List[DailyItem] = []
    try:
        if news_api_key:
            items = await fetch_news_api(client, news_api_key)
        if not items:
            response = await client.get(HN_TOP_URL)
            if response.ok:
                story_ids = response.json()[:HN_STORY_COUNT]
                stories = await asyncio.gather(*(fetch_hn_story(client, sid) for sid in story_ids))
                items = [story for story in stories if story]
    except Exception as e:
        logger.error(f"Failed to fetch news: {e}")
    return items


class DailyDataService:
    """Refreshes the daily_data table."""

    def __init__(
        self,
        repository: DailyDataRepository,
        news_api_key: Optional[str] = None,
        timeout: Optional[float] = 30.0,
        client_kwargs: Optional[Dict[str, Any]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.news_api_key = news_api_key
        self.timeout = timeout
        self.client_kwargs = client_kwargs or {}
        self.clock = clock or (lambda: datetime.now(UTC))

    async def fetch_all(self, now: datetime) -> List[DailyItem]:
        async with HTTPClientAdapterFactory.create_async_client(
            timeout=self.timeout, **self.client_kwargs
        ) as client:
            quote, fact, date_info, news = await asyncio.gather(
                fetch_quote(client),
                fetch_fact(client),
                fetch_date_info(client, now),
                fetch_headlines(client, self.news_api_key),
            )
        items = [item for item in (quote, fact, date_info) if item]
        items.extend(news)
        return items

    async def update(self, force: bool = False) -> Dict[str, Any]:
        """
        Refresh the table unless it already holds data from today.

        Args:
            force: Refresh even if today's data exists

        Returns:
            Response body for the update-daily-data function

        Raises:
            DatabaseError: Reading or writing the table failed
        """
        now = self.clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if not force and self.repository.exists_since(start_of_day):
            logger.info("Daily data already updated today")
            return {"message": "Data already updated today", "updated": False}

        self.repository.delete_before(now - timedelta(days=RETENTION_DAYS))

        items = await self.fetch_all(now)
        fetched_at = to_utc_iso(self.clock())
        if items:
            self.repository.insert_many(items, fetched_at=fetched_at)

        logger.info(f"Daily data updated with {len(items)} items")
        return {
            "message": "Daily data updated successfully",
            "updated": True,
            "items_count": len(items),
            "timestamp": to_utc_iso(self.clock()),
        }
