from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import feedparser
import requests

from .exceptions import FetchError
from .models import NewsItem
from .normalizer import to_news_item
from .parser import parse_entry

logger = logging.getLogger(__name__)

GOOGLE_NEWS_SEARCH = "https://news.google.com/rss/search?q={q}&hl=en-US&gl=US&ceid=US:en"
DEFAULT_TIMEOUT_SEC = 10.0


def news_feed_url(query: str) -> str:
    return GOOGLE_NEWS_SEARCH.format(q=quote(query, safe=""))


def fetch_feed_entries(
    url: str,
    *,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    session: Optional[requests.Session] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch a single feed URL and return its entries.

    Raises FetchError on network issues, a non-2xx status, or when the payload
    cannot be read as RSS/Atom at all (bozo without entries).
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout_sec)
    except requests.RequestException as e:
        raise FetchError(f"Failed to fetch feed: {url} ({e})") from e

    if not resp.ok:
        raise FetchError(f"RSS fetch failed: {resp.status_code} ({url})")

    feed = feedparser.parse(resp.content)
    entries = getattr(feed, "entries", None)

    # Feeds that merely declare the wrong encoding are still bozo; only reject
    # when nothing could be recovered.
    if getattr(feed, "bozo", 0) and not entries:
        exc = getattr(feed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise FetchError(msg)

    if not isinstance(entries, list):
        raise FetchError(f"Feed has no entries: {url}")
    return entries


def fetch_subject_news(
    query: str,
    max_items: int = 8,
    *,
    timeout_sec: float = DEFAULT_TIMEOUT_SEC,
    session: Optional[requests.Session] = None,
) -> List[NewsItem]:
    """Search the news feed for `query` and return up to `max_items` items in feed order."""
    url = news_feed_url(query)
    entries = fetch_feed_entries(url, timeout_sec=timeout_sec, session=session)
    items = [to_news_item(parse_entry(e)) for e in entries[:max_items]]
    logger.debug("Fetched %d of %d entries for %r", len(items), len(entries), query)
    return items
