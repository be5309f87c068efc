from __future__ import annotations

from typing import Any, Dict

# Enough for "Mon, 14 Oct 2024"; the summarizer only needs the day.
DATE_TOKEN_LENGTH = 16


def _first_text(entry: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        val = entry.get(key)
        if isinstance(val, str) and val.strip():
            return val.strip()
    return ""


def parse_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw feed entry (from feedparser) to a plain dict.
    Fields: title, link, date (short token, may be empty)
    """
    title = _first_text(entry, "title")
    link = _first_text(entry, "link", "feedburner_origlink")
    # feedparser exposes <pubDate> as "published" and <dc:date> as "updated"
    date = _first_text(entry, "published", "updated", "created")

    return {
        "title": title,
        "link": link,
        "date": date[:DATE_TOKEN_LENGTH],
    }
