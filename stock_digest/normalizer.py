from __future__ import annotations

import re
from typing import Any, Dict

from .models import NewsItem

# Hyphens, en/em dashes, pipes, middle dots and bullets separate headline segments.
_SEPARATORS = re.compile(r"[\-\u2010-\u2015|\u00b7\u2022]+")
# Any other punctuation ("Beat!" vs "Beat", "AMD/Xilinx") splits words like a space.
_PUNCTUATION = re.compile(r"[^\w\s]+")
_STOP_WORDS = re.compile(r"\b(?:the|a|an|and|for|with|of|to|from|by)\b")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """
    Build the near-duplicate key for a headline.

    Lower-cases, turns separator and other punctuation runs into a space,
    removes whole-word stop-words and collapses whitespace. A title made only of
    punctuation yields the empty key.
    """
    key = title.lower()
    key = _SEPARATORS.sub(" ", key)
    key = _PUNCTUATION.sub(" ", key)
    key = _WHITESPACE.sub(" ", key)
    key = _STOP_WORDS.sub("", key)
    key = _WHITESPACE.sub(" ", key)
    return key.strip()


def to_news_item(entry: Dict[str, Any]) -> NewsItem:
    """
    Convert a parsed entry dict into a NewsItem.

    Empty titles or links are kept here; deduplicate() drops them.
    """
    return NewsItem(
        title=(entry.get("title") or "").strip(),
        url=(entry.get("link") or "").strip(),
        published_at=(entry.get("date") or "").strip(),
    )
