from __future__ import annotations

from typing import Iterable, List, Set

from .models import NewsItem
from .normalizer import normalize_title


def deduplicate(items: Iterable[NewsItem]) -> List[NewsItem]:
    """
    Remove near-duplicate headlines by their normalized title.
    Keeps the first occurrence and preserves original order. Items without a
    title or url are dropped.
    """
    seen: Set[str] = set()
    out: List[NewsItem] = []

    for it in items:
        if not it.title.strip() or not it.url.strip():
            continue
        # An all-punctuation title maps to "" and is deduped like any other key.
        key = normalize_title(it.title)
        if key in seen:
            continue
        seen.add(key)
        out.append(it)
    return out
