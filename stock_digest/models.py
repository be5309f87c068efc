from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(frozen=True)
class NewsItem:
    """
    One headline as handed over by the feed source.

    `published_at` is the short date token taken from the feed (e.g. "Mon, 14 Oct 2024"),
    kept as text because it only ever travels into the compact block.
    """
    title: str
    url: str
    published_at: str


@dataclass(frozen=True)
class Subject:
    """A tracked entity: `key` labels its section, `query` is what the feed is searched for."""
    key: str
    query: str


# Subject key -> retained items, in configured subject order.
DigestMap = Dict[str, List[NewsItem]]


@dataclass
class DigestResult:
    ok: bool
    item_counts: Dict[str, int] = field(default_factory=dict)
    chunks_sent: int = 0
    characters: int = 0
