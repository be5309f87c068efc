from datetime import datetime
from typing import List, Optional, Set

import pytest

from stock_digest.exceptions import DeliveryError
from stock_digest.models import NewsItem


def make_item(title: str, n: int = 0, date: str = "Mon, 14 Oct 2024") -> NewsItem:
    return NewsItem(title=title, url=f"https://news.example.com/{n}", published_at=date)


class RecordingPusher:
    def __init__(self, fail_on: Optional[Set[int]] = None) -> None:
        self.calls: List[tuple] = []
        self._fail_on = fail_on or set()

    def push(self, recipient_id: str, text: str) -> None:
        self.calls.append((recipient_id, text))
        if len(self.calls) in self._fail_on:
            raise DeliveryError("rejected", status=400, body='{"message":"bad"}')


class LengthSummarizer:
    """Echoes the length of its input, repeated to make the text long."""

    def __init__(self, repeat: int = 1) -> None:
        self.inputs: List[str] = []
        self._repeat = repeat

    def summarize(self, compact_block: str) -> str:
        self.inputs.append(compact_block)
        return f"input length {len(compact_block)}\n" * self._repeat


@pytest.fixture
def fixed_clock():
    return lambda tz: datetime(2024, 10, 14, 7, 30, 0, tzinfo=tz)
