from __future__ import annotations

import concurrent.futures as _fut
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from .chunker import chunk_text
from .dedup import deduplicate
from .encoder import build_compact_block
from .exceptions import DeliveryError, DigestError, FetchError
from .fetcher import fetch_subject_news
from .models import DigestMap, DigestResult, NewsItem, Subject
from .push import Pusher
from .summarizers import Summarizer

logger = logging.getLogger(__name__)

FetchFn = Callable[[str, int], Sequence[NewsItem]]

HEADER_TITLE = "Daily Stock News Digest"


@dataclass
class PipelineOptions:
    fetch_count: int = 8
    per_subject_cap: int = 4
    max_chunk_len: int = 1200
    timezone: str = "Asia/Bangkok"
    fetch_workers: int = 1


class DigestPipeline:
    """
    One digest run over a fixed list of subjects.

    Pipeline: fetch → deduplicate → truncate → encode → summarize → header → chunk → push

    Nothing is caught or retried here. The first failing stage aborts the run and
    its error reaches the caller, tagged with the subject key (fetch) or the
    1-based chunk index (delivery).
    """

    def __init__(
        self,
        subjects: Sequence[Subject],
        *,
        summarizer: Summarizer,
        pusher: Pusher,
        recipient_id: str,
        fetch: FetchFn = fetch_subject_news,
        options: Optional[PipelineOptions] = None,
        clock: Optional[Callable[[ZoneInfo], datetime]] = None,
    ) -> None:
        self.subjects = list(subjects)
        self.summarizer = summarizer
        self.pusher = pusher
        self.recipient_id = recipient_id
        self.options = options or PipelineOptions()
        self._fetch = fetch
        self._clock = clock or (lambda tz: datetime.now(tz))

    def _collect_one(self, subject: Subject) -> List[NewsItem]:
        try:
            raw = self._fetch(subject.query, self.options.fetch_count)
        except FetchError as e:
            raise FetchError(f"Fetch failed for {subject.key}: {e}", subject=subject.key) from e
        items = deduplicate(raw)[: self.options.per_subject_cap]
        logger.info("%s: %d fetched, %d kept", subject.key, len(raw), len(items))
        return items

    def collect(self) -> DigestMap:
        """Fetch every subject and keep its first unique items, in configured subject order."""
        workers = max(1, int(self.options.fetch_workers or 1))
        if workers == 1 or len(self.subjects) <= 1:
            return {s.key: self._collect_one(s) for s in self.subjects}

        with _fut.ThreadPoolExecutor(max_workers=workers) as ex:
            futures = [ex.submit(self._collect_one, s) for s in self.subjects]
            # Read results in submission order so completion order never leaks into the map
            return {s.key: fu.result() for s, fu in zip(self.subjects, futures)}

    def header(self) -> str:
        tz = self.options.timezone
        now = self._clock(ZoneInfo(tz))
        return f"{HEADER_TITLE} - {now.strftime('%d/%m/%Y, %H:%M:%S')} ({tz})\n"

    def compose(self, digest: DigestMap) -> str:
        """Encode the digest, summarize it once and prepend the header line."""
        block = build_compact_block(digest, self.options.per_subject_cap)
        logger.info("Compact block: %d subjects, %d chars", len(digest), len(block))
        summary = self.summarizer.summarize(block)
        return self.header() + summary

    def deliver(self, chunks: Sequence[str]) -> int:
        """Push chunks one by one; stop at the first rejected chunk."""
        for index, chunk in enumerate(chunks, start=1):
            try:
                self.pusher.push(self.recipient_id, chunk)
            except DeliveryError as e:
                raise DeliveryError(
                    f"Delivery of chunk {index}/{len(chunks)} failed: {e}",
                    status=e.status,
                    body=e.body,
                    chunk_index=index,
                ) from e
            logger.info("Delivered chunk %d/%d (%d chars)", index, len(chunks), len(chunk))
        return len(chunks)

    def run(self) -> DigestResult:
        stage = "fetch"
        try:
            digest = self.collect()
            stage = "summarize"
            text = self.compose(digest)
            stage = "chunk"
            chunks = chunk_text(text, self.options.max_chunk_len)
            stage = "deliver"
            sent = self.deliver(chunks)
        except DigestError:
            logger.error("Digest run failed during %s", stage)
            raise

        return DigestResult(
            ok=True,
            item_counts={key: len(items) for key, items in digest.items()},
            chunks_sent=sent,
            characters=len(text),
        )
