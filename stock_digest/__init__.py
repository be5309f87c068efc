"""
stock_digest

Collects recent headlines per ticker, squeezes them into a compact block, asks
an LLM for a short bullet digest and pushes it to a chat as size-bounded messages.

Core ideas:
- Input: a fixed list of (key, query) subjects
- Process: fetch → deduplicate → truncate → encode → summarize → chunk → push
- Output: the digest delivered as one or more text messages

Example
-------
from stock_digest import DigestPipeline, Subject
from stock_digest.push import LinePusher
from stock_digest.summarizers import OpenAISummarizer

pipeline = DigestPipeline(
    [Subject("NVDA", "NVIDIA Corporation")],
    summarizer=OpenAISummarizer(api_key=None),
    pusher=LinePusher(token),
    recipient_id="U1234...",
)
result = pipeline.run()
"""
from .models import DigestResult, NewsItem, Subject
from .chunker import chunk_text
from .dedup import deduplicate
from .encoder import build_compact_block
from .core import DigestPipeline, PipelineOptions
from .exceptions import (
    ConfigurationError,
    DeliveryError,
    DigestError,
    FetchError,
    SummarizationError,
)

__all__ = [
    "NewsItem",
    "Subject",
    "DigestResult",
    "DigestPipeline",
    "PipelineOptions",
    "deduplicate",
    "build_compact_block",
    "chunk_text",
    "DigestError",
    "FetchError",
    "SummarizationError",
    "DeliveryError",
    "ConfigurationError",
]
