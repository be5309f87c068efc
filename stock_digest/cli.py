from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from .config import LOG_LEVELS, DigestSettings
from .core import DigestPipeline, PipelineOptions
from .exceptions import DigestError
from .push import ConsolePusher, LinePusher
from .summarizers import NullSummarizer, SummarizeOptions, build_summarizer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
# HTTP client chatter is not useful at INFO
QUIET_LOGGERS = ("urllib3", "httpx", "openai")


def configure_logging(level: str = "INFO") -> None:
    """Route every record at `level` and above to stdout, one line per record."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def build_pipeline(
    settings: DigestSettings,
    *,
    dry_run: bool = False,
    summarize: bool = True,
) -> DigestPipeline:
    """Wire the real collaborators from settings. A dry run prints chunks instead of pushing."""
    if summarize:
        summarizer = build_summarizer(
            SummarizeOptions(
                provider=settings.summarizer,
                model=settings.summarizer_model,
                max_output_tokens=settings.summary_max_tokens,
                api_key=settings.summarizer_api_key(),
            )
        )
    else:
        summarizer = NullSummarizer()

    if dry_run:
        pusher = ConsolePusher()
        recipient = "stdout"
    else:
        recipient = settings.recipient_id()
        pusher = LinePusher(settings.line_channel_access_token)

    return DigestPipeline(
        settings.subjects,
        summarizer=summarizer,
        pusher=pusher,
        recipient_id=recipient,
        options=PipelineOptions(
            fetch_count=settings.fetch_count,
            per_subject_cap=settings.per_subject_cap,
            max_chunk_len=settings.max_chunk_len,
            timezone=settings.timezone,
            fetch_workers=settings.fetch_workers,
        ),
    )


def handler(event: Any = None, context: Any = None) -> Dict[str, Any]:
    """Entry point for a scheduled serverless invocation. Errors propagate so the run is marked failed."""
    load_dotenv()
    settings = DigestSettings.from_env()
    configure_logging(settings.log_level)
    result = build_pipeline(settings).run()
    return {"ok": result.ok, "chunks": result.chunks_sent}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="stock-digest",
        description="Summarize recent news per ticker and push it as chat messages.",
    )
    parser.add_argument("--dry-run", action="store_true", help="print chunks instead of pushing them")
    parser.add_argument("--no-summarize", action="store_true", help="skip the LLM and send the compact block")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="overrides DIGEST_LOG_LEVEL",
    )
    args = parser.parse_args(argv)

    load_dotenv()

    try:
        settings = DigestSettings.from_env()
    except DigestError as e:
        configure_logging(args.log_level or "INFO")
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    configure_logging(args.log_level or settings.log_level)
    try:
        pipeline = build_pipeline(settings, dry_run=args.dry_run, summarize=not args.no_summarize)
        result = pipeline.run()
    except DigestError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    logger.info("Done: %d chunks, %d chars, items %s", result.chunks_sent, result.characters, result.item_counts)
    return 0
