"""
Settings for a digest run, read from environment variables.

The entry point calls `load_dotenv()` first, so a local `.env` file works too.
Bad values fail fast with ConfigurationError before anything is fetched.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .exceptions import ConfigurationError
from .models import Subject

DEFAULT_SUBJECTS: Tuple[Subject, ...] = (
    Subject("AMZN", "Amazon.com Inc"),
    Subject("GOOGL", "Alphabet Inc Google"),
    Subject("NVDA", "NVIDIA Corporation"),
    Subject("NET", "Cloudflare Inc"),
    Subject("INTC", "Intel Corporation"),
    Subject("MSFT", "Microsoft Corporation"),
    Subject("AMD", "Advanced Micro Devices"),
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
GEMINI_PROVIDERS = {"gemini", "google", "googleai"}


def resolve_recipient(
    user_id: Optional[str] = None,
    group_id: Optional[str] = None,
    room_id: Optional[str] = None,
) -> str:
    """Return the one configured push target. Exactly one of the three ids must be set."""
    given = [
        (name, value.strip())
        for name, value in (
            ("LINE_USER_ID", user_id),
            ("LINE_GROUP_ID", group_id),
            ("LINE_ROOM_ID", room_id),
        )
        if value and value.strip()
    ]
    if not given:
        raise ConfigurationError("Missing LINE_USER_ID (or LINE_GROUP_ID/LINE_ROOM_ID)")
    if len(given) > 1:
        names = ", ".join(name for name, _ in given)
        raise ConfigurationError(f"Only one push target may be set, got: {names}")
    return given[0][1]


def parse_subjects(raw: str) -> List[Subject]:
    """Parse "KEY=query;KEY=query" into subjects, keeping their order."""
    subjects: List[Subject] = []
    seen = set()
    for part in raw.split(";"):
        part = part.strip()
        if not part:
            continue
        key, sep, query = part.partition("=")
        key, query = key.strip(), query.strip()
        if not sep or not key or not query:
            raise ConfigurationError(f"Invalid subject entry {part!r}; expected KEY=query")
        if key in seen:
            raise ConfigurationError(f"Duplicate subject key {key!r}")
        seen.add(key)
        subjects.append(Subject(key, query))
    if not subjects:
        raise ConfigurationError("DIGEST_SUBJECTS is set but lists no subjects")
    return subjects


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(f"{name} must be > 0, got {value}")
    return value


@dataclass
class DigestSettings:
    subjects: List[Subject] = field(default_factory=lambda: list(DEFAULT_SUBJECTS))
    fetch_count: int = 8
    per_subject_cap: int = 4
    max_chunk_len: int = 1200
    summary_max_tokens: int = 240
    fetch_workers: int = 1
    timezone: str = "Asia/Bangkok"
    summarizer: str = "openai"
    summarizer_model: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    line_channel_access_token: Optional[str] = None
    line_user_id: Optional[str] = None
    line_group_id: Optional[str] = None
    line_room_id: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "DigestSettings":
        env = os.environ if env is None else env

        raw_subjects = env.get("DIGEST_SUBJECTS")
        subjects = parse_subjects(raw_subjects) if raw_subjects else list(DEFAULT_SUBJECTS)

        tz = (env.get("DIGEST_TIMEZONE") or "Asia/Bangkok").strip()
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, ValueError):
            raise ConfigurationError(f"Unknown timezone {tz!r}") from None

        log_level = (env.get("DIGEST_LOG_LEVEL") or "INFO").strip().upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError(f"DIGEST_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        provider = (env.get("DIGEST_SUMMARIZER") or "openai").strip().lower()
        if provider in GEMINI_PROVIDERS:
            model = env.get("GEMINI_MODEL")
        else:
            model = env.get("OPENAI_MODEL")

        return cls(
            subjects=subjects,
            fetch_count=_positive_int(env, "DIGEST_FETCH_COUNT", 8),
            per_subject_cap=_positive_int(env, "DIGEST_PER_SUBJECT_CAP", 4),
            max_chunk_len=_positive_int(env, "DIGEST_MAX_CHUNK_LEN", 1200),
            summary_max_tokens=_positive_int(env, "DIGEST_SUMMARY_MAX_TOKENS", 240),
            fetch_workers=_positive_int(env, "DIGEST_FETCH_WORKERS", 1),
            timezone=tz,
            summarizer=provider,
            summarizer_model=model or None,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            gemini_api_key=env.get("GOOGLE_API_KEY") or env.get("GEMINI_API_KEY") or None,
            line_channel_access_token=env.get("LINE_CHANNEL_ACCESS_TOKEN") or None,
            line_user_id=env.get("LINE_USER_ID") or None,
            line_group_id=env.get("LINE_GROUP_ID") or None,
            line_room_id=env.get("LINE_ROOM_ID") or None,
            log_level=log_level,
        )

    def recipient_id(self) -> str:
        return resolve_recipient(self.line_user_id, self.line_group_id, self.line_room_id)

    def summarizer_api_key(self) -> Optional[str]:
        if self.summarizer in GEMINI_PROVIDERS:
            return self.gemini_api_key
        return self.openai_api_key
