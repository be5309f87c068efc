from __future__ import annotations

from typing import List, Mapping, Sequence

from .models import NewsItem


def format_item(item: NewsItem) -> str:
    # "|" inside titles or urls is passed through as-is
    return f"- {item.published_at} | {item.title} | {item.url}"


def build_compact_block(digest: Mapping[str, Sequence[NewsItem]], per_subject_cap: int = 4) -> str:
    """
    Serialize a digest into the line-based block handed to the summarizer.

    Each subject key sits on its own line followed by at most `per_subject_cap`
    item lines in their existing order. Subjects follow each other without blank
    lines to keep the payload small.
    """
    if per_subject_cap < 0:
        raise ValueError("per_subject_cap must be >= 0")

    lines: List[str] = []
    for key, items in digest.items():
        lines.append(key)
        for it in items[:per_subject_cap]:
            lines.append(format_item(it))
    return "\n".join(lines)
