from __future__ import annotations

from typing import List


def chunk_text(text: str, max_len: int) -> List[str]:
    """Split text into consecutive pieces of exactly `max_len` characters, the last holding the rest.

    Splits may fall mid-word. Joining the result gives back `text`; an empty
    string yields no chunks at all.
    """
    if max_len <= 0:
        raise ValueError("max_len must be > 0")
    return [text[i:i + max_len] for i in range(0, len(text), max_len)]
