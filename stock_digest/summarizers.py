from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from .exceptions import ConfigurationError, SummarizationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Return concise stock-moving bullets. No preamble."

INSTRUCTIONS = (
    "Summarize headlines per ticker.",
    "For each ticker: 3 bullets max; ≤40 words each bullet.",
    "Focus: earnings, guidance, deals, regulation, litigation, product/AI, execs, macro.",
    "Cite with [n] linking to the URL in that bullet.",
    "Format exactly:",
    "",
    "TICKER",
    "• bullet text [1]",
    "• bullet text [2]",
    "• bullet text [3]",
    "",
    "HEADLINES:",
)


class Summarizer(Protocol):
    def summarize(self, compact_block: str) -> str:  # pragma: no cover - interface
        ...


@dataclass
class SummarizeOptions:
    provider: str = "openai"  # "openai" | "gemini" | "none"
    model: Optional[str] = None
    max_output_tokens: int = 240  # hard cap on the reply
    temperature: float = 0.1
    timeout_sec: float = 30.0
    api_key: Optional[str] = None  # falls back to the provider's env variable


def build_prompt(compact_block: str) -> str:
    return "\n".join((*INSTRUCTIONS, compact_block))


def _require_text(text: Optional[str], provider: str) -> str:
    if not text or not str(text).strip():
        raise SummarizationError(f"{provider} returned an empty summary")
    return str(text).strip()


class NullSummarizer:
    """Returns the compact block unchanged. Useful for dry runs without an API key."""

    def summarize(self, compact_block: str) -> str:
        return compact_block


class OpenAISummarizer:
    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: Optional[str] = None,
        max_output_tokens: int = 240,
        temperature: float = 0.1,
        timeout_sec: float = 30.0,
        client: Any = None,
    ) -> None:
        if client is None:
            from openai import OpenAI

            key = api_key or os.getenv("OPENAI_API_KEY")
            if not key:
                raise ConfigurationError("OPENAI_API_KEY not set.")
            client = OpenAI(api_key=key)
        self._client = client
        self._model = model or os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self._max_tokens = max_output_tokens
        self._temperature = temperature
        self._timeout = timeout_sec

    def summarize(self, compact_block: str) -> str:
        try:
            resp = self._client.chat.completions.create(
                model=self._model,
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(compact_block)},
                ],
                timeout=self._timeout,
            )
        except Exception as e:
            raise SummarizationError(f"OpenAI request failed: {e}") from e

        content = resp.choices[0].message.content if resp and resp.choices else None
        return _require_text(content, "OpenAI")


class GeminiSummarizer:
    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: Optional[str] = None,
        max_output_tokens: int = 240,
        temperature: float = 0.1,
        timeout_sec: float = 30.0,
        genai: Any = None,
    ) -> None:
        if genai is None:
            import google.generativeai as genai

            key = api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
            if not key:
                raise ConfigurationError("GOOGLE_API_KEY (or GEMINI_API_KEY) not set.")
            genai.configure(api_key=key)
        self._genai = genai
        self._model_name = model or os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
        self._max_tokens = max_output_tokens
        self._temperature = temperature
        self._timeout = timeout_sec

    def summarize(self, compact_block: str) -> str:
        try:
            model = self._genai.GenerativeModel(self._model_name, system_instruction=SYSTEM_PROMPT)
            resp = model.generate_content(
                build_prompt(compact_block),
                generation_config={
                    "max_output_tokens": self._max_tokens,
                    "temperature": self._temperature,
                },
                request_options={"timeout": self._timeout},
            )
            text = getattr(resp, "text", None)
        except Exception as e:
            raise SummarizationError(f"Gemini request failed: {e}") from e
        return _require_text(text, "Gemini")


def build_summarizer(options: Optional[SummarizeOptions]) -> Summarizer:
    if not options:
        return NullSummarizer()
    provider = (options.provider or "").lower()
    if provider == "openai":
        return OpenAISummarizer(
            api_key=options.api_key or os.getenv("OPENAI_API_KEY"),
            model=options.model,
            max_output_tokens=options.max_output_tokens,
            temperature=options.temperature,
            timeout_sec=options.timeout_sec,
        )
    if provider in {"gemini", "google", "googleai"}:
        return GeminiSummarizer(
            api_key=options.api_key or os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY"),
            model=options.model,
            max_output_tokens=options.max_output_tokens,
            temperature=options.temperature,
            timeout_sec=options.timeout_sec,
        )
    if provider in {"none", "null", ""}:
        return NullSummarizer()
    raise ConfigurationError(f"Unknown summarizer provider: {options.provider}")
