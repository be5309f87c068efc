from __future__ import annotations

import sys
from typing import Optional, Protocol, TextIO

import requests

from .exceptions import ConfigurationError, DeliveryError

LINE_PUSH_URL = "https://api.line.me/v2/bot/message/push"


class Pusher(Protocol):
    def push(self, recipient_id: str, text: str) -> None:  # pragma: no cover - interface
        ...


class LinePusher:
    """Sends one text message per call through the LINE Messaging API push endpoint."""

    def __init__(
        self,
        channel_access_token: Optional[str],
        *,
        endpoint: str = LINE_PUSH_URL,
        timeout_sec: float = 10.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not channel_access_token:
            raise ConfigurationError("Missing LINE_CHANNEL_ACCESS_TOKEN")
        self._token = channel_access_token
        self._endpoint = endpoint
        self._timeout = timeout_sec
        self._session = session

    def push(self, recipient_id: str, text: str) -> None:
        # `to` may be a user, group or room id
        body = {
            "to": recipient_id,
            "messages": [{"type": "text", "text": text}],
        }
        http = self._session or requests
        try:
            resp = http.post(
                self._endpoint,
                json=body,
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(f"LINE push failed: {e}") from e

        if not resp.ok:
            raise DeliveryError(
                f"LINE push failed {resp.status_code}: {resp.text}",
                status=resp.status_code,
                body=resp.text,
            )


class ConsolePusher:
    """Writes messages to a stream instead of sending them."""

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream or sys.stdout

    def push(self, recipient_id: str, text: str) -> None:
        self._stream.write(f"--- to {recipient_id} ---\n{text}\n")
        self._stream.flush()
