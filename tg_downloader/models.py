"""Typed containers shared across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class InboundMessage:
    """A text message received by the bot."""

    update_id: int
    chat_id: int
    text: str


@dataclass(frozen=True)
class Update:
    """One entry of a getUpdates batch.

    ``message`` is None for update kinds the bot does not handle (edited
    messages, callback queries, ...); the id still counts towards the offset.
    """

    update_id: int
    message: Optional[InboundMessage] = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "Update":
        update_id = int(raw["update_id"])
        raw_message = raw.get("message")
        if not raw_message:
            return cls(update_id=update_id)
        chat = raw_message.get("chat") or {}
        message = InboundMessage(
            update_id=update_id,
            chat_id=int(chat["id"]),
            text=raw_message.get("text") or "",
        )
        return cls(update_id=update_id, message=message)


@dataclass
class DownloadTask:
    """A single URL travelling through the retry loop."""

    url: str
    chat_id: int
    attempt: int = 0
