"""Best-effort status replies to the originating chat."""

from __future__ import annotations

import logging

from .telegram_client import TelegramAPIError, TelegramClient

logger = logging.getLogger(__name__)

NO_URL_FOUND = (
    "No recognizable URL found in the message. "
    "Make sure links start with http:// or https://."
)


def urls_found(count: int) -> str:
    return f"Found {count} URL(s), downloading them in order..."


def download_succeeded(url: str, attempt: int) -> str:
    return f"Download succeeded (attempt {attempt}):\nURL: {url}"


def download_retrying(url: str, attempt: int, error: Exception) -> str:
    return f"Download failed (attempt {attempt}, retrying...):\nURL: {url}\nError: {error}"


def download_terminated(url: str, error: Exception) -> str:
    return f"Download task terminated:\nURL: {url}\nError: {error}"


class Notifier:
    """Send status text to a chat; delivery failures are only logged."""

    def __init__(self, client: TelegramClient) -> None:
        self.client = client

    def notify(self, chat_id: int, text: str) -> bool:
        try:
            self.client.send_message(chat_id, text)
        except TelegramAPIError as exc:
            logger.warning("Could not notify chat %s: %s", chat_id, exc)
            return False
        return True
