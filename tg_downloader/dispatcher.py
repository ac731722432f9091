"""Bounded-retry submission of a single URL to the download executor."""

from __future__ import annotations

import logging
import time
from typing import Callable

from . import notifier as messages
from .downloaders import Downloader, DownloadError
from .models import DownloadTask
from .notifier import Notifier

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 5.0


class DownloadFailedError(RuntimeError):
    """Every attempt for a URL failed."""

    def __init__(self, url: str, attempts: int, last_error: Exception) -> None:
        super().__init__(f"download failed after {attempts} attempts: {last_error}")
        self.url = url
        self.attempts = attempts
        self.last_error = last_error


class DownloadDispatcher:
    """Run a URL through the executor, notifying the chat after each attempt.

    A success is announced once with its attempt number. A failure that still
    has attempts left is announced as a retry and followed by a fixed delay.
    The final failure is neither announced nor followed by a delay; it is
    raised as :class:`DownloadFailedError` for the caller to report.
    """

    def __init__(
        self,
        downloader: Downloader,
        notifier: Notifier,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.downloader = downloader
        self.notifier = notifier
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def dispatch_with_retry(self, url: str, chat_id: int) -> int:
        """Download ``url``; return the successful attempt number."""
        task = DownloadTask(url=url, chat_id=chat_id)
        last_error: DownloadError | None = None

        while task.attempt < self.max_attempts:
            task.attempt += 1
            logger.info("Attempt %d/%d: downloading %s", task.attempt, self.max_attempts, url)
            try:
                self.downloader.download(url)
            except DownloadError as exc:
                last_error = exc
                logger.warning("Download attempt %d failed for %s: %s", task.attempt, url, exc)
                if task.attempt < self.max_attempts:
                    self.notifier.notify(
                        chat_id, messages.download_retrying(url, task.attempt, exc)
                    )
                    self._sleep(self.retry_delay)
                continue

            self.notifier.notify(chat_id, messages.download_succeeded(url, task.attempt))
            return task.attempt

        raise DownloadFailedError(url, task.attempt, last_error) from last_error
