"""Main loop: fetch updates, dispatch their URLs, advance the offset."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable

from . import notifier as messages
from .dispatcher import DownloadDispatcher, DownloadFailedError
from .models import InboundMessage, Update
from .notifier import Notifier
from .offset_store import OffsetStore
from .telegram_client import TelegramAPIError, TelegramClient
from .url_extractor import extract_urls

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 2.0
FETCH_ERROR_BACKOFF_SECONDS = 5.0


class UpdatePoller:
    """Sequential poll → process → checkpoint cycle.

    The offset only ever moves forward by update id. Download outcomes never
    hold it back, so an update whose downloads failed is still acknowledged.
    """

    def __init__(
        self,
        client: TelegramClient,
        store: OffsetStore,
        dispatcher: DownloadDispatcher,
        notifier: Notifier,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        error_backoff: float = FETCH_ERROR_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.store = store
        self.dispatcher = dispatcher
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.error_backoff = error_backoff
        self._sleep = sleep
        self.checkpoint = store.load()
        logger.info("Resuming from update id %d", self.checkpoint)

    def run_forever(self) -> None:
        while True:
            self.run_iteration()

    def run(self, max_iterations: int) -> None:
        for _ in range(max_iterations):
            self.run_iteration()

    def run_iteration(self) -> None:
        if self.poll_once():
            logger.debug("Sleeping %.1fs before next poll", self.poll_interval)
            self._sleep(self.poll_interval)

    def poll_once(self) -> bool:
        """Fetch and handle one batch. Returns False when the fetch failed."""
        try:
            updates = self.client.get_updates(self.checkpoint)
        except TelegramAPIError as exc:
            logger.error("Failed to get updates: %s", exc)
            self._sleep(self.error_backoff)
            return False

        logger.info("Received %d update(s)", len(updates))
        if not updates:
            return True

        self.process_batch(updates)
        self.store.save(self.checkpoint)
        return True

    def process_batch(self, updates: Iterable[Update]) -> int:
        """Handle updates in id order and return the advanced checkpoint."""
        for update in sorted(updates, key=lambda item: item.update_id):
            if update.message is not None:
                self.handle_message(update.message)
            if update.update_id > self.checkpoint:
                self.checkpoint = update.update_id
        return self.checkpoint

    def handle_message(self, message: InboundMessage) -> None:
        chat_id = message.chat_id
        logger.info("Received message %d from chat %d: %s", message.update_id, chat_id, message.text)

        urls = extract_urls(message.text)
        if not urls:
            logger.info("No URLs found in message %d", message.update_id)
            self.notifier.notify(chat_id, messages.NO_URL_FOUND)
            return

        self.notifier.notify(chat_id, messages.urls_found(len(urls)))
        for url in urls:
            try:
                self.dispatcher.dispatch_with_retry(url, chat_id)
            except DownloadFailedError as exc:
                logger.error("Giving up on %s: %s", url, exc)
                self.notifier.notify(chat_id, messages.download_terminated(url, exc))
