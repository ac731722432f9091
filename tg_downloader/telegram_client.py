"""Telegram Bot API helper focused on long-polling and replies."""

from __future__ import annotations

import logging

import requests
from requests import Response

from .config import Settings
from .models import Update

logger = logging.getLogger(__name__)


class TelegramAPIError(RuntimeError):
    """Transport or protocol failure while talking to the Bot API."""


class TelegramClient:
    """Thin wrapper around getUpdates and sendMessage."""

    # Extra seconds on top of the server-side long-poll window.
    READ_TIMEOUT_MARGIN = 10
    SEND_TIMEOUT = 30

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.base_url = settings.bot_api_url
        self.poll_timeout = settings.telegram_poll_timeout

    def get_updates(self, since_id: int) -> list[Update]:
        """Long-poll for updates newer than ``since_id``, ascending by id."""
        params = {"offset": since_id + 1, "timeout": self.poll_timeout}
        logger.debug("Polling getUpdates with offset %s", params["offset"])
        payload = self._call(
            "get",
            "getUpdates",
            params=params,
            timeout=self.poll_timeout + self.READ_TIMEOUT_MARGIN,
        )

        result = payload.get("result") or []
        if not isinstance(result, list):
            raise TelegramAPIError(f"Malformed getUpdates result: {result!r}")

        updates = []
        for raw in result:
            update = self._to_update(raw)
            if update is not None:
                updates.append(update)
        updates.sort(key=lambda update: update.update_id)
        return updates

    def send_message(self, chat_id: int, text: str) -> None:
        payload = self._call(
            "post",
            "sendMessage",
            json={"chat_id": chat_id, "text": text},
            timeout=self.SEND_TIMEOUT,
        )
        logger.debug("Response from sendMessage: %s", payload)

    @staticmethod
    def _to_update(raw) -> Update | None:
        """Parse one update; a malformed message keeps only its id so the offset moves on."""
        try:
            return Update.from_raw(raw)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed update %r: %s", raw, exc)
        try:
            return Update(update_id=int(raw["update_id"]))
        except (KeyError, TypeError, ValueError):
            return None

    def _call(self, verb: str, method: str, **kwargs) -> dict:
        url = f"{self.base_url}/{method}"
        try:
            resp = self.session.request(verb.upper(), url, **kwargs)
        except requests.RequestException as exc:
            raise TelegramAPIError(f"{method} request failed: {exc}") from exc

        payload = self._parse_response_body(resp)
        if payload is None:
            raise TelegramAPIError(
                f"{method} returned a non-JSON body ({resp.status_code}): {resp.text[:200]}"
            )
        if resp.status_code >= 400 or not payload.get("ok"):
            logger.error("Telegram %s failed (%s): %s", method, resp.status_code, resp.text)
            description = payload.get("description") or resp.text
            raise TelegramAPIError(f"{method} failed ({resp.status_code}): {description}")
        return payload

    @staticmethod
    def _parse_response_body(response: Response) -> dict | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        return payload if isinstance(payload, dict) else None
