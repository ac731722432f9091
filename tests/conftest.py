from __future__ import annotations

import json

import pytest

from tg_downloader.config import Settings
from tg_downloader.downloaders import Downloader, DownloadError


class RecordingNotifier:
    def __init__(self) -> None:
        self.sent: list[tuple[int, str]] = []

    def notify(self, chat_id: int, text: str) -> bool:
        self.sent.append((chat_id, text))
        return True

    def texts(self) -> list[str]:
        return [text for _, text in self.sent]


class ScriptedDownloader(Downloader):
    """Fails with the queued errors, then succeeds."""

    name = "scripted"

    def __init__(self, failures: int = 0, always_fail: bool = False) -> None:
        self.failures = failures
        self.always_fail = always_fail
        self.calls: list[str] = []

    def download(self, url: str) -> None:
        self.calls.append(url)
        if self.always_fail or len(self.calls) <= self.failures:
            raise DownloadError(f"boom #{len(self.calls)}")


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings(monkeypatch, tmp_path) -> Settings:
    monkeypatch.chdir(tmp_path)
    for name in (
        "TELEGRAM_API_BASE",
        "TELEGRAM_POLL_TIMEOUT",
        "DOWNLOAD_BACKEND",
        "DOWNLOAD_TIMEOUT",
        "HTTP_PROXY",
        "http_proxy",
        "GALLERY_DL_BINARY",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("BACKEND_URL", "http://backend.local/api/download")
    return Settings()


class FakeResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """Replays queued responses (or raises queued exceptions) in order."""

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method: str, url: str, **kwargs):
        self.calls.append((method, url, kwargs))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def post(self, url: str, **kwargs):
        return self.request("POST", url, **kwargs)
