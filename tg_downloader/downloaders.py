"""Download executors: an HTTP backend or the gallery-dl command."""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod

import requests

from .config import Settings

logger = logging.getLogger(__name__)


class DownloadError(RuntimeError):
    """A single download attempt failed, whatever the cause."""


class Downloader(ABC):
    """Hand one URL to an external download mechanism."""

    name: str

    @abstractmethod
    def download(self, url: str) -> None:
        """Fetch ``url``; raise :class:`DownloadError` on any failure."""


class HttpBackendDownloader(Downloader):
    """POST each URL to a download service and expect a 2xx answer."""

    name = "http"

    def __init__(self, settings: Settings, session: requests.Session | None = None) -> None:
        self.settings = settings
        self.session = session or requests.Session()
        self.endpoint = settings.backend_endpoint
        self.timeout = settings.download_timeout

    def download(self, url: str) -> None:
        payload = {"url": url, "download": True}
        logger.info("Submitting %s to download backend", url)
        try:
            response = self.session.post(self.endpoint, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Error performing request for URL %s: %s", url, exc)
            raise DownloadError(f"backend request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            logger.error("Backend rejected %s (%s): %s", url, response.status_code, response.text)
            raise DownloadError(
                f"backend returned status code {response.status_code}, body: {response.text}"
            )

        logger.info("Backend response for URL %s: %s", url, response.text)


class GalleryDlDownloader(Downloader):
    """Run gallery-dl through the configured proxy, sharing our stdout/stderr."""

    name = "gallery-dl"

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.binary = settings.gallery_dl_binary
        self.proxy_url = settings.proxy_url

    def command(self, url: str) -> list[str]:
        return [self.binary, "--proxy", self.proxy_url, url]

    def download(self, url: str) -> None:
        cmd = self.command(url)
        logger.info("Running %s for %s", self.binary, url)
        try:
            completed = subprocess.run(cmd, check=False)
        except OSError as exc:
            raise DownloadError(f"failed to run {self.binary}: {exc}") from exc

        if completed.returncode != 0:
            raise DownloadError(f"{self.binary} exited with status {completed.returncode}")


def build_downloader(settings: Settings) -> Downloader:
    """Pick the executor matching ``settings.download_backend``."""
    if settings.download_backend == "gallery-dl":
        return GalleryDlDownloader(settings)
    return HttpBackendDownloader(settings)
