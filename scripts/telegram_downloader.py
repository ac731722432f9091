"""Entry point that forwards links sent to a Telegram bot to a downloader."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from pydantic import ValidationError

# Ensure project root is on sys.path when running as a script
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from tg_downloader.config import Settings
from tg_downloader.dispatcher import DownloadDispatcher
from tg_downloader.downloaders import build_downloader
from tg_downloader.notifier import Notifier
from tg_downloader.offset_store import OffsetStore
from tg_downloader.poller import UpdatePoller
from tg_downloader.telegram_client import TelegramClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Poll a Telegram bot for links and hand them to a downloader."
    )
    parser.add_argument("--once", action="store_true", help="Run a single poll cycle and exit")
    parser.add_argument("--log-level", help="Override LOG_LEVEL for this run")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def load_settings() -> Settings:
    try:
        return Settings()
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration:\n{exc}") from exc


def build_poller(settings: Settings) -> UpdatePoller:
    client = TelegramClient(settings)
    notifier = Notifier(client)
    dispatcher = DownloadDispatcher(build_downloader(settings), notifier)
    return UpdatePoller(client, OffsetStore(), dispatcher, notifier)


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(args.log_level or settings.log_level)
    poller = build_poller(settings)
    logging.info("Using %s download backend", poller.dispatcher.downloader.name)
    try:
        if args.once:
            poller.run(1)
        else:
            poller.run_forever()
    except KeyboardInterrupt:
        logging.info("Interrupted; last handled update id is %d", poller.checkpoint)


if __name__ == "__main__":
    main()
