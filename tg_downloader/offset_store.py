"""File-backed checkpoint of the last handled Telegram update id."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_OFFSET_FILE = Path("last_update_id.txt")


class OffsetStore:
    """Persist a single non-negative integer as decimal text."""

    def __init__(self, path: Path = DEFAULT_OFFSET_FILE) -> None:
        self.path = Path(path)

    def load(self) -> int:
        """Return the stored offset, or 0 when missing or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return 0
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read offset file %s: %s; starting from 0", self.path, exc)
            return 0

        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Offset file %s is corrupt (%r); starting from 0", self.path, raw[:64])
            return 0
        if value < 0:
            logger.warning("Offset file %s holds a negative value %d; starting from 0", self.path, value)
            return 0
        return value

    def save(self, value: int) -> bool:
        """Write ``value`` atomically. Returns False (after logging) on failure."""
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(str(value))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Failed to save offset %d to %s: %s", value, self.path, exc)
            if tmp_name:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            return False
        logger.debug("Saved offset %d to %s", value, self.path)
        return True
