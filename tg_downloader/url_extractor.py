"""Pull downloadable links out of chat message text."""

from __future__ import annotations

import re

# A link runs from its scheme to the next whitespace or full-width comma (U+FF0C).
# An ASCII comma does not end a link.
URL_PATTERN = re.compile(r"https?://[^\s，]+")


def extract_urls(text: str) -> list[str]:
    """Return every link in ``text`` in order of appearance, duplicates kept."""
    if not text:
        return []
    return URL_PATTERN.findall(text)
