"""Release note cleanup for vendor description fields."""

import re
from typing import List

TAG_PATTERN = re.compile(r"<[^>]*>")
M2_PATTERN = re.compile(r"m\.2", re.IGNORECASE)
SPACES_PATTERN = re.compile(r" {2,}")


def strip_markup(text: str) -> str:
    """Remove HTML tags, keeping the text between them."""
    return TAG_PATTERN.sub("", text or "")


def collapse_description(text: str) -> str:
    """Strip markup and collapse runs of spaces into one."""
    return SPACES_PATTERN.sub(" ", strip_markup(text))


def normalize_description(text: str) -> List[str]:
    """Split a markup-bearing description into discrete notes.

    "M.2" is rewritten to "M2" first so the sentence split does not break
    it apart.

    Args:
        text: Raw description from the vendor API

    Returns:
        Non-empty, trimmed notes in their original order

    Example:
        >>> normalize_description("M.2 slot. Fixes issue.")
        ['M2 slot', 'Fixes issue']
    """
    cleaned = M2_PATTERN.sub("M2", strip_markup(text))
    notes = (fragment.strip() for fragment in cleaned.split("."))
    return [note for note in notes if note]
