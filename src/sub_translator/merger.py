"""Line merging and splitting around a translation round-trip.

Multi-line captions are sent to the provider as one unit so that sentences
spanning line breaks are translated together. Lines are joined with a reserved
separator the provider passes through as punctuation, then broken apart again
after translation.
"""

from __future__ import annotations

import logging
import re
from typing import List

from .models import Caption

logger = logging.getLogger(__name__)

# U+00A6 BROKEN BAR; does not occur in ordinary subtitle text
SEPARATOR = "¦"
JOINER = f" {SEPARATOR} "

_SPLIT_RE = re.compile(rf"\s*{re.escape(SEPARATOR)}\s*")
_DIALOGUE_RE = re.compile(r"^\s*-")


def is_dialogue(line: str) -> bool:
    """True if the line starts with a dialogue marker (leading hyphen)."""
    return bool(_DIALOGUE_RE.match(line))


def should_merge(caption: Caption) -> bool:
    """
    Determine if a caption's lines should be sent as a single unit.

    Dialogue captions keep one unit per speaker.
    """
    if len(caption.lines) < 2:
        return False
    return not is_dialogue(caption.lines[0])


def merge_lines(caption: Caption) -> List[str]:
    """
    Build the translation units for a caption.

    Returns:
        One joined string for mergeable captions, otherwise one string per line
    """
    if should_merge(caption):
        return [JOINER.join(line.strip() for line in caption.lines)]
    return list(caption.lines)


def split_lines(text: str) -> List[str]:
    """
    Restore line breaks in translated text.

    If the provider dropped every separator the result is a single line.
    """
    parts = [part.strip() for part in _SPLIT_RE.split(text)]
    lines = [part for part in parts if part]
    return lines or [text.strip()]


def restore_separators(text: str) -> str:
    """Replace any leftover separator with a line break."""
    if SEPARATOR not in text:
        return text
    return "\n".join(split_lines(text))
