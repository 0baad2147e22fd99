"""Resume support from a partially written output file.

The output file doubles as the checkpoint: it always holds the translated
prefix of the source. On restart its caption count is the resume cursor.

The checkpoint is trusted by position. Nothing checks that it was produced
from the same source file unless ``verify`` is requested, which compares
timecodes caption by caption.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .models import Caption, SubtitleDocument
from .parser import load_srt

logger = logging.getLogger(__name__)


class CheckpointMismatchError(ValueError):
    """Raised when a checkpoint cannot be a prefix of the source."""


@dataclass
class ResumePlan:
    """断点续传计划。"""

    cursor: int
    captions: List[Caption]

    @property
    def total(self) -> int:
        return len(self.captions)

    @property
    def is_complete(self) -> bool:
        return self.cursor >= len(self.captions)

    @property
    def pending(self) -> int:
        return len(self.captions) - self.cursor


def load_checkpoint(path: Path) -> Optional[SubtitleDocument]:
    """
    Load a checkpoint file if it exists.

    Returns:
        Parsed document, or None when there is no checkpoint

    Raises:
        SrtParseError: If the checkpoint is not a valid SRT file
    """
    if not path.exists():
        return None

    document = load_srt(path)
    logger.info(f"Found checkpoint with {len(document)} captions: {path}")
    return document


def plan_resume(
    source: SubtitleDocument,
    checkpoint: Optional[SubtitleDocument],
    verify: bool = False,
) -> ResumePlan:
    """
    Work out where translation should continue.

    The working captions are the checkpoint's captions followed by the rest
    of the source. The source document is not modified.

    Args:
        source: The parsed source document
        checkpoint: The parsed checkpoint, or None
        verify: Also require matching timecodes for every checkpoint caption

    Returns:
        ResumePlan with the cursor and the working captions

    Raises:
        CheckpointMismatchError: If the checkpoint is longer than the source,
            or ``verify`` is set and a timecode differs
    """
    if checkpoint is None:
        return ResumePlan(0, [c.copy() for c in source])

    done = len(checkpoint)
    if done > len(source):
        raise CheckpointMismatchError(
            f"Checkpoint has {done} captions but source has only {len(source)}"
        )

    if verify:
        for i, (translated, original) in enumerate(zip(checkpoint, source), 1):
            if (translated.start, translated.end) != (original.start, original.end):
                raise CheckpointMismatchError(
                    f"Caption {i} timecode {translated.timecode} does not match "
                    f"source {original.timecode}"
                )

    captions = [c.copy() for c in checkpoint] + [c.copy() for c in source[done:]]
    return ResumePlan(done, captions)
