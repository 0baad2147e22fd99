"""SRT file parsing and saving utilities."""

from __future__ import annotations

import os
import re
import logging
import tempfile
from pathlib import Path
from typing import List, Sequence, Optional, Union

from .config import SUPPORTED_EXTENSIONS, MAX_SRT_BYTES
from .models import Caption, SubtitleDocument, parse_timestamp
from .merger import restore_separators
from .text_utils import repair_markup

logger = logging.getLogger(__name__)

TIMECODE_RE = re.compile(
    r"^\s*(\d{1,2}:\d{2}:\d{2}[,.]\d{3})\s*-->\s*"             # 开始时间
    r"(\d{1,2}:\d{2}:\d{2}[,.]\d{3})"                          # 结束时间
)
_BLOCK_SPLIT_RE = re.compile(r"\n[ \t]*\n")


class SrtParseError(ValueError):
    """Raised when subtitle content is not a well-formed SRT document."""


def parse_srt(content: Union[bytes, str]) -> SubtitleDocument:
    """
    Parse SRT content into a SubtitleDocument.

    Index lines are optional and their values are ignored; the position in
    the file is authoritative. A blank line inside a caption's text does not
    end the caption unless the next line is an index, so text after it is
    kept with that caption.

    Args:
        content: Raw SRT file bytes (UTF-8, BOM tolerated) or decoded text

    Returns:
        Parsed SubtitleDocument

    Raises:
        SrtParseError: If an indexed block, or the first block, has no
            valid timecode line
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise SrtParseError(f"Content is not valid UTF-8: {e}") from e
    content = content.lstrip('\ufeff')

    if not content.strip():
        return SubtitleDocument()

    # 预处理：标准化换行符
    content = content.replace('\r\n', '\n').replace('\r', '\n').strip('\n')

    captions: List[Caption] = []
    for block_num, block in enumerate(_BLOCK_SPLIT_RE.split(content), 1):
        lines = [line.rstrip() for line in block.split('\n')]
        while lines and not lines[0].strip():
            lines.pop(0)
        if not lines:
            continue

        # 序号行可选
        has_index = lines[0].strip().isdigit() and len(lines) > 1
        if has_index:
            lines = lines[1:]

        match = TIMECODE_RE.match(lines[0])
        if not match:
            # 字幕文本中的空行：只有下一行是序号时才算新条目
            if captions and not has_index:
                captions[-1].lines.extend(line for line in lines if line.strip())
                continue
            raise SrtParseError(f"Block {block_num}: missing timecode line: {lines[0]!r}")

        start, end = (parse_timestamp(t) for t in match.groups())
        if start > end:
            raise SrtParseError(f"Block {block_num}: start {match.group(1)} is after end {match.group(2)}")

        text_lines = [line for line in lines[1:] if line.strip()]
        captions.append(Caption(start, end, text_lines))

    logger.debug(f"Parsed {len(captions)} captions")
    return SubtitleDocument(captions)


def serialize_srt(captions: Sequence[Caption], newline: str = "\n") -> bytes:
    """
    Serialize captions to SRT bytes, renumbered from 1.

    Leftover merge separators become line breaks and split markup tags
    are rejoined.
    """
    parts: List[str] = []
    for idx, caption in enumerate(captions, 1):
        text = repair_markup(restore_separators("\n".join(caption.lines)))
        lines = [line for line in text.split("\n") if line.strip()]
        parts.append(caption.copy(lines=lines).to_srt(idx, newline))
    return "".join(parts).encode("utf-8")


def load_srt(path: Path) -> SubtitleDocument:
    """Read and parse an SRT file."""
    return parse_srt(path.read_bytes())


def validate_srt_file(path: Path) -> Optional[str]:
    """
    Check that a path is a subtitle file worth loading.

    An empty file would parse to a document with no captions, so it is
    reported here with the file size instead.

    Returns:
        Error message if invalid, None if valid
    """
    if not path.is_file():
        return f"Subtitle file not found: {path}"

    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        expected = ", ".join(sorted(SUPPORTED_EXTENSIONS))
        return f"Unsupported subtitle format: {path.name} (expected {expected})"

    size = path.stat().st_size
    if size == 0:
        return f"No captions in {path.name}: file is 0 bytes"
    if size > MAX_SRT_BYTES:
        return f"{path.name} is {size / 1024 / 1024:.1f}MB, over the {MAX_SRT_BYTES // 1024 // 1024}MB subtitle limit"

    return None


def save_srt(captions: Sequence[Caption], path: Path) -> None:
    """
    Atomically write captions to an SRT file.

    The content goes to a temporary file in the same directory which then
    replaces ``path``, so readers never see a partially written file.

    Raises:
        OSError: If the file cannot be written
    """
    # 确保父目录存在
    path.parent.mkdir(parents=True, exist_ok=True)
    data = serialize_srt(captions)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise

    logger.debug(f"Saved {len(captions)} captions to {path}")
