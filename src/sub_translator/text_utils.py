"""Text processing utilities."""

from __future__ import annotations

import re

# 翻译服务会把标签拆开，例如 "</ i>"、"< /b>"、"< i >"
MARKUP_TAGS = r'(?:i|b|u|font)'

_CLOSING_TAG_RE = re.compile(rf'<\s*/\s*({MARKUP_TAGS})\s*>', re.IGNORECASE)
_OPENING_TAG_RE = re.compile(rf'<\s+({MARKUP_TAGS})\s*>|<({MARKUP_TAGS})\s+>', re.IGNORECASE)


def repair_markup(text: str) -> str:
    """
    Rejoin subtitle markup tags split apart by the translation round-trip.

    Args:
        text: Translated subtitle text

    Returns:
        Text with ``</ i>`` style artifacts restored to ``</i>``
    """
    if '<' not in text:
        return text
    text = _CLOSING_TAG_RE.sub(lambda m: f"</{m.group(1).lower()}>", text)
    text = _OPENING_TAG_RE.sub(lambda m: f"<{(m.group(1) or m.group(2)).lower()}>", text)
    return text


def clean_translated_text(text: str) -> str:
    """
    Normalize a single translated unit.

    Collapses runs of spaces and trims, but keeps dialogue markers and
    punctuation intact.
    """
    if not text or not isinstance(text, str):
        return ""

    text = text.replace('\r\n', '\n').replace('\r', '\n')
    # 多行结果合并为一行，换行由分隔符恢复
    text = " ".join(part.strip() for part in text.split('\n') if part.strip())
    text = re.sub(r'[ \t\u00a0]+', ' ', text).strip()
    return repair_markup(text)
