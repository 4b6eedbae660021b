from __future__ import annotations

import re

from markupsafe import Markup

_BLOCK_TAGS = r"p|div|li|ul|ol|h[1-6]|blockquote|section|article|table|tr|pre"
# Any opening or closing block tag, a line break tag, or a raw newline ends a paragraph.
_PARAGRAPH_BREAK_RE = re.compile(
    rf"</?(?:{_BLOCK_TAGS})\b[^>]*>|<br\s*/?>|\r?\n",
    re.IGNORECASE,
)


def sanitize_paragraphs(raw: str) -> tuple[str, ...]:
    """Split free text (possibly HTML) into plain-text paragraphs.

    Block elements and line breaks separate paragraphs; inline tags are dropped and
    entities decoded. The template layer escapes the result.
    """
    if not raw:
        return ()
    paragraphs: list[str] = []
    for chunk in _PARAGRAPH_BREAK_RE.split(raw):
        text = Markup(chunk).striptags().strip()
        if text:
            paragraphs.append(text)
    return tuple(paragraphs)
