"""Tag normalisation and ``#tag`` extraction from typed titles."""

from __future__ import annotations

import re
from typing import Iterable, Optional

MAX_TAG_LEN = 32

_EDGE_PUNCT = r"\s,.;:，。！？、（）()\[\]{}<>《》\"'“”"
_LEADING_PUNCT = re.compile(f"^[{_EDGE_PUNCT}]+")
_TRAILING_PUNCT = re.compile(f"[{_EDGE_PUNCT}]+$")
_ASCII_TAG = re.compile(r"^[A-Za-z0-9_-]+$")


def normalize_tag(raw: Optional[str]) -> Optional[str]:
    """Canonical tag text, or None when nothing usable is left."""
    value = (raw or "").strip()
    if value.startswith("#"):
        value = value[1:].strip()
    value = _LEADING_PUNCT.sub("", value)
    value = _TRAILING_PUNCT.sub("", value).strip()
    if not value:
        return None
    # work == WORK
    if _ASCII_TAG.fullmatch(value):
        value = value.lower()
    return value[:MAX_TAG_LEN]


def normalize_tags(raw_tags: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    tags: list[str] = []
    for raw in raw_tags:
        tag = normalize_tag(raw)
        if tag and tag not in seen:
            seen.add(tag)
            tags.append(tag)
    return tags


def extract_tags_from_title(text: str) -> tuple[str, list[str]]:
    """Split ``#tag`` tokens out of ``text``.

    Returns the remaining title and the de-duplicated tags in the order they
    were typed. A lone ``#`` stays part of the title.
    """
    title_tokens: list[str] = []
    tag_tokens: list[str] = []
    for token in (text or "").split():
        if token.startswith("#") and len(token) > 1 and normalize_tag(token):
            tag_tokens.append(token)
            continue
        title_tokens.append(token)
    return " ".join(title_tokens).strip(), normalize_tags(tag_tokens)
