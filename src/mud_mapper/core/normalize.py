from __future__ import annotations

import hashlib
import html
import json
import re
from typing import Any

_ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_TAG_RE = re.compile(r"<[^>]*>")
_PROMPT_RE = re.compile(
    r"^\s*(?:<[^<>]*\d+\s*[HhMmVvXx][^<>]*>|\d+[Hh]\s+\d+[Mm]\s+\d+[Vv][^>]*>)\s*"
)
_SPACE_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")


def clean_line(raw: str) -> str:
    """Strip terminal colour codes, HTML markup and a leading status prompt."""
    value = _ANSI_RE.sub("", raw or "")
    value = _TAG_RE.sub("", value)
    value = html.unescape(value)
    value = _PROMPT_RE.sub("", value)
    return value.strip()


def collapse_whitespace(value: str) -> str:
    return _SPACE_RE.sub(" ", (value or "").strip())


def normalize_title(value: str) -> str:
    return collapse_whitespace(value).casefold()


def normalize_body(value: str) -> str:
    return collapse_whitespace(value).casefold()


def slugify(value: str) -> str:
    slug = _SLUG_RE.sub("-", normalize_title(value)).strip("-")
    return slug[:64] or "room"


def short_hash(value: str, length: int = 8) -> str:
    return hashlib.sha1(value.encode("utf-8")).hexdigest()[:length]


def word_overlap(left: str, right: str) -> float:
    """Jaccard similarity of the word sets of two descriptions."""
    words_left = set(normalize_body(left).split())
    words_right = set(normalize_body(right).split())
    union = words_left | words_right
    if not union:
        return 1.0
    return len(words_left & words_right) / len(union)


def dump_json(data: Any) -> str:
    return json.dumps(data, ensure_ascii=True, separators=(",", ":"))
