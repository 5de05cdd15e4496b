"""Dean Edwards ``p,a,c,k,e,d`` JavaScript unpacker.

Format: eval(function(p,a,c,k,e,d){...}('payload',base,count,'dict'.split('|')))

The payload's base-N tokens are indices into the dictionary; tokens
whose dictionary slot is empty stay as they are.
"""

from __future__ import annotations

import re
from typing import Iterator

_PACKED_START_RE = re.compile(
    r"eval\s*\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*[dr]\s*\)"
)
_PACKED_ARGS_RE = re.compile(
    r"}\s*\(\s*'(.*?)'\s*,\s*(\d+)\s*,\s*(\d+)\s*,\s*'([^']*)'\s*\.split\(\s*'\|'\s*\)",
    re.DOTALL,
)
_WORD_RE = re.compile(r"\b\w+\b")

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Upper bound on a single packed block; real players stay far below it.
_MAX_BLOCK = 65_536


def _decode_token(word: str, radix: int) -> int | None:
    """Parse *word* as a base-*radix* number (packer alphabet, radix <= 62)."""
    value = 0
    for ch in word:
        digit = _DIGITS.find(ch)
        if digit < 0 or digit >= radix:
            return None
        value = value * radix + digit
    return value


def unpack(packed: str) -> str | None:
    """Unpack one packed block. Returns ``None`` if *packed* has no packer call."""
    match = _PACKED_ARGS_RE.search(packed)
    if not match:
        return None

    payload = match.group(1).replace("\\'", "'")
    radix = int(match.group(2))
    count = int(match.group(3))
    keywords = match.group(4).split("|")
    if not 2 <= radix <= len(_DIGITS):
        return None

    if len(keywords) < count:
        keywords.extend([""] * (count - len(keywords)))

    def _replace_word(m: re.Match[str]) -> str:
        word = m.group(0)
        index = _decode_token(word, radix)
        if index is not None and index < len(keywords) and keywords[index]:
            return keywords[index]
        return word

    return _WORD_RE.sub(_replace_word, payload)


def iter_unpacked(body: str) -> Iterator[str]:
    """Yield the unpacked source of every packed block in *body*."""
    for start in _PACKED_START_RE.finditer(body):
        chunk = body[start.start() : start.start() + _MAX_BLOCK]
        unpacked = unpack(chunk)
        if unpacked:
            yield unpacked
