"""
Weapon keyword shorthand.

Compresses rule keywords ("Rapid Fire 2", "Anti-Infantry 4+") to the short
badges printed on unit cards ("RF-2", "A-I4+").
"""

from __future__ import annotations

import re
from typing import List, Optional

from .rules import ANTI_TARGETS, DASH_VARIANTS, KEYWORD_SHORTHAND

ANTI_PREFIX = "Anti-"

_DASHES = re.compile("[%s]" % DASH_VARIANTS)
_LEADING_DASHES = re.compile(r"^[\-%s]+" % DASH_VARIANTS)
_WHITESPACE = re.compile(r"\s+")
# the trailing number must be its own token, so "Sustained Hits D3" is left alone
_NUMBERED = re.compile(r"^(.*?)(?<!\S)(\d[\d+]*)$")


def _encode_anti(rest: str) -> str:
    rest = _DASHES.sub("-", rest)
    rest = _WHITESPACE.sub(" ", rest).strip()

    parts = [p for p in rest.split(" ") if p]
    target = parts[0] if parts else ""
    value = _LEADING_DASHES.sub("", "".join(parts[1:]))

    letter = ANTI_TARGETS.get(target) or target[:1]
    return f"A-{letter}{value}" if value else f"A-{letter}"


def encode_keyword(keyword: str) -> str:
    keyword = keyword.strip()

    if keyword.startswith(ANTI_PREFIX):
        return _encode_anti(keyword[len(ANTI_PREFIX):])

    match = _NUMBERED.match(keyword)
    if match:
        base = match.group(1).strip()
        num = match.group(2).strip()
        code = KEYWORD_SHORTHAND.get(base) or base
        return f"{code}-{num}"

    return KEYWORD_SHORTHAND.get(keyword) or keyword


def encode_keywords(text: Optional[str]) -> List[str]:
    """
    Encode a weapon's comma-separated keyword text.

    An empty text or the "-" placeholder has no keywords at all.
    """
    if not text or text.strip() == "-":
        return []

    parts = [k.strip() for k in text.split(",")]
    return [encode_keyword(k) for k in parts if k]
