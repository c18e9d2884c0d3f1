"""
Input transports.

A roster arrives either as an uploaded JSON export or as the list builder's
share link, whose fragment carries the same JSON gzip-compressed and base64
encoded. Both end as a plain dict handed to ``normalize``.
"""

from __future__ import annotations

import base64
import binascii
import gzip
import json
import zlib
from typing import Any, Dict

from charset_normalizer import from_bytes

from .errors import RosterDecodeError
from .rules import FRAGMENT_PREFIX

UTF8_BOM = b"\xef\xbb\xbf"


def _parse_document(text: str) -> Dict[str, Any]:
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RosterDecodeError(f"Roster is not valid JSON: {exc}") from exc

    if not isinstance(doc, dict):
        raise RosterDecodeError("Roster must be a JSON object")
    return doc


def decode_text(raw: bytes) -> str:
    """
    Decode an uploaded export to text.

    Rules:
    - UTF-8 (with or without BOM) is tried first; exports are nearly always UTF-8.
    - Otherwise detect the encoding best-effort via charset-normalizer.
    - Undecodable input is an error, not a lossy decode.
    """
    if raw.startswith(UTF8_BOM):
        raw = raw[len(UTF8_BOM):]

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is None:
        raise RosterDecodeError("Could not detect the roster's text encoding")
    return str(match)


def decode_roster_bytes(raw: bytes) -> Dict[str, Any]:
    return _parse_document(decode_text(raw))


def decode_fragment(fragment: str) -> Dict[str, Any]:
    """
    Decode a share-link fragment: base64 -> gzip -> UTF-8 -> JSON.

    Accepts the whole fragment (``#/listforge-json/<payload>``, with or
    without the ``#``) or just the payload.
    """
    payload = fragment.strip()
    if payload.startswith(FRAGMENT_PREFIX):
        payload = payload[len(FRAGMENT_PREFIX):]
    elif payload.startswith(FRAGMENT_PREFIX[1:]):
        payload = payload[len(FRAGMENT_PREFIX) - 1:]

    # the payload may be wrapped in whitespace and lack its "=" padding
    payload = "".join(payload.split())
    payload += "=" * (-len(payload) % 4)

    try:
        compressed = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise RosterDecodeError(f"Fragment is not valid base64: {exc}") from exc

    try:
        text = gzip.decompress(compressed).decode("utf-8")
    except (OSError, EOFError, zlib.error) as exc:
        raise RosterDecodeError(f"Fragment is not a gzip stream: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise RosterDecodeError(f"Fragment is not UTF-8 text: {exc}") from exc

    return _parse_document(text)
