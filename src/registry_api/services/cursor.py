"""Opaque pagination cursors.

A cursor is the unpadded URL-safe base64 of a row id. It is a convenience
token, not a capability: it carries no signature and grants nothing.
"""

from __future__ import annotations

import base64
import binascii
import re

from registry_api.errors import InvalidArgumentError, InvalidCursorError

_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
_DIGITS_PATTERN = re.compile(r"[0-9]{1,19}")
# largest row id SQLite can store
MAX_POSITION = 2**63 - 1


def encode_cursor(row_id: int) -> str:
    if isinstance(row_id, bool) or not isinstance(row_id, int) or not 0 <= row_id <= MAX_POSITION:
        raise InvalidArgumentError("Cursor position must be a non-negative 64-bit integer.")
    raw = base64.urlsafe_b64encode(str(row_id).encode("ascii"))
    return raw.decode("ascii").rstrip("=")


def decode_cursor(token: str) -> int:
    if not isinstance(token, str) or not _TOKEN_PATTERN.fullmatch(token):
        raise InvalidCursorError("Invalid cursor parameter")
    padded = token + "=" * (-len(token) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise InvalidCursorError("Invalid cursor parameter") from exc
    if not _DIGITS_PATTERN.fullmatch(decoded):
        raise InvalidCursorError("Invalid cursor parameter")
    position = int(decoded)
    if position > MAX_POSITION:
        raise InvalidCursorError("Invalid cursor parameter")
    return position
