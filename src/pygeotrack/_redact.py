"""Scrubbing of credentials before DEBUG logging.

Every report carries ``Authorization: Bearer <token>`` and the same token
lives on the config and on :class:`~pygeotrack.models.report.ReportRequest`.
Nothing built from those objects may be logged without passing through
:func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

HIDDEN = "<redacted>"

_SECRET_KEYS: frozenset[str] = frozenset(
    {"authorization", "auth_token", "authtoken", "token", "password", "cookie", "set-cookie"}
)
_BEARER_PREFIX = "bearer "
_MAX_DEPTH = 8


def is_secret_key(key: object) -> bool:
    return str(key).strip().lower() in _SECRET_KEYS


def redact_for_log(value: Any, *, max_string: int = 256) -> Any:
    """Return a log-safe copy of *value*.

    Values under credential keys are hidden, free-standing bearer strings
    lose their token, binary payloads are reduced to their size and text
    longer than *max_string* characters is clipped.
    """
    return _scrub(value, max_string, 0)


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return f"{text[:limit]}…<{len(text) - limit} more chars>"


def _scrub(value: Any, limit: int, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return "<nested too deep>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, str):
        if value[: len(_BEARER_PREFIX)].lower() == _BEARER_PREFIX:
            return f"{value[: len(_BEARER_PREFIX)]}{HIDDEN}"
        return _clip(value, limit)
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, Mapping):
        return {
            str(key): HIDDEN if is_secret_key(key) else _scrub(item, limit, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [_scrub(item, limit, depth + 1) for item in value]
    return _clip(repr(value), limit)
