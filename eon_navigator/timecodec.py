"""Timestamp parsing and formatting for Navigator API payloads.

The API is inconsistent about timestamps: a field can be missing, ``null``,
an empty string, or a timestamp with or without an offset and with or
without fractional seconds. Parsing tries an ordered list of parsers and
keeps the first that succeeds. New upstream variants are added to
``_PARSERS``.

An empty or null timestamp decodes to ``None``, the zero time of this
codec. Callers must treat ``None`` as "absent", never as an instant.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from .errors import MalformedTimestampError

_LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"
_OFFSET_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_FRACTION_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"

# strptime's %f stops at six digits, the API may send up to nine
_FRACTION_RE = re.compile(r"^(?P<head>[^.]+)\.(?P<fraction>\d+)(?P<offset>.*)$")


def _parse_offset(text: str) -> datetime:
    """RFC 3339 with offset, second precision."""
    return datetime.strptime(text, _OFFSET_FORMAT)


def _parse_local(text: str) -> datetime:
    """Bare local form without offset, read as UTC."""
    return datetime.strptime(text, _LOCAL_FORMAT).replace(tzinfo=UTC)


def _parse_fraction(text: str) -> datetime:
    """RFC 3339 with offset and fractional seconds."""
    match = _FRACTION_RE.match(text)
    if not match:
        raise ValueError(f"no fractional seconds in {text!r}")
    fraction = match.group("fraction")[:6]
    return datetime.strptime(
        f"{match.group('head')}.{fraction}{match.group('offset')}", _FRACTION_FORMAT
    )


_PARSERS: list[Callable[[str], datetime]] = [
    _parse_offset,
    _parse_local,
    _parse_fraction,
]


def parse_timestamp(raw: object) -> datetime | None:
    """Decode a timestamp field.

    Returns None for a missing, null or empty value. Raises
    MalformedTimestampError when no known format matches.
    """
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise MalformedTimestampError(str(raw))

    text = raw.strip('"')
    if text in ("", "null"):
        return None

    for parser in _PARSERS:
        try:
            return parser(text)
        except ValueError:
            continue
    raise MalformedTimestampError(raw)


def _as_utc_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def format_timestamp(value: datetime | None) -> str | None:
    """Encode a timestamp as RFC 3339 with second precision.

    None encodes to None (JSON null). Sub-second precision is dropped.
    Naive datetimes are taken as UTC.
    """
    if value is None:
        return None
    value = _as_utc_aware(value).replace(microsecond=0)
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")


def format_query_timestamp(value: datetime) -> str:
    """Encode a timestamp as UTC with millisecond precision.

    This is the form the measurements endpoint expects for its range
    parameters, e.g. ``2024-01-01T00:00:00.000Z``.
    """
    value = _as_utc_aware(value).astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
