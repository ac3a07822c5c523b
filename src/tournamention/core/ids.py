"""Record ID generation and timestamp extraction.

Tournament IDs are 24 lowercase hex chars: an 8-char big-endian unix
timestamp (seconds) followed by 16 random hex chars. The creation time of a
record is therefore derivable from its ID alone.

INVARIANT: IDs are permanent. Once generated, an ID never changes.
"""

from __future__ import annotations

import re
import secrets
from datetime import UTC, datetime

ID_PATTERN: re.Pattern[str] = re.compile(r"^[0-9a-f]{24}$")


def generate_id(now: datetime | None = None) -> str:
    """Generate a new timestamp-prefixed ID."""
    moment = now or datetime.now(UTC)
    return f"{int(moment.timestamp()):08x}{secrets.token_hex(8)}"


def validate_id(record_id: str) -> bool:
    """Check whether *record_id* is a well-formed timestamp-prefixed ID."""
    return ID_PATTERN.match(record_id) is not None


def timestamp_of(record_id: str) -> datetime:
    """Return the creation time embedded in *record_id* (second precision, UTC).

    Raises ValueError on a malformed ID.
    """
    if not validate_id(record_id):
        raise ValueError(f"Malformed record ID: {record_id!r}")
    return datetime.fromtimestamp(int(record_id[:8], 16), tz=UTC)
