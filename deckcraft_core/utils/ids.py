"""Identifier and timestamp helpers."""

import uuid
from datetime import datetime, timezone


def new_id() -> str:
    """Generate a fresh opaque identifier for decks, slides and blocks."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()
